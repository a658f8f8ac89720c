from __future__ import annotations

from datetime import datetime
from typing import Protocol

from medishop.domain.entities.user import WebSession


class SessionPort(Protocol):
    def get_session(self, *, session_id: str) -> WebSession | None:
        ...

    def bind_session(
        self,
        *,
        session_id: str,
        user_id: str,
        expires_at: datetime,
        now: datetime,
    ) -> WebSession:
        """Create the session or re-point an existing one; last writer wins."""
        ...

    def delete_session(self, *, session_id: str) -> None:
        ...

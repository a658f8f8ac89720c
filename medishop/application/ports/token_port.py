from __future__ import annotations

from datetime import datetime
from typing import Protocol

from medishop.application.dto.auth import AccessTokenPayload


class TokenPort(Protocol):
    """Bearer access tokens and opaque session cookie values.

    Access tokens are self-contained and verified by signature. Session
    tokens are random values handed to the browser; only their hash is
    stored, so a leaked session table cannot be replayed as cookies.
    """

    def create_access_token(self, *, user_id: str, now: datetime) -> tuple[str, datetime]:
        """Return the signed token and its expiry."""
        ...

    def decode_access_token(self, *, token: str) -> AccessTokenPayload:
        """Raise ``TokenExpiredError`` or ``InvalidTokenError`` on failure."""
        ...

    def generate_session_token(self) -> str:
        """Fresh server-side random value; never derived from client input."""
        ...

    def hash_session_token(self, *, session_token: str) -> str:
        """Stable digest used as the stored session id."""
        ...

    def session_expires_at(self, *, now: datetime) -> datetime:
        ...

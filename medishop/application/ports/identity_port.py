from __future__ import annotations

from datetime import datetime
from typing import Protocol

from medishop.domain.entities.user import User, UserCredentials


class IdentityPort(Protocol):
    def get_user_by_id(self, *, user_id: str) -> User | None:
        ...

    def get_credentials_by_email(self, *, email: str) -> UserCredentials | None:
        ...

    def record_failed_login(
        self,
        *,
        user_id: str,
        failed_attempts: int,
        locked_until: datetime | None,
    ) -> None:
        ...

    def record_successful_login(
        self,
        *,
        user_id: str,
        now: datetime,
        password_hash: str | None = None,
    ) -> None:
        ...

    def create_user(
        self,
        *,
        user_id: str,
        first_name: str,
        last_name: str,
        email: str,
        role: str,
        password_hash: str,
        email_verified: bool,
        created_at: datetime,
    ) -> User:
        ...

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal


Role = Literal["admin", "doctor", "patient"]

ROLES: frozenset[str] = frozenset({"admin", "doctor", "patient"})


@dataclass(frozen=True)
class User:
    id: str
    first_name: str
    last_name: str
    email: str
    role: Role
    email_verified: bool
    is_active: bool
    locked_until: datetime | None
    created_at: datetime

    def is_locked(self, now: datetime) -> bool:
        return self.locked_until is not None and self.locked_until > now


@dataclass(frozen=True)
class UserCredentials:
    user: User
    password_hash: str
    failed_login_attempts: int


@dataclass(frozen=True)
class WebSession:
    id: str
    user_id: str
    expires_at: datetime
    created_at: datetime
    updated_at: datetime

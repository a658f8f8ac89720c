from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from medishop.domain.entities.user import User


@dataclass(frozen=True)
class AccessTokenPayload:
    user_id: str


@dataclass(frozen=True)
class LoginLocalInput:
    email: str
    password: str
    session_token: str | None


@dataclass(frozen=True)
class LoginLocalOutput:
    user: User
    access_token: str
    access_expires_at: datetime
    session_token: str
    session_expires_at: datetime


@dataclass(frozen=True)
class LogoutInput:
    session_token: str | None


@dataclass(frozen=True)
class ResolveSessionInput:
    session_token: str | None
    bearer_token: str | None


@dataclass(frozen=True)
class ResolveSessionOutput:
    user: User | None
    session_token: str | None
    session_expires_at: datetime | None
    session_issued: bool

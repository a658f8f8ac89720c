from __future__ import annotations

from typing import Any, Mapping

from medishop.domain.entities.user import User, UserCredentials, WebSession


def _as_str(value: Any) -> str:
    return str(value)


def map_row_to_user(row: Mapping[str, Any]) -> User:
    return User(
        id=_as_str(row["id"]),
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row["email"],
        role=row["role"],
        email_verified=bool(row["email_verified"]),
        is_active=bool(row["is_active"]),
        locked_until=row.get("locked_until"),
        created_at=row["created_at"],
    )


def map_row_to_user_credentials(row: Mapping[str, Any]) -> UserCredentials:
    return UserCredentials(
        user=map_row_to_user(row),
        password_hash=row["password_hash"],
        failed_login_attempts=int(row["failed_login_attempts"] or 0),
    )


def map_row_to_web_session(row: Mapping[str, Any]) -> WebSession:
    return WebSession(
        id=row["id"],
        user_id=_as_str(row["user_id"]),
        expires_at=row["expires_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )

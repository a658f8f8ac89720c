from __future__ import annotations

from datetime import datetime

from sqlalchemy import text

from medishop.application.ports.identity_port import IdentityPort
from medishop.application.ports.session_port import SessionPort
from medishop.infrastructure.db.mappers.accounts_mapper import (
    map_row_to_user,
    map_row_to_user_credentials,
    map_row_to_web_session,
)


_USER_COLUMNS = """
    id, first_name, last_name, email, role, email_verified, is_active, locked_until, created_at
"""


class SqlAccountsRepository(IdentityPort, SessionPort):
    def __init__(self, engine):
        self._engine = engine

    def get_user_by_id(self, *, user_id: str):
        sql = f"""
            SELECT {_USER_COLUMNS}
            FROM public.users
            WHERE id = :user_id
            LIMIT 1
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"user_id": user_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def get_credentials_by_email(self, *, email: str):
        sql = f"""
            SELECT {_USER_COLUMNS}, password_hash, failed_login_attempts
            FROM public.users
            WHERE lower(email) = :email
            LIMIT 1
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"email": email.lower()}).mappings().first()
        if row is None:
            return None
        return map_row_to_user_credentials(row)

    def record_failed_login(
        self,
        *,
        user_id: str,
        failed_attempts: int,
        locked_until: datetime | None,
    ) -> None:
        sql = """
            UPDATE public.users
            SET failed_login_attempts = :failed_attempts,
                locked_until = COALESCE(:locked_until, locked_until),
                updated_at = now()
            WHERE id = :user_id
        """
        with self._engine.begin() as conn:
            conn.execute(
                text(sql),
                {
                    "user_id": user_id,
                    "failed_attempts": failed_attempts,
                    "locked_until": locked_until,
                },
            )

    def record_successful_login(
        self,
        *,
        user_id: str,
        now: datetime,
        password_hash: str | None = None,
    ) -> None:
        sql = """
            UPDATE public.users
            SET failed_login_attempts = 0,
                locked_until = NULL,
                password_hash = COALESCE(:password_hash, password_hash),
                last_login_at = :now,
                updated_at = :now
            WHERE id = :user_id
        """
        with self._engine.begin() as conn:
            conn.execute(text(sql), {"user_id": user_id, "now": now, "password_hash": password_hash})

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
    ):
        sql = f"""
            INSERT INTO public.users (
                id, first_name, last_name, email, password_hash, role, email_verified, created_at, updated_at
            ) VALUES (
                :id, :first_name, :last_name, :email, :password_hash, :role, :email_verified, :created_at, :created_at
            )
            RETURNING {_USER_COLUMNS}
        """
        params = {
            "id": user_id,
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
            "password_hash": password_hash,
            "role": role,
            "email_verified": email_verified,
            "created_at": created_at,
        }
        with self._engine.begin() as conn:
            row = conn.execute(text(sql), params).mappings().one()
        return map_row_to_user(row)

    def get_session(self, *, session_id: str):
        sql = """
            SELECT id, user_id, expires_at, created_at, updated_at
            FROM public.web_sessions
            WHERE id = :session_id
            LIMIT 1
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"session_id": session_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_web_session(row)

    def bind_session(
        self,
        *,
        session_id: str,
        user_id: str,
        expires_at: datetime,
        now: datetime,
    ):
        sql = """
            INSERT INTO public.web_sessions (id, user_id, expires_at, created_at, updated_at)
            VALUES (:id, :user_id, :expires_at, :now, :now)
            ON CONFLICT (id) DO UPDATE
            SET user_id = EXCLUDED.user_id,
                expires_at = EXCLUDED.expires_at,
                updated_at = EXCLUDED.updated_at
            RETURNING id, user_id, expires_at, created_at, updated_at
        """
        params = {
            "id": session_id,
            "user_id": user_id,
            "expires_at": expires_at,
            "now": now,
        }
        with self._engine.begin() as conn:
            row = conn.execute(text(sql), params).mappings().one()
        return map_row_to_web_session(row)

    def delete_session(self, *, session_id: str) -> None:
        sql = """
            DELETE FROM public.web_sessions
            WHERE id = :session_id
        """
        with self._engine.begin() as conn:
            conn.execute(text(sql), {"session_id": session_id})


from __future__ import annotations

import logging
from datetime import timedelta

from medishop.application.dto.auth import LoginLocalInput, LoginLocalOutput
from medishop.application.ports.identity_port import IdentityPort
from medishop.application.ports.password_hasher_port import PasswordHasherPort
from medishop.application.ports.session_port import SessionPort
from medishop.application.ports.token_port import TokenPort
from medishop.domain.exceptions import (
    AccountLockedError,
    InvalidCredentialsError,
    UserInactiveError,
)

from .auth_common import normalize_email, utcnow
from .verify_access_token import ACCOUNT_LOCKED_MESSAGE


logger = logging.getLogger(__name__)


class LoginLocalUseCase:
    def __init__(
        self,
        *,
        identity_port: IdentityPort,
        session_port: SessionPort,
        password_hasher: PasswordHasherPort,
        token_port: TokenPort,
        max_failed_attempts: int,
        lock_minutes: int,
    ):
        self._identity_port = identity_port
        self._session_port = session_port
        self._password_hasher = password_hasher
        self._token_port = token_port
        self._max_failed_attempts = max_failed_attempts
        self._lock_minutes = lock_minutes

    def execute(self, command: LoginLocalInput) -> LoginLocalOutput:
        now = utcnow()
        credentials = self._identity_port.get_credentials_by_email(email=normalize_email(command.email))
        if credentials is None:
            raise InvalidCredentialsError("Invalid credentials.")

        user = credentials.user
        if user.is_locked(now):
            raise AccountLockedError(ACCOUNT_LOCKED_MESSAGE)

        if not self._password_hasher.verify(command.password, credentials.password_hash):
            attempts = credentials.failed_login_attempts + 1
            locked_until = None
            if attempts >= self._max_failed_attempts:
                locked_until = now + timedelta(minutes=self._lock_minutes)
                attempts = 0
                logger.warning("Locking user %s after repeated failed logins", user.id)
            self._identity_port.record_failed_login(
                user_id=user.id,
                failed_attempts=attempts,
                locked_until=locked_until,
            )
            if locked_until is not None:
                raise AccountLockedError(ACCOUNT_LOCKED_MESSAGE)
            raise InvalidCredentialsError("Invalid credentials.")

        if not user.is_active:
            raise UserInactiveError("User is inactive.")

        rehashed = None
        if self._password_hasher.needs_rehash(credentials.password_hash):
            rehashed = self._password_hasher.hash(command.password)
            logger.info("Upgrading password hash for user %s", user.id)
        self._identity_port.record_successful_login(user_id=user.id, now=now, password_hash=rehashed)

        access_token, access_expires_at = self._token_port.create_access_token(user_id=user.id, now=now)
        if command.session_token:
            # A session id presented before login is never promoted.
            self._session_port.delete_session(
                session_id=self._token_port.hash_session_token(session_token=command.session_token),
            )
        session_token = self._token_port.generate_session_token()
        session_expires_at = self._token_port.session_expires_at(now=now)
        self._session_port.bind_session(
            session_id=self._token_port.hash_session_token(session_token=session_token),
            user_id=user.id,
            expires_at=session_expires_at,
            now=now,
        )
        return LoginLocalOutput(
            user=user,
            access_token=access_token,
            access_expires_at=access_expires_at,
            session_token=session_token,
            session_expires_at=session_expires_at,
        )

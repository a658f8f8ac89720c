from __future__ import annotations

from medishop.application.ports.identity_port import IdentityPort
from medishop.application.ports.token_port import TokenPort
from medishop.domain.entities.user import User
from medishop.domain.exceptions import (
    AccountLockedError,
    MissingTokenError,
    UnknownIdentityError,
    UserInactiveError,
)

from .auth_common import utcnow


ACCOUNT_LOCKED_MESSAGE = (
    "Account is temporarily locked due to multiple failed login attempts. "
    "Please try again later."
)


class VerifyAccessTokenUseCase:
    """Resolve a bearer token to the stored user it was issued for.

    Checks run in a fixed order: presence, signature and expiry (inside the
    token port), existence of the user, whether it is active, then the
    account lock. A locked account never hides an earlier failure.
    """

    def __init__(self, *, identity_port: IdentityPort, token_port: TokenPort):
        self._identity_port = identity_port
        self._token_port = token_port

    def execute(self, token: str | None) -> User:
        if not token or not token.strip():
            raise MissingTokenError("Access token required")

        payload = self._token_port.decode_access_token(token=token.strip())

        user = self._identity_port.get_user_by_id(user_id=payload.user_id)
        if user is None:
            raise UnknownIdentityError("User not found")

        if not user.is_active:
            raise UserInactiveError("User is inactive.")

        if user.is_locked(utcnow()):
            raise AccountLockedError(ACCOUNT_LOCKED_MESSAGE)

        return user

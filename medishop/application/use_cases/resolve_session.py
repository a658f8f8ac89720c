from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from medishop.application.dto.auth import ResolveSessionInput, ResolveSessionOutput
from medishop.application.ports.identity_port import IdentityPort
from medishop.application.ports.session_port import SessionPort
from medishop.application.ports.token_port import TokenPort
from medishop.domain.entities.user import User
from medishop.domain.exceptions import DomainError, NotAuthenticatedError

from .auth_common import utcnow
from .verify_access_token import VerifyAccessTokenUseCase


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    user: User
    bind_session: bool


class ResolverStrategy(Protocol):
    def resolve(self, request: ResolveSessionInput) -> Resolution | None:
        ...


class CookieSessionStrategy:
    def __init__(self, *, session_port: SessionPort, identity_port: IdentityPort, token_port: TokenPort):
        self._session_port = session_port
        self._identity_port = identity_port
        self._token_port = token_port

    def resolve(self, request: ResolveSessionInput) -> Resolution | None:
        if not request.session_token:
            return None
        session_id = self._token_port.hash_session_token(session_token=request.session_token)
        session = self._session_port.get_session(session_id=session_id)
        if session is None or session.expires_at <= utcnow():
            return None
        user = self._identity_port.get_user_by_id(user_id=session.user_id)
        if user is None or not user.is_active:
            return None
        return Resolution(user=user, bind_session=False)


class BearerTokenStrategy:
    def __init__(self, *, verify_access_token: VerifyAccessTokenUseCase):
        self._verify_access_token = verify_access_token

    def resolve(self, request: ResolveSessionInput) -> Resolution | None:
        if not request.bearer_token:
            return None
        try:
            user = self._verify_access_token.execute(request.bearer_token)
        except DomainError as exc:
            logger.info("JWT verification failed: %s", exc)
            return None
        return Resolution(user=user, bind_session=True)


class ResolveSessionUseCase:
    """Identify the caller from the session cookie, falling back to a bearer token.

    Strategies are tried in order and the first one that resolves a user
    wins. A user found through a token is written through to the session
    store so later requests can rely on the cookie alone.
    """

    def __init__(
        self,
        *,
        strategies: list[ResolverStrategy],
        session_port: SessionPort,
        token_port: TokenPort,
    ):
        self._strategies = strategies
        self._session_port = session_port
        self._token_port = token_port

    def execute(self, command: ResolveSessionInput, *, optional: bool = False) -> ResolveSessionOutput:
        for strategy in self._strategies:
            resolution = strategy.resolve(command)
            if resolution is None:
                continue
            if resolution.bind_session:
                return self._bind(resolution.user, command.session_token)
            return ResolveSessionOutput(
                user=resolution.user,
                session_token=command.session_token,
                session_expires_at=None,
                session_issued=False,
            )

        if optional:
            return ResolveSessionOutput(
                user=None,
                session_token=None,
                session_expires_at=None,
                session_issued=False,
            )
        raise NotAuthenticatedError("Authentication required")

    def _bind(self, user: User, session_token: str | None) -> ResolveSessionOutput:
        now = utcnow()
        token = session_token if self._owns_session(user, session_token) else None
        issued = token is None
        if token is None:
            token = self._token_port.generate_session_token()
        expires_at = self._token_port.session_expires_at(now=now)
        self._session_port.bind_session(
            session_id=self._token_port.hash_session_token(session_token=token),
            user_id=user.id,
            expires_at=expires_at,
            now=now,
        )
        return ResolveSessionOutput(
            user=user,
            session_token=token,
            session_expires_at=expires_at,
            session_issued=issued,
        )

    def _owns_session(self, user: User, session_token: str | None) -> bool:
        # Only a server-issued session already bound to this user is refreshed in place.
        if not session_token:
            return False
        session = self._session_port.get_session(
            session_id=self._token_port.hash_session_token(session_token=session_token),
        )
        return session is not None and session.user_id == user.id


def build_resolve_session_use_case(
    *,
    identity_port: IdentityPort,
    session_port: SessionPort,
    token_port: TokenPort,
) -> ResolveSessionUseCase:
    return ResolveSessionUseCase(
        strategies=[
            CookieSessionStrategy(
                session_port=session_port,
                identity_port=identity_port,
                token_port=token_port,
            ),
            BearerTokenStrategy(
                verify_access_token=VerifyAccessTokenUseCase(
                    identity_port=identity_port,
                    token_port=token_port,
                ),
            ),
        ],
        session_port=session_port,
        token_port=token_port,
    )

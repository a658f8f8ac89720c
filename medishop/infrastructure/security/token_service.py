from __future__ import annotations

import hashlib
import secrets
from datetime import datetime, timedelta

import jwt

from medishop.application.dto.auth import AccessTokenPayload
from medishop.application.ports.token_port import TokenPort
from medishop.domain.exceptions import InvalidTokenError, TokenExpiredError


class JwtTokenService(TokenPort):
    def __init__(
        self,
        *,
        jwt_secret: str,
        access_ttl_minutes: int,
        session_ttl_hours: int,
    ):
        self._jwt_secret = jwt_secret
        self._access_ttl_minutes = access_ttl_minutes
        self._session_ttl_hours = session_ttl_hours

    def create_access_token(self, *, user_id: str, now: datetime) -> tuple[str, datetime]:
        exp = now + timedelta(minutes=self._access_ttl_minutes)
        payload = {
            "sub": user_id,
            "type": "access",
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
        }
        token = jwt.encode(payload, self._jwt_secret, algorithm="HS256")
        return token, exp

    def decode_access_token(self, *, token: str) -> AccessTokenPayload:
        try:
            payload = jwt.decode(
                token,
                self._jwt_secret,
                algorithms=["HS256"],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError("Token expired") from exc
        except jwt.PyJWTError as exc:
            raise InvalidTokenError("Invalid token") from exc

        if payload.get("type") != "access":
            raise InvalidTokenError("Invalid token type.")

        user_id = payload.get("sub")
        if not user_id or not isinstance(user_id, str):
            raise InvalidTokenError("Invalid token subject.")

        return AccessTokenPayload(user_id=user_id)

    def generate_session_token(self) -> str:
        return secrets.token_urlsafe(48)

    def hash_session_token(self, *, session_token: str) -> str:
        return hashlib.sha256(session_token.encode("utf-8")).hexdigest()

    def session_expires_at(self, *, now: datetime) -> datetime:
        return now + timedelta(hours=self._session_ttl_hours)

from __future__ import annotations

from passlib.context import CryptContext

from medishop.application.ports.password_hasher_port import PasswordHasherPort


class PasswordHasher(PasswordHasherPort):
    """Argon2 for new hashes; bcrypt hashes carried over from older accounts still verify."""

    def __init__(self, *, schemes: tuple[str, ...] = ("argon2", "bcrypt")):
        self._ctx = CryptContext(schemes=list(schemes), deprecated="auto")

    def hash(self, plain_password: str) -> str:
        return self._ctx.hash(plain_password)

    def verify(self, plain_password: str, password_hash: str) -> bool:
        try:
            return self._ctx.verify(plain_password, password_hash)
        except (ValueError, TypeError):
            # Unknown or malformed hash format.
            return False

    def needs_rehash(self, password_hash: str) -> bool:
        try:
            return self._ctx.needs_update(password_hash)
        except (ValueError, TypeError):
            return False

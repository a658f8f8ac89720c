from __future__ import annotations

import logging
import os
import sys
from uuid import uuid4

from medishop.application.ports.identity_port import IdentityPort
from medishop.application.ports.password_hasher_port import PasswordHasherPort
from medishop.application.use_cases.auth_common import normalize_email, utcnow
from medishop.infrastructure.db.engine import get_engine
from medishop.infrastructure.db.repositories.accounts_repository import SqlAccountsRepository
from medishop.infrastructure.security.password_hasher import PasswordHasher
from medishop.shared.config import get_settings


logger = logging.getLogger(__name__)


def seed_admin(
    repository: IdentityPort,
    password_hasher: PasswordHasherPort,
    *,
    email: str,
    password: str,
    first_name: str = "Admin",
    last_name: str = "User",
):
    email = normalize_email(email)
    existing = repository.get_credentials_by_email(email=email)
    if existing is not None:
        logger.info("Admin %s already exists", email)
        return existing.user
    user = repository.create_user(
        user_id=str(uuid4()),
        first_name=first_name,
        last_name=last_name,
        email=email,
        role="admin",
        password_hash=password_hasher.hash(password),
        email_verified=True,
        created_at=utcnow(),
    )
    logger.info("Admin %s created", email)
    return user


def main() -> int:
    logging.basicConfig(level=logging.INFO)
    settings = get_settings()
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    if not settings.postgres_dsn or not email or not password:
        logger.error("POSTGRES_DSN, ADMIN_EMAIL and ADMIN_PASSWORD are required.")
        return 1
    seed_admin(
        SqlAccountsRepository(get_engine(settings.postgres_dsn)),
        PasswordHasher(),
        email=email,
        password=password,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

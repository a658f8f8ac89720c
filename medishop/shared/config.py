from __future__ import annotations

import json
import os
from dataclasses import dataclass
from decimal import Decimal

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _json(name: str, default=None):
    value = _env(name)
    if not value:
        return {} if default is None else default
    return json.loads(value)


def _bool(name: str, default: str = "false") -> bool:
    return (_env(name, default) or "").strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    postgres_dsn: str
    jwt_secret: str
    jwt_access_ttl_minutes: int
    session_cookie_name: str
    session_ttl_hours: int
    session_cookie_secure: bool
    login_max_failed_attempts: int
    login_lock_minutes: int
    order_tax_rate: Decimal
    order_free_shipping_threshold: Decimal
    order_flat_shipping: Decimal
    order_status_transitions: dict
    log_level: str
    cors_allow_origins: list


def get_settings() -> Settings:
    return Settings(
        postgres_dsn=_env("POSTGRES_DSN", ""),
        jwt_secret=_env("JWT_SECRET", ""),
        jwt_access_ttl_minutes=int(_env("JWT_ACCESS_TTL_MINUTES", "1440")),
        session_cookie_name=_env("SESSION_COOKIE_NAME", "hospital-session"),
        session_ttl_hours=int(_env("SESSION_TTL_HOURS", "24")),
        session_cookie_secure=_bool("SESSION_COOKIE_SECURE"),
        login_max_failed_attempts=int(_env("LOGIN_MAX_FAILED_ATTEMPTS", "5")),
        login_lock_minutes=int(_env("LOGIN_LOCK_MINUTES", "5")),
        order_tax_rate=Decimal(_env("ORDER_TAX_RATE", "0.10")),
        order_free_shipping_threshold=Decimal(_env("ORDER_FREE_SHIPPING_THRESHOLD", "100")),
        order_flat_shipping=Decimal(_env("ORDER_FLAT_SHIPPING", "10")),
        order_status_transitions=_json("ORDER_STATUS_TRANSITIONS"),
        log_level=_env("LOG_LEVEL", "INFO"),
        cors_allow_origins=_json("CORS_ALLOW_ORIGINS", ["*"]),
    )

from __future__ import annotations

from medishop.domain.entities.user import User
from medishop.domain.exceptions import (
    EmailNotVerifiedError,
    ForbiddenError,
    NotAuthenticatedError,
)


ADMIN_ONLY: frozenset[str] = frozenset({"admin"})
DOCTOR_ONLY: frozenset[str] = frozenset({"doctor"})
PATIENT_ONLY: frozenset[str] = frozenset({"patient"})
ADMIN_OR_DOCTOR: frozenset[str] = frozenset({"admin", "doctor"})


def authorize(user: User | None, required_roles: frozenset[str]) -> User:
    if user is None:
        raise NotAuthenticatedError("Authentication required")
    if user.role not in required_roles:
        raise ForbiddenError("Access denied. Insufficient permissions.")
    return user


def ensure_verified_session(user: User | None) -> User:
    if user is None:
        raise NotAuthenticatedError("Session expired. Please login again.")
    if user.role == "patient" and not user.email_verified:
        raise EmailNotVerifiedError(
            "Please verify your email address before accessing this feature."
        )
    return user

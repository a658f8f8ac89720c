from __future__ import annotations

import pytest

from medishop.domain.exceptions import (
    EmailNotVerifiedError,
    ForbiddenError,
    NotAuthenticatedError,
)
from medishop.domain.services.authorization import (
    ADMIN_ONLY,
    ADMIN_OR_DOCTOR,
    DOCTOR_ONLY,
    PATIENT_ONLY,
    authorize,
    ensure_verified_session,
)


@pytest.mark.parametrize("role", ["admin", "doctor", "patient"])
def test_admin_only_allows_exactly_admins(make_user, role):
    user = make_user(role=role)

    if role == "admin":
        assert authorize(user, ADMIN_ONLY) is user
    else:
        with pytest.raises(ForbiddenError):
            authorize(user, ADMIN_ONLY)


@pytest.mark.parametrize(
    ("roles", "allowed"),
    [
        (DOCTOR_ONLY, {"doctor"}),
        (PATIENT_ONLY, {"patient"}),
        (ADMIN_OR_DOCTOR, {"admin", "doctor"}),
    ],
)
def test_named_role_sets(make_user, roles, allowed):
    for role in ("admin", "doctor", "patient"):
        user = make_user(role=role)
        if role in allowed:
            assert authorize(user, roles) is user
        else:
            with pytest.raises(ForbiddenError):
                authorize(user, roles)


def test_missing_identity_is_unauthenticated():
    with pytest.raises(NotAuthenticatedError):
        authorize(None, ADMIN_ONLY)


def test_unverified_patient_is_rejected(make_user):
    with pytest.raises(EmailNotVerifiedError):
        ensure_verified_session(make_user(role="patient", email_verified=False))


def test_unverified_staff_is_allowed(make_user):
    doctor = make_user(role="doctor", email_verified=False)

    assert ensure_verified_session(doctor) is doctor

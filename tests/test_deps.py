from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException

from medishop.api.deps import (
    admin_only,
    admin_or_doctor,
    get_token_user,
    require_roles,
    require_verified_session,
)
from medishop.application.use_cases.verify_access_token import VerifyAccessTokenUseCase
from medishop.domain.services.authorization import PATIENT_ONLY


@pytest.fixture
def verifier(identity_port, token_service) -> VerifyAccessTokenUseCase:
    return VerifyAccessTokenUseCase(identity_port=identity_port, token_port=token_service)


def _bearer(token_service, user_id: str) -> str:
    token, _ = token_service.create_access_token(user_id=user_id, now=datetime.now(timezone.utc))
    return f"Bearer {token}"


def test_get_token_user_returns_user(verifier, identity_port, token_service, make_user):
    identity_port.add(make_user("alice"))

    user = get_token_user(authorization=_bearer(token_service, "alice"), use_case=verifier)

    assert user.id == "alice"


@pytest.mark.parametrize("authorization", [None, "Basic abc", "Bearer ", "Bearer garbage"])
def test_get_token_user_rejects_bad_headers(verifier, authorization):
    with pytest.raises(HTTPException) as exc_info:
        get_token_user(authorization=authorization, use_case=verifier)

    assert exc_info.value.status_code == 401


def test_get_token_user_maps_lock_to_423(verifier, identity_port, token_service, make_user):
    identity_port.add(make_user("alice", locked_until=datetime.now(timezone.utc) + timedelta(minutes=1)))

    with pytest.raises(HTTPException) as exc_info:
        get_token_user(authorization=_bearer(token_service, "alice"), use_case=verifier)

    assert exc_info.value.status_code == 423


def test_admin_only_blocks_patient(make_user):
    with pytest.raises(HTTPException) as exc_info:
        admin_only(user=make_user(role="patient"))

    assert exc_info.value.status_code == 403


def test_admin_or_doctor_allows_doctor(make_user):
    user = admin_or_doctor(user=make_user(role="doctor"))

    assert user.role == "doctor"


def test_require_roles_with_missing_user_is_401():
    dependency = require_roles(PATIENT_ONLY)

    with pytest.raises(HTTPException) as exc_info:
        dependency(user=None)

    assert exc_info.value.status_code == 401


def test_require_verified_session_blocks_unverified_patient(make_user):
    with pytest.raises(HTTPException) as exc_info:
        require_verified_session(user=make_user(role="patient", email_verified=False))

    assert exc_info.value.status_code == 403


def test_require_verified_session_allows_verified_patient(make_user):
    user = require_verified_session(user=make_user(role="patient"))

    assert user.role == "patient"


def test_get_token_user_maps_deactivated_account_to_403(verifier, identity_port, token_service, make_user):
    identity_port.add(make_user("gone", is_active=False))

    with pytest.raises(HTTPException) as exc_info:
        get_token_user(authorization=_bearer(token_service, "gone"), use_case=verifier)

    assert exc_info.value.status_code == 403

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from medishop.application.dto.auth import ResolveSessionInput
from medishop.application.use_cases.resolve_session import build_resolve_session_use_case
from medishop.domain.exceptions import NotAuthenticatedError


def _now() -> datetime:
    return datetime.now(timezone.utc)


@pytest.fixture
def use_case(identity_port, session_port, token_service):
    return build_resolve_session_use_case(
        identity_port=identity_port,
        session_port=session_port,
        token_port=token_service,
    )


def _open_session(session_port, token_service, *, cookie: str, user_id: str, expires_in: timedelta):
    now = _now()
    session_port.bind_session(
        session_id=token_service.hash_session_token(session_token=cookie),
        user_id=user_id,
        expires_at=now + expires_in,
        now=now,
    )


def test_session_cookie_wins_over_bearer_token(use_case, identity_port, session_port, token_service, make_user):
    identity_port.add(make_user("alice"))
    identity_port.add(make_user("bob"))
    _open_session(session_port, token_service, cookie="cookie-a", user_id="alice", expires_in=timedelta(hours=1))
    token, _ = token_service.create_access_token(user_id="bob", now=_now())

    output = use_case.execute(ResolveSessionInput(session_token="cookie-a", bearer_token=token))

    assert output.user.id == "alice"
    assert output.session_issued is False


def test_bearer_token_is_written_through_to_a_new_session(use_case, identity_port, session_port, token_service, make_user):
    identity_port.add(make_user("alice"))
    token, _ = token_service.create_access_token(user_id="alice", now=_now())

    output = use_case.execute(ResolveSessionInput(session_token=None, bearer_token=token))

    assert output.user.id == "alice"
    assert output.session_issued is True
    assert output.session_token
    stored = session_port.get_session(session_id=token_service.hash_session_token(session_token=output.session_token))
    assert stored is not None
    assert stored.user_id == "alice"

    again = use_case.execute(ResolveSessionInput(session_token=output.session_token, bearer_token=None))
    assert again.user.id == "alice"


def test_unknown_cookie_is_replaced_with_a_server_issued_session(use_case, identity_port, session_port, token_service, make_user):
    identity_port.add(make_user("victim"))
    token, _ = token_service.create_access_token(user_id="victim", now=_now())

    output = use_case.execute(ResolveSessionInput(session_token="planted-cookie", bearer_token=token))

    assert output.user.id == "victim"
    assert output.session_issued is True
    assert output.session_token != "planted-cookie"
    planted_id = token_service.hash_session_token(session_token="planted-cookie")
    assert session_port.get_session(session_id=planted_id) is None

    replay = use_case.execute(ResolveSessionInput(session_token="planted-cookie", bearer_token=None), optional=True)
    assert replay.user is None


def test_cookie_of_another_user_is_not_rebound(use_case, identity_port, session_port, token_service, make_user):
    identity_port.add(make_user("alice"))
    identity_port.add(make_user("bob"))
    _open_session(session_port, token_service, cookie="alice-cookie", user_id="alice", expires_in=-timedelta(minutes=1))
    token, _ = token_service.create_access_token(user_id="bob", now=_now())

    output = use_case.execute(ResolveSessionInput(session_token="alice-cookie", bearer_token=token))

    assert output.user.id == "bob"
    assert output.session_issued is True
    assert output.session_token != "alice-cookie"
    alice_id = token_service.hash_session_token(session_token="alice-cookie")
    assert session_port.get_session(session_id=alice_id).user_id == "alice"


def test_own_expired_session_is_refreshed_in_place(use_case, identity_port, session_port, token_service, make_user):
    identity_port.add(make_user("alice"))
    _open_session(session_port, token_service, cookie="mine", user_id="alice", expires_in=-timedelta(minutes=1))
    token, _ = token_service.create_access_token(user_id="alice", now=_now())

    output = use_case.execute(ResolveSessionInput(session_token="mine", bearer_token=token))

    assert output.session_issued is False
    assert output.session_token == "mine"
    stored = session_port.get_session(session_id=token_service.hash_session_token(session_token="mine"))
    assert stored.expires_at > _now()


def test_session_of_deactivated_user_is_ignored(use_case, identity_port, session_port, token_service, make_user):
    identity_port.add(make_user("alice", is_active=False))
    _open_session(session_port, token_service, cookie="c", user_id="alice", expires_in=timedelta(hours=1))

    output = use_case.execute(ResolveSessionInput(session_token="c", bearer_token=None), optional=True)

    assert output.user is None


def test_expired_session_is_ignored(use_case, identity_port, session_port, token_service, make_user):
    identity_port.add(make_user("alice"))
    _open_session(session_port, token_service, cookie="old", user_id="alice", expires_in=-timedelta(minutes=1))

    with pytest.raises(NotAuthenticatedError):
        use_case.execute(ResolveSessionInput(session_token="old", bearer_token=None))


def test_session_of_deleted_user_falls_back_to_token(use_case, identity_port, session_port, token_service, make_user):
    identity_port.add(make_user("bob"))
    _open_session(session_port, token_service, cookie="c", user_id="deleted", expires_in=timedelta(hours=1))
    token, _ = token_service.create_access_token(user_id="bob", now=_now())

    output = use_case.execute(ResolveSessionInput(session_token="c", bearer_token=token))

    assert output.user.id == "bob"


def test_invalid_token_is_swallowed_and_request_is_unauthenticated(use_case):
    with pytest.raises(NotAuthenticatedError):
        use_case.execute(ResolveSessionInput(session_token=None, bearer_token="broken"))


def test_optional_mode_returns_anonymous_caller(use_case, session_port):
    output = use_case.execute(ResolveSessionInput(session_token=None, bearer_token="broken"), optional=True)

    assert output.user is None
    assert output.session_issued is False
    assert session_port.sessions == {}


def test_locked_user_token_does_not_authenticate(use_case, identity_port, token_service, make_user):
    identity_port.add(make_user("alice", locked_until=_now() + timedelta(minutes=5)))
    token, _ = token_service.create_access_token(user_id="alice", now=_now())

    output = use_case.execute(ResolveSessionInput(session_token=None, bearer_token=token), optional=True)

    assert output.user is None

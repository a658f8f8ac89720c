from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from medishop.api.deps import (
    clear_session_cookie,
    get_login_local_use_case,
    get_logout_session_use_case,
    get_optional_session_user,
    get_session_token,
    get_session_user,
    set_session_cookie,
)
from medishop.api.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    SessionStatusResponse,
    UserResponse,
)
from medishop.api.schemas.common import MessageResponse
from medishop.application.dto.auth import LoginLocalInput, LogoutInput
from medishop.application.use_cases.login_local import LoginLocalUseCase
from medishop.application.use_cases.logout_session import LogoutSessionUseCase
from medishop.domain.entities.user import User
from medishop.domain.exceptions import (
    AccountLockedError,
    InvalidCredentialsError,
    UserInactiveError,
)


router = APIRouter()


@router.post("/auth/login", response_model=LoginResponse)
def login_local(
    req: LoginRequest,
    response: Response,
    session_token: str | None = Depends(get_session_token),
    use_case: LoginLocalUseCase = Depends(get_login_local_use_case),
):
    try:
        output = use_case.execute(
            LoginLocalInput(
                email=req.email,
                password=req.password,
                session_token=session_token,
            )
        )
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except AccountLockedError as exc:
        raise HTTPException(status_code=423, detail=str(exc)) from exc
    except UserInactiveError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc

    set_session_cookie(response, output.session_token, output.session_expires_at)
    return LoginResponse(
        access_token=output.access_token,
        access_expires_at=output.access_expires_at,
        user=UserResponse.from_user(output.user),
    )


@router.post("/auth/logout", response_model=MessageResponse)
def logout_session(
    response: Response,
    session_token: str | None = Depends(get_session_token),
    use_case: LogoutSessionUseCase = Depends(get_logout_session_use_case),
):
    use_case.execute(LogoutInput(session_token=session_token))
    clear_session_cookie(response)
    return MessageResponse(message="Logged out successfully")


@router.get("/auth/me", response_model=MeResponse)
def get_me(current_user: User = Depends(get_session_user)):
    return MeResponse(user=UserResponse.from_user(current_user))


@router.get("/auth/session", response_model=SessionStatusResponse)
def get_session_status(current_user: User | None = Depends(get_optional_session_user)):
    if current_user is None:
        return SessionStatusResponse(authenticated=False, user=None)
    return SessionStatusResponse(authenticated=True, user=UserResponse.from_user(current_user))

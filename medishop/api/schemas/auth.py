from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from medishop.domain.entities.user import User


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=256)


class UserResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    role: str
    email_verified: bool

    @classmethod
    def from_user(cls, user: User) -> UserResponse:
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            role=user.role,
            email_verified=user.email_verified,
        )


class LoginResponse(BaseModel):
    success: bool = True
    message: str = "Login successful"
    access_token: str
    token_type: str = "bearer"
    access_expires_at: datetime
    user: UserResponse


class MeResponse(BaseModel):
    success: bool = True
    user: UserResponse


class SessionStatusResponse(BaseModel):
    success: bool = True
    authenticated: bool
    user: UserResponse | None = None

"""Authentication request/response schemas."""

from typing import Optional

from pydantic import Field

from .base import CamelModel


class LoginRequest(CamelModel):
    email: str
    password: str


class VerifyTokenRequest(CamelModel):
    access_token: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    id: int
    email: str
    name: Optional[str] = None


class LoginResponse(CamelModel):
    access_token: str
    user: UserResponse


class VerifyTokenResponse(CamelModel):
    success: bool
    user: UserResponse
    message: str


class ProfileResponse(CamelModel):
    user: Optional[UserResponse] = None
    authenticated: bool

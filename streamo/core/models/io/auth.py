"""
Authentication I/O models for API requests and responses.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from streamo.core.models.domain.enums import UserRole

from .common import EmailAddress, Password
from .users import UserRead

PUBLIC_ROLES = (UserRole.artist, UserRole.labelowner)


class RegisterRequest(BaseModel):
    """Self-service sign-up."""

    name: str = Field(min_length=1, max_length=255)
    email: EmailAddress = Field(description="Login email, stored lowercase")
    password: Password
    role: UserRole = Field(default=UserRole.artist, description="Either artist or labelowner")
    invitation_code: Optional[str] = Field(default=None, description="Pre-approves the account when valid")

    @field_validator("role")
    @classmethod
    def _public_role(cls, value: UserRole) -> UserRole:
        if value not in PUBLIC_ROLES:
            raise ValueError("Role must be artist or labelowner")
        return value


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _lower(cls, value: str) -> str:
        return value.strip().lower()


class AuthResponse(BaseModel):
    """User plus access token; ``token`` is empty while the account awaits approval."""

    message: str
    user: UserRead
    token: Optional[str] = None


class ForgotPasswordRequest(BaseModel):
    email: EmailAddress


class VerifyOtpRequest(BaseModel):
    email: EmailAddress
    otp: str = Field(min_length=6, max_length=6, pattern=r"^\d{6}$")


class ResetPasswordRequest(VerifyOtpRequest):
    new_password: Password


class ImpersonateRequest(BaseModel):
    user_id: str = Field(description="Account to act as")

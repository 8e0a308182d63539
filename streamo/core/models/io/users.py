"""
User I/O models for API requests and responses.

The profile is grouped into basic info, address, distributor, social links and
identity document; all of those fields live flat on the user row.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from streamo.core.models.domain.enums import UserRole

from .common import EmailAddress, Password


class UserSummary(BaseModel):
    """Compact user reference embedded in other payloads."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: UserRole


class ProfileFields(BaseModel):
    """Editable profile fields shared by self-service and admin updates."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    birth_date: Optional[date] = None
    gender: Optional[str] = None
    introduction: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    current_distributor: Optional[str] = None
    distributor_number: Optional[str] = None
    youtube: Optional[str] = None
    facebook: Optional[str] = None
    tiktok: Optional[str] = None
    instagram: Optional[str] = None
    document_type: Optional[str] = None
    document_id: Optional[str] = None


class UserRead(ProfileFields):
    """Schema for reading a user from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: UserRole
    is_active: bool
    is_approved: bool
    split: float = Field(description="Artist share of revenue in percent")
    profile_image: Optional[str] = None
    document_picture: Optional[str] = None
    invited_by: Optional[str] = None
    last_login: Optional[datetime] = None
    last_password_changed: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ProfileUpdate(ProfileFields):
    """Self-service profile update."""


class AdminUserCreate(BaseModel):
    """Staff-created account; always approved."""

    name: str = Field(min_length=1, max_length=255)
    email: EmailAddress
    password: Password
    role: UserRole = UserRole.artist
    split: float = Field(default=100.0, ge=0, le=100)


class AdminUserUpdate(ProfileFields):
    """Staff update of account flags and profile."""

    role: Optional[UserRole] = None
    split: Optional[float] = Field(default=None, ge=0, le=100)
    is_active: Optional[bool] = None
    is_approved: Optional[bool] = None


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: Password

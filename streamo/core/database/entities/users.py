"""
User entity models.

This module contains the database entity for accounts. A user is either staff
(superadmin, admin) or a catalogue owner (artist, labelowner). Profile data is
kept flat on the row; the API groups it into basic info, address, distributor,
social and document sections.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class UserBase(Base):
    """Base fields for user entity."""

    name: str = Field(max_length=255)
    email: str = Field(max_length=255, unique=True, index=True)
    role: str = Field(default="artist", max_length=32, index=True)
    is_active: bool = Field(default=True)
    is_approved: bool = Field(default=False, index=True)
    split: float = Field(default=100.0, ge=0, le=100, description="Artist share of revenue in percent")
    profile_image: Optional[str] = Field(default=None, max_length=512)

    # Basic info
    birth_date: Optional[date] = Field(default=None)
    gender: Optional[str] = Field(default=None, max_length=32)
    introduction: Optional[str] = Field(default=None)

    # Address
    country: Optional[str] = Field(default=None, max_length=128)
    city: Optional[str] = Field(default=None, max_length=128)
    phone: Optional[str] = Field(default=None, max_length=64)
    address: Optional[str] = Field(default=None, max_length=512)

    # Distributor
    current_distributor: Optional[str] = Field(default=None, max_length=255)
    distributor_number: Optional[str] = Field(default=None, max_length=128)

    # Social
    youtube: Optional[str] = Field(default=None, max_length=512)
    facebook: Optional[str] = Field(default=None, max_length=512)
    tiktok: Optional[str] = Field(default=None, max_length=512)
    instagram: Optional[str] = Field(default=None, max_length=512)

    # Identity document
    document_type: Optional[str] = Field(default=None, max_length=64)
    document_id: Optional[str] = Field(default=None, max_length=128)
    document_picture: Optional[str] = Field(default=None, max_length=512)


class User(UserBase, table=True):
    """Entity for accounts.

    Table: st_users
    """

    __tablename__ = "st_users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    password_hash: str = Field(max_length=255)
    invited_by: Optional[str] = Field(default=None, max_length=32, index=True)

    last_login: Optional[datetime] = Field(default=None)
    last_password_changed: Optional[datetime] = Field(default=None)
    reset_code_hash: Optional[str] = Field(default=None, max_length=255)
    reset_code_expires_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, role={self.role})"

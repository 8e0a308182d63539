"""
Invitation entity models.

An invitation code lets a new artist register pre-approved.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class Invitation(Base, table=True):
    """Entity for invitation codes.

    Table: st_invitations
    """

    __tablename__ = "st_invitations"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    code: str = Field(max_length=16, unique=True, index=True)
    created_by: str = Field(max_length=32, index=True)
    expires_at: datetime = Field()
    is_used: bool = Field(default=False)
    used_by: Optional[str] = Field(default=None, max_length=32)
    used_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    def __repr__(self) -> str:
        return f"Invitation(code={self.code}, is_used={self.is_used})"

"""
Invitation I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .users import UserSummary


class InvitationCreate(BaseModel):
    expires_at: Optional[datetime] = Field(default=None, description="Defaults to five minutes from now")


class InvitationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    created_by: str
    expires_at: datetime
    is_used: bool
    used_by: Optional[str] = None
    used_at: Optional[datetime] = None
    created_at: datetime
    invitee: Optional[UserSummary] = None


class InvitationValidation(BaseModel):
    valid: bool
    code: str
    expires_at: datetime

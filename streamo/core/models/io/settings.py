"""
Site settings I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SiteSettingsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    logo: str
    site_name: str
    primary_color: str
    updated_at: Optional[datetime] = None


class SiteSettingsUpdate(BaseModel):
    site_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    primary_color: Optional[str] = Field(default=None, pattern=r"^#[0-9A-Fa-f]{6}$")

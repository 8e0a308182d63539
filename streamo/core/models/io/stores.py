"""
Store I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from streamo.core.models.domain.enums import StoreStatus


class StoreCreate(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    status: StoreStatus = StoreStatus.active
    category: Optional[str] = None
    videos_only: bool = False
    color: Optional[str] = None
    url: Optional[str] = None


class StoreUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    status: Optional[StoreStatus] = None
    category: Optional[str] = None
    videos_only: Optional[bool] = None
    color: Optional[str] = None
    url: Optional[str] = None


class StoreRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    icon: Optional[str] = None
    status: StoreStatus
    category: Optional[str] = None
    videos_only: bool
    color: Optional[str] = None
    url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

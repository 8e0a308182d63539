"""
Store entity models.

Stores are the digital service providers (Spotify, Apple Music, ...) a release
can be delivered to.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class Store(Base, table=True):
    """Entity for distribution stores.

    Table: st_stores
    """

    __tablename__ = "st_stores"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    name: str = Field(max_length=128, unique=True, index=True)
    icon: Optional[str] = Field(default=None, max_length=512)
    status: str = Field(default="Active", max_length=16, index=True)
    category: Optional[str] = Field(default=None, max_length=64, index=True)
    videos_only: bool = Field(default=False)
    color: Optional[str] = Field(default=None, max_length=16)
    url: Optional[str] = Field(default=None, max_length=512)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Store(id={self.id}, name={self.name}, status={self.status})"

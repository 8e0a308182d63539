"""
Release entity models.

A release is a product (single, EP or album) owned by a user. Its track list is
embedded as JSON; each entry may carry an ISRC used for royalty reconciliation.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class ReleaseBase(Base):
    """Base fields for release entity."""

    title: str = Field(max_length=255)
    artist: str = Field(max_length=255)
    cover_art: Optional[str] = Field(default=None, max_length=512)
    release_type: str = Field(default="Single", max_length=16)
    format: str = Field(default="Digital", max_length=16)
    genre: Optional[str] = Field(default=None, max_length=128)
    language: Optional[str] = Field(default=None, max_length=64)
    upc: Optional[str] = Field(default=None, max_length=32, index=True)
    release_date: Optional[date] = Field(default=None)

    # Credits
    featured_artist: Optional[str] = Field(default=None, max_length=255)
    remixer_artist: Optional[str] = Field(default=None, max_length=255)
    composer: Optional[str] = Field(default=None, max_length=255)
    lyricist: Optional[str] = Field(default=None, max_length=255)
    music_producer: Optional[str] = Field(default=None, max_length=255)
    publisher: Optional[str] = Field(default=None, max_length=255)
    singer: Optional[str] = Field(default=None, max_length=255)
    music_director: Optional[str] = Field(default=None, max_length=255)
    copyright_header: Optional[str] = Field(default=None, max_length=255)

    status: str = Field(default="submitted", max_length=16, index=True)
    rejection_reason: Optional[str] = Field(default=None)


class Release(ReleaseBase, table=True):
    """Entity for releases.

    Table: st_releases
    """

    __tablename__ = "st_releases"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(max_length=32, index=True)

    stores: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    tracks: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Release(id={self.id}, title={self.title}, status={self.status})"

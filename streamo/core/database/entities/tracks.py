"""
Track entity models.

Audio tracks and music videos share one table, told apart by ``media_type``.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class TrackBase(Base):
    """Base fields for track entity."""

    media_type: str = Field(default="audio", max_length=8, index=True)
    title: str = Field(max_length=255)
    artist: str = Field(max_length=255)
    cover_art: Optional[str] = Field(default=None, max_length=512)
    media_file: Optional[str] = Field(default=None, max_length=512)
    release_type: Optional[str] = Field(default=None, max_length=16)
    format: Optional[str] = Field(default=None, max_length=16)
    genre: Optional[str] = Field(default=None, max_length=128)
    language: Optional[str] = Field(default=None, max_length=64)
    label: Optional[str] = Field(default=None, max_length=255)
    recording_year: Optional[int] = Field(default=None)
    release_date: Optional[date] = Field(default=None)
    isrc: Optional[str] = Field(default=None, max_length=32, index=True)
    upc: Optional[str] = Field(default=None, max_length=32)
    version: Optional[str] = Field(default=None, max_length=64)
    content_rating: Optional[str] = Field(default=None, max_length=32)
    lyrics: Optional[str] = Field(default=None)
    pricing: Optional[str] = Field(default=None, max_length=64)
    status: str = Field(default="submitted", max_length=16, index=True)
    rejection_reason: Optional[str] = Field(default=None)


class Track(TrackBase, table=True):
    """Entity for tracks and videos.

    Table: st_tracks
    """

    __tablename__ = "st_tracks"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(max_length=32, index=True)

    credits: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    stores: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Track(id={self.id}, title={self.title}, media_type={self.media_type})"

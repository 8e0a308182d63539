"""
Release I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from streamo.core.models.domain.enums import ReleaseFormat, ReleaseStatus, ReleaseType


class ReleaseTrackEntry(BaseModel):
    """A track embedded in a release's track list."""

    title: str
    artist_name: Optional[str] = None
    duration: Optional[str] = None
    isrc: Optional[str] = Field(default=None, description="International Standard Recording Code")


class ReleaseCredits(BaseModel):
    featured_artist: Optional[str] = None
    remixer_artist: Optional[str] = None
    composer: Optional[str] = None
    lyricist: Optional[str] = None
    music_producer: Optional[str] = None
    publisher: Optional[str] = None
    singer: Optional[str] = None
    music_director: Optional[str] = None
    copyright_header: Optional[str] = None


class ReleaseCreate(ReleaseCredits):
    """Schema for creating a release. ``draft`` keeps it out of the review queue."""

    title: str = Field(min_length=1, max_length=255)
    artist: str = Field(min_length=1, max_length=255)
    release_type: ReleaseType = ReleaseType.single
    format: ReleaseFormat = ReleaseFormat.digital
    genre: Optional[str] = None
    language: Optional[str] = None
    upc: Optional[str] = None
    release_date: Optional[date] = None
    stores: List[str] = Field(default_factory=list)
    tracks: List[ReleaseTrackEntry] = Field(default_factory=list)
    draft: bool = False


class ReleaseUpdate(ReleaseCredits):
    """Partial update; omitted fields are left untouched."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    artist: Optional[str] = Field(default=None, min_length=1, max_length=255)
    release_type: Optional[ReleaseType] = None
    format: Optional[ReleaseFormat] = None
    genre: Optional[str] = None
    language: Optional[str] = None
    upc: Optional[str] = None
    release_date: Optional[date] = None
    stores: Optional[List[str]] = None
    tracks: Optional[List[ReleaseTrackEntry]] = None


class ReleaseRead(ReleaseCredits):
    """Schema for reading a release from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    artist: str
    cover_art: Optional[str] = None
    release_type: str
    format: str
    genre: Optional[str] = None
    language: Optional[str] = None
    upc: Optional[str] = None
    release_date: Optional[date] = None
    stores: List[str]
    tracks: List[ReleaseTrackEntry]
    status: ReleaseStatus
    rejection_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class StatusUpdate(BaseModel):
    """Staff review decision for a release or track."""

    status: ReleaseStatus
    rejection_reason: Optional[str] = None

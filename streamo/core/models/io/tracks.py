"""
Track and video I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from streamo.core.models.domain.enums import MediaType, ReleaseStatus


class TrackFields(BaseModel):
    release_type: Optional[str] = None
    format: Optional[str] = None
    genre: Optional[str] = None
    language: Optional[str] = None
    label: Optional[str] = None
    recording_year: Optional[int] = Field(default=None, ge=1900, le=2100)
    release_date: Optional[date] = None
    isrc: Optional[str] = None
    upc: Optional[str] = None
    version: Optional[str] = None
    content_rating: Optional[str] = None
    lyrics: Optional[str] = None
    pricing: Optional[str] = None


class TrackCreate(TrackFields):
    """Schema for creating a track or video."""

    media_type: MediaType = MediaType.audio
    title: str = Field(min_length=1, max_length=255)
    artist: str = Field(min_length=1, max_length=255)
    credits: Dict[str, Any] = Field(default_factory=dict)
    stores: List[str] = Field(default_factory=list)
    draft: bool = False


class TrackUpdate(TrackFields):
    """Partial update; omitted fields are left untouched."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    artist: Optional[str] = Field(default=None, min_length=1, max_length=255)
    credits: Optional[Dict[str, Any]] = None
    stores: Optional[List[str]] = None


class TrackRead(TrackFields):
    """Schema for reading a track from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    media_type: MediaType
    title: str
    artist: str
    cover_art: Optional[str] = None
    media_file: Optional[str] = None
    credits: Dict[str, Any]
    stores: List[str]
    status: ReleaseStatus
    rejection_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime

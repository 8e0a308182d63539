"""
Royalty CSV upload I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from streamo.core.models.domain.enums import CsvUploadStatus

from .users import UserSummary


class CsvUploadRead(BaseModel):
    """Upload record with import progress."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    file_name: str
    original_file_name: str
    file_size: int
    mime_type: str
    status: CsvUploadStatus
    processed_rows: int
    total_rows: int
    progress: int = Field(description="Import progress in percent")
    error_message: Optional[str] = None
    uploaded_by: str
    created_at: datetime
    completed_at: Optional[datetime] = None


class CsvUploadListItem(CsvUploadRead):
    uploader: Optional[UserSummary] = None


class CsvContent(BaseModel):
    """Preview of the parsed rows of an uploaded report."""

    upload_id: str
    headers: List[str]
    rows: List[Dict[str, Any]]
    total_rows: int

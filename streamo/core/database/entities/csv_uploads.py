"""
CSV upload entity models.

Each row tracks one royalty report file and the progress of its import.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now


class CsvUpload(Base, table=True):
    """Entity for royalty CSV imports.

    Table: st_csv_uploads
    """

    __tablename__ = "st_csv_uploads"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    file_name: str = Field(max_length=255)
    original_file_name: str = Field(max_length=255)
    file_path: str = Field(max_length=512)
    file_size: int = Field(default=0)
    mime_type: str = Field(default="text/csv", max_length=128)

    status: str = Field(default="pending", max_length=32, index=True)
    processed_rows: int = Field(default=0)
    total_rows: int = Field(default=0)
    progress: int = Field(default=0, ge=0, le=100)
    error_message: Optional[str] = Field(default=None, sa_type=Text)

    uploaded_by: str = Field(max_length=32, index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    completed_at: Optional[datetime] = Field(default=None)

    def __repr__(self) -> str:
        return f"CsvUpload(id={self.id}, file={self.original_file_name}, status={self.status})"

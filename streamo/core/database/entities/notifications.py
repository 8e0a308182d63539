"""
Notification entity models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class Notification(Base, table=True):
    """Entity for in-app notifications.

    Table: st_notifications
    """

    __tablename__ = "st_notifications"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(max_length=32, index=True)
    title: str = Field(max_length=255)
    message: str = Field()
    type: str = Field(default="info", max_length=16)
    is_read: bool = Field(default=False, index=True)
    related_to: str = Field(default="general", max_length=16)
    related_item_id: Optional[str] = Field(default=None, max_length=32)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Notification(id={self.id}, user_id={self.user_id}, is_read={self.is_read})"

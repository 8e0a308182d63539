"""
Notification I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from streamo.core.models.domain.enums import NotificationRelation, NotificationType


class NotificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    message: str
    type: NotificationType
    is_read: bool
    related_to: NotificationRelation
    related_item_id: Optional[str] = None
    created_at: datetime


class NotificationList(BaseModel):
    count: int
    unread_count: int
    items: List[NotificationRead]

"""
Notification Service.

Creates the in-app notifications sent when staff act on a user's catalogue,
payouts or account.
"""

from __future__ import annotations

from typing import Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from streamo.core.database.entities.notifications import Notification
from streamo.core.database.repositories.notifications import NotificationRepository
from streamo.core.logging_config import get_logger
from streamo.core.models.domain.enums import (
    NotificationRelation,
    NotificationType,
    ReleaseStatus,
    WithdrawalStatus,
)

logger = get_logger(__name__)

_STATUS_TYPES = {
    ReleaseStatus.approved.value: NotificationType.success,
    ReleaseStatus.rejected.value: NotificationType.error,
    WithdrawalStatus.completed.value: NotificationType.success,
}


async def notify(
    session: AsyncSession,
    user_id: str,
    title: str,
    message: str,
    type: NotificationType = NotificationType.info,
    related_to: NotificationRelation = NotificationRelation.general,
    related_item_id: Optional[str] = None,
) -> Notification:
    """Store a notification for ``user_id``."""
    notification = Notification(
        user_id=user_id,
        title=title,
        message=message,
        type=type.value,
        related_to=related_to.value,
        related_item_id=related_item_id,
    )
    notification = await NotificationRepository(session).create(notification)
    logger.debug(f"Notified user {user_id}: {title}")
    return notification


async def notify_status_change(
    session: AsyncSession,
    user_id: str,
    related_to: NotificationRelation,
    item_id: str,
    item_title: str,
    status: str,
    reason: Optional[str] = None,
) -> Notification:
    """Tell an owner that staff changed the status of their release, track or withdrawal."""
    kind = related_to.value.capitalize()
    message = f"Your {related_to.value} '{item_title}' is now {status}."
    if reason:
        message += f" Reason: {reason}"
    return await notify(
        session,
        user_id,
        title=f"{kind} {status}",
        message=message,
        type=_STATUS_TYPES.get(status, NotificationType.info),
        related_to=related_to,
        related_item_id=item_id,
    )

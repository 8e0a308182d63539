"""
Notification Endpoints.

Every endpoint works on the caller's own notifications only.
"""

from fastapi import APIRouter

from streamo.core.database.entities.notifications import Notification
from streamo.core.database.entities.users import User
from streamo.core.database.repositories.notifications import NotificationRepository
from streamo.core.errors import NotFoundError
from streamo.core.models.io.common import MessageResponse
from streamo.core.models.io.notifications import NotificationList, NotificationRead
from streamo.server.services.deps import CurrentUser, SessionDep

router = APIRouter()


async def _get_own(session: SessionDep, user: User, notification_id: str) -> Notification:
    notification = await NotificationRepository(session).get_by_id(notification_id)
    if notification is None or notification.user_id != user.id:
        raise NotFoundError("Notification", notification_id)
    return notification


@router.get(
    "",
    response_model=NotificationList,
    summary="My Notifications",
    description="The caller's notifications newest first, with total and unread counts.",
)
async def list_notifications(user: CurrentUser, session: SessionDep) -> NotificationList:
    repo = NotificationRepository(session)
    items = await repo.list_for_user(user.id)
    return NotificationList(
        count=len(items),
        unread_count=sum(1 for n in items if not n.is_read),
        items=[NotificationRead.model_validate(n) for n in items],
    )


@router.put("/read-all", response_model=MessageResponse, summary="Mark All Read")
async def mark_all_read(user: CurrentUser, session: SessionDep) -> MessageResponse:
    updated = await NotificationRepository(session).mark_all_read(user.id)
    return MessageResponse(message=f"Marked {updated} notifications as read")


@router.put(
    "/{notification_id}/read",
    response_model=NotificationRead,
    summary="Mark Read",
    responses={404: {"description": "Notification not found"}},
)
async def mark_read(notification_id: str, user: CurrentUser, session: SessionDep) -> NotificationRead:
    notification = await _get_own(session, user, notification_id)
    notification.is_read = True
    notification = await NotificationRepository(session).update(notification)
    return NotificationRead.model_validate(notification)


@router.delete("/clear-all", response_model=MessageResponse, summary="Clear All")
async def clear_all(user: CurrentUser, session: SessionDep) -> MessageResponse:
    removed = await NotificationRepository(session).clear_all(user.id)
    return MessageResponse(message=f"Deleted {removed} notifications")


@router.delete(
    "/{notification_id}",
    response_model=MessageResponse,
    summary="Delete Notification",
    responses={404: {"description": "Notification not found"}},
)
async def delete_notification(notification_id: str, user: CurrentUser, session: SessionDep) -> MessageResponse:
    notification = await _get_own(session, user, notification_id)
    await NotificationRepository(session).delete(notification.id)
    return MessageResponse(message="Notification deleted")

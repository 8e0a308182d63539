"""
Notification repository.
"""

from __future__ import annotations

from typing import List

from sqlalchemy import delete as sa_delete
from sqlalchemy import func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..base import utc_now
from ..entities.notifications import Notification
from .base import AsyncBaseRepository


class NotificationRepository(AsyncBaseRepository[Notification]):
    """Repository for notification data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Notification)

    async def list_for_user(self, user_id: str) -> List[Notification]:
        stmt = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def unread_count(self, user_id: str) -> int:
        stmt = select(func.count()).select_from(Notification).where(
            Notification.user_id == user_id, Notification.is_read == False  # noqa: E712
        )
        result = await self.session.exec(stmt)
        return int(result.one())

    async def mark_all_read(self, user_id: str) -> int:
        stmt = (
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
            .values(is_read=True, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return int(result.rowcount or 0)

    async def clear_all(self, user_id: str) -> int:
        result = await self.session.execute(sa_delete(Notification).where(Notification.user_id == user_id))
        await self.session.commit()
        return int(result.rowcount or 0)

"""
Invitation repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.invitations import Invitation
from .base import AsyncBaseRepository


class InvitationRepository(AsyncBaseRepository[Invitation]):
    """Repository for invitation data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Invitation)

    async def get_by_code(self, code: str) -> Optional[Invitation]:
        result = await self.session.exec(select(Invitation).where(Invitation.code == code.strip().upper()))
        return result.first()

    async def list_by_creator(self, user_id: str) -> List[Invitation]:
        stmt = (
            select(Invitation)
            .where(Invitation.created_by == user_id)
            .order_by(Invitation.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.exec(stmt)
        return list(result.all())

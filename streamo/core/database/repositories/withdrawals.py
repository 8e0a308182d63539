"""
Withdrawal repository.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.withdrawals import Withdrawal
from .base import AsyncBaseRepository, AsyncQueryBuilder


class WithdrawalRepository(AsyncBaseRepository[Withdrawal]):
    """Repository for withdrawal data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Withdrawal)

    async def list_for_user(self, user_id: str) -> List[Withdrawal]:
        stmt = select(Withdrawal).where(Withdrawal.user_id == user_id).order_by(Withdrawal.created_at.desc())  # type: ignore[attr-defined]
        result = await self.session.exec(stmt)
        return list(result.all())

    async def search(
        self, *, status: Optional[str] = None, limit: int = 20, offset: int = 0
    ) -> Tuple[Sequence[Withdrawal], int]:
        stmt = AsyncQueryBuilder.apply_filters(select(Withdrawal), Withdrawal, {"status": status})
        stmt = stmt.order_by(Withdrawal.created_at.desc())  # type: ignore[attr-defined]
        return await self.paginate(stmt, limit, offset)

    async def sum_for_user(self, user_id: str, statuses: Iterable[str]) -> float:
        """Sum of withdrawal amounts for ``user_id`` in the given statuses."""
        stmt = (
            select(func.coalesce(func.sum(Withdrawal.amount), 0.0))
            .where(Withdrawal.user_id == user_id)
            .where(Withdrawal.status.in_(list(statuses)))  # type: ignore[attr-defined]
        )
        result = await self.session.exec(stmt)
        return float(result.one() or 0.0)

    async def last_completed(self, user_id: str) -> Optional[Withdrawal]:
        stmt = (
            select(Withdrawal)
            .where(Withdrawal.user_id == user_id, Withdrawal.status == "completed")
            .order_by(Withdrawal.processed_at.desc(), Withdrawal.created_at.desc())  # type: ignore[attr-defined]
            .limit(1)
        )
        result = await self.session.exec(stmt)
        return result.first()

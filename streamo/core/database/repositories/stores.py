"""
Store repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.stores import Store
from .base import AsyncBaseRepository, AsyncQueryBuilder


class StoreRepository(AsyncBaseRepository[Store]):
    """Repository for store data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Store)

    async def get_by_name(self, name: str) -> Optional[Store]:
        result = await self.session.exec(select(Store).where(Store.name == name))
        return result.first()

    async def filter(
        self,
        *,
        status: Optional[str] = None,
        category: Optional[str] = None,
        videos_only: Optional[bool] = None,
    ) -> List[Store]:
        """List stores alphabetically with optional equality filters."""
        stmt = AsyncQueryBuilder.apply_filters(
            select(Store), Store, {"status": status, "category": category, "videos_only": videos_only}
        )
        result = await self.session.exec(stmt.order_by(Store.name))
        return list(result.all())

"""
Release repository.

Owner-scoped listing and counting of releases.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.releases import Release
from .base import AsyncBaseRepository, AsyncQueryBuilder


class ReleaseRepository(AsyncBaseRepository[Release]):
    """Repository for release data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Release)

    async def search(
        self,
        *,
        owner_id: Optional[str] = None,
        status: Optional[str] = None,
        release_type: Optional[str] = None,
        term: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[Sequence[Release], int]:
        """Filter releases, newest first. ``owner_id=None`` means all owners."""
        stmt = select(Release)
        stmt = AsyncQueryBuilder.apply_filters(
            stmt, Release, {"user_id": owner_id, "status": status, "release_type": release_type}
        )
        stmt = AsyncQueryBuilder.apply_search(stmt, [Release.title, Release.artist], term)
        stmt = stmt.order_by(Release.created_at.desc())  # type: ignore[attr-defined]
        return await self.paginate(stmt, limit, offset)

    async def latest(self, owner_id: Optional[str], limit: int) -> List[Release]:
        stmt = select(Release)
        if owner_id is not None:
            stmt = stmt.where(Release.user_id == owner_id)
        stmt = stmt.order_by(Release.created_at.desc()).limit(limit)  # type: ignore[attr-defined]
        result = await self.session.exec(stmt)
        return list(result.all())

    async def list_for_owner(self, owner_id: str) -> List[Release]:
        result = await self.session.exec(select(Release).where(Release.user_id == owner_id))
        return list(result.all())

    async def count_for(self, owner_id: Optional[str] = None, statuses: Optional[Iterable[str]] = None) -> int:
        """Count releases, optionally per owner and restricted to ``statuses``."""
        stmt = select(func.count()).select_from(Release)
        if owner_id is not None:
            stmt = stmt.where(Release.user_id == owner_id)
        if statuses is not None:
            stmt = stmt.where(Release.status.in_(list(statuses)))  # type: ignore[attr-defined]
        result = await self.session.exec(stmt)
        return int(result.one())

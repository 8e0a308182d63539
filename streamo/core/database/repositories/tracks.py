"""
Track repository.

Owner-scoped listing and counting of audio tracks and videos.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.tracks import Track
from .base import AsyncBaseRepository, AsyncQueryBuilder


class TrackRepository(AsyncBaseRepository[Track]):
    """Repository for track data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Track)

    async def search(
        self,
        *,
        owner_id: Optional[str] = None,
        media_type: Optional[str] = None,
        status: Optional[str] = None,
        release_type: Optional[str] = None,
        term: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[Sequence[Track], int]:
        """Filter tracks, newest first. ``owner_id=None`` means all owners."""
        stmt = select(Track)
        stmt = AsyncQueryBuilder.apply_filters(
            stmt,
            Track,
            {"user_id": owner_id, "media_type": media_type, "status": status, "release_type": release_type},
        )
        stmt = AsyncQueryBuilder.apply_search(stmt, [Track.title, Track.artist], term)
        stmt = stmt.order_by(Track.created_at.desc())  # type: ignore[attr-defined]
        return await self.paginate(stmt, limit, offset)

    async def list_for_owner(self, owner_id: str) -> List[Track]:
        result = await self.session.exec(select(Track).where(Track.user_id == owner_id))
        return list(result.all())

    async def count_for(self, owner_id: Optional[str] = None, statuses: Optional[Iterable[str]] = None) -> int:
        """Count tracks, optionally per owner and restricted to ``statuses``."""
        stmt = select(func.count()).select_from(Track)
        if owner_id is not None:
            stmt = stmt.where(Track.user_id == owner_id)
        if statuses is not None:
            stmt = stmt.where(Track.status.in_(list(statuses)))  # type: ignore[attr-defined]
        result = await self.session.exec(stmt)
        return int(result.one())

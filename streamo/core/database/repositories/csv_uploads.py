"""
CSV upload repository.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.csv_uploads import CsvUpload
from .base import AsyncBaseRepository, AsyncQueryBuilder


class CsvUploadRepository(AsyncBaseRepository[CsvUpload]):
    """Repository for CSV upload data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CsvUpload)

    async def search(
        self, *, status: Optional[str] = None, limit: int = 20, offset: int = 0
    ) -> Tuple[Sequence[CsvUpload], int]:
        """List uploads newest first, optionally by status."""
        stmt = AsyncQueryBuilder.apply_filters(select(CsvUpload), CsvUpload, {"status": status})
        stmt = stmt.order_by(CsvUpload.created_at.desc())  # type: ignore[attr-defined]
        return await self.paginate(stmt, limit, offset)

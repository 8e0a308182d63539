"""
Royalty transaction repository.

Besides CRUD this module holds the aggregate queries behind the transaction
summary, the royalty statements and the dashboard figures. Every query takes an
optional ``user_id`` scope: ``None`` means all rows (staff view), otherwise only
rows linked to that user.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import delete as sa_delete
from sqlalchemy import extract, func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.transactions import Transaction
from .base import AsyncBaseRepository, AsyncQueryBuilder


@dataclass(frozen=True)
class TransactionFilters:
    """Filters accepted by the transaction list and summary."""

    user_id: Optional[str] = None
    artist: Optional[str] = None
    title: Optional[str] = None
    service_type: Optional[str] = None
    territory: Optional[str] = None
    isrc: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


# Characters removed from ISRCs before comparison, in Python and in SQL alike
ISRC_NOISE = ("-", " ", "\t", "\n", "\r")


def normalized_isrc_column():
    """SQL expression normalising the stored ISRC the same way as ``normalize_isrc``."""
    expression = Transaction.isrc
    for char in ISRC_NOISE:
        expression = func.replace(expression, char, "")
    return func.upper(expression)


class TransactionRepository(AsyncBaseRepository[Transaction]):
    """Repository for transaction data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Transaction)

    @staticmethod
    def _apply(stmt, filters: TransactionFilters):
        stmt = AsyncQueryBuilder.apply_filters(
            stmt,
            Transaction,
            {
                "user_id": filters.user_id,
                "service_type": filters.service_type,
                "territory": filters.territory,
                "isrc": filters.isrc,
            },
        )
        stmt = AsyncQueryBuilder.apply_search(stmt, [Transaction.artist], filters.artist)
        stmt = AsyncQueryBuilder.apply_search(stmt, [Transaction.title], filters.title)
        if filters.start_date is not None:
            stmt = stmt.where(Transaction.transaction_date >= filters.start_date)
        if filters.end_date is not None:
            stmt = stmt.where(Transaction.transaction_date <= filters.end_date)
        return stmt

    async def search(
        self, filters: TransactionFilters, limit: int = 20, offset: int = 0
    ) -> Tuple[Sequence[Transaction], int]:
        """Filter transactions, newest transaction date first."""
        stmt = self._apply(select(Transaction), filters)
        stmt = stmt.order_by(Transaction.transaction_date.desc(), Transaction.row_number)  # type: ignore[attr-defined]
        return await self.paginate(stmt, limit, offset)

    async def recent_for_user(self, user_id: str, limit: int = 50) -> List[Transaction]:
        stmt = (
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .order_by(Transaction.transaction_date.desc())  # type: ignore[attr-defined]
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def list_for_user_month(self, user_id: str, year: int, month: int) -> List[Transaction]:
        stmt = (
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .where(extract("year", Transaction.transaction_date) == year)
            .where(extract("month", Transaction.transaction_date) == month)
            .order_by(Transaction.transaction_date, Transaction.row_number)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    async def totals(self, filters: TransactionFilters) -> Tuple[float, int, int]:
        """Return (revenue_usd sum, quantity sum, row count)."""
        stmt = self._apply(
            select(
                func.coalesce(func.sum(Transaction.revenue_usd), 0.0),
                func.coalesce(func.sum(Transaction.quantity), 0),
                func.count(Transaction.id),
            ),
            filters,
        )
        result = await self.session.exec(stmt)
        revenue, quantity, count = result.one()
        return float(revenue or 0.0), int(quantity or 0), int(count or 0)

    async def revenue_by(self, column_name: str, filters: TransactionFilters, limit: Optional[int] = None):
        """Group revenue by ``service_type`` or ``territory``; empty values become ``Unknown``.

        Returns:
            List of (key, revenue_usd, quantity, count) ordered by revenue descending
        """
        column = getattr(Transaction, column_name)
        key = func.coalesce(func.nullif(column, ""), "Unknown").label("key")
        revenue = func.sum(Transaction.revenue_usd).label("revenue")
        stmt = self._apply(
            select(key, revenue, func.sum(Transaction.quantity), func.count(Transaction.id)), filters
        )
        stmt = stmt.group_by(key).order_by(revenue.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.exec(stmt)
        return [(row[0], float(row[1] or 0.0), int(row[2] or 0), int(row[3] or 0)) for row in result.all()]

    async def monthly(self, filters: TransactionFilters):
        """Group revenue by calendar month.

        Returns:
            List of (year, month, revenue_usd, quantity, count) ascending by (year, month)
        """
        year = extract("year", Transaction.transaction_date).label("year")
        month = extract("month", Transaction.transaction_date).label("month")
        stmt = self._apply(
            select(
                year,
                month,
                func.sum(Transaction.revenue_usd),
                func.sum(Transaction.quantity),
                func.count(Transaction.id),
            ),
            filters,
        )
        stmt = stmt.group_by(year, month).order_by(year, month)
        result = await self.session.exec(stmt)
        return [
            (int(row[0]), int(row[1]), float(row[2] or 0.0), int(row[3] or 0), int(row[4] or 0))
            for row in result.all()
        ]

    async def by_track(self, user_id: Optional[str]):
        """Group revenue per (isrc, title, artist, label).

        Returns:
            List of (isrc, title, artist, label, revenue_usd, quantity) ordered by revenue descending
        """
        revenue = func.sum(Transaction.revenue_usd).label("revenue")
        stmt = select(
            Transaction.isrc,
            func.max(Transaction.title),
            func.max(Transaction.artist),
            func.max(Transaction.label),
            revenue,
            func.sum(Transaction.quantity),
        )
        if user_id is not None:
            stmt = stmt.where(Transaction.user_id == user_id)
        stmt = stmt.group_by(Transaction.isrc).order_by(revenue.desc())
        result = await self.session.exec(stmt)
        return [
            (row[0], row[1], row[2], row[3], float(row[4] or 0.0), int(row[5] or 0)) for row in result.all()
        ]

    # ------------------------------------------------------------------
    # Bulk writes
    # ------------------------------------------------------------------

    async def link_isrcs(self, user_id: str, normalized_isrcs: Iterable[str]) -> int:
        """Link every transaction whose normalised ISRC is in ``normalized_isrcs`` to ``user_id``.

        Does not commit; the caller commits once for the whole pass.

        Returns:
            Number of rows updated
        """
        values = sorted(set(normalized_isrcs))
        if not values:
            return 0
        stmt = (
            update(Transaction)
            .where(normalized_isrc_column().in_(values))
            .values(user_id=user_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return int(result.rowcount or 0)

    async def delete_for_upload(self, upload_id: str) -> int:
        """Delete all transactions imported from ``upload_id``. Does not commit."""
        stmt = sa_delete(Transaction).where(Transaction.csv_upload_id == upload_id)
        result = await self.session.execute(stmt)
        return int(result.rowcount or 0)

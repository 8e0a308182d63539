"""
Earnings and Royalty Statement Service.

A user's earnings are the USD revenue of the transactions linked to them, scaled
by their split percentage. Withdrawals are drawn against those earnings:

- available balance = earnings - every withdrawal that was not rejected
- pending payments  = pending + approved withdrawals

Monthly statements group linked transactions by calendar month. A statement is
``paid`` once completed withdrawals cover the cumulative earnings up to and
including that month.
"""

from __future__ import annotations

import csv
import io
import re
from datetime import date
from typing import List, Optional, Tuple

from sqlmodel.ext.asyncio.session import AsyncSession

from streamo.core.database.entities.users import User
from streamo.core.database.repositories.transactions import TransactionFilters, TransactionRepository
from streamo.core.database.repositories.withdrawals import WithdrawalRepository
from streamo.core.errors import NotFoundError
from streamo.core.models.domain.enums import WithdrawalStatus
from streamo.core.models.io.royalties import EarningsResponse, RoyaltySummary, Statement, TrackRoyalty
from streamo.core.models.io.transactions import TransactionRead
from streamo.core.models.io.withdrawals import WithdrawalRead

STATEMENT_ID = re.compile(r"^(\d{4})-(\d{2})$")

RESERVED_STATUSES = (WithdrawalStatus.pending.value, WithdrawalStatus.approved.value, WithdrawalStatus.completed.value)
PENDING_STATUSES = (WithdrawalStatus.pending.value, WithdrawalStatus.approved.value)

STATEMENT_COLUMNS = (
    "transaction_id",
    "transaction_date",
    "title",
    "artist",
    "isrc",
    "upc",
    "label",
    "service_type",
    "territory",
    "transaction_type",
    "quantity",
    "revenue_usd",
    "currency",
)


def apply_split(amount: float, user: User) -> float:
    return round(amount * (user.split or 0) / 100, 2)


def statement_period(year: int, month: int) -> Tuple[str, str]:
    """Return (``YYYY-MM`` id, ``Mon YYYY`` label)."""
    return f"{year:04d}-{month:02d}", date(year, month, 1).strftime("%b %Y")


def parse_statement_id(statement_id: str) -> Tuple[int, int]:
    match = STATEMENT_ID.match(statement_id)
    if not match or not 1 <= int(match.group(2)) <= 12:
        raise NotFoundError("Statement", statement_id)
    return int(match.group(1)), int(match.group(2))


async def total_earnings(session: AsyncSession, user: User) -> float:
    revenue, _, _ = await TransactionRepository(session).totals(TransactionFilters(user_id=user.id))
    return apply_split(revenue, user)


async def available_balance(session: AsyncSession, user: User) -> float:
    earnings = await total_earnings(session, user)
    reserved = await WithdrawalRepository(session).sum_for_user(user.id, RESERVED_STATUSES)
    return round(earnings - reserved, 2)


async def get_earnings(session: AsyncSession, user: User) -> EarningsResponse:
    withdrawals = WithdrawalRepository(session)
    earnings = await total_earnings(session, user)
    reserved = await withdrawals.sum_for_user(user.id, RESERVED_STATUSES)
    pending = await withdrawals.sum_for_user(user.id, PENDING_STATUSES)
    last_payout = await withdrawals.last_completed(user.id)
    recent = await TransactionRepository(session).recent_for_user(user.id, limit=50)
    return EarningsResponse(
        total_earnings=earnings,
        last_payout=WithdrawalRead.model_validate(last_payout) if last_payout else None,
        pending_payments=round(pending, 2),
        available_balance=round(earnings - reserved, 2),
        recent_transactions=[TransactionRead.model_validate(t) for t in recent],
    )


async def monthly_statements(session: AsyncSession, user: User) -> List[Statement]:
    """Statements for every month with linked transactions, newest first."""
    months = await TransactionRepository(session).monthly(TransactionFilters(user_id=user.id))
    paid_out = await WithdrawalRepository(session).sum_for_user(user.id, (WithdrawalStatus.completed.value,))

    statements: List[Statement] = []
    cumulative = 0.0
    for year, month, revenue, quantity, _ in months:
        amount = apply_split(revenue, user)
        cumulative += amount
        statement_id, period = statement_period(year, month)
        statements.append(
            Statement(
                id=statement_id,
                period=period,
                amount=amount,
                streams=quantity,
                status="paid" if paid_out + 0.005 >= cumulative else "pending",
            )
        )
    statements.reverse()
    return statements


async def royalty_summary(session: AsyncSession, user: User) -> RoyaltySummary:
    history = await monthly_statements(session, user)
    pending = await WithdrawalRepository(session).sum_for_user(user.id, PENDING_STATUSES)
    return RoyaltySummary(
        total_earnings=await total_earnings(session, user),
        last_statement=history[0].amount if history else 0.0,
        pending_payments=round(pending, 2),
        history=history,
    )


async def statement_csv(session: AsyncSession, user: User, statement_id: str) -> Tuple[str, str]:
    """
    Render one month's linked transactions as CSV.

    Returns:
        Tuple of (download file name, CSV text)

    Raises:
        NotFoundError: Malformed id or no transactions in that month
    """
    year, month = parse_statement_id(statement_id)
    rows = await TransactionRepository(session).list_for_user_month(user.id, year, month)
    if not rows:
        raise NotFoundError("Statement", statement_id)

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(STATEMENT_COLUMNS)
    for row in rows:
        writer.writerow(
            [
                row.transaction_id,
                row.transaction_date.date().isoformat(),
                row.title,
                row.artist,
                row.isrc,
                row.upc,
                row.label,
                row.service_type,
                row.territory,
                row.transaction_type,
                row.quantity,
                f"{row.revenue_usd:.2f}",
                row.currency,
            ]
        )
    return f"statement-{statement_id}.csv", buffer.getvalue()


async def track_royalties(session: AsyncSession, user: User) -> List[TrackRoyalty]:
    """Per-track revenue from ``user``'s linked transactions with the artist and label shares."""
    artist_split = float(user.split or 0)
    rows = await TransactionRepository(session).by_track(user.id)
    return [
        TrackRoyalty(
            isrc=isrc or None,
            track=title or None,
            artist=artist or None,
            label=label or None,
            streams=quantity,
            revenue=round(revenue, 2),
            artist_split=artist_split,
            label_split=round(100 - artist_split, 2),
            artist_revenue=apply_split(revenue, user),
        )
        for isrc, title, artist, label, revenue, quantity in rows
    ]


async def last_statement_amount(session: AsyncSession, user: Optional[User]) -> float:
    """Most recent month's amount: split-adjusted for ``user``, gross across all rows when ``None``."""
    months = await TransactionRepository(session).monthly(TransactionFilters(user_id=user.id if user else None))
    if not months:
        return 0.0
    revenue = months[-1][2]
    return apply_split(revenue, user) if user else round(revenue, 2)

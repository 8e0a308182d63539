"""
Royalty Transaction Endpoints.

Staff see every imported transaction. Artists and label owners see only the
transactions linked to them by ISRC reconciliation.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Query

from streamo.core.database.base import to_naive_utc
from streamo.core.database.entities.transactions import Transaction
from streamo.core.database.entities.users import User
from streamo.core.database.repositories.base import apply_changes
from streamo.core.database.repositories.transactions import TransactionFilters, TransactionRepository
from streamo.core.errors import NotFoundError
from streamo.core.logging_config import get_logger
from streamo.core.models.io.common import MessageResponse, Page
from streamo.core.models.io.transactions import (
    MonthlyRevenue,
    RevenueBucket,
    SummaryTotals,
    TransactionRead,
    TransactionSummary,
    TransactionUpdate,
)
from streamo.server.services.deps import AdminUser, CurrentUser, PageDep, SessionDep, is_staff

logger = get_logger(__name__)

router = APIRouter()

TOP_BUCKETS = 10


def _scope(user: User) -> Optional[str]:
    return None if is_staff(user) else user.id


async def _get_visible(session: SessionDep, user: User, transaction_id: str) -> Transaction:
    transaction = await TransactionRepository(session).get_by_id(transaction_id)
    if transaction is None or (not is_staff(user) and transaction.user_id != user.id):
        raise NotFoundError("Transaction", transaction_id)
    return transaction


@router.get(
    "",
    response_model=Page[TransactionRead],
    summary="List Transactions",
    description="Paginated transactions, newest first, filtered by artist, title, service, territory, ISRC and date range.",
)
async def list_transactions(
    user: CurrentUser,
    session: SessionDep,
    pagination: PageDep,
    artist: Optional[str] = Query(default=None, description="Case-insensitive substring"),
    title: Optional[str] = Query(default=None, description="Case-insensitive substring"),
    service_type: Optional[str] = None,
    territory: Optional[str] = None,
    isrc: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> Page[TransactionRead]:
    filters = TransactionFilters(
        user_id=_scope(user),
        artist=artist,
        title=title,
        service_type=service_type,
        territory=territory,
        isrc=isrc,
        start_date=to_naive_utc(start_date),
        end_date=to_naive_utc(end_date),
    )
    rows, total = await TransactionRepository(session).search(filters, pagination.limit, pagination.offset)
    return Page.build([TransactionRead.model_validate(t) for t in rows], total, pagination.page, pagination.limit)


@router.get(
    "/summary",
    response_model=TransactionSummary,
    summary="Transaction Summary",
    description="Totals, top ten services and territories by revenue, and revenue per month.",
)
async def transaction_summary(
    user: CurrentUser,
    session: SessionDep,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> TransactionSummary:
    filters = TransactionFilters(
        user_id=_scope(user), start_date=to_naive_utc(start_date), end_date=to_naive_utc(end_date)
    )
    repo = TransactionRepository(session)
    revenue, quantity, count = await repo.totals(filters)
    services = await repo.revenue_by("service_type", filters, limit=TOP_BUCKETS)
    territories = await repo.revenue_by("territory", filters, limit=TOP_BUCKETS)
    months = await repo.monthly(filters)

    return TransactionSummary(
        totals=SummaryTotals(revenue=round(revenue, 2), quantity=quantity, count=count),
        top_services=[RevenueBucket(name=n, revenue=round(r, 2), quantity=q, count=c) for n, r, q, c in services],
        top_territories=[
            RevenueBucket(name=n, revenue=round(r, 2), quantity=q, count=c) for n, r, q, c in territories
        ],
        monthly=[
            MonthlyRevenue(year=y, month=m, revenue=round(r, 2), quantity=q, count=c) for y, m, r, q, c in months
        ],
    )


@router.get(
    "/{transaction_id}",
    response_model=TransactionRead,
    summary="Get Transaction",
    responses={404: {"description": "Transaction not found"}},
)
async def get_transaction(transaction_id: str, user: CurrentUser, session: SessionDep) -> TransactionRead:
    return TransactionRead.model_validate(await _get_visible(session, user, transaction_id))


@router.put(
    "/{transaction_id}",
    response_model=TransactionRead,
    summary="Update Transaction",
    description="Staff only. Correct the metadata of an imported transaction.",
    responses={404: {"description": "Transaction not found"}},
)
async def update_transaction(
    transaction_id: str, payload: TransactionUpdate, actor: AdminUser, session: SessionDep
) -> TransactionRead:
    transaction = await _get_visible(session, actor, transaction_id)
    changes = {key: value for key, value in payload.model_dump(exclude_unset=True).items() if value is not None}
    if "transaction_date" in changes:
        changes["transaction_date"] = to_naive_utc(changes["transaction_date"])
    apply_changes(transaction, changes)
    transaction = await TransactionRepository(session).update(transaction)
    logger.info(f"User {actor.id} updated transaction {transaction.id}: {sorted(changes)}")
    return TransactionRead.model_validate(transaction)


@router.delete(
    "/{transaction_id}",
    response_model=MessageResponse,
    summary="Delete Transaction",
    description="Staff only.",
    responses={404: {"description": "Transaction not found"}},
)
async def delete_transaction(transaction_id: str, actor: AdminUser, session: SessionDep) -> MessageResponse:
    await _get_visible(session, actor, transaction_id)
    await TransactionRepository(session).delete(transaction_id)
    logger.info(f"User {actor.id} deleted transaction {transaction_id}")
    return MessageResponse(message="Transaction deleted successfully")

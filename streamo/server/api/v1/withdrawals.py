"""
Withdrawal Endpoints.

Artists and label owners request payouts against their available balance; staff
approve, reject and complete them. Allowed status changes:

- pending  -> approved | rejected
- approved -> completed | rejected
"""

from typing import Optional

from fastapi import APIRouter, Query, status

from streamo.core.database.base import utc_now
from streamo.core.database.entities.withdrawals import Withdrawal
from streamo.core.database.repositories.withdrawals import WithdrawalRepository
from streamo.core.errors import NotFoundError, ValidationFailedError
from streamo.core.logging_config import get_logger
from streamo.core.models.domain.enums import NotificationRelation, WithdrawalStatus
from streamo.core.models.io.common import MessageResponse, Page
from streamo.core.models.io.withdrawals import WithdrawalCreate, WithdrawalRead, WithdrawalUpdate
from streamo.server.services import earnings as earnings_service
from streamo.server.services.deps import AdminUser, CurrentUser, PageDep, SessionDep, is_staff
from streamo.server.services.notifications import notify_status_change

logger = get_logger(__name__)

router = APIRouter()

TRANSITIONS = {
    WithdrawalStatus.pending.value: {WithdrawalStatus.approved.value, WithdrawalStatus.rejected.value},
    WithdrawalStatus.approved.value: {WithdrawalStatus.completed.value, WithdrawalStatus.rejected.value},
}


@router.post(
    "",
    response_model=WithdrawalRead,
    status_code=status.HTTP_201_CREATED,
    summary="Request Withdrawal",
    description="Request a payout. The amount may not exceed the available balance.",
    responses={400: {"description": "Insufficient balance"}},
)
async def create_withdrawal(payload: WithdrawalCreate, user: CurrentUser, session: SessionDep) -> WithdrawalRead:
    balance = await earnings_service.available_balance(session, user)
    if payload.amount > balance + 1e-9:
        raise ValidationFailedError(f"Insufficient balance. Available: {balance:.2f}")

    withdrawal = await WithdrawalRepository(session).create(
        Withdrawal(
            user_id=user.id,
            amount=round(payload.amount, 2),
            payment_method=payload.payment_method.value,
            bank_details=payload.bank_details.model_dump() if payload.bank_details else None,
            mobile_number=payload.mobile_number,
            notes=payload.notes,
        )
    )
    logger.info(f"User {user.id} requested withdrawal {withdrawal.id} of {withdrawal.amount:.2f}")
    return WithdrawalRead.model_validate(withdrawal)


@router.get(
    "",
    response_model=list[WithdrawalRead],
    summary="My Withdrawals",
    description="The caller's withdrawals, newest first.",
)
async def my_withdrawals(user: CurrentUser, session: SessionDep) -> list[WithdrawalRead]:
    return [WithdrawalRead.model_validate(w) for w in await WithdrawalRepository(session).list_for_user(user.id)]


@router.get(
    "/all",
    response_model=Page[WithdrawalRead],
    summary="All Withdrawals",
    description="Staff only. Every withdrawal, newest first, optionally by status.",
)
async def all_withdrawals(
    _: AdminUser,
    session: SessionDep,
    pagination: PageDep,
    status_filter: Optional[WithdrawalStatus] = Query(default=None, alias="status"),
) -> Page[WithdrawalRead]:
    rows, total = await WithdrawalRepository(session).search(
        status=status_filter.value if status_filter else None, limit=pagination.limit, offset=pagination.offset
    )
    return Page.build([WithdrawalRead.model_validate(w) for w in rows], total, pagination.page, pagination.limit)


@router.get(
    "/{withdrawal_id}",
    response_model=WithdrawalRead,
    summary="Get Withdrawal",
    responses={404: {"description": "Withdrawal not found"}},
)
async def get_withdrawal(withdrawal_id: str, user: CurrentUser, session: SessionDep) -> WithdrawalRead:
    withdrawal = await WithdrawalRepository(session).get_by_id(withdrawal_id)
    if withdrawal is None or (not is_staff(user) and withdrawal.user_id != user.id):
        raise NotFoundError("Withdrawal", withdrawal_id)
    return WithdrawalRead.model_validate(withdrawal)


@router.put(
    "/{withdrawal_id}",
    response_model=WithdrawalRead,
    summary="Process Withdrawal",
    description="Staff only. Change the status and notes; the owner is notified of status changes.",
    responses={400: {"description": "Status change not allowed"}, 404: {"description": "Withdrawal not found"}},
)
async def process_withdrawal(
    withdrawal_id: str, payload: WithdrawalUpdate, actor: AdminUser, session: SessionDep
) -> WithdrawalRead:
    repo = WithdrawalRepository(session)
    withdrawal = await repo.get_by_id(withdrawal_id)
    if withdrawal is None:
        raise NotFoundError("Withdrawal", withdrawal_id)

    new_status = payload.status.value if payload.status else None
    changed = new_status is not None and new_status != withdrawal.status
    if changed and new_status not in TRANSITIONS.get(withdrawal.status, set()):
        raise ValidationFailedError(f"Cannot change withdrawal from {withdrawal.status} to {new_status}")

    if payload.notes is not None:
        withdrawal.notes = payload.notes
    if changed:
        withdrawal.status = new_status
        withdrawal.processed_by = actor.id
        withdrawal.processed_at = utc_now()
    withdrawal = await repo.update(withdrawal)

    if changed:
        await notify_status_change(
            session,
            withdrawal.user_id,
            NotificationRelation.withdrawal,
            withdrawal.id,
            f"{withdrawal.amount:.2f} withdrawal",
            withdrawal.status,
            payload.notes,
        )
        logger.info(f"User {actor.id} set withdrawal {withdrawal.id} to {withdrawal.status}")
    return WithdrawalRead.model_validate(withdrawal)


@router.delete(
    "/{withdrawal_id}",
    response_model=MessageResponse,
    summary="Delete Withdrawal",
    description="Staff only.",
    responses={404: {"description": "Withdrawal not found"}},
)
async def delete_withdrawal(withdrawal_id: str, actor: AdminUser, session: SessionDep) -> MessageResponse:
    if not await WithdrawalRepository(session).delete(withdrawal_id):
        raise NotFoundError("Withdrawal", withdrawal_id)
    logger.info(f"User {actor.id} deleted withdrawal {withdrawal_id}")
    return MessageResponse(message="Withdrawal deleted successfully")

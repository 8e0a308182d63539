"""
Earnings Endpoints.
"""

from fastapi import APIRouter

from streamo.core.models.io.royalties import EarningsResponse
from streamo.server.services import earnings as earnings_service
from streamo.server.services.deps import CurrentUser, SessionDep

router = APIRouter()


@router.get(
    "/user",
    response_model=EarningsResponse,
    summary="My Earnings",
    description=(
        "Earnings after the caller's split, last payout, pending payouts, available balance "
        "and the 50 most recent linked transactions."
    ),
)
async def user_earnings(user: CurrentUser, session: SessionDep) -> EarningsResponse:
    return await earnings_service.get_earnings(session, user)

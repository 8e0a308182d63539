"""
Royalty Endpoints.

Per-track royalties and monthly statements built from the caller's linked
transactions. Statements are identified by their month (``YYYY-MM``) and can be
downloaded as CSV.
"""

from fastapi import APIRouter
from fastapi.responses import Response

from streamo.core.logging_config import get_logger
from streamo.core.models.io.royalties import RoyaltySummary, Statement, TrackRoyalty
from streamo.server.services import earnings as earnings_service
from streamo.server.services.deps import CurrentUser, SessionDep

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=list[TrackRoyalty],
    summary="Track Royalties",
    description="Revenue per track with the artist and label shares.",
)
async def track_royalties(user: CurrentUser, session: SessionDep) -> list[TrackRoyalty]:
    return await earnings_service.track_royalties(session, user)


@router.get(
    "/summary",
    response_model=RoyaltySummary,
    summary="Royalty Summary",
    description="Total earnings, latest statement amount, pending payouts and statement history.",
)
async def royalty_summary(user: CurrentUser, session: SessionDep) -> RoyaltySummary:
    return await earnings_service.royalty_summary(session, user)


@router.get(
    "/statements",
    response_model=list[Statement],
    summary="Monthly Statements",
    description="One statement per month with linked transactions, newest first.",
)
async def statements(user: CurrentUser, session: SessionDep) -> list[Statement]:
    return await earnings_service.monthly_statements(session, user)


@router.get(
    "/statements/{statement_id}/download",
    summary="Download Statement",
    description="The month's linked transactions as a CSV attachment.",
    response_class=Response,
    responses={
        200: {"content": {"text/csv": {}}, "description": "Statement CSV"},
        404: {"description": "No transactions in that month"},
    },
)
async def download_statement(statement_id: str, user: CurrentUser, session: SessionDep) -> Response:
    filename, content = await earnings_service.statement_csv(session, user, statement_id)
    logger.debug(f"User {user.id} downloaded statement {statement_id}")
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

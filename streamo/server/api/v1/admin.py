"""
Admin Tool Endpoints.

Maintenance actions for staff, currently the royalty reconciliation pass.
"""

from fastapi import APIRouter

from streamo.core.logging_config import get_logger
from streamo.core.models.io.transactions import LinkResponse
from streamo.server.services.deps import AdminUser, SessionDep
from streamo.server.services.reconciliation import update_transaction_links

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/update-transaction-links",
    response_model=LinkResponse,
    summary="Link Transactions To Users",
    description=(
        "Staff only. Match imported transactions to artists and label owners by the ISRCs "
        "of their tracks and releases."
    ),
    response_description="Per-user ISRC and updated transaction counts.",
)
async def update_links(actor: AdminUser, session: SessionDep) -> LinkResponse:
    """
    Run royalty reconciliation.

    ISRCs are compared case-insensitively with hyphens and spaces ignored. When two
    users list the same ISRC, the earlier account keeps it.
    """
    logger.info(f"User {actor.id} started transaction link update")
    results = await update_transaction_links(session)
    total = sum(result.transactions_updated for result in results)
    return LinkResponse(message=f"Updated {total} transactions for {len(results)} users", results=results)

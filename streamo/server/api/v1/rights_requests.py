"""
Rights Management Endpoints.

Whitelist and claim requests are not stored; they are mailed to the rights
mailbox for manual handling.
"""

from fastapi import APIRouter

from streamo.core.logging_config import get_logger
from streamo.core.models.io.common import MessageResponse
from streamo.core.models.io.royalties import RightsRequest
from streamo.server.services.deps import CurrentUser
from streamo.server.services.mailer import send_rights_request

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=MessageResponse,
    summary="Submit Rights Request",
    description="Email a whitelist or claim-release request to the rights team.",
    responses={502: {"description": "Mail server rejected the message"}, 503: {"description": "Mail not configured"}},
)
async def submit_rights_request(payload: RightsRequest, user: CurrentUser) -> MessageResponse:
    subject = await send_rights_request(payload, requested_by=f"{user.name} <{user.email}>")
    logger.info(f"User {user.id} sent rights request '{subject}'")
    return MessageResponse(message=f"{payload.request_type.value.capitalize()} request sent successfully")

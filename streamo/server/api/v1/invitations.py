"""
Invitation Endpoints.

Staff and label owners hand out short-lived codes; a new artist who registers
with a valid code is approved immediately.
"""

from datetime import datetime, timedelta

from fastapi import APIRouter, status

from streamo.core.database.base import to_naive_utc, utc_now
from streamo.core.database.entities.invitations import Invitation
from streamo.core.database.repositories.invitations import InvitationRepository
from streamo.core.database.repositories.users import UserRepository
from streamo.core.errors import NotFoundError, ValidationFailedError
from streamo.core.logging_config import get_logger
from streamo.core.models.io.common import MessageResponse
from streamo.core.models.io.invitations import InvitationCreate, InvitationRead, InvitationValidation
from streamo.core.models.io.users import UserSummary
from streamo.core.security import generate_invitation_code
from streamo.server.services.deps import CurrentUser, InviterUser, SessionDep
from streamo.server.services.invitations import get_valid_invitation

logger = get_logger(__name__)

router = APIRouter()

DEFAULT_LIFETIME = timedelta(minutes=5)


async def _unique_code(repo: InvitationRepository) -> str:
    while True:
        code = generate_invitation_code()
        if await repo.get_by_code(code) is None:
            return code


@router.post(
    "",
    response_model=InvitationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Invitation",
    description="Create an 8-character invitation code. ``expires_at`` defaults to five minutes from now.",
    responses={400: {"description": "Expiry is not in the future"}},
)
async def create_invitation(payload: InvitationCreate, user: InviterUser, session: SessionDep) -> InvitationRead:
    now = utc_now()
    expires_at: datetime = to_naive_utc(payload.expires_at) if payload.expires_at else now + DEFAULT_LIFETIME
    if expires_at <= now:
        raise ValidationFailedError("Expiry date must be in the future")

    repo = InvitationRepository(session)
    invitation = await repo.create(Invitation(code=await _unique_code(repo), created_by=user.id, expires_at=expires_at))
    logger.info(f"User {user.id} created invitation {invitation.code} expiring {expires_at.isoformat()}")
    return InvitationRead.model_validate(invitation)


@router.get(
    "",
    response_model=list[InvitationRead],
    summary="My Invitations",
    description="Invitations created by the caller, newest first, with the account that used each one.",
)
async def list_invitations(user: InviterUser, session: SessionDep) -> list[InvitationRead]:
    invitations = await InvitationRepository(session).list_by_creator(user.id)
    invitees = await UserRepository(session).get_many([i.used_by for i in invitations if i.used_by])
    items = []
    for invitation in invitations:
        item = InvitationRead.model_validate(invitation)
        invitee = invitees.get(invitation.used_by) if invitation.used_by else None
        item.invitee = UserSummary.model_validate(invitee) if invitee else None
        items.append(item)
    return items


@router.get(
    "/users",
    response_model=list[UserSummary],
    summary="Invited Users",
    description="Accounts registered with one of the caller's codes.",
)
async def invited_users(user: InviterUser, session: SessionDep) -> list[UserSummary]:
    return [UserSummary.model_validate(u) for u in await UserRepository(session).list_invited_by(user.id)]


@router.get(
    "/validate/{code}",
    response_model=InvitationValidation,
    summary="Validate Invitation",
    description="Public. Check whether a code can still be used to register.",
    responses={404: {"description": "Unknown code"}, 410: {"description": "Code used or expired"}},
)
async def validate_invitation(code: str, session: SessionDep) -> InvitationValidation:
    invitation = await get_valid_invitation(session, code)
    return InvitationValidation(valid=True, code=invitation.code, expires_at=invitation.expires_at)


@router.delete(
    "/{invitation_id}",
    response_model=MessageResponse,
    summary="Delete Invitation",
    responses={404: {"description": "Invitation not found"}},
)
async def delete_invitation(invitation_id: str, user: CurrentUser, session: SessionDep) -> MessageResponse:
    repo = InvitationRepository(session)
    invitation = await repo.get_by_id(invitation_id)
    if invitation is None or invitation.created_by != user.id:
        raise NotFoundError("Invitation", invitation_id)
    await repo.delete(invitation.id)
    return MessageResponse(message="Invitation deleted")

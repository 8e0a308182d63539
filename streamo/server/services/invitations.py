"""
Invitation Service.

Checks invitation codes for the public validation endpoint and for sign-up.
"""

from __future__ import annotations

from sqlmodel.ext.asyncio.session import AsyncSession

from streamo.core.database.base import utc_now
from streamo.core.database.entities.invitations import Invitation
from streamo.core.database.repositories.invitations import InvitationRepository
from streamo.core.errors import GoneError, NotFoundError


async def get_valid_invitation(session: AsyncSession, code: str) -> Invitation:
    """
    Look up an invitation that can still be redeemed.

    Raises:
        NotFoundError: Unknown code (404)
        GoneError: Code already used or expired (410)
    """
    invitation = await InvitationRepository(session).get_by_code(code)
    if invitation is None:
        raise NotFoundError("Invitation code")
    if invitation.is_used:
        raise GoneError("Invitation code has already been used")
    if invitation.is_expired(utc_now()):
        raise GoneError("Invitation code has expired")
    return invitation


async def redeem(session: AsyncSession, invitation: Invitation, user_id: str) -> Invitation:
    invitation.is_used = True
    invitation.used_by = user_id
    invitation.used_at = utc_now()
    return await InvitationRepository(session).update(invitation)

"""
Royalty Reconciliation Service.

Links imported transactions to catalogue owners by ISRC. For every artist and
label owner, the ISRCs of their tracks and of the tracks embedded in their
releases are collected and every transaction carrying one of them is assigned
to that user.

An ISRC belongs to at most one user: when two users list the same code, the
user created first keeps it.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Set

from sqlmodel.ext.asyncio.session import AsyncSession

from streamo.core.database.entities.users import User
from streamo.core.database.repositories.releases import ReleaseRepository
from streamo.core.database.repositories.tracks import TrackRepository
from streamo.core.database.repositories.transactions import ISRC_NOISE, TransactionRepository
from streamo.core.database.repositories.users import UserRepository
from streamo.core.logging_config import get_logger
from streamo.core.models.io.transactions import LinkResult

logger = get_logger(__name__)


def normalize_isrc(value: Optional[str]) -> str:
    """Uppercase an ISRC and strip hyphens, spaces, tabs and line breaks."""
    if not value:
        return ""
    text = str(value)
    for char in ISRC_NOISE:
        text = text.replace(char, "")
    return text.upper()


async def collect_isrcs(session: AsyncSession, user: User) -> Set[str]:
    """Normalised ISRCs declared by ``user``'s tracks and release track lists."""
    isrcs: Set[str] = set()
    for track in await TrackRepository(session).list_for_owner(user.id):
        isrcs.add(normalize_isrc(track.isrc))
    for release in await ReleaseRepository(session).list_for_owner(user.id):
        for entry in release.tracks or []:
            if isinstance(entry, dict):
                isrcs.add(normalize_isrc(entry.get("isrc")))
    isrcs.discard("")
    return isrcs


async def update_transaction_links(session: AsyncSession) -> List[LinkResult]:
    """
    Link transactions to their owners.

    Returns:
        One result per catalogue owner, in creation order
    """
    owners = await UserRepository(session).list_catalogue_owners()
    transactions = TransactionRepository(session)
    claimed: Dict[str, str] = {}
    results: List[LinkResult] = []

    for user in owners:
        owned: Set[str] = set()
        for isrc in sorted(await collect_isrcs(session, user)):
            holder = claimed.setdefault(isrc, user.id)
            if holder != user.id:
                logger.warning(f"ISRC {isrc} is claimed by users {holder} and {user.id}; keeping {holder}")
                continue
            owned.add(isrc)

        updated = await transactions.link_isrcs(user.id, owned)
        results.append(
            LinkResult(
                user_id=user.id,
                name=user.name,
                email=user.email,
                role=user.role,
                isrc_count=len(owned),
                transactions_updated=updated,
            )
        )
        logger.debug(f"Linked {updated} transactions to user {user.id} via {len(owned)} ISRCs")

    await session.commit()
    total = sum(result.transactions_updated for result in results)
    logger.info(f"Transaction links updated: {total} rows across {len(results)} users")
    return results

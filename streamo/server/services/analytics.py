"""
Dashboard Analytics Service.

Staff see platform-wide figures; artists and label owners see figures computed
from their own catalogue and linked transactions.
"""

from __future__ import annotations

from typing import List

from sqlmodel.ext.asyncio.session import AsyncSession

from streamo.core.database.entities.users import User
from streamo.core.database.repositories.releases import ReleaseRepository
from streamo.core.database.repositories.tracks import TrackRepository
from streamo.core.database.repositories.transactions import TransactionFilters, TransactionRepository
from streamo.core.models.domain.enums import ReleaseStatus
from streamo.core.models.io.analytics import DashboardStats, PlatformShare

from .deps import is_staff
from .earnings import apply_split, last_statement_amount

TOP_PLATFORMS = 5

PLATFORM_COLORS = {
    "spotify": "#1DB954",
    "apple music": "#FA243C",
    "itunes": "#FA243C",
    "youtube": "#FF0000",
    "youtube music": "#FF0000",
    "amazon music": "#00A8E1",
    "amazon": "#00A8E1",
    "deezer": "#A238FF",
    "tidal": "#000000",
    "tiktok": "#25F4EE",
    "facebook": "#1877F2",
    "instagram": "#E4405F",
    "soundcloud": "#FF5500",
}
OTHERS_COLOR = "#9CA3AF"
DEFAULT_COLOR = "#6B7280"

PENDING_REVIEW = (ReleaseStatus.submitted.value, ReleaseStatus.processing.value)


def platform_color(name: str) -> str:
    return PLATFORM_COLORS.get(name.strip().lower(), DEFAULT_COLOR)


async def dashboard(session: AsyncSession, user: User) -> DashboardStats:
    staff = is_staff(user)
    owner_id = None if staff else user.id
    revenue, quantity, _ = await TransactionRepository(session).totals(TransactionFilters(user_id=owner_id))

    return DashboardStats(
        total_earnings=round(revenue, 2) if staff else apply_split(revenue, user),
        last_statement=await last_statement_amount(session, None if staff else user),
        releases=await ReleaseRepository(session).count_for(owner_id),
        tracks=await TrackRepository(session).count_for(owner_id),
        streams=quantity,
        revenue=round(revenue, 2),
        pending_releases=await ReleaseRepository(session).count_for(None, PENDING_REVIEW) if staff else None,
    )


async def platform_shares(session: AsyncSession, user: User) -> List[PlatformShare]:
    """Revenue share per service: the top five plus an ``Others`` bucket."""
    owner_id = None if is_staff(user) else user.id
    buckets = await TransactionRepository(session).revenue_by("service_type", TransactionFilters(user_id=owner_id))
    total = sum(revenue for _, revenue, _, _ in buckets)
    if total <= 0:
        return []

    shares = [
        PlatformShare(
            name=name,
            value=round(revenue / total * 100, 1),
            revenue=round(revenue, 2),
            color=platform_color(name),
        )
        for name, revenue, _, _ in buckets[:TOP_PLATFORMS]
    ]
    rest = sum(revenue for _, revenue, _, _ in buckets[TOP_PLATFORMS:])
    if rest > 0:
        shares.append(
            PlatformShare(name="Others", value=round(rest / total * 100, 1), revenue=round(rest, 2), color=OTHERS_COLOR)
        )
    return shares

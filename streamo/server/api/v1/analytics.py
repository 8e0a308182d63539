"""
Analytics Endpoints.

Dashboard figures: platform-wide for staff, per-user for artists and label owners.
"""

from fastapi import APIRouter

from streamo.core.models.io.analytics import DashboardStats, PlatformShare
from streamo.server.services import analytics as analytics_service
from streamo.server.services.deps import CurrentUser, SessionDep

router = APIRouter()


@router.get(
    "/dashboard",
    response_model=DashboardStats,
    summary="Dashboard Figures",
    description="Earnings, latest statement, catalogue counts, streams and revenue.",
)
async def dashboard(user: CurrentUser, session: SessionDep) -> DashboardStats:
    return await analytics_service.dashboard(session, user)


@router.get(
    "/platform",
    response_model=list[PlatformShare],
    summary="Revenue By Platform",
    description="Share of revenue per service in percent: the top five plus 'Others'.",
)
async def platform(user: CurrentUser, session: SessionDep) -> list[PlatformShare]:
    return await analytics_service.platform_shares(session, user)

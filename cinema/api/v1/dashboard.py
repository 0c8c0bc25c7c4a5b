"""Admin dashboard API endpoints."""

from fastapi import APIRouter

from cinema.api.v1.dependencies import CurrentAdmin, DashboardServiceDep
from cinema.schemas.dashboard import ActivityEntry, DashboardStats

router = APIRouter()


@router.get(
    "/stats",
    response_model=DashboardStats,
    summary="Get dashboard statistics",
)
async def get_stats(
    admin: CurrentAdmin,
    dashboard_service: DashboardServiceDep,
) -> DashboardStats:
    """Totals of movies, halls and reservations."""
    return DashboardStats(**await dashboard_service.get_stats())


@router.get(
    "/activity",
    response_model=list[ActivityEntry],
    summary="Get recent activity",
)
async def get_activity(
    admin: CurrentAdmin,
    dashboard_service: DashboardServiceDep,
) -> list[ActivityEntry]:
    """Latest bookings labelled as new, validated or cancelled."""
    activity = await dashboard_service.get_recent_activity()
    return [ActivityEntry(**entry) for entry in activity]

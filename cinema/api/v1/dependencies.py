"""API dependencies."""

import secrets
from typing import Annotated, AsyncGenerator

from fastapi import Depends, Header, HTTPException, Request, status

from cinema.config import get_settings
from cinema.seat_locks import SeatLocker
from cinema.services.booking_service import BookingService
from cinema.services.dashboard_service import DashboardService
from cinema.services.hall_service import HallService
from cinema.services.lifecycle_service import BookingLifecycleService
from cinema.services.movie_service import MovieService
from cinema.services.seat_service import SeatService
from cinema.storage.base import StoreSession


async def get_store(request: Request) -> AsyncGenerator[StoreSession, None]:
    """Open a unit of work on the storage backend chosen at startup."""
    async with request.app.state.storage.session() as store:
        yield store


def get_seat_locker(request: Request) -> SeatLocker:
    """Get the seat locker chosen at startup."""
    return request.app.state.seat_locker


# Type aliases
Store = Annotated[StoreSession, Depends(get_store)]
Locker = Annotated[SeatLocker, Depends(get_seat_locker)]


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header()] = None,
) -> str:
    """
    Get current user ID from header.
    Token verification happens in front of this service.
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-ID header is required",
        )
    return x_user_id


async def get_current_admin(
    x_admin_key: Annotated[str | None, Header()] = None,
    x_admin_name: Annotated[str | None, Header()] = None,
) -> str:
    """Check the admin key header and return the admin's display name."""
    expected = get_settings().ADMIN_API_KEY
    if not x_admin_key or not secrets.compare_digest(x_admin_key, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Valid X-Admin-Key header is required",
        )
    return x_admin_name or "Admin"


CurrentUser = Annotated[str, Depends(get_current_user_id)]
CurrentAdmin = Annotated[str, Depends(get_current_admin)]


def get_seat_service(store: Store) -> SeatService:
    """Get seat service."""
    return SeatService(store)


def get_booking_service(store: Store, locker: Locker) -> BookingService:
    """Get booking service."""
    return BookingService(store, locker)


def get_lifecycle_service(store: Store) -> BookingLifecycleService:
    """Get booking lifecycle service."""
    return BookingLifecycleService(store)


def get_movie_service(store: Store) -> MovieService:
    """Get movie service."""
    return MovieService(store)


def get_hall_service(store: Store) -> HallService:
    """Get hall service."""
    return HallService(store)


def get_dashboard_service(store: Store) -> DashboardService:
    """Get dashboard service."""
    return DashboardService(store)


# Annotated dependencies
SeatServiceDep = Annotated[SeatService, Depends(get_seat_service)]
BookingServiceDep = Annotated[BookingService, Depends(get_booking_service)]
LifecycleServiceDep = Annotated[BookingLifecycleService, Depends(get_lifecycle_service)]
MovieServiceDep = Annotated[MovieService, Depends(get_movie_service)]
HallServiceDep = Annotated[HallService, Depends(get_hall_service)]
DashboardServiceDep = Annotated[DashboardService, Depends(get_dashboard_service)]

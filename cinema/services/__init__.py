"""Services package."""

from cinema.services.booking_service import BookingService
from cinema.services.dashboard_service import DashboardService
from cinema.services.hall_service import HallService
from cinema.services.lifecycle_service import BookingLifecycleService
from cinema.services.movie_service import MovieService
from cinema.services.seat_service import SeatService

__all__ = [
    "BookingService",
    "BookingLifecycleService",
    "DashboardService",
    "HallService",
    "MovieService",
    "SeatService",
]

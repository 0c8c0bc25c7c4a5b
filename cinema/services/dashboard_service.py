"""Admin dashboard statistics."""

from cinema.config import Settings, get_settings
from cinema.models.booking import Booking, BookingStatus
from cinema.storage.base import StoreSession


def describe_activity(booking: Booking) -> str:
    """Label a booking for the recent activity feed."""
    if booking.is_validated and booking.validated_at:
        return "Ticket Validated"
    if booking.status == BookingStatus.CANCELLED:
        return "Reservation Cancelled"
    return "New Reservation"


class DashboardService:
    """Service for dashboard statistics."""

    def __init__(self, store: StoreSession, settings: Settings | None = None):
        self.store = store
        self.settings = settings or get_settings()

    async def get_stats(self) -> dict[str, int]:
        """Count movies, halls and reservations."""
        return {
            "total_movies": await self.store.movies.count(),
            "total_halls": await self.store.halls.count(),
            "total_reservations": await self.store.bookings.count(),
        }

    async def get_recent_activity(self) -> list[dict]:
        """Latest bookings with a human readable action."""
        bookings = await self.store.bookings.find_all(limit=self.settings.RECENT_ACTIVITY_LIMIT)
        return [
            {
                "booking_id": booking.booking_id,
                "action": describe_activity(booking),
                "movie_title": booking.movie_title,
                "user": booking.validated_by or booking.user_id,
                "created_at": booking.validated_at or booking.created_at,
            }
            for booking in bookings
        ]

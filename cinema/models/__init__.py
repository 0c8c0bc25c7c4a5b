"""SQLAlchemy models."""

from cinema.models.base import Base
from cinema.models.booking import (
    ACTIVE_STATUSES,
    Booking,
    BookingStatus,
    CancellationReason,
    MovieSnapshot,
    SeatHold,
)
from cinema.models.hall import Hall, HallStatus, HallType
from cinema.models.movie import Movie, MovieStatus, Showtime

__all__ = [
    "Base",
    "ACTIVE_STATUSES",
    "Booking",
    "BookingStatus",
    "CancellationReason",
    "MovieSnapshot",
    "SeatHold",
    "Hall",
    "HallStatus",
    "HallType",
    "Movie",
    "MovieStatus",
    "Showtime",
]

"""Storage interface shared by the SQL and in-memory backends."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from datetime import datetime

from cinema.models.booking import Booking, BookingStatus, CancellationReason
from cinema.models.hall import Hall, HallStatus
from cinema.models.movie import Movie


class BookingRepository(ABC):
    """Persistence operations for bookings."""

    @abstractmethod
    async def get(self, booking_id: str) -> Booking | None:
        """Get booking by its public booking id."""

    @abstractmethod
    async def find_all(
        self,
        user_id: str | None = None,
        status: BookingStatus | None = None,
        show_date: str | None = None,
        search: str | None = None,
        limit: int | None = None,
    ) -> list[Booking]:
        """List bookings matching all given filters, newest first."""

    @abstractmethod
    async def find_active_for_showing(
        self, movie_title: str, show_date: str, show_time: str
    ) -> list[Booking]:
        """Get pending and confirmed bookings of one showing."""

    @abstractmethod
    async def add(self, booking: Booking) -> Booking:
        """
        Insert a booking together with its seat holds.

        Raises:
            DuplicateBookingId: If the booking id is already taken
            SeatConflict: If any seat is held by another active booking
        """

    @abstractmethod
    async def save(self, booking: Booking) -> Booking:
        """Persist changes to an existing booking; cancelled bookings release their seats."""

    @abstractmethod
    async def cancel_active_for_movie(
        self, movie_title: str, reason: CancellationReason, now: datetime
    ) -> int:
        """Cancel every active booking of a movie and scrub image references of all its bookings."""

    @abstractmethod
    async def clear_image_urls(self, containing: str, now: datetime) -> int:
        """Null the snapshot image of bookings whose image URL contains a marker."""

    @abstractmethod
    async def count(self) -> int:
        """Count all bookings."""


class MovieRepository(ABC):
    """Persistence operations for movies."""

    @abstractmethod
    async def get(self, movie_id: str) -> Movie | None: ...

    @abstractmethod
    async def get_by_title(self, title: str) -> Movie | None: ...

    @abstractmethod
    async def find_all(self, include_inactive: bool = False) -> list[Movie]: ...

    @abstractmethod
    async def add(self, movie: Movie) -> Movie: ...

    @abstractmethod
    async def save(self, movie: Movie) -> Movie: ...

    @abstractmethod
    async def delete(self, movie: Movie) -> None: ...

    @abstractmethod
    async def count(self) -> int: ...


class HallRepository(ABC):
    """Persistence operations for halls."""

    @abstractmethod
    async def get(self, hall_id: str) -> Hall | None: ...

    @abstractmethod
    async def get_by_name(self, name: str) -> Hall | None: ...

    @abstractmethod
    async def find_all(
        self, status: HallStatus | None = None, order_by_name: bool = False
    ) -> list[Hall]: ...

    @abstractmethod
    async def add(self, hall: Hall) -> Hall:
        """
        Insert a hall.

        Raises:
            InvalidRequest: If the hall name is already taken
        """

    @abstractmethod
    async def save(self, hall: Hall) -> Hall: ...

    @abstractmethod
    async def delete(self, hall: Hall) -> None: ...

    @abstractmethod
    async def count(self) -> int: ...


@dataclass
class StoreSession:
    """Repositories bound to one unit of work."""

    bookings: BookingRepository
    movies: MovieRepository
    halls: HallRepository


class Storage(ABC):
    """A storage backend selected at startup."""

    name: str = "storage"

    async def initialize(self) -> None:
        """Prepare the backend (create tables, etc.)."""

    async def close(self) -> None:
        """Release backend resources."""

    @abstractmethod
    def session(self) -> AbstractAsyncContextManager[StoreSession]:
        """Open a unit of work."""

"""In-memory storage backend.

Keeps model instances in dictionaries for single-process deployments and
tests. All writes run under one asyncio lock, which makes the seat check and
the insert of a booking a single step.
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator

from cinema.errors import DuplicateBookingId, InvalidRequest, SeatConflict
from cinema.models.booking import Booking, BookingStatus, CancellationReason
from cinema.models.hall import Hall, HallStatus
from cinema.models.movie import Movie, MovieStatus
from cinema.storage.base import (
    BookingRepository,
    HallRepository,
    MovieRepository,
    Storage,
    StoreSession,
)


def _newest_first(items):
    return sorted(items, key=lambda item: item.created_at, reverse=True)


class MemoryBookingRepository(BookingRepository):
    """Booking repository over a MemoryStorage."""

    def __init__(self, storage: "MemoryStorage"):
        self.storage = storage

    async def get(self, booking_id: str) -> Booking | None:
        return self.storage.bookings.get(booking_id)

    async def find_all(
        self,
        user_id: str | None = None,
        status: BookingStatus | None = None,
        show_date: str | None = None,
        search: str | None = None,
        limit: int | None = None,
    ) -> list[Booking]:
        bookings = list(self.storage.bookings.values())

        if user_id:
            bookings = [b for b in bookings if b.user_id == user_id]
        if status:
            bookings = [b for b in bookings if b.status == status]
        if show_date:
            bookings = [b for b in bookings if b.show_date == show_date]
        if search:
            needle = search.lower()
            bookings = [
                b
                for b in bookings
                if needle in b.booking_id.lower() or needle in b.movie_title.lower()
            ]

        bookings = _newest_first(bookings)
        if limit:
            bookings = bookings[:limit]
        return bookings

    async def find_active_for_showing(
        self, movie_title: str, show_date: str, show_time: str
    ) -> list[Booking]:
        return [
            b
            for b in self.storage.bookings.values()
            if b.movie_title == movie_title
            and b.show_date == show_date
            and b.show_time == show_time
            and b.is_active
        ]

    async def add(self, booking: Booking) -> Booking:
        async with self.storage.lock:
            if booking.booking_id in self.storage.bookings:
                raise DuplicateBookingId(
                    f"Booking id {booking.booking_id} already exists"
                )

            held: set[str] = set()
            for other in await self.find_active_for_showing(
                booking.movie_title, booking.show_date, booking.show_time
            ):
                held.update(other.seats)

            taken = set(booking.seats) & held
            if taken:
                raise SeatConflict(list(taken))

            self.storage.bookings[booking.booking_id] = booking
            return booking

    async def save(self, booking: Booking) -> Booking:
        async with self.storage.lock:
            self.storage.bookings[booking.booking_id] = booking
            return booking

    async def cancel_active_for_movie(
        self, movie_title: str, reason: CancellationReason, now: datetime
    ) -> int:
        count = 0
        async with self.storage.lock:
            for booking in self.storage.bookings.values():
                if booking.movie_title != movie_title:
                    continue
                if booking.is_active:
                    booking.status = BookingStatus.CANCELLED
                    booking.cancellation_reason = reason
                    count += 1
                booking.movie_image_url = None
                booking.updated_at = now
        return count

    async def clear_image_urls(self, containing: str, now: datetime) -> int:
        count = 0
        async with self.storage.lock:
            for booking in self.storage.bookings.values():
                if booking.movie_image_url and containing in booking.movie_image_url:
                    booking.movie_image_url = None
                    booking.updated_at = now
                    count += 1
        return count

    async def count(self) -> int:
        return len(self.storage.bookings)


class MemoryMovieRepository(MovieRepository):
    """Movie repository over a MemoryStorage."""

    def __init__(self, storage: "MemoryStorage"):
        self.storage = storage

    async def get(self, movie_id: str) -> Movie | None:
        return self.storage.movies.get(movie_id)

    async def get_by_title(self, title: str) -> Movie | None:
        matches = [m for m in self.storage.movies.values() if m.title == title]
        return _newest_first(matches)[0] if matches else None

    async def find_all(self, include_inactive: bool = False) -> list[Movie]:
        movies = list(self.storage.movies.values())
        if not include_inactive:
            movies = [m for m in movies if m.status != MovieStatus.INACTIVE]
        return _newest_first(movies)

    async def add(self, movie: Movie) -> Movie:
        async with self.storage.lock:
            self.storage.movies[movie.id] = movie
        return movie

    async def save(self, movie: Movie) -> Movie:
        return await self.add(movie)

    async def delete(self, movie: Movie) -> None:
        async with self.storage.lock:
            self.storage.movies.pop(movie.id, None)

    async def count(self) -> int:
        return len(self.storage.movies)


class MemoryHallRepository(HallRepository):
    """Hall repository over a MemoryStorage."""

    def __init__(self, storage: "MemoryStorage"):
        self.storage = storage

    async def get(self, hall_id: str) -> Hall | None:
        return self.storage.halls.get(hall_id)

    async def get_by_name(self, name: str) -> Hall | None:
        for hall in self.storage.halls.values():
            if hall.name == name:
                return hall
        return None

    async def find_all(
        self, status: HallStatus | None = None, order_by_name: bool = False
    ) -> list[Hall]:
        halls = list(self.storage.halls.values())
        if status:
            halls = [h for h in halls if h.status == status]
        if order_by_name:
            return sorted(halls, key=lambda h: h.name)
        return _newest_first(halls)

    async def add(self, hall: Hall) -> Hall:
        async with self.storage.lock:
            self._check_name(hall)
            self.storage.halls[hall.id] = hall
        return hall

    async def save(self, hall: Hall) -> Hall:
        async with self.storage.lock:
            self._check_name(hall)
            self.storage.halls[hall.id] = hall
        return hall

    def _check_name(self, hall: Hall) -> None:
        for other in self.storage.halls.values():
            if other.id != hall.id and other.name == hall.name:
                raise InvalidRequest("Hall with this name already exists")

    async def delete(self, hall: Hall) -> None:
        async with self.storage.lock:
            self.storage.halls.pop(hall.id, None)

    async def count(self) -> int:
        return len(self.storage.halls)


class MemoryStorage(Storage):
    """Process-local storage; contents are lost on restart."""

    name = "memory"

    def __init__(self):
        self.bookings: dict[str, Booking] = {}
        self.movies: dict[str, Movie] = {}
        self.halls: dict[str, Hall] = {}
        self.lock = asyncio.Lock()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[StoreSession, None]:
        yield StoreSession(
            bookings=MemoryBookingRepository(self),
            movies=MemoryMovieRepository(self),
            halls=MemoryHallRepository(self),
        )

"""Booking service: seat validation, pricing and conflict-free creation."""

import logging
import secrets
import time
from decimal import Decimal
from typing import Callable

from cinema.config import Settings, get_settings
from cinema.errors import (
    DuplicateBookingId,
    InternalError,
    InvalidRequest,
    SeatConflict,
    ShowtimeNotFound,
)
from cinema.models.base import local_now, new_id
from cinema.models.booking import Booking, BookingStatus, MovieSnapshot
from cinema.models.movie import Movie
from cinema.seat_locks import SeatLocker
from cinema.services.seat_service import SeatService, is_valid_seat, seat_sort_key
from cinema.storage.base import StoreSession

logger = logging.getLogger(__name__)

BASE36_DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
CENTS = Decimal("0.01")


def to_base36(number: int) -> str:
    """Upper-case base36 representation of a non-negative integer."""
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def generate_booking_id(timestamp_ms: int | None = None) -> str:
    """
    Generate a human-readable booking id such as ``RES-LQ8Z3K2A-7F2K``.

    The prefix is the millisecond timestamp in base36 and the suffix four
    random base36 characters, so collisions are unlikely but possible; the
    storage layer rejects duplicates.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    suffix = "".join(secrets.choice(BASE36_DIGITS) for _ in range(4))
    return f"RES-{to_base36(timestamp_ms)}-{suffix}"


def resolve_price(
    movie: Movie,
    show_date: str,
    show_time: str,
    fallback: Decimal,
) -> Decimal:
    """
    Price per seat for a showing of a movie.

    Movies with structured showtimes must have one at the requested date and
    time. Movies without them (older data) use the fallback price, provided
    the time appears in their legacy time list when they have one.

    Raises:
        ShowtimeNotFound: If no showtime matches
    """
    if movie.showtimes:
        showtime = movie.find_showtime(show_date, show_time)
        if showtime is None:
            raise ShowtimeNotFound(
                f"No showtime for '{movie.title}' on {show_date} at {show_time}"
            )
        return Decimal(showtime.price).quantize(CENTS)

    if movie.legacy_times and show_time not in movie.legacy_times:
        raise ShowtimeNotFound(f"'{movie.title}' is not shown at {show_time}")

    return Decimal(fallback).quantize(CENTS)


class BookingService:
    """Service for booking creation and lookup."""

    def __init__(
        self,
        store: StoreSession,
        seat_locker: SeatLocker,
        settings: Settings | None = None,
        id_generator: Callable[[], str] = generate_booking_id,
    ):
        self.store = store
        self.seat_locker = seat_locker
        self.settings = settings or get_settings()
        self.id_generator = id_generator
        self.seat_service = SeatService(store)

    def _validate_seats(self, seats: list[str]) -> list[str]:
        """Normalize requested seats and check them against the seat map."""
        if not seats:
            raise InvalidRequest("At least one seat must be selected")

        normalized = [seat.strip().upper() for seat in seats]

        duplicates = sorted({seat for seat in normalized if normalized.count(seat) > 1})
        if duplicates:
            raise InvalidRequest(f"Duplicate seats requested: {', '.join(duplicates)}")

        invalid = [seat for seat in normalized if not is_valid_seat(seat)]
        if invalid:
            raise InvalidRequest(f"Invalid seats: {', '.join(invalid)}")

        if len(normalized) > self.settings.MAX_SEATS_PER_BOOKING:
            raise InvalidRequest(
                f"Cannot book more than {self.settings.MAX_SEATS_PER_BOOKING} seats"
            )

        return sorted(normalized, key=seat_sort_key)

    async def _resolve_movie(self, movie_id: str | None, movie_title: str | None) -> Movie:
        if movie_id:
            movie = await self.store.movies.get(movie_id)
        elif movie_title:
            movie = await self.store.movies.get_by_title(movie_title)
        else:
            raise InvalidRequest("Movie title is required")

        if movie is None:
            raise ShowtimeNotFound(f"Movie not found: {movie_id or movie_title}")
        return movie

    async def create_booking(
        self,
        user_id: str,
        show_date: str,
        show_time: str,
        seats: list[str],
        movie_id: str | None = None,
        movie_title: str | None = None,
        hall: str | None = None,
        price_per_seat: Decimal | None = None,
    ) -> Booking:
        """
        Create a confirmed booking for a showing.

        The held-seat check and the insert run while the requested seats are
        locked, and the storage insert itself refuses seats that another
        active booking holds, so concurrent requests for the same seat cannot
        both succeed.

        Args:
            user_id: Owner of the booking
            show_date: Showing date, YYYY-MM-DD
            show_time: Showing time, HH:MM
            seats: Seat identifiers from the seat map
            movie_id: Movie ID (preferred over title)
            movie_title: Movie title, used when no ID is given
            hall: Hall name; defaults to the movie's hall
            price_per_seat: Price used when the movie has no showtime prices

        Returns:
            Created booking

        Raises:
            InvalidRequest: If input is missing or seats are invalid
            ShowtimeNotFound: If the movie or its showtime cannot be found
            SeatConflict: If any seat is already booked
            InternalError: If no unique booking id could be allocated
        """
        if not user_id:
            raise InvalidRequest("User is required")
        if not show_date or not show_time:
            raise InvalidRequest("Show date and time are required")

        seats = self._validate_seats(seats)
        movie = await self._resolve_movie(movie_id, movie_title)

        fallback = (
            price_per_seat if price_per_seat is not None else self.settings.DEFAULT_SEAT_PRICE
        )
        price = resolve_price(movie, show_date, show_time, fallback)

        # Copied up front; a failed insert rolls back and expires loaded rows
        snapshot = MovieSnapshot(
            movie_id=movie.id,
            title=movie.title,
            duration=movie.duration,
            hall=hall or movie.hall or self.settings.DEFAULT_HALL,
            image_url=movie.image,
        )

        async with self.seat_locker.hold(snapshot.title, show_date, show_time, seats):
            held = await self.seat_service.get_held_seats(snapshot.title, show_date, show_time)
            taken = held.intersection(seats)
            if taken:
                logger.info(
                    "Seat conflict for %s %s %s: %s",
                    snapshot.title, show_date, show_time, sorted(taken),
                )
                raise SeatConflict(list(taken))

            return await self._insert_booking(
                user_id=user_id,
                movie=snapshot,
                show_date=show_date,
                show_time=show_time,
                seats=seats,
                price=price,
            )

    async def _insert_booking(
        self,
        user_id: str,
        movie: MovieSnapshot,
        show_date: str,
        show_time: str,
        seats: list[str],
        price: Decimal,
    ) -> Booking:
        """Insert the booking, retrying with a fresh id on a collision."""
        attempts = self.settings.BOOKING_ID_RETRIES + 1

        for attempt in range(1, attempts + 1):
            now = local_now()
            booking = Booking(
                id=new_id(),
                booking_id=self.id_generator(),
                user_id=user_id,
                movie_id=movie.movie_id,
                movie_title=movie.title,
                movie_duration=movie.duration,
                movie_hall=movie.hall,
                movie_image_url=movie.image_url,
                seats=list(seats),
                show_date=show_date,
                show_time=show_time,
                price_per_seat=price,
                seat_count=len(seats),
                total_amount=(price * len(seats)).quantize(CENTS),
                theater=movie.hall,
                status=BookingStatus.CONFIRMED,
                cancellation_reason=None,
                is_validated=False,
                validated_at=None,
                validated_by=None,
                created_at=now,
                updated_at=now,
            )
            try:
                booking = await self.store.bookings.add(booking)
            except SeatConflict:
                logger.info(
                    "Seat conflict on insert for %s %s %s", movie.title, show_date, show_time
                )
                raise
            except DuplicateBookingId:
                logger.warning(
                    "Booking id collision on %s (attempt %d of %d)",
                    booking.booking_id, attempt, attempts,
                )
                continue

            logger.info(
                "Created booking %s for user %s: %s %s %s seats=%s total=%s",
                booking.booking_id, user_id, movie.title, show_date, show_time,
                ",".join(seats), booking.total_amount,
            )
            return booking

        raise InternalError("Could not allocate a unique booking id")

    async def get_booking(self, booking_id: str) -> Booking | None:
        """Get booking by its booking id."""
        return await self.store.bookings.get(booking_id)

    async def get_user_bookings(self, user_id: str) -> list[Booking]:
        """Get bookings of a user, newest first."""
        return await self.store.bookings.find_all(user_id=user_id)

    async def list_bookings(
        self,
        status: BookingStatus | None = None,
        show_date: str | None = None,
        search: str | None = None,
    ) -> list[Booking]:
        """List bookings for administration, newest first."""
        return await self.store.bookings.find_all(
            status=status,
            show_date=show_date,
            search=search.strip() if search else None,
        )

"""Seat map and seat availability."""

from cinema.errors import InvalidRequest
from cinema.models.booking import Booking
from cinema.storage.base import StoreSession

SEAT_ROWS = "ABCDEFGH"
SEATS_PER_ROW = 12


def build_seat_map(rows: str = SEAT_ROWS, seats_per_row: int = SEATS_PER_ROW) -> list[str]:
    """
    Seat identifiers of a hall, row by row.

    >>> build_seat_map("AB", 2)
    ['A1', 'A2', 'B1', 'B2']
    """
    return [f"{row}{number}" for row in rows for number in range(1, seats_per_row + 1)]


SEAT_MAP: tuple[str, ...] = tuple(build_seat_map())
_SEAT_SET = frozenset(SEAT_MAP)


def is_valid_seat(seat: str) -> bool:
    """Check that a seat identifier exists in the hall layout."""
    return seat in _SEAT_SET


def seat_sort_key(seat: str) -> tuple[str, int]:
    """Order seats the way they appear on the seat map."""
    return seat[0], int(seat[1:])


def collect_held_seats(bookings: list[Booking]) -> set[str]:
    """Union of the seats of the given bookings."""
    held: set[str] = set()
    for booking in bookings:
        held.update(booking.seats)
    return held


def available_seats(held: set[str]) -> list[str]:
    """Seat map minus held seats, in seat map order."""
    return [seat for seat in SEAT_MAP if seat not in held]


def _require_showing(movie_title: str, show_date: str, show_time: str) -> None:
    missing = [
        name
        for name, value in (
            ("movie", movie_title),
            ("date", show_date),
            ("time", show_time),
        )
        if not value or not value.strip()
    ]
    if missing:
        raise InvalidRequest(f"Movie, date, and time are required (missing: {', '.join(missing)})")


class SeatService:
    """Service for seat availability queries."""

    def __init__(self, store: StoreSession):
        self.store = store

    async def get_showing_bookings(
        self, movie_title: str, show_date: str, show_time: str
    ) -> list[Booking]:
        """Get pending and confirmed bookings of a showing."""
        _require_showing(movie_title, show_date, show_time)
        return await self.store.bookings.find_active_for_showing(
            movie_title, show_date, show_time
        )

    async def get_held_seats(
        self, movie_title: str, show_date: str, show_time: str
    ) -> set[str]:
        """
        Seats held by non-cancelled bookings of a showing.

        The result is a snapshot; booking creation checks again under lock.

        Raises:
            InvalidRequest: If movie, date or time is missing
        """
        bookings = await self.get_showing_bookings(movie_title, show_date, show_time)
        return collect_held_seats(bookings)

    async def get_available_seats(
        self, movie_title: str, show_date: str, show_time: str
    ) -> list[str]:
        """Seat map minus held seats, in seat map order."""
        held = await self.get_held_seats(movie_title, show_date, show_time)
        return available_seats(held)

    async def get_showing_availability(
        self, movie_title: str, show_date: str, show_time: str
    ) -> tuple[list[Booking], set[str], list[str]]:
        """Bookings, held seats and available seats of a showing from one read."""
        bookings = await self.get_showing_bookings(movie_title, show_date, show_time)
        held = collect_held_seats(bookings)
        return bookings, held, available_seats(held)

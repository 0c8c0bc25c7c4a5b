"""Tests for the seat map and showing availability."""

import pytest

from cinema.errors import InvalidRequest
from cinema.services.booking_service import BookingService
from cinema.services.seat_service import (
    SEAT_MAP,
    SeatService,
    build_seat_map,
    is_valid_seat,
    seat_sort_key,
)
from tests.conftest import SHOW_DATE, SHOW_TIME


def test_seat_map_layout():
    assert len(SEAT_MAP) == 96
    assert len(set(SEAT_MAP)) == 96
    assert SEAT_MAP[0] == "A1"
    assert SEAT_MAP[11] == "A12"
    assert SEAT_MAP[12] == "B1"
    assert SEAT_MAP[-1] == "H12"


def test_build_seat_map_custom_layout():
    assert build_seat_map("AB", 2) == ["A1", "A2", "B1", "B2"]


@pytest.mark.parametrize("seat", ["A1", "D7", "H12"])
def test_valid_seats(seat):
    assert is_valid_seat(seat)


@pytest.mark.parametrize("seat", ["I1", "A0", "A13", "a1", "", "1A"])
def test_invalid_seats(seat):
    assert not is_valid_seat(seat)


def test_seat_sort_key_orders_numerically_within_row():
    seats = ["B2", "A10", "A2", "A1"]
    assert sorted(seats, key=seat_sort_key) == ["A1", "A2", "A10", "B2"]


async def test_empty_showing_has_every_seat_available(store):
    service = SeatService(store)
    assert await service.get_held_seats("Dune", SHOW_DATE, SHOW_TIME) == set()
    assert await service.get_available_seats("Dune", SHOW_DATE, SHOW_TIME) == list(SEAT_MAP)


@pytest.mark.parametrize(
    "movie, date, time",
    [
        ("", SHOW_DATE, SHOW_TIME),
        ("Dune", "", SHOW_TIME),
        ("Dune", SHOW_DATE, "   "),
    ],
)
async def test_showing_query_requires_movie_date_and_time(store, movie, date, time):
    with pytest.raises(InvalidRequest):
        await SeatService(store).get_held_seats(movie, date, time)


async def test_held_seats_exclude_cancelled_and_other_showings(store, dune, seat_locker):
    bookings = BookingService(store, seat_locker)
    kept = await bookings.create_booking("user-1", SHOW_DATE, SHOW_TIME, ["A1", "A2"], movie_id=dune.id)
    await bookings.create_booking("user-2", SHOW_DATE, "22:00", ["C3"], movie_id=dune.id)

    service = SeatService(store)
    assert await service.get_held_seats("Dune", SHOW_DATE, SHOW_TIME) == {"A1", "A2"}

    available = await service.get_available_seats("Dune", SHOW_DATE, SHOW_TIME)
    assert "A1" not in available
    assert "C3" in available
    assert len(available) == 94

    showing = await service.get_showing_bookings("Dune", SHOW_DATE, SHOW_TIME)
    assert [b.booking_id for b in showing] == [kept.booking_id]


async def test_showing_availability_matches_held_and_available(store, dune, seat_locker):
    booking = await BookingService(store, seat_locker).create_booking(
        "user-1", SHOW_DATE, SHOW_TIME, ["B2", "B1"], movie_id=dune.id
    )
    service = SeatService(store)

    bookings, held, available = await service.get_showing_availability("Dune", SHOW_DATE, SHOW_TIME)

    assert [b.booking_id for b in bookings] == [booking.booking_id]
    assert held == await service.get_held_seats("Dune", SHOW_DATE, SHOW_TIME)
    assert available == await service.get_available_seats("Dune", SHOW_DATE, SHOW_TIME)
    assert held == {"B1", "B2"}
    assert held.isdisjoint(available)
    assert len(available) == 94

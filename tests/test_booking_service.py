"""Tests for booking creation."""

import asyncio
import re
from contextlib import asynccontextmanager
from decimal import Decimal

import pytest

from cinema.config import Settings
from cinema.errors import InternalError, InvalidRequest, SeatConflict, ShowtimeNotFound
from cinema.models.booking import BookingStatus
from cinema.schemas.movie import MovieCreate
from cinema.seat_locks import LocalSeatLocker, SeatLocker
from cinema.services.booking_service import (
    BookingService,
    generate_booking_id,
    to_base36,
)
from cinema.services.movie_service import MovieService
from cinema.services.seat_service import SeatService
from cinema.storage import MemoryStorage, SqlStorage
from tests.conftest import SHOW_DATE, SHOW_TIME, dune_payload


class NoopSeatLocker(SeatLocker):
    """Locker that never blocks, leaving conflict detection to storage."""

    @asynccontextmanager
    async def hold(self, movie_title, show_date, show_time, seats):
        yield


def test_to_base36():
    assert to_base36(0) == "0"
    assert to_base36(35) == "Z"
    assert to_base36(36) == "10"


def test_generate_booking_id_format():
    booking_id = generate_booking_id(timestamp_ms=36**3)
    assert re.fullmatch(r"RES-1000-[0-9A-Z]{4}", booking_id)
    assert re.fullmatch(r"RES-[0-9A-Z]+-[0-9A-Z]{4}", generate_booking_id())


async def test_create_booking_uses_showtime_price(store, dune, seat_locker):
    service = BookingService(store, seat_locker)

    booking = await service.create_booking(
        user_id="user-1",
        movie_id=dune.id,
        show_date=SHOW_DATE,
        show_time=SHOW_TIME,
        seats=["a2", "A1"],
    )

    assert booking.status == BookingStatus.CONFIRMED
    assert booking.seats == ["A1", "A2"]
    assert booking.seat_count == 2
    assert booking.price_per_seat == Decimal("12.50")
    assert booking.total_amount == Decimal("25.00")
    assert booking.theater == "Hall 1"
    assert booking.movie.title == "Dune"
    assert booking.movie.image_url == "https://cdn.example.com/dune.jpg"
    assert booking.is_validated is False
    assert booking.booking_id.startswith("RES-")


async def test_create_booking_by_title_and_hall_override(store, dune, seat_locker):
    service = BookingService(store, seat_locker)

    booking = await service.create_booking(
        user_id="user-1",
        movie_title="Dune",
        hall="Hall 7",
        show_date=SHOW_DATE,
        show_time="22:00",
        seats=["B1"],
    )

    assert booking.theater == "Hall 7"
    assert booking.total_amount == Decimal("10.00")


async def test_booking_is_retrievable(store, dune, seat_locker):
    service = BookingService(store, seat_locker)
    booking = await service.create_booking("user-1", SHOW_DATE, SHOW_TIME, ["C5"], movie_id=dune.id)

    found = await service.get_booking(booking.booking_id)
    assert found is not None
    assert found.seats == ["C5"]
    assert [b.booking_id for b in await service.get_user_bookings("user-1")] == [booking.booking_id]
    assert await service.get_user_bookings("user-2") == []


async def test_overlapping_seat_is_rejected(store, dune, seat_locker):
    service = BookingService(store, seat_locker)
    await service.create_booking("user-1", SHOW_DATE, SHOW_TIME, ["A1", "A2"], movie_id=dune.id)

    with pytest.raises(SeatConflict) as exc_info:
        await service.create_booking("user-2", SHOW_DATE, SHOW_TIME, ["A2", "A3"], movie_title="Dune")

    assert exc_info.value.seats == ["A2"]
    assert len(await service.get_user_bookings("user-2")) == 0


async def test_same_seat_in_another_showing_is_allowed(store, dune, seat_locker):
    service = BookingService(store, seat_locker)
    await service.create_booking("user-1", SHOW_DATE, SHOW_TIME, ["A1"], movie_id=dune.id)

    other = await service.create_booking("user-2", SHOW_DATE, "22:00", ["A1"], movie_id=dune.id)
    assert other.seats == ["A1"]


@pytest.mark.parametrize(
    "seats",
    [
        ["Z9"],
        ["A1", "A1"],
        ["A0"],
        [f"B{n}" for n in range(1, 12)],
    ],
)
async def test_invalid_seat_requests(store, dune, seat_locker, seats):
    service = BookingService(store, seat_locker)
    with pytest.raises(InvalidRequest):
        await service.create_booking("user-1", SHOW_DATE, SHOW_TIME, seats, movie_id=dune.id)


async def test_missing_fields_are_rejected(store, dune, seat_locker):
    service = BookingService(store, seat_locker)
    with pytest.raises(InvalidRequest):
        await service.create_booking("", SHOW_DATE, SHOW_TIME, ["A1"], movie_id=dune.id)
    with pytest.raises(InvalidRequest):
        await service.create_booking("user-1", SHOW_DATE, "", ["A1"], movie_id=dune.id)
    with pytest.raises(InvalidRequest):
        await service.create_booking("user-1", SHOW_DATE, SHOW_TIME, ["A1"])


async def test_unknown_showtime(store, dune, seat_locker):
    service = BookingService(store, seat_locker)
    with pytest.raises(ShowtimeNotFound):
        await service.create_booking("user-1", SHOW_DATE, "13:00", ["A1"], movie_id=dune.id)
    with pytest.raises(ShowtimeNotFound):
        await service.create_booking("user-1", "2024-01-02", SHOW_TIME, ["A1"], movie_id=dune.id)


async def test_unknown_movie(store, seat_locker):
    service = BookingService(store, seat_locker)
    with pytest.raises(ShowtimeNotFound):
        await service.create_booking("user-1", SHOW_DATE, SHOW_TIME, ["A1"], movie_title="Nope")


async def test_movie_without_showtimes_uses_fallback_price(store, seat_locker):
    movie = await MovieService(store).create_movie(
        dune_payload(title="Casablanca", showtimes=[], legacy_times=["18:00", "21:00"])
    )
    service = BookingService(store, seat_locker)

    default_priced = await service.create_booking("user-1", SHOW_DATE, "18:00", ["A1", "A2"], movie_id=movie.id)
    assert default_priced.price_per_seat == Decimal("15.00")
    assert default_priced.total_amount == Decimal("30.00")

    caller_priced = await service.create_booking(
        "user-1", SHOW_DATE, "21:00", ["A1"], movie_id=movie.id, price_per_seat=Decimal("9")
    )
    assert caller_priced.total_amount == Decimal("9.00")

    with pytest.raises(ShowtimeNotFound):
        await service.create_booking("user-1", SHOW_DATE, "19:00", ["A3"], movie_id=movie.id)


async def test_duplicate_booking_id_is_retried_then_fails(store, dune, seat_locker):
    service = BookingService(store, seat_locker, id_generator=lambda: "RES-FIXED-0000")
    movie_id = dune.id

    first = await service.create_booking("user-1", SHOW_DATE, SHOW_TIME, ["A1"], movie_id=movie_id)
    assert first.booking_id == "RES-FIXED-0000"

    with pytest.raises(InternalError):
        await service.create_booking("user-1", SHOW_DATE, SHOW_TIME, ["A2"], movie_id=movie_id)


async def test_duplicate_booking_id_recovers_with_fresh_id(store, dune, seat_locker):
    ids = iter(["RES-A-0000", "RES-A-0000", "RES-B-0000"])
    service = BookingService(store, seat_locker, id_generator=lambda: next(ids))
    movie_id = dune.id

    await service.create_booking("user-1", SHOW_DATE, SHOW_TIME, ["A1"], movie_id=movie_id)
    second = await service.create_booking("user-1", SHOW_DATE, SHOW_TIME, ["A2"], movie_id=movie_id)

    assert second.booking_id == "RES-B-0000"


async def test_max_seats_comes_from_settings(store, dune, seat_locker):
    service = BookingService(store, seat_locker, settings=Settings(MAX_SEATS_PER_BOOKING=2))
    with pytest.raises(InvalidRequest):
        await service.create_booking("user-1", SHOW_DATE, SHOW_TIME, ["A1", "A2", "A3"], movie_id=dune.id)


@pytest.mark.parametrize("locker", [LocalSeatLocker(), NoopSeatLocker()], ids=["local", "noop"])
async def test_concurrent_requests_for_one_seat_have_one_winner(locker):
    storage = MemoryStorage()
    async with storage.session() as store:
        movie = await MovieService(store).create_movie(dune_payload())

    async def attempt(user_id):
        async with storage.session() as store:
            return await BookingService(store, locker).create_booking(
                user_id, SHOW_DATE, SHOW_TIME, ["A1"], movie_id=movie.id
            )

    results = await asyncio.gather(
        *(attempt(f"user-{n}") for n in range(10)),
        return_exceptions=True,
    )

    winners = [r for r in results if not isinstance(r, Exception)]
    losers = [r for r in results if isinstance(r, Exception)]
    assert len(winners) == 1
    assert len(losers) == 9
    assert all(isinstance(r, SeatConflict) for r in losers)


async def test_concurrent_sql_sessions_have_one_winner(tmp_path):
    storage = SqlStorage.from_url(f"sqlite+aiosqlite:///{tmp_path}/cinema.sqlite")
    await storage.initialize()
    locker = NoopSeatLocker()
    try:
        async with storage.session() as store:
            movie_id = (await MovieService(store).create_movie(dune_payload())).id

        async def attempt(n):
            async with storage.session() as store:
                return await BookingService(store, locker).create_booking(
                    f"user-{n}", SHOW_DATE, SHOW_TIME, ["A1", f"B{n}"], movie_id=movie_id
                )

        results = await asyncio.gather(
            *(attempt(n) for n in range(1, 7)),
            return_exceptions=True,
        )

        winners = [r for r in results if not isinstance(r, Exception)]
        losers = [r for r in results if isinstance(r, Exception)]
        assert len(winners) == 1
        assert all(isinstance(r, SeatConflict) for r in losers)

        async with storage.session() as store:
            assert await store.bookings.count() == 1
            held = await SeatService(store).get_held_seats("Dune", SHOW_DATE, SHOW_TIME)
            assert held == set(winners[0].seats)
    finally:
        await storage.close()


async def test_list_bookings_filters(store, dune, seat_locker):
    service = BookingService(store, seat_locker)
    first = await service.create_booking("user-1", SHOW_DATE, SHOW_TIME, ["A1"], movie_id=dune.id)
    await service.create_booking("user-2", SHOW_DATE, "22:00", ["A1"], movie_id=dune.id)

    assert len(await service.list_bookings()) == 2
    assert len(await service.list_bookings(status=BookingStatus.CONFIRMED)) == 2
    assert await service.list_bookings(status=BookingStatus.CANCELLED) == []
    assert len(await service.list_bookings(show_date=SHOW_DATE)) == 2
    assert await service.list_bookings(show_date="2030-01-01") == []
    assert len(await service.list_bookings(search="dune")) == 2

    found = await service.list_bookings(search=first.booking_id)
    assert [b.booking_id for b in found] == [first.booking_id]


def test_movie_create_requires_a_schedule():
    with pytest.raises(ValueError):
        MovieCreate(title="X", duration="1h", hall="Hall 1", image="x.jpg")

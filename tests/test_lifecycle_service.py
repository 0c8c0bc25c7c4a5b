"""Tests for booking status changes, cancellation and check-in."""

import pytest

from cinema.errors import Forbidden, InvalidRequest, InvalidTransition, NotFound, SeatConflict
from cinema.models.booking import BookingStatus, CancellationReason
from cinema.services.booking_service import BookingService
from cinema.services.lifecycle_service import BookingLifecycleService, can_transition
from cinema.services.movie_service import MovieService
from cinema.services.seat_service import SeatService
from tests.conftest import SHOW_DATE, SHOW_TIME, dune_payload


@pytest.fixture
async def booking(store, dune, seat_locker):
    return await BookingService(store, seat_locker).create_booking(
        "user-1", SHOW_DATE, SHOW_TIME, ["A1", "A2"], movie_id=dune.id
    )


@pytest.mark.parametrize(
    "current, new, allowed",
    [
        (BookingStatus.PENDING, BookingStatus.CONFIRMED, True),
        (BookingStatus.PENDING, BookingStatus.CANCELLED, True),
        (BookingStatus.CONFIRMED, BookingStatus.CANCELLED, True),
        (BookingStatus.CONFIRMED, BookingStatus.PENDING, False),
        (BookingStatus.CANCELLED, BookingStatus.PENDING, False),
        (BookingStatus.CANCELLED, BookingStatus.CONFIRMED, False),
        (BookingStatus.CANCELLED, BookingStatus.CANCELLED, True),
    ],
)
def test_can_transition(current, new, allowed):
    assert can_transition(current, new) is allowed


async def test_cancel_releases_seats(store, booking, seat_locker):
    lifecycle = BookingLifecycleService(store)

    cancelled = await lifecycle.cancel(booking.booking_id, user_id="user-1")

    assert cancelled.status == BookingStatus.CANCELLED
    assert cancelled.cancellation_reason == CancellationReason.USER_CANCELLED
    assert await SeatService(store).get_held_seats("Dune", SHOW_DATE, SHOW_TIME) == set()

    rebooked = await BookingService(store, seat_locker).create_booking(
        "user-2", SHOW_DATE, SHOW_TIME, ["A1"], movie_title="Dune"
    )
    assert rebooked.seats == ["A1"]


async def test_cancel_is_idempotent(store, booking):
    lifecycle = BookingLifecycleService(store)
    await lifecycle.cancel(booking.booking_id, reason=CancellationReason.ADMIN_CANCELLED)

    again = await lifecycle.cancel(booking.booking_id, reason=CancellationReason.USER_CANCELLED)

    assert again.status == BookingStatus.CANCELLED
    assert again.cancellation_reason == CancellationReason.ADMIN_CANCELLED


async def test_cancel_by_another_user_is_forbidden(store, booking):
    with pytest.raises(Forbidden):
        await BookingLifecycleService(store).cancel(booking.booking_id, user_id="user-2")

    unchanged = await store.bookings.get(booking.booking_id)
    assert unchanged.status == BookingStatus.CONFIRMED


async def test_unknown_booking(store):
    lifecycle = BookingLifecycleService(store)
    with pytest.raises(NotFound):
        await lifecycle.cancel("RES-NOPE-0000")
    with pytest.raises(NotFound):
        await lifecycle.set_status("RES-NOPE-0000", BookingStatus.CONFIRMED)
    with pytest.raises(NotFound):
        await lifecycle.validate("RES-NOPE-0000")


async def test_cancelled_booking_cannot_be_revived(store, booking, seat_locker):
    lifecycle = BookingLifecycleService(store)
    await lifecycle.set_status(booking.booking_id, "cancelled")

    # Someone else takes the released seat
    await BookingService(store, seat_locker).create_booking(
        "user-2", SHOW_DATE, SHOW_TIME, ["A1"], movie_title="Dune"
    )

    with pytest.raises(InvalidTransition):
        await lifecycle.set_status(booking.booking_id, BookingStatus.PENDING)
    with pytest.raises(InvalidTransition):
        await lifecycle.set_status(booking.booking_id, BookingStatus.CONFIRMED)

    current = await store.bookings.get(booking.booking_id)
    assert current.status == BookingStatus.CANCELLED
    assert current.cancellation_reason == CancellationReason.ADMIN_CANCELLED


async def test_set_status_same_value_is_noop(store, booking):
    result = await BookingLifecycleService(store).set_status(
        booking.booking_id, BookingStatus.CONFIRMED
    )
    assert result.status == BookingStatus.CONFIRMED


async def test_set_status_rejects_unknown_value(store, booking):
    with pytest.raises(InvalidRequest):
        await BookingLifecycleService(store).set_status(booking.booking_id, "refunded")


async def test_confirmed_cannot_go_back_to_pending(store, booking):
    with pytest.raises(InvalidTransition):
        await BookingLifecycleService(store).set_status(booking.booking_id, BookingStatus.PENDING)


async def test_validate_records_check_in(store, booking):
    lifecycle = BookingLifecycleService(store)

    validated = await lifecycle.validate(booking.booking_id, validator_name="Alice")

    assert validated.is_validated is True
    assert validated.validated_by == "Alice"
    assert validated.validated_at is not None
    assert validated.status == BookingStatus.CONFIRMED


async def test_validate_defaults_validator_name(store, booking):
    validated = await BookingLifecycleService(store).validate(booking.booking_id)
    assert validated.validated_by == "Admin"


async def test_unvalidate_clears_check_in_only(store, booking):
    lifecycle = BookingLifecycleService(store)
    await lifecycle.validate(booking.booking_id, validator_name="Alice")

    cleared = await lifecycle.validate(booking.booking_id, is_validated=False)

    assert cleared.is_validated is False
    assert cleared.validated_by is None
    assert cleared.validated_at is None
    assert cleared.status == BookingStatus.CONFIRMED


async def test_cancelled_booking_cannot_be_validated(store, booking):
    lifecycle = BookingLifecycleService(store)
    await lifecycle.cancel(booking.booking_id)

    with pytest.raises(InvalidTransition):
        await lifecycle.validate(booking.booking_id, validator_name="Alice")


async def test_movie_deletion_cancels_only_that_movie(store, dune, seat_locker):
    other = await MovieService(store).create_movie(
        dune_payload(title="Arrival", image="https://cdn.example.com/arrival.jpg")
    )
    bookings = BookingService(store, seat_locker)
    lifecycle = BookingLifecycleService(store)

    active = await bookings.create_booking("user-1", SHOW_DATE, SHOW_TIME, ["A1"], movie_id=dune.id)
    already_cancelled = await bookings.create_booking(
        "user-1", SHOW_DATE, SHOW_TIME, ["B1"], movie_id=dune.id
    )
    await lifecycle.cancel(already_cancelled.booking_id)
    survivor = await bookings.create_booking("user-1", SHOW_DATE, SHOW_TIME, ["A1"], movie_id=other.id)
    dune_id = dune.id

    assert await MovieService(store).delete_movie(dune_id) == 1

    active = await store.bookings.get(active.booking_id)
    assert active.status == BookingStatus.CANCELLED
    assert active.cancellation_reason == CancellationReason.MOVIE_DELETED
    assert active.movie_image_url is None

    already_cancelled = await store.bookings.get(already_cancelled.booking_id)
    assert already_cancelled.cancellation_reason == CancellationReason.USER_CANCELLED
    assert already_cancelled.movie_image_url is None

    survivor = await store.bookings.get(survivor.booking_id)
    assert survivor.status == BookingStatus.CONFIRMED
    assert survivor.movie_image_url == "https://cdn.example.com/arrival.jpg"

    assert await store.movies.get(dune_id) is None


async def test_delete_unknown_movie(store):
    with pytest.raises(NotFound):
        await MovieService(store).delete_movie("missing")


async def test_seat_conflict_lists_only_taken_seats(store, booking, seat_locker):
    with pytest.raises(SeatConflict) as exc_info:
        await BookingService(store, seat_locker).create_booking(
            "user-2", SHOW_DATE, SHOW_TIME, ["A2", "A1", "A5"], movie_title="Dune"
        )
    assert exc_info.value.seats == ["A1", "A2"]

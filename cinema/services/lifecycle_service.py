"""Booking lifecycle: status transitions, cancellation and ticket check-in."""

import logging

from cinema.errors import Forbidden, InvalidRequest, InvalidTransition, NotFound
from cinema.models.base import local_now
from cinema.models.booking import Booking, BookingStatus, CancellationReason
from cinema.storage.base import StoreSession

logger = logging.getLogger(__name__)

# cancelled is terminal
ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CANCELLED}),
    BookingStatus.CANCELLED: frozenset(),
}

DEFAULT_VALIDATOR = "Admin"


def can_transition(current: BookingStatus, new: BookingStatus) -> bool:
    """Check whether a booking may move from one status to another."""
    return new == current or new in ALLOWED_TRANSITIONS[current]


class BookingLifecycleService:
    """Service for changing the state of existing bookings."""

    def __init__(self, store: StoreSession):
        self.store = store

    async def _get(self, booking_id: str) -> Booking:
        booking = await self.store.bookings.get(booking_id)
        if booking is None:
            raise NotFound("Booking not found")
        return booking

    async def set_status(self, booking_id: str, status: BookingStatus | str) -> Booking:
        """
        Move a booking to a new status.

        Setting the current status again is a no-op. Cancelling through this
        operation records an admin cancellation.

        Raises:
            NotFound: If the booking does not exist
            InvalidTransition: If the status is not reachable from the current one
        """
        try:
            status = BookingStatus(status)
        except ValueError:
            raise InvalidRequest(
                "Invalid status. Must be pending, confirmed, or cancelled"
            )

        booking = await self._get(booking_id)

        if not can_transition(booking.status, status):
            raise InvalidTransition(
                f"Cannot change booking from {booking.status.value} to {status.value}"
            )
        if status == booking.status:
            return booking

        if status == BookingStatus.CANCELLED:
            return await self._cancel(booking, CancellationReason.ADMIN_CANCELLED)

        booking.status = status
        booking.updated_at = local_now()
        booking = await self.store.bookings.save(booking)
        logger.info("Booking %s set to %s", booking.booking_id, status.value)
        return booking

    async def cancel(
        self,
        booking_id: str,
        reason: CancellationReason = CancellationReason.USER_CANCELLED,
        user_id: str | None = None,
    ) -> Booking:
        """
        Cancel a booking and release its seats.

        Cancelling an already cancelled booking returns it unchanged.

        Args:
            booking_id: Booking to cancel
            reason: Recorded cancellation reason
            user_id: When given, the booking must belong to this user

        Raises:
            NotFound: If the booking does not exist
            Forbidden: If the booking belongs to another user
        """
        booking = await self._get(booking_id)

        if user_id is not None and booking.user_id != user_id:
            raise Forbidden("Not authorized to cancel this booking")

        if booking.status == BookingStatus.CANCELLED:
            return booking

        return await self._cancel(booking, reason)

    async def _cancel(self, booking: Booking, reason: CancellationReason) -> Booking:
        booking.status = BookingStatus.CANCELLED
        booking.cancellation_reason = reason
        booking.updated_at = local_now()
        booking = await self.store.bookings.save(booking)
        logger.info("Booking %s cancelled (%s)", booking.booking_id, reason.value)
        return booking

    async def validate(
        self,
        booking_id: str,
        validator_name: str | None = None,
        is_validated: bool = True,
    ) -> Booking:
        """
        Record or clear ticket check-in.

        Check-in metadata is independent of the booking status: checking a
        ticket in does not confirm it and clearing the check-in does not
        cancel it.

        Raises:
            NotFound: If the booking does not exist
            InvalidTransition: If checking in a cancelled booking
        """
        booking = await self._get(booking_id)

        if is_validated and booking.status == BookingStatus.CANCELLED:
            raise InvalidTransition("Cannot validate a cancelled booking")

        booking.is_validated = is_validated
        booking.validated_at = local_now() if is_validated else None
        booking.validated_by = (validator_name or DEFAULT_VALIDATOR) if is_validated else None
        booking.updated_at = local_now()

        booking = await self.store.bookings.save(booking)
        logger.info(
            "Booking %s %s by %s",
            booking.booking_id,
            "validated" if is_validated else "unvalidated",
            validator_name or DEFAULT_VALIDATOR,
        )
        return booking

    async def cancel_for_deleted_movie(self, movie_title: str) -> int:
        """
        Cancel all active bookings of a movie that is being removed.

        Also clears the snapshot image of every booking of the movie, since
        the image asset goes away with it.

        Returns:
            Number of bookings cancelled
        """
        count = await self.store.bookings.cancel_active_for_movie(
            movie_title, CancellationReason.MOVIE_DELETED, local_now()
        )
        logger.info("Cancelled %d bookings for movie: %s", count, movie_title)
        return count

"""Booking domain errors.

Every error carries the HTTP status the API layer answers with, so routers
can translate them without a lookup table of their own.
"""


class CinemaError(Exception):
    """Base class for booking domain errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(CinemaError):
    """Malformed or missing input."""

    status_code = 400


class Forbidden(CinemaError):
    """The caller may not act on the referenced resource."""

    status_code = 403


class NotFound(CinemaError):
    """Referenced resource does not exist."""

    status_code = 404


class SeatConflict(CinemaError):
    """One or more requested seats are already held for the showing."""

    status_code = 409

    def __init__(self, seats: list[str]):
        self.seats = sorted(seats)
        super().__init__(f"Seats already booked: {', '.join(self.seats)}")


class InvalidTransition(CinemaError):
    """Requested status is not reachable from the current status."""

    status_code = 409


class ShowtimeNotFound(CinemaError):
    """No showtime configuration matches the requested date and time."""

    status_code = 422


class DuplicateBookingId(CinemaError):
    """Generated booking id already exists in storage."""

    status_code = 500


class InternalError(CinemaError):
    """Storage or other unexpected failure."""

    status_code = 500

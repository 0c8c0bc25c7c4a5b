"""Seat schemas."""

from pydantic import Field

from cinema.schemas.common import BaseSchema


class SeatMapResponse(BaseSchema):
    """Schema for the hall seat layout."""

    rows: list[str]
    seats_per_row: int
    seats: list[str]


class ShowingBooking(BaseSchema):
    """Seats of one booking in a showing."""

    booking_id: str
    seats: list[str]


class ShowingAvailabilityResponse(BaseSchema):
    """Schema for seat availability of a showing."""

    movie: str
    date: str
    time: str
    held_seats: list[str]
    available_seats: list[str]
    bookings: list[ShowingBooking] = Field(default_factory=list)

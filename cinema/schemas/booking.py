"""Booking schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field, model_validator

from cinema.models.booking import BookingStatus, CancellationReason
from cinema.schemas.common import DATE_PATTERN, TIME_PATTERN, BaseSchema


class BookingCreate(BaseSchema):
    """Schema for creating a booking."""

    movie_id: str | None = None
    movie_title: str | None = Field(None, min_length=1, max_length=255)
    hall: str | None = Field(None, max_length=100)
    show_date: str = Field(..., pattern=DATE_PATTERN)
    show_time: str = Field(..., pattern=TIME_PATTERN)
    seats: list[str] = Field(..., min_length=1)
    price_per_seat: Decimal | None = Field(None, ge=0)

    @model_validator(mode="after")
    def check_movie_reference(self) -> "BookingCreate":
        if not self.movie_id and not self.movie_title:
            raise ValueError("Movie title is required")
        return self


class MovieSnapshotResponse(BaseSchema):
    """Movie details as they were when the booking was made."""

    movie_id: str | None = None
    title: str
    duration: str | None = None
    hall: str | None = None
    image_url: str | None = None


class BookingResponse(BaseSchema):
    """Schema for booking response."""

    booking_id: str
    user_id: str
    movie: MovieSnapshotResponse
    seats: list[str]
    show_date: str
    show_time: str
    price_per_seat: Decimal
    seat_count: int
    total_amount: Decimal
    theater: str
    status: BookingStatus
    cancellation_reason: CancellationReason | None = None
    is_validated: bool
    validated_at: datetime | None = None
    validated_by: str | None = None
    created_at: datetime
    updated_at: datetime


class BookingStatusUpdate(BaseSchema):
    """Schema for an admin status change."""

    status: BookingStatus


class BookingValidateRequest(BaseSchema):
    """Schema for ticket check-in."""

    is_validated: bool = True
    admin_name: str | None = Field(None, max_length=100)


class AffectedBookingsResponse(BaseSchema):
    """Count of bookings affected by a bulk operation."""

    success: bool = True
    message: str
    count: int

"""Booking models."""

import enum
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from cinema.models.base import Base, local_now


class BookingStatus(str, enum.Enum):
    """Booking status enum."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class CancellationReason(str, enum.Enum):
    """Why a booking was cancelled."""

    USER_CANCELLED = "user_cancelled"
    ADMIN_CANCELLED = "admin_cancelled"
    MOVIE_DELETED = "movie_deleted"
    OTHER = "other"


ACTIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


@dataclass(frozen=True)
class MovieSnapshot:
    """Movie details copied into a booking when it is made."""

    movie_id: str | None
    title: str
    duration: str | None
    hall: str | None
    image_url: str | None


class Booking(Base):
    """Booking model representing reserved seats for one showing."""

    __tablename__ = "bookings"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    booking_id: Mapped[str] = mapped_column(String(40), unique=True, nullable=False)
    user_id: Mapped[str] = mapped_column(String(50), nullable=False)

    # Movie snapshot
    movie_id: Mapped[str | None] = mapped_column(String(26))
    movie_title: Mapped[str] = mapped_column(String(255), nullable=False)
    movie_duration: Mapped[str | None] = mapped_column(String(50))
    movie_hall: Mapped[str | None] = mapped_column(String(100))
    movie_image_url: Mapped[str | None] = mapped_column(String(500))

    seats: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    show_date: Mapped[str] = mapped_column(String(10), nullable=False)
    show_time: Mapped[str] = mapped_column(String(5), nullable=False)

    # Pricing
    price_per_seat: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    seat_count: Mapped[int] = mapped_column(Integer, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    theater: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus, values_callable=lambda e: [m.value for m in e]),
        default=BookingStatus.PENDING,
    )
    cancellation_reason: Mapped[CancellationReason | None] = mapped_column(
        Enum(CancellationReason, values_callable=lambda e: [m.value for m in e])
    )

    # Ticket check-in
    is_validated: Mapped[bool] = mapped_column(Boolean, default=False)
    validated_at: Mapped[datetime | None] = mapped_column(DateTime)
    validated_by: Mapped[str | None] = mapped_column(String(100))

    created_at: Mapped[datetime] = mapped_column(DateTime, default=local_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=local_now, onupdate=local_now)

    __table_args__ = (
        Index("idx_booking_user_id", "user_id"),
        Index("idx_booking_showing", "movie_title", "show_date", "show_time"),
        Index("idx_booking_status", "status"),
    )

    @property
    def movie(self) -> MovieSnapshot:
        """Movie snapshot taken at booking time."""
        return MovieSnapshot(
            movie_id=self.movie_id,
            title=self.movie_title,
            duration=self.movie_duration,
            hall=self.movie_hall,
            image_url=self.movie_image_url,
        )

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES


class SeatHold(Base):
    """One seat of one showing held by a non-cancelled booking.

    The unique constraint over the showing and seat is what makes double
    booking impossible at the database level; holds are deleted when their
    booking is cancelled.
    """

    __tablename__ = "seat_holds"

    hold_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    booking_pk: Mapped[str] = mapped_column(
        String(26), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False
    )
    movie_title: Mapped[str] = mapped_column(String(255), nullable=False)
    show_date: Mapped[str] = mapped_column(String(10), nullable=False)
    show_time: Mapped[str] = mapped_column(String(5), nullable=False)
    seat: Mapped[str] = mapped_column(String(5), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "movie_title", "show_date", "show_time", "seat", name="uk_showing_seat"
        ),
        Index("idx_hold_booking", "booking_pk"),
    )

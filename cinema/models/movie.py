"""Movie models."""

import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cinema.models.base import Base, local_now


class MovieStatus(str, enum.Enum):
    """Movie status enum."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    COMING_SOON = "coming-soon"


class Movie(Base):
    """Movie model with its scheduled showtimes."""

    __tablename__ = "movies"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    duration: Mapped[str] = mapped_column(String(50), nullable=False)
    hall: Mapped[str] = mapped_column(String(100), nullable=False)
    image: Mapped[str] = mapped_column(String(500), nullable=False)
    # Plain "HH:MM" list kept for movies created before per-showtime pricing
    legacy_times: Mapped[list[str]] = mapped_column(JSON, default=list)
    genre: Mapped[str] = mapped_column(String(100), default="")
    description: Mapped[str] = mapped_column(Text, default="")
    status: Mapped[MovieStatus] = mapped_column(
        Enum(MovieStatus, values_callable=lambda e: [m.value for m in e]),
        default=MovieStatus.ACTIVE,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=local_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=local_now, onupdate=local_now)

    # Relationships
    showtimes: Mapped[list["Showtime"]] = relationship(
        "Showtime",
        back_populates="movie",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="Showtime.showtime_id",
    )

    __table_args__ = (
        Index("idx_movie_title", "title"),
        Index("idx_movie_status", "status"),
    )

    def find_showtime(self, show_date: str, show_time: str) -> "Showtime | None":
        """Return the showtime scheduled at the given date and time."""
        for showtime in self.showtimes:
            if showtime.show_date == show_date and showtime.show_time == show_time:
                return showtime
        return None


class Showtime(Base):
    """Showtime model: one dated screening of a movie and its seat price."""

    __tablename__ = "showtimes"

    showtime_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    movie_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("movies.id", ondelete="CASCADE"), nullable=False
    )
    show_date: Mapped[str] = mapped_column(String(10), nullable=False)
    show_time: Mapped[str] = mapped_column(String(5), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    movie: Mapped["Movie"] = relationship("Movie", back_populates="showtimes")

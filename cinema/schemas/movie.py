"""Movie schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field, model_validator

from cinema.models.movie import MovieStatus
from cinema.schemas.common import DATE_PATTERN, TIME_PATTERN, BaseSchema

DEFAULT_SHOWTIME_PRICE = Decimal("15")


class ShowtimeSchema(BaseSchema):
    """One scheduled screening and its seat price."""

    show_date: str = Field(..., pattern=DATE_PATTERN)
    show_time: str = Field(..., pattern=TIME_PATTERN)
    price: Decimal = Field(DEFAULT_SHOWTIME_PRICE, ge=0)


class MovieCreate(BaseSchema):
    """Schema for creating a movie."""

    title: str = Field(..., min_length=1, max_length=255)
    duration: str = Field(..., min_length=1, max_length=50)
    hall: str = Field(..., min_length=1, max_length=100)
    image: str = Field(..., min_length=1, max_length=500)
    showtimes: list[ShowtimeSchema] = Field(default_factory=list)
    legacy_times: list[str] = Field(default_factory=list)
    genre: str = Field("", max_length=100)
    description: str = ""
    status: MovieStatus = MovieStatus.ACTIVE

    @model_validator(mode="after")
    def check_schedule(self) -> "MovieCreate":
        if not self.showtimes and not self.legacy_times:
            raise ValueError("At least one showtime is required")
        return self


class MovieUpdate(BaseSchema):
    """Schema for updating a movie."""

    title: str | None = Field(None, min_length=1, max_length=255)
    duration: str | None = Field(None, min_length=1, max_length=50)
    hall: str | None = Field(None, min_length=1, max_length=100)
    image: str | None = Field(None, min_length=1, max_length=500)
    showtimes: list[ShowtimeSchema] | None = None
    legacy_times: list[str] | None = None
    genre: str | None = Field(None, max_length=100)
    description: str | None = None
    status: MovieStatus | None = None


class MovieResponse(BaseSchema):
    """Schema for movie response."""

    id: str
    title: str
    duration: str
    hall: str
    image: str
    showtimes: list[ShowtimeSchema]
    legacy_times: list[str]
    genre: str
    description: str
    status: MovieStatus
    created_at: datetime
    updated_at: datetime


class MovieDeleteResponse(BaseSchema):
    """Schema for movie deletion result."""

    success: bool = True
    message: str
    cancelled_bookings: int

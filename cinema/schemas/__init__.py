"""Pydantic schemas for API request/response."""

from cinema.schemas.booking import (
    BookingCreate,
    BookingResponse,
    BookingStatusUpdate,
    BookingValidateRequest,
)
from cinema.schemas.dashboard import ActivityEntry, DashboardStats
from cinema.schemas.hall import HallCreate, HallResponse, HallUpdate
from cinema.schemas.movie import MovieCreate, MovieResponse, MovieUpdate, ShowtimeSchema
from cinema.schemas.seat import SeatMapResponse, ShowingAvailabilityResponse

__all__ = [
    "BookingCreate",
    "BookingResponse",
    "BookingStatusUpdate",
    "BookingValidateRequest",
    "ActivityEntry",
    "DashboardStats",
    "HallCreate",
    "HallResponse",
    "HallUpdate",
    "MovieCreate",
    "MovieResponse",
    "MovieUpdate",
    "ShowtimeSchema",
    "SeatMapResponse",
    "ShowingAvailabilityResponse",
]

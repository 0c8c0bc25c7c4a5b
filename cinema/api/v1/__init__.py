"""API v1 routers package."""

from cinema.api.v1.bookings import router as bookings_router
from cinema.api.v1.dashboard import router as dashboard_router
from cinema.api.v1.halls import router as halls_router
from cinema.api.v1.movies import router as movies_router
from cinema.api.v1.seats import router as seats_router

__all__ = [
    "bookings_router",
    "dashboard_router",
    "halls_router",
    "movies_router",
    "seats_router",
]

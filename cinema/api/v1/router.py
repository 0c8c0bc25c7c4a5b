"""API v1 main router."""

from fastapi import APIRouter

from cinema.api.v1.bookings import router as bookings_router
from cinema.api.v1.dashboard import router as dashboard_router
from cinema.api.v1.halls import router as halls_router
from cinema.api.v1.movies import router as movies_router
from cinema.api.v1.seats import router as seats_router

router = APIRouter(prefix="/v1")

router.include_router(movies_router, prefix="/movies", tags=["Movies"])
router.include_router(halls_router, prefix="/halls", tags=["Halls"])
router.include_router(seats_router, prefix="/seats", tags=["Seats"])
router.include_router(bookings_router, prefix="/bookings", tags=["Bookings"])
router.include_router(dashboard_router, prefix="/dashboard", tags=["Dashboard"])

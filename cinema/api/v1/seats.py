"""Seats API endpoints."""

from fastapi import APIRouter, Query

from cinema.api.v1.dependencies import SeatServiceDep
from cinema.schemas.seat import SeatMapResponse, ShowingAvailabilityResponse, ShowingBooking
from cinema.services.seat_service import SEAT_MAP, SEAT_ROWS, SEATS_PER_ROW, seat_sort_key

router = APIRouter()


@router.get(
    "/map",
    response_model=SeatMapResponse,
    summary="Get hall seat layout",
)
async def get_seat_map() -> SeatMapResponse:
    """Seat identifiers of a hall, row by row."""
    return SeatMapResponse(
        rows=list(SEAT_ROWS),
        seats_per_row=SEATS_PER_ROW,
        seats=list(SEAT_MAP),
    )


@router.get(
    "/showtime",
    response_model=ShowingAvailabilityResponse,
    summary="Get seat availability for a showing",
)
async def get_showing_availability(
    seat_service: SeatServiceDep,
    movie: str = Query(""),
    date: str = Query(""),
    time: str = Query(""),
) -> ShowingAvailabilityResponse:
    """
    Seats already held for a movie, date and time.

    Advisory only: booking creation checks availability again.
    """
    bookings, held, available = await seat_service.get_showing_availability(
        movie, date, time
    )

    return ShowingAvailabilityResponse(
        movie=movie,
        date=date,
        time=time,
        held_seats=sorted(held, key=seat_sort_key),
        available_seats=available,
        bookings=[
            ShowingBooking(booking_id=b.booking_id, seats=list(b.seats)) for b in bookings
        ],
    )

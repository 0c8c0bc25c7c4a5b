"""Bookings API endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from cinema.api.v1.dependencies import (
    BookingServiceDep,
    CurrentAdmin,
    CurrentUser,
    LifecycleServiceDep,
)
from cinema.models.booking import BookingStatus, CancellationReason
from cinema.schemas.booking import (
    BookingCreate,
    BookingResponse,
    BookingStatusUpdate,
    BookingValidateRequest,
)

router = APIRouter()


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create booking",
)
async def create_booking(
    booking_data: BookingCreate,
    current_user: CurrentUser,
    booking_service: BookingServiceDep,
) -> BookingResponse:
    """
    Book seats for a showing.

    The booking is confirmed immediately. Fails with 409 if any seat is
    already held by another booking of the same showing.
    """
    booking = await booking_service.create_booking(
        user_id=current_user,
        movie_id=booking_data.movie_id,
        movie_title=booking_data.movie_title,
        hall=booking_data.hall,
        show_date=booking_data.show_date,
        show_time=booking_data.show_time,
        seats=booking_data.seats,
        price_per_seat=booking_data.price_per_seat,
    )
    return BookingResponse.model_validate(booking)


@router.get(
    "/user",
    response_model=list[BookingResponse],
    summary="Get user bookings",
)
async def get_user_bookings(
    current_user: CurrentUser,
    booking_service: BookingServiceDep,
) -> list[BookingResponse]:
    """Get all bookings of the current user, newest first."""
    bookings = await booking_service.get_user_bookings(current_user)
    return [BookingResponse.model_validate(b) for b in bookings]


@router.delete(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Cancel own booking",
)
async def cancel_own_booking(
    booking_id: str,
    current_user: CurrentUser,
    lifecycle_service: LifecycleServiceDep,
) -> BookingResponse:
    """Cancel one of the current user's bookings and release its seats."""
    booking = await lifecycle_service.cancel(
        booking_id,
        reason=CancellationReason.USER_CANCELLED,
        user_id=current_user,
    )
    return BookingResponse.model_validate(booking)


@router.get(
    "",
    response_model=list[BookingResponse],
    summary="List bookings (admin)",
)
async def list_bookings(
    admin: CurrentAdmin,
    booking_service: BookingServiceDep,
    status_filter: str | None = Query(None, alias="status"),
    date: str | None = None,
    search: str | None = None,
) -> list[BookingResponse]:
    """List bookings filtered by status, show date, or booking id / movie title."""
    db_status = None
    if status_filter and status_filter != "all":
        try:
            db_status = BookingStatus(status_filter)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid status filter",
            )

    bookings = await booking_service.list_bookings(
        status=db_status,
        show_date=date,
        search=search,
    )
    return [BookingResponse.model_validate(b) for b in bookings]


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Get booking (admin)",
)
async def get_booking(
    booking_id: str,
    admin: CurrentAdmin,
    booking_service: BookingServiceDep,
) -> BookingResponse:
    """Look up a booking by its booking id, e.g. at ticket check-in."""
    booking = await booking_service.get_booking(booking_id)
    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found",
        )
    return BookingResponse.model_validate(booking)


@router.put(
    "/admin/{booking_id}/status",
    response_model=BookingResponse,
    summary="Update booking status (admin)",
)
async def update_booking_status(
    booking_id: str,
    status_data: BookingStatusUpdate,
    admin: CurrentAdmin,
    lifecycle_service: LifecycleServiceDep,
) -> BookingResponse:
    """Move a booking along pending -> confirmed -> cancelled."""
    booking = await lifecycle_service.set_status(booking_id, status_data.status)
    return BookingResponse.model_validate(booking)


@router.put(
    "/admin/{booking_id}/validate",
    response_model=BookingResponse,
    summary="Validate ticket (admin)",
)
async def validate_booking(
    booking_id: str,
    validate_data: BookingValidateRequest,
    admin: CurrentAdmin,
    lifecycle_service: LifecycleServiceDep,
) -> BookingResponse:
    """Record or clear ticket check-in."""
    booking = await lifecycle_service.validate(
        booking_id,
        validator_name=validate_data.admin_name or admin,
        is_validated=validate_data.is_validated,
    )
    return BookingResponse.model_validate(booking)


@router.delete(
    "/admin/{booking_id}",
    response_model=BookingResponse,
    summary="Cancel booking (admin)",
)
async def cancel_booking(
    booking_id: str,
    admin: CurrentAdmin,
    lifecycle_service: LifecycleServiceDep,
) -> BookingResponse:
    """Cancel any booking and release its seats."""
    booking = await lifecycle_service.cancel(
        booking_id, reason=CancellationReason.ADMIN_CANCELLED
    )
    return BookingResponse.model_validate(booking)

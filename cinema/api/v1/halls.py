"""Halls API endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from cinema.api.v1.dependencies import CurrentAdmin, HallServiceDep
from cinema.models.hall import HallStatus
from cinema.schemas.common import SuccessResponse
from cinema.schemas.hall import HallCreate, HallResponse, HallSummary, HallUpdate

router = APIRouter()


@router.get(
    "",
    response_model=list[HallResponse],
    summary="List halls",
)
async def list_halls(
    hall_service: HallServiceDep,
    status_filter: HallStatus | None = Query(None, alias="status"),
) -> list[HallResponse]:
    """List halls with optional status filter."""
    halls = await hall_service.get_halls(status=status_filter)
    return [HallResponse.model_validate(h) for h in halls]


@router.get(
    "/active/list",
    response_model=list[HallSummary],
    summary="List active halls",
)
async def list_active_halls(
    hall_service: HallServiceDep,
) -> list[HallSummary]:
    """Active halls sorted by name, for selection lists."""
    halls = await hall_service.get_active_halls()
    return [HallSummary.model_validate(h) for h in halls]


@router.post(
    "",
    response_model=HallResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create hall",
)
async def create_hall(
    hall_data: HallCreate,
    admin: CurrentAdmin,
    hall_service: HallServiceDep,
) -> HallResponse:
    """Create a hall; names must be unique."""
    hall = await hall_service.create_hall(hall_data)
    return HallResponse.model_validate(hall)


@router.get(
    "/{hall_id}",
    response_model=HallResponse,
    summary="Get hall",
)
async def get_hall(
    hall_id: str,
    hall_service: HallServiceDep,
) -> HallResponse:
    hall = await hall_service.get_hall(hall_id)
    if not hall:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Hall not found",
        )
    return HallResponse.model_validate(hall)


@router.patch(
    "/{hall_id}",
    response_model=HallResponse,
    summary="Update hall",
)
async def update_hall(
    hall_id: str,
    hall_data: HallUpdate,
    admin: CurrentAdmin,
    hall_service: HallServiceDep,
) -> HallResponse:
    hall = await hall_service.update_hall(hall_id, hall_data)
    if not hall:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Hall not found",
        )
    return HallResponse.model_validate(hall)


@router.delete(
    "/{hall_id}",
    response_model=SuccessResponse,
    summary="Delete hall",
)
async def delete_hall(
    hall_id: str,
    admin: CurrentAdmin,
    hall_service: HallServiceDep,
) -> SuccessResponse:
    await hall_service.delete_hall(hall_id)
    return SuccessResponse(message="Hall deleted successfully")

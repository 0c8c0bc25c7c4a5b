"""Hall schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from cinema.models.hall import HallStatus, HallType
from cinema.schemas.common import BaseSchema


class HallCreate(BaseSchema):
    """Schema for creating a hall."""

    name: str = Field(..., min_length=2, max_length=50)
    capacity: int = Field(..., ge=1)
    type: HallType = HallType.STANDARD
    status: HallStatus = HallStatus.ACTIVE
    description: str = Field("", max_length=500)
    amenities: list[str] = Field(default_factory=list)

    @field_validator("name", "description")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()


class HallUpdate(BaseSchema):
    """Schema for updating a hall."""

    name: str | None = Field(None, min_length=2, max_length=50)
    capacity: int | None = Field(None, ge=1)
    type: HallType | None = None
    status: HallStatus | None = None
    description: str | None = Field(None, max_length=500)
    amenities: list[str] | None = None


class HallResponse(BaseSchema):
    """Schema for hall response."""

    id: str
    name: str
    capacity: int
    type: HallType
    status: HallStatus
    description: str
    amenities: list[str]
    created_at: datetime
    updated_at: datetime


class HallSummary(BaseSchema):
    """Short hall entry for selection lists."""

    id: str
    name: str
    type: HallType
    capacity: int

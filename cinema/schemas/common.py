"""Common schema utilities."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
TIME_PATTERN = r"^\d{2}:\d{2}$"


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class ErrorResponse(BaseModel):
    """Error response schema."""

    error: str
    detail: str | None = None
    seats: list[str] | None = None
    timestamp: datetime


class SuccessResponse(BaseModel):
    """Simple success response."""

    success: bool = True
    message: str

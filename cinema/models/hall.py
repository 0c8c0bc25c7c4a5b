"""Hall model."""

import enum
from datetime import datetime

from sqlalchemy import JSON, DateTime, Enum, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from cinema.models.base import Base, local_now


class HallType(str, enum.Enum):
    """Hall type enum."""

    STANDARD = "Standard"
    IMAX = "IMAX"
    VIP = "VIP"
    PREMIUM = "Premium"


class HallStatus(str, enum.Enum):
    """Hall status enum."""

    ACTIVE = "Active"
    MAINTENANCE = "Maintenance"
    INACTIVE = "Inactive"


class Hall(Base):
    """Hall model representing a screening room."""

    __tablename__ = "halls"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[HallType] = mapped_column(
        Enum(HallType, values_callable=lambda e: [m.value for m in e]),
        default=HallType.STANDARD,
    )
    status: Mapped[HallStatus] = mapped_column(
        Enum(HallStatus, values_callable=lambda e: [m.value for m in e]),
        default=HallStatus.ACTIVE,
    )
    description: Mapped[str] = mapped_column(String(500), default="")
    amenities: Mapped[list[str]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=local_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=local_now, onupdate=local_now)

    __table_args__ = (Index("idx_hall_status", "status"),)

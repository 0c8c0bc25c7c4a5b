"""Hall service."""

import logging

from cinema.errors import InvalidRequest, NotFound
from cinema.models.base import local_now, new_id
from cinema.models.hall import Hall, HallStatus
from cinema.schemas.hall import HallCreate, HallUpdate
from cinema.storage.base import StoreSession

logger = logging.getLogger(__name__)


class HallService:
    """Service for hall operations."""

    def __init__(self, store: StoreSession):
        self.store = store

    async def create_hall(self, hall_data: HallCreate) -> Hall:
        """Create a new hall with a unique name."""
        if await self.store.halls.get_by_name(hall_data.name):
            raise InvalidRequest("Hall with this name already exists")

        now = local_now()
        hall = Hall(
            id=new_id(),
            name=hall_data.name,
            capacity=hall_data.capacity,
            type=hall_data.type,
            status=hall_data.status,
            description=hall_data.description,
            amenities=list(hall_data.amenities),
            created_at=now,
            updated_at=now,
        )
        hall = await self.store.halls.add(hall)
        logger.info("Created hall %s", hall.name)
        return hall

    async def get_hall(self, hall_id: str) -> Hall | None:
        """Get hall by ID."""
        return await self.store.halls.get(hall_id)

    async def get_halls(self, status: HallStatus | None = None) -> list[Hall]:
        """Get halls, newest first."""
        return await self.store.halls.find_all(status=status)

    async def get_active_halls(self) -> list[Hall]:
        """Get active halls sorted by name."""
        return await self.store.halls.find_all(status=HallStatus.ACTIVE, order_by_name=True)

    async def update_hall(self, hall_id: str, hall_data: HallUpdate) -> Hall | None:
        """Update a hall."""
        hall = await self.get_hall(hall_id)
        if not hall:
            return None

        update_data = hall_data.model_dump(exclude_unset=True)
        if update_data.get("name"):
            update_data["name"] = update_data["name"].strip()
            other = await self.store.halls.get_by_name(update_data["name"])
            if other and other.id != hall.id:
                raise InvalidRequest("Hall with this name already exists")

        for field, value in update_data.items():
            if value is not None:
                setattr(hall, field, value)

        hall.updated_at = local_now()
        return await self.store.halls.save(hall)

    async def delete_hall(self, hall_id: str) -> None:
        """Delete a hall."""
        hall = await self.get_hall(hall_id)
        if not hall:
            raise NotFound("Hall not found")
        await self.store.halls.delete(hall)
        logger.info("Deleted hall %s", hall.name)

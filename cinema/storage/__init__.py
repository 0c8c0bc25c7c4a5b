"""Storage backends."""

import logging

from cinema.config import Settings
from cinema.storage.base import (
    BookingRepository,
    HallRepository,
    MovieRepository,
    Storage,
    StoreSession,
)
from cinema.storage.memory import MemoryStorage
from cinema.storage.sql import SqlStorage

logger = logging.getLogger(__name__)


def build_storage(settings: Settings) -> Storage:
    """Create the storage backend named by STORAGE_BACKEND."""
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "memory":
        logger.warning("Using in-memory storage; data will not survive a restart")
        return MemoryStorage()
    if backend == "sql":
        logger.info("Using SQL storage")
        return SqlStorage.from_url(settings.database_url, echo=settings.DB_ECHO)
    raise ValueError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND!r}")


__all__ = [
    "BookingRepository",
    "HallRepository",
    "MovieRepository",
    "Storage",
    "StoreSession",
    "MemoryStorage",
    "SqlStorage",
    "build_storage",
]

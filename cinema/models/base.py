"""Declarative base and identifier helpers."""

from datetime import datetime

from sqlalchemy.orm import DeclarativeBase
from ulid import ULID


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


def new_id() -> str:
    """Generate a sortable primary key."""
    return str(ULID())


def local_now() -> datetime:
    """Current local wall-clock time (naive), as stored in timestamp columns."""
    return datetime.now()

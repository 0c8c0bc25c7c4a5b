"""Shared fixtures."""

from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from cinema.config import get_settings
from cinema.main import create_app
from cinema.schemas.movie import MovieCreate, ShowtimeSchema
from cinema.seat_locks import LocalSeatLocker
from cinema.services.movie_service import MovieService
from cinema.storage import MemoryStorage, SqlStorage

SHOW_DATE = "2024-01-01"
SHOW_TIME = "19:00"


def dune_payload(**overrides) -> MovieCreate:
    data = {
        "title": "Dune",
        "duration": "2h 35m",
        "hall": "Hall 1",
        "image": "https://cdn.example.com/dune.jpg",
        "showtimes": [
            ShowtimeSchema(show_date=SHOW_DATE, show_time=SHOW_TIME, price=Decimal("12.50")),
            ShowtimeSchema(show_date=SHOW_DATE, show_time="22:00", price=Decimal("10.00")),
        ],
        "genre": "Sci-Fi",
    }
    data.update(overrides)
    return MovieCreate(**data)


def make_sql_storage() -> SqlStorage:
    return SqlStorage.from_url(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
async def sql_storage():
    storage = make_sql_storage()
    await storage.initialize()
    yield storage
    await storage.close()


@pytest.fixture(params=["memory", "sql"])
async def storage(request):
    """Run a test against both storage backends."""
    if request.param == "memory":
        yield MemoryStorage()
        return
    sql = make_sql_storage()
    await sql.initialize()
    yield sql
    await sql.close()


@pytest.fixture
async def store(storage):
    async with storage.session() as session:
        yield session


@pytest.fixture
def seat_locker():
    return LocalSeatLocker()


@pytest.fixture
async def dune(store):
    return await MovieService(store).create_movie(dune_payload())


@pytest.fixture
def app(memory_storage, seat_locker):
    return create_app(storage=memory_storage, seat_locker=seat_locker)


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def admin_headers():
    return {"X-Admin-Key": get_settings().ADMIN_API_KEY, "X-Admin-Name": "Alice"}


@pytest.fixture
def user_headers():
    return {"X-User-ID": "user-1"}

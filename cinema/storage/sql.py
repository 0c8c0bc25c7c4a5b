"""SQLAlchemy (async) storage backend."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from cinema.errors import (
    CinemaError,
    DuplicateBookingId,
    InternalError,
    InvalidRequest,
    SeatConflict,
)
from cinema.models.base import Base
from cinema.models.booking import (
    ACTIVE_STATUSES,
    Booking,
    BookingStatus,
    CancellationReason,
    SeatHold,
)
from cinema.models.hall import Hall, HallStatus
from cinema.models.movie import Movie, MovieStatus
from cinema.storage.base import (
    BookingRepository,
    HallRepository,
    MovieRepository,
    Storage,
    StoreSession,
)

logger = logging.getLogger(__name__)


class SqlBookingRepository(BookingRepository):
    """Booking repository backed by an async session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, booking_id: str) -> Booking | None:
        result = await self.db.execute(
            select(Booking).where(Booking.booking_id == booking_id)
        )
        return result.scalar_one_or_none()

    async def find_all(
        self,
        user_id: str | None = None,
        status: BookingStatus | None = None,
        show_date: str | None = None,
        search: str | None = None,
        limit: int | None = None,
    ) -> list[Booking]:
        query = select(Booking)

        if user_id:
            query = query.where(Booking.user_id == user_id)
        if status:
            query = query.where(Booking.status == status)
        if show_date:
            query = query.where(Booking.show_date == show_date)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    Booking.booking_id.ilike(pattern),
                    Booking.movie_title.ilike(pattern),
                )
            )

        query = query.order_by(Booking.created_at.desc())
        if limit:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find_active_for_showing(
        self, movie_title: str, show_date: str, show_time: str
    ) -> list[Booking]:
        result = await self.db.execute(
            select(Booking).where(
                Booking.movie_title == movie_title,
                Booking.show_date == show_date,
                Booking.show_time == show_time,
                Booking.status.in_(ACTIVE_STATUSES),
            )
        )
        return list(result.scalars().all())

    async def add(self, booking: Booking) -> Booking:
        self.db.add(booking)
        try:
            await self.db.flush()
        except IntegrityError as exc:
            await self.db.rollback()
            raise DuplicateBookingId(
                f"Booking id {booking.booking_id} already exists"
            ) from exc

        # One hold row per seat; the unique constraint rejects double booking
        self.db.add_all(
            [
                SeatHold(
                    booking_pk=booking.id,
                    movie_title=booking.movie_title,
                    show_date=booking.show_date,
                    show_time=booking.show_time,
                    seat=seat,
                )
                for seat in booking.seats
            ]
        )
        try:
            await self.db.flush()
        except IntegrityError as exc:
            await self.db.rollback()
            held = await self._held_seats(
                booking.movie_title, booking.show_date, booking.show_time
            )
            taken = sorted(set(booking.seats) & held) or list(booking.seats)
            raise SeatConflict(taken) from exc

        await self.db.commit()
        return booking

    async def _held_seats(
        self, movie_title: str, show_date: str, show_time: str
    ) -> set[str]:
        result = await self.db.execute(
            select(SeatHold.seat).where(
                SeatHold.movie_title == movie_title,
                SeatHold.show_date == show_date,
                SeatHold.show_time == show_time,
            )
        )
        return set(result.scalars().all())

    async def save(self, booking: Booking) -> Booking:
        if booking.status == BookingStatus.CANCELLED:
            await self.db.execute(
                delete(SeatHold).where(SeatHold.booking_pk == booking.id)
            )
        await self.db.commit()
        return booking

    async def cancel_active_for_movie(
        self, movie_title: str, reason: CancellationReason, now: datetime
    ) -> int:
        result = await self.db.execute(
            select(Booking.id).where(
                Booking.movie_title == movie_title,
                Booking.status.in_(ACTIVE_STATUSES),
            )
        )
        ids = list(result.scalars().all())

        if ids:
            await self.db.execute(
                update(Booking)
                .where(Booking.id.in_(ids))
                .values(
                    status=BookingStatus.CANCELLED,
                    cancellation_reason=reason,
                    updated_at=now,
                )
            )
            await self.db.execute(delete(SeatHold).where(SeatHold.booking_pk.in_(ids)))

        # Scrub image references of every booking of the movie, cancelled or not
        await self.db.execute(
            update(Booking)
            .where(Booking.movie_title == movie_title)
            .values(movie_image_url=None, updated_at=now)
        )
        await self.db.commit()
        return len(ids)

    async def clear_image_urls(self, containing: str, now: datetime) -> int:
        result = await self.db.execute(
            update(Booking)
            .where(Booking.movie_image_url.contains(containing))
            .values(movie_image_url=None, updated_at=now)
        )
        await self.db.commit()
        return result.rowcount

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Booking))
        return result.scalar() or 0


class SqlMovieRepository(MovieRepository):
    """Movie repository backed by an async session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, movie_id: str) -> Movie | None:
        result = await self.db.execute(select(Movie).where(Movie.id == movie_id))
        return result.scalar_one_or_none()

    async def get_by_title(self, title: str) -> Movie | None:
        result = await self.db.execute(
            select(Movie).where(Movie.title == title).order_by(Movie.created_at.desc())
        )
        return result.scalars().first()

    async def find_all(self, include_inactive: bool = False) -> list[Movie]:
        query = select(Movie)
        if not include_inactive:
            query = query.where(Movie.status != MovieStatus.INACTIVE)
        query = query.order_by(Movie.created_at.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def add(self, movie: Movie) -> Movie:
        self.db.add(movie)
        await self.db.commit()
        return movie

    async def save(self, movie: Movie) -> Movie:
        await self.db.commit()
        return movie

    async def delete(self, movie: Movie) -> None:
        await self.db.delete(movie)
        await self.db.commit()

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Movie))
        return result.scalar() or 0


class SqlHallRepository(HallRepository):
    """Hall repository backed by an async session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, hall_id: str) -> Hall | None:
        result = await self.db.execute(select(Hall).where(Hall.id == hall_id))
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Hall | None:
        result = await self.db.execute(select(Hall).where(Hall.name == name))
        return result.scalar_one_or_none()

    async def find_all(
        self, status: HallStatus | None = None, order_by_name: bool = False
    ) -> list[Hall]:
        query = select(Hall)
        if status:
            query = query.where(Hall.status == status)
        if order_by_name:
            query = query.order_by(Hall.name)
        else:
            query = query.order_by(Hall.created_at.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def add(self, hall: Hall) -> Hall:
        self.db.add(hall)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise InvalidRequest("Hall with this name already exists") from exc
        return hall

    async def save(self, hall: Hall) -> Hall:
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise InvalidRequest("Hall with this name already exists") from exc
        return hall

    async def delete(self, hall: Hall) -> None:
        await self.db.delete(hall)
        await self.db.commit()

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Hall))
        return result.scalar() or 0


class SqlStorage(Storage):
    """Storage backed by a relational database through SQLAlchemy."""

    name = "sql"

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_url(cls, url: str, echo: bool = False, **engine_kwargs) -> "SqlStorage":
        """Create storage with a new engine for the given URL."""
        return cls(create_async_engine(url, echo=echo, **engine_kwargs))

    async def initialize(self) -> None:
        """Create tables that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[StoreSession, None]:
        """
        Open a session and expose its repositories.

        Database errors are logged and surfaced as InternalError so that no
        driver detail reaches API clients.
        """
        async with self.session_factory() as db:
            try:
                yield StoreSession(
                    bookings=SqlBookingRepository(db),
                    movies=SqlMovieRepository(db),
                    halls=SqlHallRepository(db),
                )
            except CinemaError:
                raise
            except SQLAlchemyError as exc:
                await db.rollback()
                logger.exception("Storage failure: %s", exc)
                raise InternalError("Storage failure") from exc

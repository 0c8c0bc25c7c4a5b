"""Movie service."""

import logging
from decimal import Decimal

from cinema.errors import NotFound
from cinema.models.base import local_now, new_id
from cinema.models.movie import Movie, Showtime
from cinema.schemas.movie import MovieCreate, MovieUpdate, ShowtimeSchema
from cinema.services.lifecycle_service import BookingLifecycleService
from cinema.storage.base import StoreSession

logger = logging.getLogger(__name__)

BROKEN_IMAGE_MARKER = "placeholder"


def _build_showtimes(showtimes: list[ShowtimeSchema]) -> list[Showtime]:
    return [
        Showtime(
            show_date=showtime.show_date,
            show_time=showtime.show_time,
            price=Decimal(showtime.price),
        )
        for showtime in showtimes
    ]


class MovieService:
    """Service for movie catalog operations."""

    def __init__(self, store: StoreSession):
        self.store = store

    async def create_movie(self, movie_data: MovieCreate) -> Movie:
        """Create a new movie with its showtimes."""
        now = local_now()
        movie = Movie(
            id=new_id(),
            title=movie_data.title.strip(),
            duration=movie_data.duration.strip(),
            hall=movie_data.hall.strip(),
            image=movie_data.image,
            showtimes=_build_showtimes(movie_data.showtimes),
            legacy_times=list(movie_data.legacy_times),
            genre=movie_data.genre.strip(),
            description=movie_data.description.strip(),
            status=movie_data.status,
            created_at=now,
            updated_at=now,
        )
        movie = await self.store.movies.add(movie)
        logger.info("Created movie %s (%s)", movie.title, movie.id)
        return movie

    async def get_movie(self, movie_id: str) -> Movie | None:
        """Get movie by ID."""
        return await self.store.movies.get(movie_id)

    async def get_movies(self, include_inactive: bool = False) -> list[Movie]:
        """Get movies, newest first; inactive movies are hidden by default."""
        return await self.store.movies.find_all(include_inactive=include_inactive)

    async def update_movie(self, movie_id: str, movie_data: MovieUpdate) -> Movie | None:
        """Update a movie. Existing bookings keep their snapshot."""
        movie = await self.get_movie(movie_id)
        if not movie:
            return None

        update_data = movie_data.model_dump(exclude_unset=True, exclude={"showtimes"})
        for field, value in update_data.items():
            if value is not None:
                setattr(movie, field, value)

        if movie_data.showtimes is not None:
            movie.showtimes = _build_showtimes(movie_data.showtimes)

        movie.updated_at = local_now()
        return await self.store.movies.save(movie)

    async def delete_movie(self, movie_id: str) -> int:
        """
        Delete a movie after cancelling its active bookings.

        Returns:
            Number of bookings cancelled

        Raises:
            NotFound: If the movie does not exist
        """
        movie = await self.get_movie(movie_id)
        if not movie:
            raise NotFound("Movie not found")

        title = movie.title
        cancelled = await BookingLifecycleService(self.store).cancel_for_deleted_movie(title)
        await self.store.movies.delete(movie)
        logger.info("Deleted movie %s (%s)", title, movie_id)
        return cancelled

    async def cleanup_broken_images(self) -> int:
        """Clear placeholder image URLs from booking snapshots."""
        count = await self.store.bookings.clear_image_urls(BROKEN_IMAGE_MARKER, local_now())
        logger.info("Cleaned up %d bookings with broken image URLs", count)
        return count

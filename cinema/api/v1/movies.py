"""Movies API endpoints."""

from fastapi import APIRouter, HTTPException, status

from cinema.api.v1.dependencies import CurrentAdmin, MovieServiceDep
from cinema.schemas.booking import AffectedBookingsResponse
from cinema.schemas.movie import (
    MovieCreate,
    MovieDeleteResponse,
    MovieResponse,
    MovieUpdate,
)

router = APIRouter()


@router.get(
    "",
    response_model=list[MovieResponse],
    summary="List movies",
)
async def list_movies(
    movie_service: MovieServiceDep,
) -> list[MovieResponse]:
    """List movies that are not inactive, newest first."""
    movies = await movie_service.get_movies()
    return [MovieResponse.model_validate(m) for m in movies]


@router.post(
    "",
    response_model=MovieResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new movie",
)
async def create_movie(
    movie_data: MovieCreate,
    admin: CurrentAdmin,
    movie_service: MovieServiceDep,
) -> MovieResponse:
    """Create a movie with its showtimes and seat prices."""
    movie = await movie_service.create_movie(movie_data)
    return MovieResponse.model_validate(movie)


@router.post(
    "/cleanup-broken-images",
    response_model=AffectedBookingsResponse,
    summary="Clear broken image URLs from bookings",
)
async def cleanup_broken_images(
    admin: CurrentAdmin,
    movie_service: MovieServiceDep,
) -> AffectedBookingsResponse:
    """Null placeholder image URLs stored in booking snapshots."""
    count = await movie_service.cleanup_broken_images()
    return AffectedBookingsResponse(
        message=f"Cleaned up {count} bookings with broken image URLs",
        count=count,
    )


@router.get(
    "/{movie_id}",
    response_model=MovieResponse,
    summary="Get movie details",
)
async def get_movie(
    movie_id: str,
    movie_service: MovieServiceDep,
) -> MovieResponse:
    """Get movie details with showtimes."""
    movie = await movie_service.get_movie(movie_id)
    if not movie:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Movie not found",
        )
    return MovieResponse.model_validate(movie)


@router.patch(
    "/{movie_id}",
    response_model=MovieResponse,
    summary="Update movie",
)
async def update_movie(
    movie_id: str,
    movie_data: MovieUpdate,
    admin: CurrentAdmin,
    movie_service: MovieServiceDep,
) -> MovieResponse:
    """Update a movie; bookings already made keep their snapshot."""
    movie = await movie_service.update_movie(movie_id, movie_data)
    if not movie:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Movie not found",
        )
    return MovieResponse.model_validate(movie)


@router.delete(
    "/{movie_id}",
    response_model=MovieDeleteResponse,
    summary="Delete movie",
)
async def delete_movie(
    movie_id: str,
    admin: CurrentAdmin,
    movie_service: MovieServiceDep,
) -> MovieDeleteResponse:
    """Delete a movie and cancel its pending and confirmed bookings."""
    cancelled = await movie_service.delete_movie(movie_id)
    return MovieDeleteResponse(
        message="Movie deleted successfully",
        cancelled_bookings=cancelled,
    )

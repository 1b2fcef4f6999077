"""Movie catalog API endpoints."""

import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from enum import StrEnum

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from moviematic.config import get_settings
from moviematic.database import get_db
from moviematic.exceptions import NotFoundError
from moviematic.models.movie import Movie, MovieStreamingPlatform
from moviematic.models.streaming_service import StreamingService
from moviematic.schemas.movie import MovieCreate, MovieResponse, MovieUpdate, StreamingPlatformIn
from moviematic.services.integrity import (
    require_movie,
    set_movie_of_the_week,
    validate_service_references,
)
from moviematic.services.search import MovieFilters, MovieSort, list_genres, search_movies
from moviematic.services.storage import ImageStorage, get_image_storage
from moviematic.utils.security import AdminUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/movies", tags=["movies"])


class ImageKind(StrEnum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


def build_platforms(
    platforms: Sequence[StreamingPlatformIn],
    services: dict[int, StreamingService],
) -> list[MovieStreamingPlatform]:
    """Create platform rows in request order, attached to their resolved services."""
    return [
        MovieStreamingPlatform(
            service_id=platform.service_id,
            service=services[platform.service_id],
            url=platform.url,
            position=position,
        )
        for position, platform in enumerate(platforms)
    ]


def search_params(
    q: str | None = Query(None, max_length=200, description="Text in title, director, description or cast"),
    genre: str | None = Query(None, max_length=50, description="Exact genre"),
    year: int | None = Query(None, description="Exact release year"),
    min_rating: float | None = Query(None, ge=0, le=10, description="Minimum rating"),
) -> MovieFilters:
    return MovieFilters(q=q, genre=genre, year=year, min_rating=min_rating)


@router.get("", response_model=list[MovieResponse])
async def list_movies(
    filters: MovieFilters = Depends(search_params),
    sort: MovieSort = Query(MovieSort.NEWEST, description="Sort order"),
    db: AsyncSession = Depends(get_db),
) -> list[MovieResponse]:
    """List movies, newest first unless another sort order is given.

    Accepts the same optional filters as /search.
    """
    movies = await search_movies(db, filters, sort)
    return [MovieResponse.model_validate(movie) for movie in movies]


@router.get("/search", response_model=list[MovieResponse])
async def search(
    filters: MovieFilters = Depends(search_params),
    sort: MovieSort = Query(MovieSort.NEWEST, description="Sort order"),
    db: AsyncSession = Depends(get_db),
) -> list[MovieResponse]:
    """Search movies.

    Every supplied filter must match. The text query matches case-insensitively
    against the title, director, description or any cast member.
    """
    movies = await search_movies(db, filters, sort)
    logger.info("Search %s matched %d movies", filters, len(movies))
    return [MovieResponse.model_validate(movie) for movie in movies]


@router.get("/genres", response_model=list[str])
async def get_genres(db: AsyncSession = Depends(get_db)) -> list[str]:
    """Genres that at least one movie is tagged with."""
    return await list_genres(db)


@router.get("/genre/{genre}", response_model=list[MovieResponse])
async def get_movies_by_genre(
    genre: str,
    db: AsyncSession = Depends(get_db),
) -> list[MovieResponse]:
    """Movies tagged with the given genre, newest first."""
    movies = await search_movies(db, MovieFilters(genre=genre))
    return [MovieResponse.model_validate(movie) for movie in movies]


@router.get("/featured", response_model=MovieResponse)
async def get_movie_of_the_week(db: AsyncSession = Depends(get_db)) -> MovieResponse:
    """Get the movie of the week.

    Raises:
        NotFoundError (404): If no movie is featured
    """
    result = await db.execute(select(Movie).where(Movie.movie_of_the_week.is_(True)))
    movie = result.scalars().first()
    if movie is None:
        raise NotFoundError("No movie of the week set")
    return MovieResponse.model_validate(movie)


@router.get("/{movie_id}", response_model=MovieResponse)
async def get_movie(movie_id: int, db: AsyncSession = Depends(get_db)) -> MovieResponse:
    """Get a single movie with its streaming platforms."""
    movie = await require_movie(db, movie_id)
    return MovieResponse.model_validate(movie)


@router.post("", response_model=MovieResponse, status_code=201)
async def create_movie(
    admin: AdminUser,
    movie_data: MovieCreate,
    db: AsyncSession = Depends(get_db),
) -> MovieResponse:
    """Create a movie. Admin only.

    If movie_of_the_week is set, the flag is removed from every other movie.

    Raises:
        InvalidServiceReferenceError (400): If a streaming platform names an unknown service
    """
    services = await validate_service_references(db, movie_data.streaming_platforms)

    now = datetime.now(UTC)
    fields = movie_data.model_dump(
        mode="json", exclude={"streaming_platforms", "movie_of_the_week"}
    )
    movie = Movie(**fields, movie_of_the_week=False, created_at=now, updated_at=now)
    movie.streaming_platforms = build_platforms(movie_data.streaming_platforms, services)
    db.add(movie)
    await db.flush()

    if movie_data.movie_of_the_week:
        await set_movie_of_the_week(db, movie)

    logger.info("Admin %s created movie %s (%s)", admin.id, movie.id, movie.title)
    return MovieResponse.model_validate(movie)


@router.put("/{movie_id}", response_model=MovieResponse)
async def update_movie(
    movie_id: int,
    admin: AdminUser,
    movie_data: MovieUpdate,
    db: AsyncSession = Depends(get_db),
) -> MovieResponse:
    """Update a movie. Admin only. Only fields present in the body change.

    Setting movie_of_the_week to true clears it on every other movie in the
    same transaction.

    Raises:
        NotFoundError (404): If the movie does not exist
        InvalidServiceReferenceError (400): If a streaming platform names an unknown service
        MovieOfTheWeekConflictError (409): If another movie was featured concurrently
    """
    movie = await require_movie(db, movie_id)

    changes = movie_data.model_dump(mode="json", exclude_unset=True)
    changes.pop("streaming_platforms", None)
    featured = changes.pop("movie_of_the_week", None)

    if movie_data.streaming_platforms is not None:
        services = await validate_service_references(db, movie_data.streaming_platforms)
        movie.streaming_platforms = build_platforms(movie_data.streaming_platforms, services)

    for field, value in changes.items():
        setattr(movie, field, value)
    movie.updated_at = datetime.now(UTC)

    if featured is True:
        await set_movie_of_the_week(db, movie)
    elif featured is False:
        movie.movie_of_the_week = False

    await db.flush()

    logger.info("Admin %s updated movie %s", admin.id, movie.id)
    return MovieResponse.model_validate(movie)


@router.delete("/{movie_id}", status_code=204)
async def delete_movie(
    movie_id: int,
    admin: AdminUser,
    db: AsyncSession = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
) -> None:
    """Delete a movie. Admin only.

    Reviews, watchlist entries and homepage section references to the movie
    are kept; read paths skip or null them.
    """
    movie = await require_movie(db, movie_id)
    images = [movie.portrait_image, movie.landscape_image]

    await db.delete(movie)
    await db.flush()

    for image in images:
        await storage.delete(image)

    logger.info("Admin %s deleted movie %s", admin.id, movie_id)


@router.put("/{movie_id}/images/{kind}", response_model=MovieResponse)
async def upload_movie_image(
    movie_id: int,
    kind: ImageKind,
    admin: AdminUser,
    file: UploadFile = File(..., description="Image file (max 5MB)"),
    db: AsyncSession = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
) -> MovieResponse:
    """Upload or replace a movie's portrait or landscape image. Admin only.

    Raises:
        InvalidUploadError (400): If the file is not an image
        FileTooLargeError (400): If the file exceeds the size limit
    """
    movie = await require_movie(db, movie_id)

    attribute = f"{kind.value}_image"
    path = await storage.save_image(
        file,
        prefix=f"{kind.value}Image",
        max_bytes=get_settings().max_image_size,
    )

    old_path = getattr(movie, attribute)
    setattr(movie, attribute, path)
    movie.updated_at = datetime.now(UTC)
    await db.flush()

    await storage.delete(old_path)

    logger.info("Admin %s set %s image of movie %s", admin.id, kind.value, movie.id)
    return MovieResponse.model_validate(movie)

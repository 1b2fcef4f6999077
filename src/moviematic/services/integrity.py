"""Uniqueness and referential integrity rules.

Every check here is an optimistic pre-check. The unique indexes declared on
the models are the authoritative backstop: when a concurrent request slips
past a pre-check, the store rejects the write with an ``IntegrityError`` and
it is translated into the same domain error the pre-check raises.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from moviematic.exceptions import (
    AlreadyInWatchlistError,
    DuplicateReviewError,
    DuplicateServiceNameError,
    InvalidMovieReferenceError,
    InvalidServiceReferenceError,
    MovieOfTheWeekConflictError,
    NotFoundError,
)
from moviematic.models.enums import WatchlistStatus
from moviematic.models.movie import Movie
from moviematic.models.review import Review
from moviematic.models.streaming_service import StreamingService, service_name_key
from moviematic.models.watchlist import Watchlist
from moviematic.schemas.movie import StreamingPlatformIn

logger = logging.getLogger(__name__)


async def get_movie_or_none(db: AsyncSession, movie_id: int) -> Movie | None:
    result = await db.execute(select(Movie).where(Movie.id == movie_id))
    return result.scalar_one_or_none()


async def require_movie(db: AsyncSession, movie_id: int) -> Movie:
    """Load a movie or raise NotFoundError."""
    movie = await get_movie_or_none(db, movie_id)
    if movie is None:
        raise NotFoundError("Movie not found", code="MOVIE_NOT_FOUND")
    return movie


async def _flush_or_raise(db: AsyncSession, error: Exception) -> None:
    """Flush pending writes, turning a unique index violation into ``error``."""
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        raise error from e


# Reviews


async def ensure_no_active_review(db: AsyncSession, user_id: int, movie_id: int) -> None:
    """Raise DuplicateReviewError if the user already has an active review of the movie."""
    query = select(Review.id).where(
        Review.user_id == user_id,
        Review.movie_id == movie_id,
        Review.is_active.is_(True),
    )
    result = await db.execute(query)
    if result.scalar_one_or_none() is not None:
        raise DuplicateReviewError()


async def create_or_reactivate_review(
    db: AsyncSession,
    user_id: int,
    movie_id: int,
    rating: int,
    review_text: str,
) -> Review:
    """Create the user's review of a movie.

    The unique index covers soft-deleted rows too, so a user who deleted their
    review and reviews again gets the old row back with the new content.

    Raises:
        DuplicateReviewError: If an active review already exists
    """
    await ensure_no_active_review(db, user_id, movie_id)

    now = datetime.now(UTC)
    existing_query = select(Review).where(Review.user_id == user_id, Review.movie_id == movie_id)
    existing_result = await db.execute(existing_query)
    review = existing_result.scalar_one_or_none()

    if review is not None:
        review.rating = rating
        review.review_text = review_text
        review.is_active = True
        review.created_at = now
        review.updated_at = now
    else:
        review = Review(
            user_id=user_id,
            movie_id=movie_id,
            rating=rating,
            review_text=review_text,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        db.add(review)

    await _flush_or_raise(db, DuplicateReviewError())
    return review


# Watchlist


async def ensure_not_in_watchlist(db: AsyncSession, user_id: int, movie_id: int) -> None:
    """Raise AlreadyInWatchlistError if the movie is already on the user's watchlist."""
    query = select(Watchlist.id).where(
        Watchlist.user_id == user_id,
        Watchlist.movie_id == movie_id,
    )
    result = await db.execute(query)
    if result.scalar_one_or_none() is not None:
        raise AlreadyInWatchlistError()


async def add_to_watchlist(
    db: AsyncSession,
    user_id: int,
    movie_id: int,
    status: WatchlistStatus = WatchlistStatus.WANT_TO_WATCH,
) -> Watchlist:
    """Add a movie to a user's watchlist.

    Raises:
        AlreadyInWatchlistError: If the entry exists, including when a
            concurrent request inserted it first
    """
    await ensure_not_in_watchlist(db, user_id, movie_id)

    now = datetime.now(UTC)
    item = Watchlist(
        user_id=user_id,
        movie_id=movie_id,
        status=status.value,
        rating=None,
        notes="",
        added_at=now,
        updated_at=now,
    )
    db.add(item)
    await _flush_or_raise(db, AlreadyInWatchlistError())
    return item


# Homepage sections


async def validate_movie_references(db: AsyncSession, movie_ids: Sequence[int]) -> list[Movie]:
    """Resolve every movie id, in the requested order.

    Raises:
        InvalidMovieReferenceError: If any id does not match an existing movie
    """
    requested = list(movie_ids)
    result = await db.execute(select(Movie).where(Movie.id.in_(requested)))
    movies_by_id = {movie.id: movie for movie in result.scalars().all()}

    if len(movies_by_id) != len(set(requested)):
        invalid = [movie_id for movie_id in set(requested) if movie_id not in movies_by_id]
        raise InvalidMovieReferenceError(invalid, requested=len(requested), resolved=len(movies_by_id))

    return [movies_by_id[movie_id] for movie_id in requested]


# Streaming services


async def validate_service_references(
    db: AsyncSession, platforms: Iterable[StreamingPlatformIn]
) -> dict[int, StreamingService]:
    """Resolve the streaming services referenced by a movie's platforms.

    Raises:
        InvalidServiceReferenceError: If any service id does not exist
    """
    service_ids = {platform.service_id for platform in platforms}
    if not service_ids:
        return {}

    result = await db.execute(select(StreamingService).where(StreamingService.id.in_(service_ids)))
    services = {service.id: service for service in result.scalars().all()}

    missing = service_ids - services.keys()
    if missing:
        raise InvalidServiceReferenceError(list(missing))

    return services


async def ensure_unique_service_name(
    db: AsyncSession, name: str, exclude_id: int | None = None
) -> None:
    """Raise DuplicateServiceNameError if another service has this name, ignoring case."""
    query = select(StreamingService.id).where(StreamingService.name_key == service_name_key(name))
    if exclude_id is not None:
        query = query.where(StreamingService.id != exclude_id)

    result = await db.execute(query)
    if result.first() is not None:
        raise DuplicateServiceNameError()


async def save_streaming_service(db: AsyncSession, service: StreamingService) -> StreamingService:
    """Flush a new or renamed service, mapping the name_key unique violation."""
    await _flush_or_raise(db, DuplicateServiceNameError())
    return service


# Movie of the week


async def set_movie_of_the_week(db: AsyncSession, movie: Movie) -> Movie:
    """Make ``movie`` the only featured movie.

    Clearing the other movies and setting the flag happen in the request's
    transaction and commit together. If a concurrent request featured a
    different movie first, the partial unique index rejects this write and
    the whole transaction is rolled back, leaving the other movie featured.

    Raises:
        MovieOfTheWeekConflictError: On a concurrent featured-movie write (retryable)
    """
    now = datetime.now(UTC)
    await db.execute(
        update(Movie)
        .where(Movie.movie_of_the_week.is_(True), Movie.id != movie.id)
        .values(movie_of_the_week=False, updated_at=now)
    )
    movie.movie_of_the_week = True
    movie.updated_at = now

    await _flush_or_raise(db, MovieOfTheWeekConflictError())
    logger.info("Movie of the week is now %s (id=%s)", movie.title, movie.id)
    return movie

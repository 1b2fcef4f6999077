"""Review API endpoints."""

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from moviematic.database import get_db
from moviematic.exceptions import NotFoundError, PermissionDeniedError
from moviematic.models.movie import Movie
from moviematic.models.review import Review
from moviematic.models.user import User
from moviematic.schemas.movie import MovieSummary
from moviematic.schemas.review import (
    MessageResponse,
    Reviewer,
    ReviewCreate,
    ReviewResponse,
    ReviewStatsResponse,
    ReviewUpdate,
    UserReviewResponse,
)
from moviematic.services.integrity import create_or_reactivate_review, require_movie
from moviematic.services.stats import get_review_stats
from moviematic.utils.security import CurrentUser

router = APIRouter(prefix="/reviews", tags=["reviews"])


def review_to_response(review: Review, user: User | None) -> ReviewResponse:
    """Convert a Review model to ReviewResponse, attaching the author if known."""
    return ReviewResponse(
        id=review.id,
        movie_id=review.movie_id,
        user_id=review.user_id,
        rating=review.rating,
        review_text=review.review_text,
        created_at=review.created_at,
        updated_at=review.updated_at,
        user=Reviewer.model_validate(user) if user else None,
    )


async def load_users(db: AsyncSession, user_ids: Iterable[int]) -> dict[int, User]:
    ids = set(user_ids)
    if not ids:
        return {}
    result = await db.execute(select(User).where(User.id.in_(ids)))
    return {user.id: user for user in result.scalars().all()}


async def load_movies(db: AsyncSession, movie_ids: Iterable[int]) -> dict[int, Movie]:
    ids = set(movie_ids)
    if not ids:
        return {}
    result = await db.execute(select(Movie).where(Movie.id.in_(ids)))
    return {movie.id: movie for movie in result.scalars().all()}


def ensure_own_user(current_user: User, user_id: int) -> None:
    """Users can only read their own review listings."""
    if current_user.id != user_id:
        raise PermissionDeniedError()


async def get_owned_active_review(db: AsyncSession, review_id: int, user_id: int) -> Review:
    query = select(Review).where(
        Review.id == review_id,
        Review.user_id == user_id,
        Review.is_active.is_(True),
    )
    result = await db.execute(query)
    review = result.scalar_one_or_none()
    if review is None:
        raise NotFoundError("Review not found or access denied")
    return review


@router.get("/movie/{movie_id}", response_model=list[ReviewResponse])
async def list_movie_reviews(
    movie_id: int,
    db: AsyncSession = Depends(get_db),
) -> list[ReviewResponse]:
    """List a movie's active reviews, newest first."""
    query = (
        select(Review)
        .where(Review.movie_id == movie_id, Review.is_active.is_(True))
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    result = await db.execute(query)
    reviews: Sequence[Review] = result.scalars().all()

    users = await load_users(db, (review.user_id for review in reviews))
    return [review_to_response(review, users.get(review.user_id)) for review in reviews]


@router.get("/movie/{movie_id}/stats", response_model=ReviewStatsResponse)
async def movie_review_stats(
    movie_id: int,
    db: AsyncSession = Depends(get_db),
) -> ReviewStatsResponse:
    """Average rating, review count and per-star distribution over active reviews."""
    stats = await get_review_stats(db, movie_id)
    return ReviewStatsResponse(
        average_rating=stats.average_rating,
        total_reviews=stats.total_reviews,
        rating_distribution=stats.rating_distribution,
    )


@router.get("/movie/{movie_id}/user/{user_id}", response_model=ReviewResponse | None)
async def get_user_review_for_movie(
    movie_id: int,
    user_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> ReviewResponse | None:
    """Get the current user's active review of a movie, or null."""
    ensure_own_user(current_user, user_id)

    query = select(Review).where(
        Review.movie_id == movie_id,
        Review.user_id == user_id,
        Review.is_active.is_(True),
    )
    result = await db.execute(query)
    review = result.scalar_one_or_none()
    if review is None:
        return None
    return review_to_response(review, current_user)


@router.get("/user/{user_id}", response_model=list[UserReviewResponse])
async def list_user_reviews(
    user_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> list[UserReviewResponse]:
    """List the current user's active reviews with the reviewed movies, newest first."""
    ensure_own_user(current_user, user_id)

    query = (
        select(Review)
        .where(Review.user_id == user_id, Review.is_active.is_(True))
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    result = await db.execute(query)
    reviews = result.scalars().all()

    movies = await load_movies(db, (review.movie_id for review in reviews))
    return [
        UserReviewResponse(
            id=review.id,
            movie_id=review.movie_id,
            rating=review.rating,
            review_text=review.review_text,
            created_at=review.created_at,
            updated_at=review.updated_at,
            movie=MovieSummary.model_validate(movies[review.movie_id])
            if review.movie_id in movies
            else None,
        )
        for review in reviews
    ]


@router.post("", response_model=ReviewResponse, status_code=201)
async def create_review(
    current_user: CurrentUser,
    review_data: ReviewCreate,
    db: AsyncSession = Depends(get_db),
) -> ReviewResponse:
    """Review a movie.

    Raises:
        NotFoundError (404): If the movie does not exist
        DuplicateReviewError (409): If the user already has an active review of it
    """
    await require_movie(db, review_data.movie_id)

    review = await create_or_reactivate_review(
        db,
        user_id=current_user.id,
        movie_id=review_data.movie_id,
        rating=review_data.rating,
        review_text=review_data.review_text,
    )
    return review_to_response(review, current_user)


@router.put("/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_id: int,
    current_user: CurrentUser,
    review_data: ReviewUpdate,
    db: AsyncSession = Depends(get_db),
) -> ReviewResponse:
    """Edit one of the current user's active reviews."""
    review = await get_owned_active_review(db, review_id, current_user.id)

    review.rating = review_data.rating
    review.review_text = review_data.review_text
    review.updated_at = datetime.now(UTC)
    await db.flush()

    return review_to_response(review, current_user)


@router.delete("/{review_id}", response_model=MessageResponse)
async def delete_review(
    review_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Soft-delete one of the current user's reviews.

    The row is kept with is_active=false and drops out of listings and stats.
    """
    review = await get_owned_active_review(db, review_id, current_user.id)

    review.is_active = False
    review.updated_at = datetime.now(UTC)
    await db.flush()

    return MessageResponse(message="Review deleted successfully")

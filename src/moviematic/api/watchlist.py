"""Watchlist API endpoints.

Every endpoint acts on the current user's own watchlist.
"""

import math
from collections.abc import Iterable
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from moviematic.database import get_db
from moviematic.exceptions import NotInWatchlistError
from moviematic.models.enums import WatchlistStatus
from moviematic.models.movie import Movie
from moviematic.models.watchlist import Watchlist
from moviematic.schemas.movie import MovieSummary
from moviematic.schemas.review import MessageResponse
from moviematic.schemas.watchlist import (
    WatchlistAdd,
    WatchlistCheckResponse,
    WatchlistItemResponse,
    WatchlistListResponse,
    WatchlistPagination,
    WatchlistStatsResponse,
    WatchlistUpdate,
)
from moviematic.services.integrity import add_to_watchlist, require_movie
from moviematic.services.stats import get_watchlist_stats
from moviematic.utils.security import CurrentUser

router = APIRouter(prefix="/watchlist", tags=["watchlist"])


def item_to_response(item: Watchlist, movie: Movie | None) -> WatchlistItemResponse:
    """Convert a Watchlist model to WatchlistItemResponse.

    ``movie`` is None when the referenced movie has been deleted.
    """
    return WatchlistItemResponse(
        id=item.id,
        movie_id=item.movie_id,
        status=item.status,
        rating=item.rating,
        notes=item.notes,
        added_at=item.added_at,
        updated_at=item.updated_at,
        movie=MovieSummary.model_validate(movie) if movie else None,
    )


async def load_movies(db: AsyncSession, movie_ids: Iterable[int]) -> dict[int, Movie]:
    ids = set(movie_ids)
    if not ids:
        return {}
    result = await db.execute(select(Movie).where(Movie.id.in_(ids)))
    return {movie.id: movie for movie in result.scalars().all()}


async def get_item(db: AsyncSession, user_id: int, movie_id: int) -> Watchlist | None:
    query = select(Watchlist).where(Watchlist.user_id == user_id, Watchlist.movie_id == movie_id)
    result = await db.execute(query)
    return result.scalar_one_or_none()


@router.get("", response_model=WatchlistListResponse)
async def list_watchlist(
    current_user: CurrentUser,
    status: WatchlistStatus | None = Query(None, description="Filter by status"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    db: AsyncSession = Depends(get_db),
) -> WatchlistListResponse:
    """List the current user's watchlist, most recently added first."""
    base_query = select(Watchlist).where(Watchlist.user_id == current_user.id)
    if status is not None:
        base_query = base_query.where(Watchlist.status == status.value)

    # Get total count
    count_query = select(func.count()).select_from(base_query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar_one()

    offset = (page - 1) * limit
    results_query = (
        base_query.order_by(Watchlist.added_at.desc(), Watchlist.id.desc())
        .offset(offset)
        .limit(limit)
    )
    results = await db.execute(results_query)
    items = results.scalars().all()

    movies = await load_movies(db, (item.movie_id for item in items))
    return WatchlistListResponse(
        items=[item_to_response(item, movies.get(item.movie_id)) for item in items],
        pagination=WatchlistPagination(
            current=page,
            pages=math.ceil(total / limit),
            total=total,
        ),
    )


@router.post("/add", response_model=WatchlistItemResponse, status_code=201)
async def add_movie(
    current_user: CurrentUser,
    item_data: WatchlistAdd,
    db: AsyncSession = Depends(get_db),
) -> WatchlistItemResponse:
    """Add a movie to the current user's watchlist.

    Raises:
        NotFoundError (404): If the movie does not exist
        AlreadyInWatchlistError (409): If the movie is already on the watchlist
    """
    movie = await require_movie(db, item_data.movie_id)
    item = await add_to_watchlist(db, current_user.id, movie.id, item_data.status)
    return item_to_response(item, movie)


@router.put("/update/{movie_id}", response_model=WatchlistItemResponse)
async def update_item(
    movie_id: int,
    current_user: CurrentUser,
    item_data: WatchlistUpdate,
    db: AsyncSession = Depends(get_db),
) -> WatchlistItemResponse:
    """Update status, personal rating or notes of a watchlist entry.

    Raises:
        NotInWatchlistError (404): If the movie is not on the watchlist
    """
    item = await get_item(db, current_user.id, movie_id)
    if item is None:
        raise NotInWatchlistError()

    changes = item_data.model_dump(mode="json", exclude_unset=True)
    for field, value in changes.items():
        setattr(item, field, value)
    if changes:
        item.updated_at = datetime.now(UTC)
        await db.flush()

    movies = await load_movies(db, [item.movie_id])
    return item_to_response(item, movies.get(item.movie_id))


@router.delete("/remove/{movie_id}", response_model=MessageResponse)
async def remove_movie(
    movie_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Remove a movie from the current user's watchlist.

    Raises:
        NotInWatchlistError (404): If the movie is not on the watchlist
    """
    item = await get_item(db, current_user.id, movie_id)
    if item is None:
        raise NotInWatchlistError()

    await db.delete(item)
    await db.flush()
    return MessageResponse(message="Movie removed from watchlist successfully")


@router.get("/check/{movie_id}", response_model=WatchlistCheckResponse)
async def check_movie(
    movie_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> WatchlistCheckResponse:
    """Tell whether a movie is on the current user's watchlist."""
    item = await get_item(db, current_user.id, movie_id)
    if item is None:
        return WatchlistCheckResponse(in_watchlist=False, item=None)

    movies = await load_movies(db, [item.movie_id])
    return WatchlistCheckResponse(
        in_watchlist=True,
        item=item_to_response(item, movies.get(item.movie_id)),
    )


@router.get("/stats", response_model=WatchlistStatsResponse)
async def watchlist_stats(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> WatchlistStatsResponse:
    """Count the current user's watchlist entries, overall and per status."""
    stats = await get_watchlist_stats(db, current_user.id)
    return WatchlistStatsResponse(total=stats.total, by_status=stats.by_status)

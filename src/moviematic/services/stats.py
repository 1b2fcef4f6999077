"""Review and watchlist statistics."""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from moviematic.models.enums import WatchlistStatus
from moviematic.models.review import Review
from moviematic.models.watchlist import Watchlist

RATING_VALUES = range(1, 6)


@dataclass(frozen=True)
class ReviewStats:
    average_rating: float
    total_reviews: int
    rating_distribution: dict[int, int] = field(default_factory=dict)


@dataclass(frozen=True)
class WatchlistStats:
    total: int
    by_status: dict[WatchlistStatus, int] = field(default_factory=dict)


def round_half_up(value: float, digits: int = 1) -> float:
    """Round to ``digits`` decimals with halves going up (4.25 -> 4.3)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def summarize_ratings(counts: Mapping[int, int]) -> ReviewStats:
    """Build review stats from a {rating: number of reviews} mapping.

    The distribution always has keys 1 to 5. With no reviews the average is 0.
    """
    distribution = {rating: 0 for rating in RATING_VALUES}
    for rating, count in counts.items():
        distribution[int(rating)] = distribution.get(int(rating), 0) + count

    total = sum(distribution.values())
    if total == 0:
        return ReviewStats(average_rating=0, total_reviews=0, rating_distribution=distribution)

    average = sum(rating * count for rating, count in distribution.items()) / total
    return ReviewStats(
        average_rating=round_half_up(average),
        total_reviews=total,
        rating_distribution=distribution,
    )


def summarize_watchlist(counts: Mapping[str, int]) -> WatchlistStats:
    """Build watchlist stats from a {status: count} mapping, zero-filling missing statuses."""
    by_status = {status: 0 for status in WatchlistStatus}
    for status, count in counts.items():
        by_status[WatchlistStatus(status)] += count
    return WatchlistStats(total=sum(by_status.values()), by_status=by_status)


async def get_review_stats(db: AsyncSession, movie_id: int) -> ReviewStats:
    """Compute rating statistics over a movie's active reviews."""
    query = (
        select(Review.rating, func.count())
        .where(Review.movie_id == movie_id, Review.is_active.is_(True))
        .group_by(Review.rating)
    )
    result = await db.execute(query)
    return summarize_ratings({rating: count for rating, count in result.all()})


async def get_watchlist_stats(db: AsyncSession, user_id: int) -> WatchlistStats:
    """Count a user's watchlist entries per status."""
    query = (
        select(Watchlist.status, func.count())
        .where(Watchlist.user_id == user_id)
        .group_by(Watchlist.status)
    )
    result = await db.execute(query)
    return summarize_watchlist({status: count for status, count in result.all()})

"""Tests for review and watchlist statistics."""

from datetime import UTC, datetime

import pytest

from moviematic.models import Review, WatchlistStatus
from moviematic.services.stats import (
    get_review_stats,
    round_half_up,
    summarize_ratings,
    summarize_watchlist,
)


class TestRoundHalfUp:
    """Tests for one-decimal rounding."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(4.25, 4.3), (4.24, 4.2), (2.5, 2.5), (3.0, 3.0), (1.05, 1.1), (0.0, 0.0)],
    )
    def test_rounding(self, value: float, expected: float) -> None:
        assert round_half_up(value) == expected


class TestSummarizeRatings:
    """Tests for the review aggregation."""

    def test_example_distribution(self) -> None:
        stats = summarize_ratings({5: 2, 4: 1, 3: 1})

        assert stats.average_rating == 4.3
        assert stats.total_reviews == 4
        assert stats.rating_distribution == {1: 0, 2: 0, 3: 1, 4: 1, 5: 2}

    def test_no_reviews(self) -> None:
        stats = summarize_ratings({})

        assert stats.average_rating == 0
        assert stats.total_reviews == 0
        assert stats.rating_distribution == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}

    def test_single_review(self) -> None:
        stats = summarize_ratings({1: 1})

        assert stats.average_rating == 1.0
        assert stats.total_reviews == 1


class TestSummarizeWatchlist:
    """Tests for the watchlist counters."""

    def test_missing_statuses_are_zero(self) -> None:
        stats = summarize_watchlist({"watched": 3})

        assert stats.total == 3
        assert stats.by_status == {
            WatchlistStatus.WANT_TO_WATCH: 0,
            WatchlistStatus.WATCHING: 0,
            WatchlistStatus.WATCHED: 3,
        }


class TestReviewStatsQuery:
    """Tests for the database-backed review stats."""

    async def test_inactive_reviews_are_excluded(self, session_factory, create_user) -> None:
        now = datetime.now(UTC)
        users = [await create_user(email=f"u{i}@example.com") for i in range(3)]
        async with session_factory() as session:
            for user, rating, active in zip(users, [5, 1, 3], [True, False, True], strict=True):
                session.add(
                    Review(
                        user_id=user.id,
                        movie_id=7,
                        rating=rating,
                        review_text="text",
                        is_active=active,
                        created_at=now,
                        updated_at=now,
                    )
                )
            await session.commit()

        async with session_factory() as session:
            stats = await get_review_stats(session, 7)

        assert stats.total_reviews == 2
        assert stats.average_rating == 4.0
        assert stats.rating_distribution[1] == 0

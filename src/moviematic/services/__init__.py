"""Domain services: integrity rules, statistics, search and file storage."""

from moviematic.services.search import MovieFilters, MovieSort, search_movies
from moviematic.services.stats import (
    ReviewStats,
    WatchlistStats,
    get_review_stats,
    get_watchlist_stats,
)
from moviematic.services.storage import ImageStorage, get_image_storage

__all__ = [
    "ImageStorage",
    "MovieFilters",
    "MovieSort",
    "ReviewStats",
    "WatchlistStats",
    "get_image_storage",
    "get_review_stats",
    "get_watchlist_stats",
    "search_movies",
]

"""SQLAlchemy ORM models."""

from moviematic.models.enums import Genre, UserRole, WatchlistStatus
from moviematic.models.homepage_section import HomepageSection
from moviematic.models.movie import Movie, MovieStreamingPlatform
from moviematic.models.review import Review
from moviematic.models.streaming_service import StreamingService
from moviematic.models.user import User
from moviematic.models.watchlist import Watchlist

__all__ = [
    "Genre",
    "HomepageSection",
    "Movie",
    "MovieStreamingPlatform",
    "Review",
    "StreamingService",
    "User",
    "UserRole",
    "Watchlist",
    "WatchlistStatus",
]

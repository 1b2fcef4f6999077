"""Pydantic schemas for request/response validation."""

from moviematic.schemas.homepage_section import (
    AvailableMovie,
    HomepageSectionCreate,
    HomepageSectionResponse,
    HomepageSectionUpdate,
)
from moviematic.schemas.movie import (
    MovieCreate,
    MovieResponse,
    MovieSummary,
    MovieUpdate,
    StreamingPlatformIn,
    StreamingPlatformResponse,
)
from moviematic.schemas.review import (
    MessageResponse,
    ReviewCreate,
    ReviewResponse,
    ReviewStatsResponse,
    ReviewUpdate,
    UserReviewResponse,
)
from moviematic.schemas.streaming_service import (
    StreamingServiceCreate,
    StreamingServiceResponse,
    StreamingServiceUpdate,
)
from moviematic.schemas.user import (
    AuthResponse,
    PasswordChange,
    ProfileUpdate,
    RefreshRequest,
    TokenPair,
    UserCreate,
    UserLogin,
    UserResponse,
    UserStatusUpdate,
)
from moviematic.schemas.watchlist import (
    WatchlistAdd,
    WatchlistCheckResponse,
    WatchlistItemResponse,
    WatchlistListResponse,
    WatchlistStatsResponse,
    WatchlistUpdate,
)

__all__ = [
    # Auth schemas
    "AuthResponse",
    "PasswordChange",
    "ProfileUpdate",
    "RefreshRequest",
    "TokenPair",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "UserStatusUpdate",
    # Movie schemas
    "MovieCreate",
    "MovieUpdate",
    "MovieResponse",
    "MovieSummary",
    "StreamingPlatformIn",
    "StreamingPlatformResponse",
    # Review schemas
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "UserReviewResponse",
    "ReviewStatsResponse",
    "MessageResponse",
    # Watchlist schemas
    "WatchlistAdd",
    "WatchlistUpdate",
    "WatchlistItemResponse",
    "WatchlistListResponse",
    "WatchlistCheckResponse",
    "WatchlistStatsResponse",
    # Streaming service schemas
    "StreamingServiceCreate",
    "StreamingServiceUpdate",
    "StreamingServiceResponse",
    # Homepage section schemas
    "HomepageSectionCreate",
    "HomepageSectionUpdate",
    "HomepageSectionResponse",
    "AvailableMovie",
]

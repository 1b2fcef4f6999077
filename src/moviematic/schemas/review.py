"""Pydantic schemas for review API endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from moviematic.schemas.movie import MovieSummary


class ReviewCreate(BaseModel):
    """Schema for reviewing a movie."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    movie_id: int = Field(ge=1, description="Movie being reviewed")
    rating: int = Field(ge=1, le=5, description="Star rating (1-5)")
    review_text: str = Field(min_length=1, max_length=1000, description="Review body")


class ReviewUpdate(BaseModel):
    """Schema for editing a review. Both fields are required."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    rating: int = Field(ge=1, le=5, description="Star rating (1-5)")
    review_text: str = Field(min_length=1, max_length=1000, description="Review body")


class Reviewer(BaseModel):
    """Public info about a review's author."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str


class ReviewResponse(BaseModel):
    """A review with its author."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    movie_id: int
    user_id: int
    rating: int
    review_text: str
    created_at: datetime
    updated_at: datetime
    user: Reviewer | None = Field(default=None, description="Review author")


class UserReviewResponse(BaseModel):
    """A review in a user's own review list, with the reviewed movie."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    movie_id: int
    rating: int
    review_text: str
    created_at: datetime
    updated_at: datetime
    movie: MovieSummary | None = Field(default=None, description="Null if the movie was deleted")


class ReviewStatsResponse(BaseModel):
    """Aggregate rating statistics for a movie's active reviews."""

    average_rating: float = Field(description="Average rating rounded to one decimal")
    total_reviews: int = Field(description="Number of active reviews")
    rating_distribution: dict[int, int] = Field(description="Review count per star (1-5)")


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str

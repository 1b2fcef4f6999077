"""Pydantic schemas for watchlist API endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from moviematic.models.enums import WatchlistStatus
from moviematic.schemas.movie import MovieSummary


class WatchlistAdd(BaseModel):
    """Schema for adding a movie to the current user's watchlist."""

    model_config = ConfigDict(extra="forbid")

    movie_id: int = Field(ge=1, description="Movie to add")
    status: WatchlistStatus = Field(default=WatchlistStatus.WANT_TO_WATCH)


class WatchlistUpdate(BaseModel):
    """Schema for updating a watchlist entry.

    Only fields sent are changed. ``rating`` may be sent as null to clear it.
    """

    model_config = ConfigDict(extra="forbid")

    status: WatchlistStatus | None = None
    rating: int | None = Field(default=None, ge=1, le=10, description="Personal rating (1-10)")
    notes: str | None = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def reject_null_status_or_notes(self) -> "WatchlistUpdate":
        for name in ("status", "notes"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class WatchlistItemResponse(BaseModel):
    """A watchlist entry with the movie it refers to."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    movie_id: int
    status: WatchlistStatus
    rating: int | None = None
    notes: str
    added_at: datetime
    updated_at: datetime
    movie: MovieSummary | None = Field(default=None, description="Null if the movie was deleted")


class WatchlistPagination(BaseModel):
    current: int = Field(description="Current page number")
    pages: int = Field(description="Total number of pages")
    total: int = Field(description="Total number of entries")


class WatchlistListResponse(BaseModel):
    """Paginated watchlist."""

    items: list[WatchlistItemResponse] = Field(default_factory=list)
    pagination: WatchlistPagination


class WatchlistCheckResponse(BaseModel):
    in_watchlist: bool
    item: WatchlistItemResponse | None = None


class WatchlistStatsResponse(BaseModel):
    """Watchlist counts; every status is present, zero when unused."""

    total: int
    by_status: dict[WatchlistStatus, int]

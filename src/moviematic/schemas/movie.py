"""Pydantic schemas for movie API endpoints."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from moviematic.models.enums import Genre

MIN_RELEASE_YEAR = 1888

# Columns that may be omitted from an update but never set to null
NON_NULLABLE_UPDATE_FIELDS = frozenset(
    {
        "title",
        "director",
        "release_year",
        "genre",
        "rating",
        "duration",
        "description",
        "cast",
        "language",
        "country",
        "awards",
        "is_released",
        "movie_of_the_week",
        "streaming_platforms",
    }
)


def max_release_year() -> int:
    return datetime.now(UTC).year + 5


def check_release_year(v: int | None) -> int | None:
    if v is not None and not MIN_RELEASE_YEAR <= v <= max_release_year():
        msg = f"Release year must be between {MIN_RELEASE_YEAR} and {max_release_year()}"
        raise ValueError(msg)
    return v


def dedupe_genres(v: list[Genre] | None) -> list[Genre] | None:
    """Genres form a set; keep the first occurrence of each."""
    if v is None:
        return v
    return list(dict.fromkeys(v))


def clean_names(v: list[str] | None) -> list[str] | None:
    """Trim entries and drop empty ones (cast members, awards)."""
    if v is None:
        return v
    return [item.strip() for item in v if item and item.strip()]


class StreamingPlatformIn(BaseModel):
    """A streaming platform entry in a movie write request."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    service_id: int = Field(ge=1, description="Streaming service ID")
    url: str = Field(min_length=1, max_length=500, description="Link to the movie on the service")


class MovieCreate(BaseModel):
    """Schema for creating a movie."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)
    director: str = Field(min_length=1, max_length=255)
    release_year: int = Field(description="Release year (1888 to five years from now)")
    genre: list[Genre] = Field(min_length=1, description="One or more genres")
    rating: float = Field(default=0, ge=0, le=10)
    duration: int = Field(ge=1, le=600, description="Runtime in minutes")
    description: str = Field(min_length=1, max_length=1000)
    cast: list[str] = Field(default_factory=list, description="Cast in billing order")
    language: str = Field(default="English", min_length=1, max_length=100)
    country: str = Field(default="United States", min_length=1, max_length=100)
    budget: int | None = Field(default=None, ge=0)
    box_office: int | None = Field(default=None, ge=0)
    awards: list[str] = Field(default_factory=list)
    is_released: bool = True
    movie_of_the_week: bool = False
    trailer_url: str | None = Field(default=None, max_length=500)
    streaming_platforms: list[StreamingPlatformIn] = Field(default_factory=list)

    @field_validator("release_year")
    @classmethod
    def validate_release_year(cls, v: int | None) -> int | None:
        return check_release_year(v)

    @field_validator("genre")
    @classmethod
    def validate_genre(cls, v: list[Genre] | None) -> list[Genre] | None:
        return dedupe_genres(v)

    @field_validator("cast", "awards")
    @classmethod
    def validate_names(cls, v: list[str] | None) -> list[str] | None:
        return clean_names(v)

    @field_validator("trailer_url")
    @classmethod
    def blank_trailer_is_none(cls, v: str | None) -> str | None:
        return v or None


class MovieUpdate(BaseModel):
    """Schema for a partial movie update. Only fields sent are changed."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=1, max_length=255)
    director: str | None = Field(default=None, min_length=1, max_length=255)
    release_year: int | None = None
    genre: list[Genre] | None = Field(default=None, min_length=1)
    rating: float | None = Field(default=None, ge=0, le=10)
    duration: int | None = Field(default=None, ge=1, le=600)
    description: str | None = Field(default=None, min_length=1, max_length=1000)
    cast: list[str] | None = None
    language: str | None = Field(default=None, min_length=1, max_length=100)
    country: str | None = Field(default=None, min_length=1, max_length=100)
    budget: int | None = Field(default=None, ge=0)
    box_office: int | None = Field(default=None, ge=0)
    awards: list[str] | None = None
    is_released: bool | None = None
    movie_of_the_week: bool | None = None
    trailer_url: str | None = Field(default=None, max_length=500)
    streaming_platforms: list[StreamingPlatformIn] | None = None

    @field_validator("release_year")
    @classmethod
    def validate_release_year(cls, v: int | None) -> int | None:
        return check_release_year(v)

    @field_validator("genre")
    @classmethod
    def validate_genre(cls, v: list[Genre] | None) -> list[Genre] | None:
        return dedupe_genres(v)

    @field_validator("cast", "awards")
    @classmethod
    def validate_names(cls, v: list[str] | None) -> list[str] | None:
        return clean_names(v)

    @field_validator("trailer_url")
    @classmethod
    def blank_trailer_is_none(cls, v: str | None) -> str | None:
        return v or None

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "MovieUpdate":
        nulls = sorted(
            name
            for name in self.model_fields_set & NON_NULLABLE_UPDATE_FIELDS
            if getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return self


class StreamingServiceSummary(BaseModel):
    """Service details embedded in a movie's streaming platforms."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    base_url: str
    icon: str | None = None
    is_active: bool


class StreamingPlatformResponse(BaseModel):
    """A streaming platform entry on a movie."""

    model_config = ConfigDict(from_attributes=True)

    service_id: int = Field(description="Streaming service ID")
    url: str = Field(description="Link to the movie on the service")
    service: StreamingServiceSummary | None = Field(default=None, description="Service details")


class MovieResponse(BaseModel):
    """Full movie details."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    director: str
    release_year: int
    genre: list[str]
    rating: float
    duration: int
    description: str
    cast: list[str]
    language: str
    country: str
    budget: int | None = None
    box_office: int | None = None
    awards: list[str]
    is_released: bool
    movie_of_the_week: bool
    trailer_url: str | None = None
    portrait_image: str | None = None
    landscape_image: str | None = None
    streaming_platforms: list[StreamingPlatformResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class MovieSummary(BaseModel):
    """Compact movie details for watchlists, review listings and pickers."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    director: str
    release_year: int
    duration: int
    rating: float
    genre: list[str]
    description: str
    portrait_image: str | None = None
    landscape_image: str | None = None

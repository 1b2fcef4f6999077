"""Pydantic schemas for homepage section API endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from moviematic.schemas.movie import MovieResponse


def reject_duplicate_ids(v: list[int] | None) -> list[int] | None:
    if v is not None and len(set(v)) != len(v):
        raise ValueError("Movie IDs must not repeat within a section")
    return v


class HomepageSectionCreate(BaseModel):
    """Schema for creating a homepage section."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)
    movie_ids: list[int] = Field(min_length=1, description="Movies in display order")
    order: int = Field(default=0, description="Sort key; lower values come first")
    is_active: bool = True

    @field_validator("movie_ids")
    @classmethod
    def validate_movie_ids(cls, v: list[int]) -> list[int]:
        return reject_duplicate_ids(v)


class HomepageSectionUpdate(BaseModel):
    """Schema for a partial homepage section update."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=1, max_length=255)
    movie_ids: list[int] | None = Field(default=None, min_length=1)
    order: int | None = None
    is_active: bool | None = None

    @field_validator("movie_ids")
    @classmethod
    def validate_movie_ids(cls, v: list[int] | None) -> list[int] | None:
        return reject_duplicate_ids(v)

    @model_validator(mode="after")
    def reject_nulls(self) -> "HomepageSectionUpdate":
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class HomepageSectionResponse(BaseModel):
    """A section with its movies resolved in display order."""

    id: int
    title: str
    movie_ids: list[int]
    order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
    movies: list[MovieResponse] = Field(
        default_factory=list, description="Resolved movies; ids of deleted movies are skipped"
    )


class AvailableMovie(BaseModel):
    """Movie option for the section editor."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    release_year: int
    director: str
    genre: list[str]
    cast: list[str]
    portrait_image: str | None = None

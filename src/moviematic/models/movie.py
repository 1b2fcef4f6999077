"""Movie ORM models."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    BigInteger,
    CheckConstraint,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from moviematic.database import Base, utcnow

if TYPE_CHECKING:
    from moviematic.models.streaming_service import StreamingService


class Movie(Base):
    """A catalog entry managed by admins."""

    __tablename__ = "movies"
    __table_args__ = (
        CheckConstraint("rating >= 0 AND rating <= 10", name="ck_movie_rating_range"),
        CheckConstraint("duration >= 1 AND duration <= 600", name="ck_movie_duration_range"),
        # Backstop for the single featured movie; the write path clears others first
        Index(
            "uq_movies_movie_of_the_week",
            "movie_of_the_week",
            unique=True,
            sqlite_where=text("movie_of_the_week = 1"),
            postgresql_where=text("movie_of_the_week"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255), index=True)
    director: Mapped[str] = mapped_column(String(255))
    release_year: Mapped[int] = mapped_column(index=True)
    genre: Mapped[list[str]] = mapped_column(JSON, default=list)
    rating: Mapped[float] = mapped_column(Float, default=0)
    duration: Mapped[int] = mapped_column()  # minutes
    description: Mapped[str] = mapped_column(Text)
    cast: Mapped[list[str]] = mapped_column(JSON, default=list)
    language: Mapped[str] = mapped_column(String(100), default="English")
    country: Mapped[str] = mapped_column(String(100), default="United States")
    budget: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    box_office: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    awards: Mapped[list[str]] = mapped_column(JSON, default=list)
    is_released: Mapped[bool] = mapped_column(default=True)
    movie_of_the_week: Mapped[bool] = mapped_column(default=False)
    trailer_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    portrait_image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    landscape_image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow)

    # Relationships
    streaming_platforms: Mapped[list[MovieStreamingPlatform]] = relationship(
        back_populates="movie",
        cascade="all, delete-orphan",
        order_by="MovieStreamingPlatform.position",
        lazy="selectin",
    )


class MovieStreamingPlatform(Base):
    """Where a movie can be watched: a streaming service plus a deep link."""

    __tablename__ = "movie_streaming_platforms"

    id: Mapped[int] = mapped_column(primary_key=True)
    movie_id: Mapped[int] = mapped_column(ForeignKey("movies.id", ondelete="CASCADE"), index=True)
    service_id: Mapped[int] = mapped_column(
        ForeignKey("streaming_services.id", ondelete="CASCADE"), index=True
    )
    url: Mapped[str] = mapped_column(String(500))
    position: Mapped[int] = mapped_column(default=0)  # Display order on the movie page

    # Relationships
    movie: Mapped[Movie] = relationship(back_populates="streaming_platforms")
    service: Mapped[StreamingService] = relationship(lazy="selectin")

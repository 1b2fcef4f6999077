"""Watchlist ORM model."""

from datetime import datetime

from sqlalchemy import CheckConstraint, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from moviematic.database import Base, utcnow
from moviematic.models.enums import WatchlistStatus


class Watchlist(Base):
    """A movie on a user's watchlist, with viewing progress."""

    __tablename__ = "watchlists"
    __table_args__ = (
        UniqueConstraint("user_id", "movie_id", name="uq_watchlist_user_movie"),
        CheckConstraint(
            "rating IS NULL OR (rating >= 1 AND rating <= 10)",
            name="ck_watchlist_rating_range",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    # No foreign key: deleting a movie leaves watchlist entries in place
    movie_id: Mapped[int] = mapped_column(index=True)
    status: Mapped[str] = mapped_column(String(20), default=WatchlistStatus.WANT_TO_WATCH.value)
    rating: Mapped[int | None] = mapped_column(nullable=True)
    notes: Mapped[str] = mapped_column(String(500), default="")
    added_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow)

"""Homepage section ORM model."""

from datetime import datetime

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from moviematic.database import Base, utcnow


class HomepageSection(Base):
    """An admin-curated, ordered shelf of movies shown on the landing page.

    ``movie_ids`` keeps the display order. The ids are checked against the
    movies table on every write but are not kept in sync afterwards.
    """

    __tablename__ = "homepage_sections"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255))
    movie_ids: Mapped[list[int]] = mapped_column(JSON, default=list)
    order: Mapped[int] = mapped_column(default=0, index=True)
    is_active: Mapped[bool] = mapped_column(default=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow)

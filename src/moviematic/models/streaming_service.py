"""Streaming service ORM model."""

from datetime import datetime

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from moviematic.database import Base, utcnow


def service_name_key(name: str) -> str:
    """Case-insensitive comparison key for a service name."""
    return name.casefold()


class StreamingService(Base):
    """A streaming provider movies can link to (Netflix, Prime Video, ...)."""

    __tablename__ = "streaming_services"
    __table_args__ = (Index("uq_streaming_services_name_key", "name_key", unique=True),)

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    # Kept in sync with name; SQLite's lower() only folds ASCII
    name_key: Mapped[str] = mapped_column(String(200))
    base_url: Mapped[str] = mapped_column(String(500))
    icon: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow)

    @validates("name")
    def _sync_name_key(self, key: str, name: str) -> str:
        self.name_key = service_name_key(name)
        return name

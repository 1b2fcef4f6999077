"""Database configuration with async SQLAlchemy support."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlalchemy.engine import Dialect
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

from moviematic.config import get_settings


def utcnow() -> datetime:
    return datetime.now(UTC)


class UTCDateTime(TypeDecorator[datetime]):
    """Timestamps stored as naive UTC and always loaded back as aware UTC.

    SQLite has no timezone support, so without this a value written by a
    handler and the same value read back would serialize differently.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(UTC).replace(tzinfo=None)
        return value

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        return value.replace(tzinfo=UTC)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    type_annotation_map = {datetime: UTCDateTime}


settings = get_settings()

# One engine per process; its pool is the only shared state between requests
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
)

catalog_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession]:
    """Yield a session bound to one request's transaction.

    Committed when the handler returns, rolled back if anything raises.
    """
    async with catalog_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

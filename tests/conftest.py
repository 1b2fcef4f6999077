"""Pytest fixtures and configuration."""

import os
import tempfile
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import UTC, datetime
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing the app
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-at-least-32-characters-long")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="moviematic-test-uploads-"))

from moviematic.database import Base, get_db
from moviematic.main import app
from moviematic.models import Movie, StreamingService, User, UserRole
from moviematic.services.storage import ImageStorage, get_image_storage
from moviematic.utils.security import create_access_token, hash_password

TEST_PASSWORD = "securepassword123"


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend for tests."""
    return "asyncio"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory database per test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def storage(tmp_path: Path) -> ImageStorage:
    return ImageStorage(tmp_path / "uploads", "/uploads")


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession], storage: ImageStorage
) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for testing FastAPI endpoints against the test database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_storage] = lambda: storage

    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def create_user(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[User]]:
    """Factory that inserts a user directly into the database."""

    async def _create_user(
        email: str = "user@example.com",
        password: str = TEST_PASSWORD,
        role: UserRole = UserRole.USER,
        is_active: bool = True,
        first_name: str = "Test",
        last_name: str = "User",
    ) -> User:
        now = datetime.now(UTC)
        async with session_factory() as session:
            user = User(
                email=email,
                first_name=first_name,
                last_name=last_name,
                hashed_password=hash_password(password),
                role=role.value,
                is_active=is_active,
                created_at=now,
                updated_at=now,
            )
            session.add(user)
            await session.commit()
            return user

    return _create_user


@pytest.fixture
async def user(create_user: Callable[..., Awaitable[User]]) -> User:
    return await create_user()


@pytest.fixture
async def admin(create_user: Callable[..., Awaitable[User]]) -> User:
    return await create_user(email="admin@example.com", role=UserRole.ADMIN)


def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def user_headers(user: User) -> dict[str, str]:
    return bearer(user)


@pytest.fixture
def admin_headers(admin: User) -> dict[str, str]:
    return bearer(admin)


@pytest.fixture
def create_movie(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[Movie]]:
    """Factory that inserts a movie directly into the database."""

    async def _create_movie(**overrides) -> Movie:
        now = datetime.now(UTC)
        fields = {
            "title": "Test Movie",
            "director": "Jane Director",
            "release_year": 2000,
            "genre": ["Drama"],
            "rating": 7.0,
            "duration": 120,
            "description": "A movie used in tests.",
            "cast": [],
            "language": "English",
            "country": "United States",
            "awards": [],
            "is_released": True,
            "movie_of_the_week": False,
            "created_at": now,
            "updated_at": now,
        }
        fields.update(overrides)
        async with session_factory() as session:
            movie = Movie(**fields)
            movie.streaming_platforms = []
            session.add(movie)
            await session.commit()
            return movie

    return _create_movie


@pytest.fixture
def create_service(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[StreamingService]]:
    """Factory that inserts a streaming service directly into the database."""

    async def _create_service(
        name: str = "Netflix",
        base_url: str = "https://www.netflix.com",
        is_active: bool = True,
        icon: str | None = None,
    ) -> StreamingService:
        now = datetime.now(UTC)
        async with session_factory() as session:
            service = StreamingService(
                name=name,
                base_url=base_url,
                is_active=is_active,
                icon=icon,
                created_at=now,
                updated_at=now,
            )
            session.add(service)
            await session.commit()
            return service

    return _create_service

"""Pytest fixtures and configuration."""

import itertools
import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import date, datetime

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing the package
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("DEBUG", "false")

from moovover.database import enable_foreign_keys, init_models  # noqa: E402
from moovover.models import Movie, Moviegoer, Review  # noqa: E402
from moovover.repository.sql import SQLRepository  # noqa: E402

# Fixed "now" for tests that depend on review age
NOW = datetime(2025, 6, 15, 12, 0, 0)


@pytest.fixture
def now() -> datetime:
    """The time the test repository reports as current."""
    return NOW


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory database with all tables created."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    enable_foreign_keys(engine)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session bound to the test database."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def repository(session: AsyncSession) -> SQLRepository:
    """SQL repository whose clock is pinned to NOW."""
    return SQLRepository(session, clock=lambda: NOW)


@pytest.fixture
def make_movie(repository: SQLRepository) -> Callable[..., Awaitable[Movie]]:
    """Store a movie directly, bypassing validation."""

    async def _make(
        title: str = "Aladdin",
        rating: str | None = "G",
        release_date: date = date(1992, 11, 25),
        **kwargs,
    ) -> Movie:
        movie = Movie(title=title, rating=rating, release_date=release_date, **kwargs)
        return await repository.save(movie)

    return _make


@pytest.fixture
def make_moviegoer(repository: SQLRepository) -> Callable[..., Awaitable[Moviegoer]]:
    """Store a moviegoer directly, with a unique uid unless one is given."""
    counter = itertools.count(1)

    async def _make(
        name: str | None = None,
        provider: str = "developer",
        uid: str | None = None,
        **kwargs,
    ) -> Moviegoer:
        n = next(counter)
        moviegoer = Moviegoer(
            name=name or f"User {n}",
            provider=provider,
            uid=uid or f"user{n}",
            **kwargs,
        )
        return await repository.save(moviegoer)

    return _make


@pytest.fixture
def make_review(
    repository: SQLRepository,
    make_moviegoer: Callable[..., Awaitable[Moviegoer]],
) -> Callable[..., Awaitable[Review]]:
    """Store a review directly, creating a fresh moviegoer unless one is given."""

    async def _make(
        movie: Movie,
        potatoes: int = 5,
        moviegoer: Moviegoer | None = None,
        created_at: datetime | None = None,
    ) -> Review:
        if moviegoer is None:
            moviegoer = await make_moviegoer()
        review = Review(
            movie_id=movie.id,
            moviegoer_id=moviegoer.id,
            potatoes=potatoes,
            created_at=created_at or NOW,
        )
        return await repository.save(review)

    return _make

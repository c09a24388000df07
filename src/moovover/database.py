"""Database configuration with async SQLAlchemy support."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from moovover.config import get_settings


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the database."""
    return datetime.now(UTC).replace(tzinfo=None)


def _set_sqlite_pragma(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def enable_foreign_keys(bind: AsyncEngine) -> None:
    """Have SQLite enforce foreign keys, including ON DELETE CASCADE.

    SQLite leaves them off per connection unless asked. Other databases
    always enforce them.
    """
    if bind.dialect.name == "sqlite":
        event.listen(bind.sync_engine, "connect", _set_sqlite_pragma)


settings = get_settings()

# Create async engine
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
)

enable_foreign_keys(engine)

# Create async session factory
async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_models(bind: AsyncEngine = engine) -> None:
    """Create all tables that do not exist yet."""
    # Import for side effect: registers the mapped classes on Base.metadata
    import moovover.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def get_db() -> AsyncIterator[AsyncSession]:
    """Provide an async database session for one unit of work.

    Yields a session, commits when the block exits cleanly and rolls back
    if it raises.

        async with get_db() as session:
            repository = SQLRepository(session)
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

"""Repository backed by an async SQLAlchemy session."""

import logging
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timedelta
from typing import Any, TypeVar

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from moovover.database import utcnow
from moovover.errors import ArgumentError, ConflictError, PersistenceError
from moovover.models import Movie, Moviegoer, Review
from moovover.repository.base import Repository
from moovover.scopes import (
    AveragePotatoesAbove,
    RatingIn,
    ReviewCountAtLeast,
    ReviewedWithin,
    ScopeSpec,
    ScopeStep,
)

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT")


def _is_unique_violation(error: IntegrityError) -> bool:
    """Whether the database rejected the write for a duplicate key."""
    # SQLite: "UNIQUE constraint failed", PostgreSQL: "violates unique constraint"
    return "unique" in str(error.orig).lower()


class SQLRepository(Repository):
    """Repository over one ``AsyncSession``.

    Writes are flushed, not committed: the owner of the session (for
    example ``get_db``) decides when the unit of work commits.
    """

    def __init__(self, session: AsyncSession, clock: Callable[[], datetime] = utcnow) -> None:
        """Initialize the repository.

        Args:
            session: The session all reads and writes go through.
            clock: Source of the current naive-UTC time, used by
                time-window scopes.
        """
        self.session = session
        self.clock = clock

    async def find_by_id(self, kind: type[EntityT], id: Any) -> EntityT | None:
        if id is None:
            return None
        return await self.session.get(kind, id)

    async def find_by(self, kind: type[EntityT], **criteria: Any) -> EntityT | None:
        result = await self.session.execute(select(kind).filter_by(**criteria).limit(1))
        return result.scalars().first()

    async def exists(self, kind: type, *, exclude_id: Any = None, **criteria: Any) -> bool:
        stmt = select(kind.id).filter_by(**criteria)
        if exclude_id is not None:
            stmt = stmt.where(kind.id != exclude_id)
        result = await self.session.execute(stmt.limit(1))
        return result.first() is not None

    async def find_or_create(
        self,
        kind: type[EntityT],
        natural_key: Mapping[str, Any],
        defaults: Mapping[str, Any] | None = None,
    ) -> EntityT:
        existing = await self.find_by(kind, **natural_key)
        if existing is not None:
            return existing

        try:
            return await self.save(kind(**natural_key, **(defaults or {})))
        except ConflictError:
            # Another writer stored the same natural key between our read and insert
            logger.info(
                "Create of %s %s lost a race, re-fetching", kind.__name__, dict(natural_key)
            )
            existing = await self.find_by(kind, **natural_key)
            if existing is None:
                raise
            return existing

    async def save(self, entity: EntityT) -> EntityT:
        # The savepoint keeps a failed insert from discarding the rest of the unit of work
        try:
            async with self.session.begin_nested():
                self.session.add(entity)
                await self.session.flush()
        except IntegrityError as e:
            kind = type(entity).__name__
            logger.warning("Integrity error saving %s: %s", kind, e.orig)
            if _is_unique_violation(e):
                raise ConflictError(kind, str(e.orig)) from e
            raise PersistenceError(kind, str(e.orig)) from e

        await self.session.refresh(entity)
        return entity

    async def delete(self, entity: Any) -> None:
        await self.session.delete(entity)
        await self.session.flush()

    def _criterion(self, step: ScopeStep, now: datetime) -> ColumnElement[bool]:
        """Translate one scope step into a WHERE clause on movies."""
        if isinstance(step, RatingIn):
            return Movie.rating.in_(step.ratings)

        if isinstance(step, AveragePotatoesAbove):
            good = (
                select(Review.movie_id)
                .group_by(Review.movie_id)
                .having(func.avg(Review.potatoes) > step.cutoff)
            )
            return Movie.id.in_(good)

        if isinstance(step, ReviewedWithin):
            since = now - timedelta(days=step.days)
            recent = select(Review.movie_id).where(Review.created_at >= since)
            return Movie.id.in_(recent)

        if isinstance(step, ReviewCountAtLeast):
            many = (
                select(Review.movie_id)
                .group_by(Review.movie_id)
                .having(func.count(Review.id) >= step.min_count)
            )
            return Movie.id.in_(many)

        raise ArgumentError(f"Unsupported scope step: {step!r}")

    async def query(self, spec: ScopeSpec) -> Sequence[Movie]:
        now = self.clock()
        stmt = select(Movie)
        for step in spec.steps:
            stmt = stmt.where(self._criterion(step, now))
        stmt = stmt.order_by(Movie.id)

        logger.debug("Executing movie scope with %d step(s)", len(spec.steps))
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def reviews_for_movie(self, movie_id: int) -> Sequence[Review]:
        stmt = (
            select(Review)
            .where(Review.movie_id == movie_id)
            .order_by(Review.created_at, Review.id)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def movies_for_moviegoer(self, moviegoer_id: int) -> Sequence[Movie]:
        stmt = (
            select(Movie)
            .join(Review, Review.movie_id == Movie.id)
            .where(Review.moviegoer_id == moviegoer_id)
            .order_by(Movie.id)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def moviegoers_for_movie(self, movie_id: int) -> Sequence[Moviegoer]:
        stmt = (
            select(Moviegoer)
            .join(Review, Review.moviegoer_id == Moviegoer.id)
            .where(Review.movie_id == movie_id)
            .order_by(Moviegoer.id)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

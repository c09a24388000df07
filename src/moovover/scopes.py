"""Composable, lazy query scopes over movies.

A ``MovieQuery`` only records what to filter on. Each scope method returns a
new query with one more step appended to its ``ScopeSpec``; nothing touches
the database until ``all()`` hands the finished spec to the repository.

    good_for_kids = MovieQuery(repository).for_kids().with_good_reviews(3)
    movies = await good_for_kids.all()
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from moovover.errors import ArgumentError
from moovover.models.movie import KID_RATINGS

if TYPE_CHECKING:
    from collections.abc import Sequence

    from moovover.models.movie import Movie
    from moovover.repository.base import Repository

DEFAULT_RECENT_DAYS = 7
DEFAULT_MIN_REVIEWS = 3


class RatingIn(BaseModel):
    """Keep movies whose rating is one of ``ratings``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["rating_in"] = "rating_in"
    ratings: tuple[str, ...] = Field(description="Accepted ratings")


class AveragePotatoesAbove(BaseModel):
    """Keep movies whose mean review score is strictly above ``cutoff``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["average_potatoes_above"] = "average_potatoes_above"
    cutoff: float = Field(description="Exclusive lower bound on mean potatoes")


class ReviewedWithin(BaseModel):
    """Keep movies with at least one review created in the last ``days`` days."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["reviewed_within"] = "reviewed_within"
    days: int = Field(ge=0, description="Size of the look-back window in days")


class ReviewCountAtLeast(BaseModel):
    """Keep movies with ``min_count`` or more reviews."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["review_count_at_least"] = "review_count_at_least"
    min_count: int = Field(ge=0, description="Inclusive lower bound on review count")


ScopeStep = Annotated[
    RatingIn | AveragePotatoesAbove | ReviewedWithin | ReviewCountAtLeast,
    Field(discriminator="kind"),
]


class ScopeSpec(BaseModel):
    """The accumulated steps of a movie query, applied with AND."""

    model_config = ConfigDict(frozen=True)

    steps: tuple[ScopeStep, ...] = Field(default=(), description="Filter steps in call order")

    def then(self, step: ScopeStep) -> ScopeSpec:
        """Return a new spec with ``step`` appended."""
        return ScopeSpec(steps=(*self.steps, step))


def _require_count(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ArgumentError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ArgumentError(f"{name} must not be negative, got {value}")
    return value


def _require_number(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ArgumentError(f"{name} must be a number, got {value!r}")
    if math.isnan(value):
        raise ArgumentError(f"{name} must not be NaN")
    return float(value)


class MovieQuery:
    """Chainable builder for movie scopes bound to a repository."""

    def __init__(self, repository: Repository, spec: ScopeSpec | None = None) -> None:
        self._repository = repository
        self._spec = spec or ScopeSpec()

    @property
    def spec(self) -> ScopeSpec:
        """The steps accumulated so far."""
        return self._spec

    def _chain(self, step: ScopeStep) -> MovieQuery:
        return MovieQuery(self._repository, self._spec.then(step))

    def for_kids(self) -> MovieQuery:
        """Movies rated G or PG."""
        return self._chain(RatingIn(ratings=KID_RATINGS))

    def with_good_reviews(self, cutoff: float) -> MovieQuery:
        """Movies whose average potatoes is strictly greater than ``cutoff``.

        Movies without reviews are excluded.

        Raises:
            ArgumentError: If ``cutoff`` is not a number.
        """
        return self._chain(AveragePotatoesAbove(cutoff=_require_number("cutoff", cutoff)))

    def recently_reviewed(self, days: int = DEFAULT_RECENT_DAYS) -> MovieQuery:
        """Movies reviewed at least once in the last ``days`` days, each listed once.

        Raises:
            ArgumentError: If ``days`` is negative or not an integer.
        """
        return self._chain(ReviewedWithin(days=_require_count("days", days)))

    def with_many_reviews(self, min_count: int = DEFAULT_MIN_REVIEWS) -> MovieQuery:
        """Movies with at least ``min_count`` reviews.

        Movies without reviews are excluded.

        Raises:
            ArgumentError: If ``min_count`` is negative or not an integer.
        """
        return self._chain(ReviewCountAtLeast(min_count=_require_count("min_count", min_count)))

    async def all(self) -> Sequence[Movie]:
        """Execute the query and return the matching movies in id order."""
        return await self._repository.query(self._spec)

    def __repr__(self) -> str:
        steps = ", ".join(step.kind for step in self._spec.steps) or "all"
        return f"<MovieQuery {steps}>"

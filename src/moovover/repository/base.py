"""Persistence collaborator interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from moovover.models import Movie, Moviegoer, Review
    from moovover.scopes import ScopeSpec

EntityT = TypeVar("EntityT")


class Repository(ABC):
    """Abstract base class for entity storage.

    The domain core talks to storage only through this interface. Lookups
    return None rather than raising; deciding whether a missing entity is
    an error belongs to the caller.
    """

    @abstractmethod
    async def find_by_id(self, kind: type[EntityT], id: Any) -> EntityT | None:
        """Return the entity of ``kind`` with primary key ``id``, if any."""
        ...

    @abstractmethod
    async def find_by(self, kind: type[EntityT], **criteria: Any) -> EntityT | None:
        """Return the first entity of ``kind`` whose fields equal ``criteria``."""
        ...

    @abstractmethod
    async def exists(self, kind: type, *, exclude_id: Any = None, **criteria: Any) -> bool:
        """Whether an entity of ``kind`` matches ``criteria``, ignoring ``exclude_id``."""
        ...

    @abstractmethod
    async def find_or_create(
        self,
        kind: type[EntityT],
        natural_key: Mapping[str, Any],
        defaults: Mapping[str, Any] | None = None,
    ) -> EntityT:
        """Return the entity identified by ``natural_key``, creating it if needed.

        Creation that loses a race against a concurrent writer resolves to
        the record that writer stored.
        """
        ...

    @abstractmethod
    async def save(self, entity: EntityT) -> EntityT:
        """Insert or update the entity.

        Raises:
            ConflictError: If the write violates a uniqueness constraint.
            PersistenceError: If storage rejects the write for any other
                integrity reason.
        """
        ...

    @abstractmethod
    async def delete(self, entity: Any) -> None:
        """Delete the entity and any reviews that depend on it."""
        ...

    @abstractmethod
    async def query(self, spec: ScopeSpec) -> Sequence[Movie]:
        """Execute a movie scope and return the matches in id order."""
        ...

    @abstractmethod
    async def reviews_for_movie(self, movie_id: int) -> Sequence[Review]:
        """Reviews of a movie, oldest first."""
        ...

    @abstractmethod
    async def movies_for_moviegoer(self, moviegoer_id: int) -> Sequence[Movie]:
        """Movies a moviegoer has reviewed."""
        ...

    @abstractmethod
    async def moviegoers_for_movie(self, movie_id: int) -> Sequence[Moviegoer]:
        """Moviegoers who have reviewed a movie."""
        ...

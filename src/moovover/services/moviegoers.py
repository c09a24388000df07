"""Moviegoer lifecycle and the identity seam used by sign-in."""

import logging
from collections.abc import Sequence

from moovover.errors import ConflictError, NotFoundError
from moovover.models import Movie, Moviegoer
from moovover.repository.base import Repository
from moovover.schemas.moviegoer import Identity
from moovover.validation.rules import MOVIEGOER_VALIDATOR

logger = logging.getLogger(__name__)


async def get_moviegoer(repository: Repository, moviegoer_id: int) -> Moviegoer:
    """Get a moviegoer by id.

    Raises:
        NotFoundError: If no moviegoer has that id.
    """
    moviegoer = await repository.find_by_id(Moviegoer, moviegoer_id)
    if moviegoer is None:
        raise NotFoundError("Moviegoer", moviegoer_id)
    return moviegoer


async def create_moviegoer(repository: Repository, identity: Identity) -> Moviegoer:
    """Validate and store a new moviegoer.

    Raises:
        ValidationError: If provider or uid is blank, or the pair is taken.
    """
    moviegoer = Moviegoer(**identity.model_dump())
    await MOVIEGOER_VALIDATOR.validate(moviegoer, repository)

    try:
        moviegoer = await repository.save(moviegoer)
    except ConflictError as e:
        logger.warning("Moviegoer %s/%s was created concurrently", identity.provider, identity.uid)
        raise MOVIEGOER_VALIDATOR.conflict_error(e) from e

    logger.info("Created moviegoer %s (%s/%s)", moviegoer.id, moviegoer.provider, moviegoer.uid)
    return moviegoer


async def find_or_create_from_identity(repository: Repository, identity: Identity) -> Moviegoer:
    """Return the moviegoer for a verified identity, creating one on first sign-in.

    Name and email are only used when the moviegoer is created. Safe under
    concurrent sign-ins of the same identity: a create that loses the race
    returns the record stored by the winner.

    Raises:
        ValidationError: If provider or uid is blank.
    """
    natural_key = {"provider": identity.provider, "uid": identity.uid}
    defaults = {"name": identity.name, "email": identity.email}

    # An existing (provider, uid) is the "find" case, not an error
    candidate = Moviegoer(**natural_key, **defaults)
    await MOVIEGOER_VALIDATOR.validate(candidate, repository, check_uniqueness=False)

    return await repository.find_or_create(Moviegoer, natural_key, defaults)


async def delete_moviegoer(repository: Repository, moviegoer_id: int) -> None:
    """Delete a moviegoer and their reviews.

    Raises:
        NotFoundError: If no moviegoer has that id.
    """
    moviegoer = await get_moviegoer(repository, moviegoer_id)
    await repository.delete(moviegoer)
    logger.info("Deleted moviegoer %s", moviegoer_id)


async def movies_of(repository: Repository, moviegoer_id: int) -> Sequence[Movie]:
    """Movies the moviegoer has reviewed."""
    moviegoer = await get_moviegoer(repository, moviegoer_id)
    return await repository.movies_for_moviegoer(moviegoer.id)

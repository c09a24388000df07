"""Movie lifecycle: look up, validate, persist, delete."""

import logging
from collections.abc import Sequence

from moovover.errors import NotFoundError
from moovover.models import Movie, Moviegoer
from moovover.repository.base import Repository
from moovover.schemas.movie import MovieCreate, MovieUpdate
from moovover.scopes import MovieQuery
from moovover.services.lifecycle import apply_candidate, candidate_for
from moovover.validation.rules import MOVIE_VALIDATOR

logger = logging.getLogger(__name__)

MOVIE_FIELDS = ("title", "rating", "release_date", "description")


async def get_movie(repository: Repository, movie_id: int) -> Movie:
    """Get a movie by id.

    Raises:
        NotFoundError: If no movie has that id.
    """
    movie = await repository.find_by_id(Movie, movie_id)
    if movie is None:
        raise NotFoundError("Movie", movie_id)
    return movie


def movie_scope(repository: Repository) -> MovieQuery:
    """Start a scope over all movies."""
    return MovieQuery(repository)


async def list_movies(repository: Repository) -> Sequence[Movie]:
    """All movies in id order."""
    return await movie_scope(repository).all()


async def create_movie(repository: Repository, data: MovieCreate) -> Movie:
    """Validate and store a new movie.

    The title is trimmed before validation.

    Raises:
        ValidationError: If any movie rule fails.
    """
    movie = Movie(**data.model_dump(include=set(MOVIE_FIELDS)))
    await MOVIE_VALIDATOR.validate(movie, repository)

    movie = await repository.save(movie)
    logger.info("Created movie %s (%r)", movie.id, movie.title)
    return movie


async def update_movie(repository: Repository, movie_id: int, data: MovieUpdate) -> Movie:
    """Apply the fields set on ``data`` to a stored movie.

    Raises:
        NotFoundError: If no movie has that id.
        ValidationError: If the updated movie would be invalid. The stored
            movie is left unchanged.
    """
    movie = await get_movie(repository, movie_id)

    candidate = candidate_for(movie, MOVIE_FIELDS, data.model_dump(exclude_unset=True))
    await MOVIE_VALIDATOR.validate(candidate, repository)

    apply_candidate(movie, candidate, MOVIE_FIELDS)
    movie = await repository.save(movie)
    logger.info("Updated movie %s", movie.id)
    return movie


async def delete_movie(repository: Repository, movie_id: int) -> None:
    """Delete a movie and its reviews.

    Raises:
        NotFoundError: If no movie has that id.
    """
    movie = await get_movie(repository, movie_id)
    await repository.delete(movie)
    logger.info("Deleted movie %s", movie_id)


async def moviegoers_of(repository: Repository, movie_id: int) -> Sequence[Moviegoer]:
    """Moviegoers who reviewed the movie."""
    movie = await get_movie(repository, movie_id)
    return await repository.moviegoers_for_movie(movie.id)

"""Review lifecycle. Reviews are always addressed through their movie."""

import logging
from collections.abc import Sequence

from moovover.errors import ConflictError, NotFoundError
from moovover.models import Moviegoer, Review
from moovover.repository.base import Repository
from moovover.schemas.review import ReviewCreate, ReviewUpdate
from moovover.services.lifecycle import apply_candidate, candidate_for
from moovover.services.movies import get_movie
from moovover.validation.rules import REVIEW_VALIDATOR

logger = logging.getLogger(__name__)

REVIEW_FIELDS = ("movie_id", "moviegoer_id", "potatoes")


async def _save(repository: Repository, review: Review) -> Review:
    movie_id, moviegoer_id = review.movie_id, review.moviegoer_id
    try:
        return await repository.save(review)
    except ConflictError as e:
        logger.warning("Moviegoer %s already reviewed movie %s", moviegoer_id, movie_id)
        raise REVIEW_VALIDATOR.conflict_error(e) from e


async def list_reviews(repository: Repository, movie_id: int) -> Sequence[Review]:
    """Reviews of a movie, oldest first.

    Raises:
        NotFoundError: If no movie has that id.
    """
    movie = await get_movie(repository, movie_id)
    return await repository.reviews_for_movie(movie.id)


async def get_review(repository: Repository, movie_id: int, review_id: int) -> Review:
    """Get a review of a movie.

    Raises:
        NotFoundError: If the movie does not exist, or the review does not
            exist or belongs to another movie.
    """
    movie = await get_movie(repository, movie_id)
    review = await repository.find_by(Review, id=review_id, movie_id=movie.id)
    if review is None:
        raise NotFoundError("Review", review_id)
    return review


async def create_review(
    repository: Repository,
    movie_id: int,
    moviegoer: Moviegoer,
    data: ReviewCreate,
) -> Review:
    """Validate and store a moviegoer's review of a movie.

    Raises:
        NotFoundError: If no movie has that id.
        ValidationError: If potatoes is invalid or the moviegoer already
            reviewed the movie.
    """
    movie = await get_movie(repository, movie_id)

    review = Review(movie_id=movie.id, moviegoer_id=moviegoer.id, potatoes=data.potatoes)
    await REVIEW_VALIDATOR.validate(review, repository)

    review = await _save(repository, review)
    logger.info(
        "Moviegoer %s gave movie %s %s potatoes", moviegoer.id, movie.id, review.potatoes
    )
    return review


async def update_review(
    repository: Repository,
    movie_id: int,
    review_id: int,
    data: ReviewUpdate,
) -> Review:
    """Change the score of an existing review.

    Raises:
        NotFoundError: If the movie or review does not exist.
        ValidationError: If the new score is invalid. The stored review is
            left unchanged.
    """
    review = await get_review(repository, movie_id, review_id)

    candidate = candidate_for(review, REVIEW_FIELDS, data.model_dump(exclude_unset=True))
    await REVIEW_VALIDATOR.validate(candidate, repository)

    apply_candidate(review, candidate, REVIEW_FIELDS)
    return await _save(repository, review)


async def delete_review(repository: Repository, movie_id: int, review_id: int) -> None:
    """Delete a review of a movie.

    Raises:
        NotFoundError: If the movie or review does not exist.
    """
    review = await get_review(repository, movie_id, review_id)
    await repository.delete(review)
    logger.info("Deleted review %s of movie %s", review_id, movie_id)

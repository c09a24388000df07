"""Tests for the movie service."""

from collections.abc import Awaitable, Callable
from datetime import date

import pytest

from moovover.errors import NotFoundError, ValidationError
from moovover.models import Movie, Moviegoer, Review
from moovover.repository.sql import SQLRepository
from moovover.schemas import MovieCreate, MovieUpdate
from moovover.services import (
    create_movie,
    delete_movie,
    get_movie,
    list_movies,
    movie_scope,
    moviegoers_of,
    update_movie,
)

MakeMovie = Callable[..., Awaitable[Movie]]
MakeMoviegoer = Callable[..., Awaitable[Moviegoer]]
MakeReview = Callable[..., Awaitable[Review]]


class TestCreateMovie:
    """Tests for creating movies."""

    async def test_create_movie(self, repository: SQLRepository) -> None:
        """Test that a valid movie is stored with an id."""
        movie = await create_movie(
            repository,
            MovieCreate(
                title="Aladdin",
                rating="G",
                release_date=date(1992, 11, 25),
                description="A street urchin finds a lamp.",
            ),
        )

        assert movie.id is not None
        assert movie.created_at is not None
        stored = await repository.find_by_id(Movie, movie.id)
        assert stored.title == "Aladdin"
        assert stored.description == "A street urchin finds a lamp."

    async def test_title_is_stored_trimmed(self, repository: SQLRepository) -> None:
        """Test that "  Aladdin  " is stored as "Aladdin"."""
        movie = await create_movie(
            repository,
            MovieCreate(title="  Aladdin  ", rating="G", release_date=date(1992, 11, 25)),
        )

        assert movie.title == "Aladdin"

    async def test_release_date_string_is_parsed(self, repository: SQLRepository) -> None:
        """Test that ISO date strings from form input are accepted."""
        movie = await create_movie(
            repository,
            MovieCreate.model_validate(
                {"title": "Up", "rating": "PG", "release_date": "2009-05-29"}
            ),
        )

        assert movie.release_date == date(2009, 5, 29)

    async def test_invalid_movie_is_not_stored(self, repository: SQLRepository) -> None:
        """Test that every failing rule is reported and nothing is saved."""
        with pytest.raises(ValidationError) as exc_info:
            await create_movie(
                repository,
                MovieCreate(title="", rating="XYZ", release_date=date(1925, 1, 1)),
            )

        assert exc_info.value.codes() == {
            "title": ["blank"],
            "release_date": ["too_old"],
            "rating": ["inclusion"],
        }
        assert await list_movies(repository) == []

    async def test_missing_fields(self, repository: SQLRepository) -> None:
        """Test that an empty form reports every required field."""
        with pytest.raises(ValidationError) as exc_info:
            await create_movie(repository, MovieCreate())

        assert exc_info.value.codes() == {
            "title": ["blank"],
            "release_date": ["blank"],
            "rating": ["inclusion"],
        }


class TestGetAndList:
    """Tests for looking up movies."""

    async def test_get_movie(self, repository: SQLRepository, make_movie: MakeMovie) -> None:
        """Test fetching a movie by id."""
        movie = await make_movie()

        assert await get_movie(repository, movie.id) is movie

    async def test_get_missing_movie(self, repository: SQLRepository) -> None:
        """Test that an unknown id raises NotFoundError."""
        with pytest.raises(NotFoundError) as exc_info:
            await get_movie(repository, 999)

        assert exc_info.value.kind == "Movie"
        assert exc_info.value.identifier == 999
        assert str(exc_info.value) == "Movie 999 not found"

    async def test_list_movies_in_id_order(
        self, repository: SQLRepository, make_movie: MakeMovie
    ) -> None:
        """Test that listing returns every movie oldest first."""
        await make_movie(title="Up")
        await make_movie(title="Aladdin")

        assert [m.title for m in await list_movies(repository)] == ["Up", "Aladdin"]

    async def test_movie_scope_starts_from_all_movies(
        self, repository: SQLRepository, make_movie: MakeMovie
    ) -> None:
        """Test that movie_scope returns a chainable query."""
        await make_movie(title="Aladdin", rating="G")
        await make_movie(title="Terminator", rating="R")

        kids = await movie_scope(repository).for_kids().all()

        assert [m.title for m in kids] == ["Aladdin"]


class TestUpdateMovie:
    """Tests for updating movies."""

    async def test_partial_update(self, repository: SQLRepository, make_movie: MakeMovie) -> None:
        """Test that only fields set on the update are changed."""
        movie = await make_movie(title="Aladdin", rating="G")

        updated = await update_movie(repository, movie.id, MovieUpdate(rating="PG"))

        assert updated.rating == "PG"
        assert updated.title == "Aladdin"
        assert updated.release_date == date(1992, 11, 25)

    async def test_update_trims_title(
        self, repository: SQLRepository, make_movie: MakeMovie
    ) -> None:
        """Test that updated titles are normalized too."""
        movie = await make_movie()

        updated = await update_movie(repository, movie.id, MovieUpdate(title="  Jasmine "))

        assert updated.title == "Jasmine"

    async def test_invalid_update_leaves_movie_unchanged(
        self, repository: SQLRepository, make_movie: MakeMovie
    ) -> None:
        """Test that a failed update does not partially apply."""
        movie = await make_movie(title="Aladdin", rating="G")

        with pytest.raises(ValidationError) as exc_info:
            await update_movie(
                repository,
                movie.id,
                MovieUpdate(title="  Much Too Long A Title  ", rating="PG-13"),
            )

        assert exc_info.value.codes() == {"title": ["too_long"]}
        assert movie.title == "Aladdin"
        assert movie.rating == "G"
        assert movie not in repository.session.dirty

    async def test_update_can_grandfather_a_movie(
        self, repository: SQLRepository, make_movie: MakeMovie
    ) -> None:
        """Test that moving the release date before 1900 lifts the rating rule only."""
        movie = await make_movie()

        with pytest.raises(ValidationError) as exc_info:
            await update_movie(
                repository,
                movie.id,
                MovieUpdate(rating="Unrated", release_date=date(1899, 1, 1)),
            )

        assert exc_info.value.codes() == {"release_date": ["too_old"]}

    async def test_update_missing_movie(self, repository: SQLRepository) -> None:
        """Test that updating an unknown id raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await update_movie(repository, 999, MovieUpdate(rating="PG"))


class TestDeleteMovie:
    """Tests for deleting movies."""

    async def test_delete_cascades_to_reviews(
        self,
        repository: SQLRepository,
        make_movie: MakeMovie,
        make_review: MakeReview,
    ) -> None:
        """Test that a movie's reviews are deleted with it."""
        movie = await make_movie()
        other = await make_movie(title="Up")
        review = await make_review(movie)
        kept = await make_review(other)
        movie_id, review_id, kept_id = movie.id, review.id, kept.id

        await delete_movie(repository, movie_id)

        assert await repository.find_by(Movie, id=movie_id) is None
        assert await repository.find_by(Review, id=review_id) is None
        assert await repository.find_by(Review, id=kept_id) is not None

    async def test_delete_missing_movie(self, repository: SQLRepository) -> None:
        """Test that deleting an unknown id raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await delete_movie(repository, 999)


class TestMoviegoersOf:
    """Tests for the movie -> moviegoers projection."""

    async def test_moviegoers_who_reviewed(
        self,
        repository: SQLRepository,
        make_movie: MakeMovie,
        make_moviegoer: MakeMoviegoer,
        make_review: MakeReview,
    ) -> None:
        """Test that every reviewer is listed once."""
        movie = await make_movie()
        alice = await make_moviegoer(name="Alice")
        bob = await make_moviegoer(name="Bob")
        await make_moviegoer(name="Charlie")
        await make_review(movie, moviegoer=alice)
        await make_review(movie, moviegoer=bob)

        reviewers = await moviegoers_of(repository, movie.id)

        assert [m.name for m in reviewers] == ["Alice", "Bob"]

    async def test_unreviewed_movie(self, repository: SQLRepository, make_movie: MakeMovie) -> None:
        """Test that a movie without reviews has no moviegoers."""
        movie = await make_movie()

        assert await moviegoers_of(repository, movie.id) == []

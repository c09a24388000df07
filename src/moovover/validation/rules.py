"""Validation rules for movies, moviegoers and reviews."""

import re
from datetime import datetime
from typing import Any

from moovover.models.movie import EARLIEST_RELEASE_DATE, RATINGS, TITLE_MAX_LENGTH, Movie
from moovover.models.moviegoer import Moviegoer
from moovover.models.review import POTATOES_MAX, POTATOES_MIN, Review
from moovover.validation.engine import Rule, UniquenessRule, Validator

BLANK_MESSAGE = "can't be blank"

_INTEGER_PATTERN = re.compile(r"[+-]?\d+")


def is_blank(value: Any) -> bool:
    """None, or a string of only whitespace."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def is_integer(value: Any) -> bool:
    """An int that is not a bool."""
    return isinstance(value, int) and not isinstance(value, bool)


def present(field: str) -> Rule:
    """Rule failing with ``blank`` when the field is blank."""
    return Rule(field, "blank", BLANK_MESSAGE, check=lambda e: not is_blank(getattr(e, field)))


# Movie


def normalize_title(movie: Movie) -> None:
    movie.title = "" if movie.title is None else str(movie.title).strip()


def normalize_release_date(movie: Movie) -> None:
    """Drop the time part of a datetime release date."""
    if isinstance(movie.release_date, datetime):
        movie.release_date = movie.release_date.date()


MOVIE_VALIDATOR = Validator(
    normalizers=[normalize_title, normalize_release_date],
    rules=[
        present("title"),
        Rule(
            "title",
            "too_long",
            f"is too long (maximum is {TITLE_MAX_LENGTH} characters)",
            check=lambda m: m.title is None or len(m.title) <= TITLE_MAX_LENGTH,
        ),
        present("release_date"),
        Rule(
            "release_date",
            "too_old",
            f"must be {EARLIEST_RELEASE_DATE.year} or later",
            check=lambda m: m.release_date >= EARLIEST_RELEASE_DATE,
            applies=lambda m: m.release_date is not None,
        ),
        Rule(
            "rating",
            "inclusion",
            "{value} is not a valid rating",
            check=lambda m: m.rating in RATINGS,
            applies=lambda m: not m.is_grandfathered,
        ),
    ],
)


# Moviegoer

MOVIEGOER_VALIDATOR = Validator(
    rules=[
        present("uid"),
        present("provider"),
        UniquenessRule("uid", scope=["provider"]),
    ],
)


# Review


def normalize_potatoes(review: Review) -> None:
    """Convert integer strings such as "4" to ints; leave anything else for the rules."""
    value = review.potatoes
    if isinstance(value, str) and _INTEGER_PATTERN.fullmatch(value.strip()):
        review.potatoes = int(value.strip())


REVIEW_VALIDATOR = Validator(
    normalizers=[normalize_potatoes],
    rules=[
        present("movie_id"),
        present("moviegoer_id"),
        present("potatoes"),
        Rule(
            "potatoes",
            "not_an_integer",
            "must be an integer",
            check=lambda r: is_integer(r.potatoes),
            applies=lambda r: not is_blank(r.potatoes),
        ),
        Rule(
            "potatoes",
            "out_of_range",
            f"must be between {POTATOES_MIN} and {POTATOES_MAX}",
            check=lambda r: POTATOES_MIN <= r.potatoes <= POTATOES_MAX,
            applies=lambda r: is_integer(r.potatoes),
        ),
        UniquenessRule(
            "moviegoer_id",
            scope=["movie_id"],
            message="has already reviewed this movie",
        ),
    ],
)


VALIDATORS: dict[type, Validator] = {
    Movie: MOVIE_VALIDATOR,
    Moviegoer: MOVIEGOER_VALIDATOR,
    Review: REVIEW_VALIDATOR,
}


def validator_for(entity: Any) -> Validator:
    """Look up the validator registered for an entity or entity class."""
    kind = entity if isinstance(entity, type) else type(entity)
    return VALIDATORS[kind]

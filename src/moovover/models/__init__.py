"""SQLAlchemy ORM models."""

from moovover.models.movie import Movie
from moovover.models.moviegoer import Moviegoer
from moovover.models.review import Review

__all__ = [
    "Movie",
    "Moviegoer",
    "Review",
]

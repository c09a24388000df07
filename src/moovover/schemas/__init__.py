"""Pydantic schemas for input handed to the domain core."""

from moovover.schemas.movie import MovieCreate, MovieUpdate
from moovover.schemas.moviegoer import Identity
from moovover.schemas.review import ReviewCreate, ReviewUpdate

__all__ = [
    "Identity",
    "MovieCreate",
    "MovieUpdate",
    "ReviewCreate",
    "ReviewUpdate",
]

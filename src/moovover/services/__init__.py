"""Validate-then-persist operations on movies, moviegoers and reviews."""

from moovover.services.moviegoers import (
    create_moviegoer,
    delete_moviegoer,
    find_or_create_from_identity,
    get_moviegoer,
    movies_of,
)
from moovover.services.movies import (
    create_movie,
    delete_movie,
    get_movie,
    list_movies,
    movie_scope,
    moviegoers_of,
    update_movie,
)
from moovover.services.reviews import (
    create_review,
    delete_review,
    get_review,
    list_reviews,
    update_review,
)

__all__ = [
    # Movies
    "create_movie",
    "delete_movie",
    "get_movie",
    "list_movies",
    "movie_scope",
    "moviegoers_of",
    "update_movie",
    # Moviegoers
    "create_moviegoer",
    "delete_moviegoer",
    "find_or_create_from_identity",
    "get_moviegoer",
    "movies_of",
    # Reviews
    "create_review",
    "delete_review",
    "get_review",
    "list_reviews",
    "update_review",
]

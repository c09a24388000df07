"""Sample movies, moviegoers and reviews.

Seeding is idempotent: movies are matched by title, moviegoers by
(provider, uid), and reviews are only added to an empty review table.

Run ``python -m moovover.seeds`` to seed the configured database and log
what the scopes and relationship projections return for the sample data.
"""

import asyncio
import logging
from collections.abc import Sequence
from datetime import date

from moovover import __version__
from moovover.config import get_settings
from moovover.database import engine, get_db, init_models
from moovover.models import Movie, Moviegoer, Review
from moovover.repository.base import Repository
from moovover.repository.sql import SQLRepository
from moovover.schemas import Identity, MovieCreate, ReviewCreate
from moovover.services import (
    create_movie,
    create_review,
    find_or_create_from_identity,
    movie_scope,
    moviegoers_of,
    movies_of,
)

logger = logging.getLogger(__name__)

SEED_MOVIES = [
    MovieCreate(title="Aladdin", rating="G", release_date=date(1992, 11, 25)),
    MovieCreate(title="Terminator", rating="R", release_date=date(1984, 10, 26)),
    MovieCreate(title="Big", rating="PG", release_date=date(1988, 6, 3)),
    MovieCreate(title="The Help", rating="PG-13", release_date=date(2011, 8, 10)),
    MovieCreate(title="Chocolat", rating="PG-13", release_date=date(2001, 1, 5)),
    MovieCreate(title="Amelie", rating="R", release_date=date(2001, 4, 25)),
    MovieCreate(title="Casablanca", rating="PG", release_date=date(1942, 11, 26)),
    MovieCreate(title="Toy Story", rating="G", release_date=date(1995, 11, 22)),
    MovieCreate(title="Up", rating="PG", release_date=date(2009, 5, 29)),
]

SEED_MOVIEGOERS = [
    Identity(provider="developer", uid="alice123", name="Alice", email="alice@example.com"),
    Identity(provider="developer", uid="bob456", name="Bob", email="bob@example.com"),
    Identity(provider="developer", uid="charlie789", name="Charlie", email="charlie@example.com"),
]

# (moviegoer uid, movie title, potatoes)
SEED_REVIEWS = [
    ("alice123", "Aladdin", 5),
    ("alice123", "Terminator", 4),
    ("alice123", "Up", 5),
    ("bob456", "Aladdin", 4),
    ("bob456", "Terminator", 5),
    ("charlie789", "Up", 4),
]


async def seed(repository: Repository) -> None:
    """Store the sample data, skipping anything already present."""
    for data in SEED_MOVIES:
        if await repository.find_by(Movie, title=data.title) is None:
            await create_movie(repository, data)

    moviegoers = {}
    for identity in SEED_MOVIEGOERS:
        moviegoers[identity.uid] = await find_or_create_from_identity(repository, identity)

    if await repository.exists(Review):
        logger.info("Reviews already present, skipping review seeds")
        return

    for uid, title, potatoes in SEED_REVIEWS:
        movie = await repository.find_by(Movie, title=title)
        await create_review(repository, movie.id, moviegoers[uid], ReviewCreate(potatoes=potatoes))
    logger.info("Seeded %d reviews", len(SEED_REVIEWS))


def _titles(movies: Sequence[Movie]) -> str:
    return ", ".join(movie.title for movie in movies) or "(none)"


async def report(repository: Repository) -> None:
    """Log what the scopes and projections return for the current data."""
    scope = movie_scope(repository)
    logger.info("All movies: %s", _titles(await scope.all()))
    logger.info("Movies for kids (G, PG): %s", _titles(await scope.for_kids().all()))
    logger.info("Good reviews (avg > 3): %s", _titles(await scope.with_good_reviews(3).all()))
    logger.info("Reviewed in last 30 days: %s", _titles(await scope.recently_reviewed(30).all()))
    logger.info("At least 2 reviews: %s", _titles(await scope.with_many_reviews(2).all()))

    alice = await repository.find_by(Moviegoer, provider="developer", uid="alice123")
    if alice is not None:
        logger.info("Movies reviewed by Alice: %s", _titles(await movies_of(repository, alice.id)))

    aladdin = await repository.find_by(Movie, title="Aladdin")
    if aladdin is not None:
        names = ", ".join(m.name or m.uid for m in await moviegoers_of(repository, aladdin.id))
        logger.info("Moviegoers who reviewed Aladdin: %s", names or "(none)")


async def main() -> None:
    """Create tables, seed the configured database and log a report."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger.info("Seeding %s v%s", settings.app_name, __version__)
    logger.info("Database: %s", settings.database_url.split("///")[-1])
    for warning in settings.validate_runtime_config():
        logger.warning("  - %s", warning)

    await init_models()
    try:
        async with get_db() as session:
            repository = SQLRepository(session)
            await seed(repository)
            await report(repository)
    finally:
        await engine.dispose()

    logger.info("Seeding complete")


if __name__ == "__main__":
    asyncio.run(main())

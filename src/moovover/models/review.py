"""Review ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from moovover.database import Base, utcnow

if TYPE_CHECKING:
    from moovover.models.movie import Movie
    from moovover.models.moviegoer import Moviegoer

POTATOES_MIN = 1
POTATOES_MAX = 5


class Review(Base):
    """A moviegoer's potatoes score for a movie."""

    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("movie_id", "moviegoer_id", name="uq_review_movie_moviegoer"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    movie_id: Mapped[int] = mapped_column(ForeignKey("movies.id", ondelete="CASCADE"), index=True)
    moviegoer_id: Mapped[int] = mapped_column(
        ForeignKey("moviegoers.id", ondelete="CASCADE"), index=True
    )
    potatoes: Mapped[int] = mapped_column()  # 1-5
    created_at: Mapped[datetime] = mapped_column(default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)

    # Relationships
    movie: Mapped[Movie] = relationship(back_populates="reviews")
    moviegoer: Mapped[Moviegoer] = relationship(back_populates="reviews")

    def __repr__(self) -> str:
        return (
            f"<Review id={self.id} movie_id={self.movie_id} "
            f"moviegoer_id={self.moviegoer_id} potatoes={self.potatoes}>"
        )

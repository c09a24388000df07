"""Movie ORM model."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from moovover.database import Base, utcnow

if TYPE_CHECKING:
    from moovover.models.review import Review

RATINGS: tuple[str, ...] = ("G", "PG", "PG-13", "R", "NC-17")
KID_RATINGS: tuple[str, ...] = ("G", "PG")

# Movies released before this date are exempt from rating validation
GRANDFATHERED_DATE = date(1900, 1, 1)
EARLIEST_RELEASE_DATE = date(1930, 1, 1)
TITLE_MAX_LENGTH = 10


class Movie(Base):
    """A movie that moviegoers can review."""

    __tablename__ = "movies"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255))
    rating: Mapped[str | None] = mapped_column(String(10), nullable=True, index=True)
    release_date: Mapped[date] = mapped_column(Date)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)

    # Relationships
    reviews: Mapped[list[Review]] = relationship(
        back_populates="movie", cascade="all, delete"
    )

    @property
    def is_grandfathered(self) -> bool:
        """Whether the movie predates rating enforcement."""
        released = self.release_date
        if isinstance(released, datetime):
            released = released.date()
        return released is not None and released < GRANDFATHERED_DATE

    def __repr__(self) -> str:
        return f"<Movie id={self.id} title={self.title!r} rating={self.rating!r}>"

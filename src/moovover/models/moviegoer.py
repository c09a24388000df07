"""Moviegoer ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from moovover.database import Base, utcnow

if TYPE_CHECKING:
    from moovover.models.review import Review


class Moviegoer(Base):
    """A site user, identified by an external identity provider."""

    __tablename__ = "moviegoers"
    __table_args__ = (UniqueConstraint("provider", "uid", name="uq_moviegoer_provider_uid"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    provider: Mapped[str] = mapped_column(String(50))  # e.g. "github", "developer"
    uid: Mapped[str] = mapped_column(String(255))  # user id within the provider
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)

    # Relationships
    reviews: Mapped[list[Review]] = relationship(
        back_populates="moviegoer", cascade="all, delete"
    )

    def __repr__(self) -> str:
        return f"<Moviegoer id={self.id} provider={self.provider!r} uid={self.uid!r}>"

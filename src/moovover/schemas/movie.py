"""Pydantic schemas for movie input."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class MovieCreate(BaseModel):
    """Field values for a new movie.

    Fields are deliberately permissive; the domain rules decide what is
    acceptable so that every problem is reported in one ValidationError.
    """

    model_config = ConfigDict(extra="ignore")

    title: str | None = Field(default=None, description="Movie title (at most 10 characters)")
    rating: str | None = Field(default=None, description="G, PG, PG-13, R or NC-17")
    release_date: date | None = Field(default=None, description="Release date")
    description: str | None = Field(default=None, description="Free-text description")


class MovieUpdate(MovieCreate):
    """Field values to change on an existing movie. Only fields explicitly set are applied."""

"""Pydantic schemas for review input."""

from pydantic import BaseModel, ConfigDict, Field


class ReviewCreate(BaseModel):
    """Field values for a new review."""

    model_config = ConfigDict(extra="ignore")

    # Left loose so "4" and 4.5 reach the potatoes rules instead of failing here
    potatoes: int | float | str | None = Field(default=None, description="Score from 1 to 5")


class ReviewUpdate(ReviewCreate):
    """Field values to change on an existing review."""

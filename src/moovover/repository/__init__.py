"""Persistence collaborators."""

from moovover.repository.base import Repository
from moovover.repository.sql import SQLRepository

__all__ = [
    "Repository",
    "SQLRepository",
]

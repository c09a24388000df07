"""Moovover: movie, moviegoer and review domain core."""

__version__ = "0.1.0"

"""TMDB passthrough module."""

from src.tmdb.client import TMDBClient

__all__ = ["TMDBClient"]

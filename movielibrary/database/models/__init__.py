"""SQLAlchemy ORM models for the movie library database.

Usage:
    from movielibrary.database.models import Base, Movie, Actor, Genre

Tables:
    - movies: Catalog movies
    - actors: Catalog actors
    - genres: Catalog genres
    - movie_actors: Movie-Actor association
    - movie_genres: Movie-Genre association
"""

from movielibrary.database.models.base import Base, CatalogEntryMixin
from movielibrary.database.models.catalog import (
    Actor,
    Genre,
    Movie,
    MovieActor,
    MovieGenre,
)

__all__ = [
    # Base
    "Base",
    "CatalogEntryMixin",
    # Catalog models
    "Movie",
    "Actor",
    "Genre",
    "MovieActor",
    "MovieGenre",
]

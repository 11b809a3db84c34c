"""Database package for the movie library.

Provides connection management, ORM models, and repositories.

Usage:
    from movielibrary.database import DatabaseConnection, MovieRepository

    db = DatabaseConnection(settings)
    await db.create_all()
    movies = await MovieRepository(db).fetch_all()
"""

from movielibrary.database.connection import DatabaseConnection
from movielibrary.database.exceptions import (
    CommitFailedError,
    EntityNotFoundError,
    RepositoryError,
    SeedLoadError,
    UnsupportedFilterError,
)
from movielibrary.database.models import Actor, Base, Genre, Movie, MovieActor, MovieGenre
from movielibrary.database.repositories import (
    ActorRepository,
    BaseRepository,
    GenreRepository,
    MovieRepository,
)
from movielibrary.database.schemas import ActorUpdate, GenreUpdate, MovieUpdate

__all__ = [
    # Connection
    "DatabaseConnection",
    # Errors
    "RepositoryError",
    "CommitFailedError",
    "EntityNotFoundError",
    "UnsupportedFilterError",
    "SeedLoadError",
    # Models
    "Base",
    "Movie",
    "Actor",
    "Genre",
    "MovieActor",
    "MovieGenre",
    # Repositories
    "BaseRepository",
    "MovieRepository",
    "ActorRepository",
    "GenreRepository",
    # Update schemas
    "MovieUpdate",
    "ActorUpdate",
    "GenreUpdate",
]

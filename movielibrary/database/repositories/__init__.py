"""Catalog repositories.

One repository per entity type, each serializing its own operations.

Usage:
    from movielibrary.database import DatabaseConnection
    from movielibrary.database.repositories import MovieRepository, NameFilter

    db = DatabaseConnection(settings)
    movie_repo = MovieRepository(db)
    movies = await movie_repo.fetch([NameFilter("alien")])
"""

from movielibrary.database.repositories.actor import ActorRepository
from movielibrary.database.repositories.base import BaseRepository
from movielibrary.database.repositories.filters import (
    ActorsFilter,
    FavoriteFilter,
    Filter,
    GenresFilter,
    MembershipFilter,
    MoviesFilter,
    NameFilter,
    RatingFilter,
    ReleaseYearFilter,
    ScalarFilter,
)
from movielibrary.database.repositories.genre import GenreRepository
from movielibrary.database.repositories.movie import MovieRepository

__all__ = [
    # Repositories
    "BaseRepository",
    "MovieRepository",
    "ActorRepository",
    "GenreRepository",
    # Filters
    "Filter",
    "ScalarFilter",
    "MembershipFilter",
    "NameFilter",
    "FavoriteFilter",
    "RatingFilter",
    "ReleaseYearFilter",
    "GenresFilter",
    "ActorsFilter",
    "MoviesFilter",
]

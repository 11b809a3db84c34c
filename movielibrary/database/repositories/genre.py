"""Genre repository.

Genres are the owning side of the movie-genre link: updating
``movies`` here rewrites the association rows that ``Movie.genres``
reads back.
"""

from sqlalchemy.orm import selectinload
from sqlalchemy.orm.interfaces import LoaderOption

from movielibrary.database.models.catalog import Genre, Movie
from movielibrary.database.repositories.base import BaseRepository
from movielibrary.database.repositories.filters import FavoriteFilter, MoviesFilter, NameFilter
from movielibrary.database.schemas import GenreUpdate


class GenreRepository(BaseRepository[Genre]):
    """Repository for Genre entity operations."""

    model = Genre
    relations = ("movies",)
    related_models = {"movies": Movie}
    update_schema = GenreUpdate
    supported_filters = (NameFilter, FavoriteFilter, MoviesFilter)

    def _load_options(self) -> list[LoaderOption]:
        return [
            selectinload(Genre.movies).selectinload(Movie.genres),
            selectinload(Genre.movies).selectinload(Movie.actors),
        ]

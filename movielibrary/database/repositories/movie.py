"""Movie repository.

Movies own the richest query surface: name, favorite, rating and
release year criteria run in SQL, genre and actor membership in memory.
"""

from sqlalchemy.orm import selectinload
from sqlalchemy.orm.interfaces import LoaderOption

from movielibrary.database.models.catalog import Actor, Genre, Movie
from movielibrary.database.repositories.base import BaseRepository
from movielibrary.database.repositories.filters import (
    ActorsFilter,
    FavoriteFilter,
    GenresFilter,
    NameFilter,
    RatingFilter,
    ReleaseYearFilter,
)
from movielibrary.database.schemas import MovieUpdate


class MovieRepository(BaseRepository[Movie]):
    """Repository for Movie entity operations."""

    model = Movie
    relations = ("actors", "genres")
    related_models = {"actors": Actor, "genres": Genre}
    update_schema = MovieUpdate
    image_field = "poster_ref"
    supported_filters = (
        NameFilter,
        FavoriteFilter,
        RatingFilter,
        ReleaseYearFilter,
        GenresFilter,
        ActorsFilter,
    )

    def _load_options(self) -> list[LoaderOption]:
        return [
            selectinload(Movie.actors).selectinload(Actor.movies),
            selectinload(Movie.genres).selectinload(Genre.movies),
        ]

    async def update_rating(self, movie: Movie, rating: int) -> Movie:
        """Set the user rating and commit.

        The value is stored as given; clamping is a presentation concern.

        Args:
            movie: Movie to rate.
            rating: New rating.

        Returns:
            Freshly loaded copy of the movie.

        Raises:
            EntityNotFoundError: If the movie is absent.
            CommitFailedError: If the commit fails.
        """
        async with self._lock:
            async with self._database.async_session() as session:
                row = await self._load_for_write(session, movie.id)
                row.rating = rating
                await self._commit(session, "update rating", movie.id)
            return await self._get_fresh(movie.id)

"""Actor repository."""

from sqlalchemy.orm import selectinload
from sqlalchemy.orm.interfaces import LoaderOption

from movielibrary.database.models.catalog import Actor, Movie
from movielibrary.database.repositories.base import BaseRepository
from movielibrary.database.repositories.filters import FavoriteFilter, MoviesFilter, NameFilter
from movielibrary.database.schemas import ActorUpdate


class ActorRepository(BaseRepository[Actor]):
    """Repository for Actor entity operations."""

    model = Actor
    relations = ("movies",)
    related_models = {"movies": Movie}
    update_schema = ActorUpdate
    image_field = "photo_ref"
    supported_filters = (NameFilter, FavoriteFilter, MoviesFilter)

    def _load_options(self) -> list[LoaderOption]:
        return [
            selectinload(Actor.movies).selectinload(Movie.actors),
            selectinload(Actor.movies).selectinload(Movie.genres),
        ]

"""Catalog orchestration over the three repositories.

Holds one working list per entity type for the presentation layer.
Writes go to the repository first, then the working list is patched to
match. The working lists may drift from the store if something else
writes to it; ``refresh`` reloads them wholesale.
"""

import asyncio
from collections.abc import Iterable, Iterator, Sequence
from typing import Any, Generic

from movielibrary.database.exceptions import EntityNotFoundError, RepositoryError
from movielibrary.database.models import Actor, Genre, Movie
from movielibrary.database.repositories import (
    ActorRepository,
    BaseRepository,
    GenreRepository,
    MovieRepository,
)
from movielibrary.database.repositories.base import ModelT
from movielibrary.database.repositories.filters import Filter
from movielibrary.images.exceptions import ImageStoreError
from movielibrary.images.store import ImageStore
from movielibrary.utils.logger import setup_logger

logger = setup_logger("services.catalog")


# =============================================================================
# WORKING SET
# =============================================================================


class WorkingSet(Generic[ModelT]):
    """In-memory list of one entity type, matched by id.

    Attributes:
        items: Entities in the order last fetched or appended.
    """

    def __init__(self) -> None:
        self.items: list[ModelT] = []

    def __iter__(self) -> Iterator[ModelT]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def index(self, entity: ModelT) -> int | None:
        """Position of the entity with the same id, or None."""
        for position, item in enumerate(self.items):
            if item.id == entity.id:
                return position
        return None

    def find(self, entity: ModelT) -> ModelT | None:
        """Working copy of *entity*, or None."""
        position = self.index(entity)
        return None if position is None else self.items[position]

    def by_name(self, name: str) -> ModelT | None:
        """First entity with exactly this name."""
        return next((item for item in self.items if item.name == name), None)

    def reset(self, items: Sequence[ModelT]) -> None:
        self.items = list(items)

    def append(self, entity: ModelT) -> None:
        self.items.append(entity)

    def replace(self, entity: ModelT) -> None:
        position = self.index(entity)
        if position is not None:
            self.items[position] = entity

    def remove(self, entity: ModelT) -> None:
        self.items = [item for item in self.items if item.id != entity.id]


# =============================================================================
# CATALOG SERVICE
# =============================================================================


class CatalogService:
    """Working-set view of the catalog with write-through operations.

    One instance assumes it is the only writer to the store for its
    lifetime.

    Attributes:
        _movie_repo: Movie repository.
        _actor_repo: Actor repository.
        _genre_repo: Genre repository.
        _images: Image store owning poster and photo files.
    """

    def __init__(
        self,
        movie_repo: MovieRepository,
        actor_repo: ActorRepository,
        genre_repo: GenreRepository,
        images: ImageStore,
    ) -> None:
        """Initialize catalog service.

        Args:
            movie_repo: Movie repository.
            actor_repo: Actor repository.
            genre_repo: Genre repository.
            images: Image store.
        """
        self._movie_repo = movie_repo
        self._actor_repo = actor_repo
        self._genre_repo = genre_repo
        self._images = images
        self._movies: WorkingSet[Movie] = WorkingSet()
        self._actors: WorkingSet[Actor] = WorkingSet()
        self._genres: WorkingSet[Genre] = WorkingSet()

    @property
    def movies(self) -> list[Movie]:
        """Movie working list."""
        return self._movies.items

    @property
    def actors(self) -> list[Actor]:
        """Actor working list."""
        return self._actors.items

    @property
    def genres(self) -> list[Genre]:
        """Genre working list."""
        return self._genres.items

    def find_actor(self, name: str) -> Actor | None:
        """Actor in the working list with exactly this name."""
        return self._actors.by_name(name)

    def find_genre(self, name: str) -> Genre | None:
        """Genre in the working list with exactly this name."""
        return self._genres.by_name(name)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def refresh(self) -> None:
        """Reload the three working lists from the store."""
        movies, actors, genres = await asyncio.gather(
            self._movie_repo.fetch_all(),
            self._actor_repo.fetch_all(),
            self._genre_repo.fetch_all(),
        )
        self._movies.reset(movies)
        self._actors.reset(actors)
        self._genres.reset(genres)
        logger.debug(
            f"Catalog refreshed: {len(movies)} movies, "
            f"{len(actors)} actors, {len(genres)} genres"
        )

    async def fetch_all_movies(self) -> list[Movie]:
        self._movies.reset(await self._movie_repo.fetch_all())
        return self.movies

    async def fetch_all_actors(self) -> list[Actor]:
        self._actors.reset(await self._actor_repo.fetch_all())
        return self.actors

    async def fetch_all_genres(self) -> list[Genre]:
        self._genres.reset(await self._genre_repo.fetch_all())
        return self.genres

    async def fetch_movies(self, filters: Iterable[Filter] | None) -> list[Movie]:
        """Replace the movie working list with a filtered fetch."""
        self._movies.reset(await self._movie_repo.fetch(filters))
        logger.info(f"Fetch complete: {len(self._movies)} movies")
        return self.movies

    async def fetch_actors(self, filters: Iterable[Filter] | None) -> list[Actor]:
        """Replace the actor working list with a filtered fetch."""
        self._actors.reset(await self._actor_repo.fetch(filters))
        logger.info(f"Fetch complete: {len(self._actors)} actors")
        return self.actors

    async def fetch_genres(self, filters: Iterable[Filter] | None) -> list[Genre]:
        """Replace the genre working list with a filtered fetch."""
        self._genres.reset(await self._genre_repo.fetch(filters))
        logger.info(f"Fetch complete: {len(self._genres)} genres")
        return self.genres

    # -------------------------------------------------------------------------
    # Add
    # -------------------------------------------------------------------------

    async def add_movie(self, movie: Movie) -> bool:
        """Persist *movie* unless one with the same title is listed.

        Returns:
            True if added, False if skipped as a duplicate.
        """
        return await self._add(self._movies, self._movie_repo, movie)

    async def add_actor(self, actor: Actor) -> bool:
        """Persist *actor* unless one with the same name is listed."""
        return await self._add(self._actors, self._actor_repo, actor)

    async def add_genre(self, genre: Genre) -> bool:
        """Persist *genre* unless one with the same name is listed."""
        return await self._add(self._genres, self._genre_repo, genre)

    async def create_movie(
        self,
        title: str,
        release_year: int,
        summary: str = "",
        rating: int = 0,
        actors: Sequence[Actor] = (),
        genres: Sequence[Genre] = (),
        poster_data: bytes | None = None,
        poster_ref: str | None = None,
    ) -> Movie:
        """Build, persist and list a new movie.

        Args:
            title: Movie title.
            release_year: Year of release.
            summary: Synopsis.
            rating: User rating.
            actors: Persisted actors to link.
            genres: Persisted genres to link.
            poster_data: Uploaded poster bytes, stored through the image store.
            poster_ref: Existing image reference, used when no bytes are given.

        Returns:
            Persisted movie.
        """
        if poster_data is not None:
            poster_ref = await self._store_image(poster_data)
        movie = Movie(
            title=title,
            summary=summary,
            rating=rating,
            release_year=release_year,
            poster_ref=poster_ref,
            actors=list(actors),
            genres=list(genres),
        )
        stored = await self._movie_repo.add(movie)
        self._movies.append(stored)
        return stored

    async def create_actor(
        self,
        name: str,
        summary: str = "",
        photo_data: bytes | None = None,
        photo_ref: str | None = None,
    ) -> Actor:
        """Build, persist and list a new actor."""
        if photo_data is not None:
            photo_ref = await self._store_image(photo_data)
        stored = await self._actor_repo.add(Actor(name=name, summary=summary, photo_ref=photo_ref))
        self._actors.append(stored)
        return stored

    async def create_genre(
        self,
        name: str,
        summary: str = "",
        movies: Sequence[Movie] = (),
    ) -> Genre:
        """Build, persist and list a new genre."""
        stored = await self._genre_repo.add(Genre(name=name, summary=summary, movies=list(movies)))
        self._genres.append(stored)
        return stored

    # -------------------------------------------------------------------------
    # Update
    # -------------------------------------------------------------------------

    async def update_movie(
        self,
        movie: Movie,
        poster_data: bytes | None = None,
        **changes: Any,
    ) -> Movie:
        """Apply a partial update to a listed movie.

        Relationship fields (``actors``, ``genres``) accept entities or
        ids; an empty list leaves the relationship unchanged.

        Args:
            movie: Movie in the working list.
            poster_data: New poster bytes. Replaces the current poster.
            **changes: Fields to overwrite.

        Returns:
            Updated movie.

        Raises:
            EntityNotFoundError: If the movie is not in the working list.
        """
        if poster_data is not None:
            new_ref = await self._store_image(poster_data)
            if new_ref is not None:
                changes["poster_ref"] = new_ref
        return await self._update(self._movies, self._movie_repo, movie, changes)

    async def update_actor(
        self,
        actor: Actor,
        photo_data: bytes | None = None,
        **changes: Any,
    ) -> Actor:
        """Apply a partial update to a listed actor."""
        if photo_data is not None:
            new_ref = await self._store_image(photo_data)
            if new_ref is not None:
                changes["photo_ref"] = new_ref
        return await self._update(self._actors, self._actor_repo, actor, changes)

    async def update_genre(self, genre: Genre, **changes: Any) -> Genre:
        """Apply a partial update to a listed genre."""
        return await self._update(self._genres, self._genre_repo, genre, changes)

    async def clear_movie_relation(self, movie: Movie, relation: str) -> Movie:
        """Unlink every actor or every genre from a listed movie.

        Args:
            movie: Movie in the working list.
            relation: ``"actors"`` or ``"genres"``.
        """
        current = self._require(self._movies, movie)
        updated = await self._movie_repo.clear_relation(current, relation)
        self._movies.replace(updated)
        return updated

    async def clear_actor_movies(self, actor: Actor) -> Actor:
        current = self._require(self._actors, actor)
        updated = await self._actor_repo.clear_relation(current, "movies")
        self._actors.replace(updated)
        return updated

    async def clear_genre_movies(self, genre: Genre) -> Genre:
        current = self._require(self._genres, genre)
        updated = await self._genre_repo.clear_relation(current, "movies")
        self._genres.replace(updated)
        return updated

    async def clear_movie_poster(self, movie: Movie) -> Movie:
        """Remove the poster of a listed movie and delete its file.

        Args:
            movie: Movie in the working list.

        Returns:
            Updated movie without a poster.
        """
        return await self._clear_image(self._movies, self._movie_repo, movie)

    async def clear_actor_photo(self, actor: Actor) -> Actor:
        """Remove the photo of a listed actor and delete its file."""
        return await self._clear_image(self._actors, self._actor_repo, actor)

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------

    async def delete_movie(self, movie: Movie) -> None:
        """Delete a listed movie together with its poster."""
        await self._delete(self._movies, self._movie_repo, movie)

    async def delete_actor(self, actor: Actor) -> None:
        """Delete a listed actor together with its photo."""
        await self._delete(self._actors, self._actor_repo, actor)

    async def delete_genre(self, genre: Genre) -> None:
        """Delete a listed genre; its movies are kept."""
        await self._delete(self._genres, self._genre_repo, genre)

    # -------------------------------------------------------------------------
    # Quick edits
    # -------------------------------------------------------------------------

    async def toggle_favorite_movie(self, movie: Movie) -> bool:
        """Flip the favorite flag of a listed movie.

        Returns:
            True if the movie was listed and toggled, False otherwise.
        """
        return await self._toggle(self._movies, self._movie_repo, movie)

    async def toggle_favorite_actor(self, actor: Actor) -> bool:
        return await self._toggle(self._actors, self._actor_repo, actor)

    async def toggle_favorite_genre(self, genre: Genre) -> bool:
        return await self._toggle(self._genres, self._genre_repo, genre)

    async def update_rating(self, movie: Movie, rating: int) -> bool:
        """Set the rating of a listed movie.

        Returns:
            True if the movie was listed and rated, False otherwise.
        """
        current = self._movies.find(movie)
        if current is None:
            return False
        logger.debug(f"Updating rating for movie: {current.title}")
        self._movies.replace(await self._movie_repo.update_rating(current, rating))
        return True

    # -------------------------------------------------------------------------
    # Shared implementations
    # -------------------------------------------------------------------------

    @staticmethod
    def _require(working_set: WorkingSet[ModelT], entity: ModelT) -> ModelT:
        current = working_set.find(entity)
        if current is None:
            raise EntityNotFoundError(type(entity).__name__, entity.id)
        return current

    async def _add(
        self,
        working_set: WorkingSet[ModelT],
        repo: BaseRepository[ModelT],
        entity: ModelT,
    ) -> bool:
        if working_set.by_name(entity.name) is not None:
            logger.debug(f"Skipping duplicate {repo.kind} '{entity.name}'")
            return False
        working_set.append(await repo.add(entity))
        return True

    async def _update(
        self,
        working_set: WorkingSet[ModelT],
        repo: BaseRepository[ModelT],
        entity: ModelT,
        changes: dict[str, Any],
    ) -> ModelT:
        current = self._require(working_set, entity)
        previous_ref = current.image_ref
        for relation in repo.relations:
            if changes.get(relation):
                changes[relation] = [_entity_id(member) for member in changes[relation]]

        try:
            updated = await repo.update(current, changes)
        except RepositoryError:
            # The new image never became reachable from the store
            new_ref = changes.get("poster_ref") or changes.get("photo_ref")
            if new_ref and new_ref != previous_ref:
                await self._images.delete(new_ref)
            raise

        working_set.replace(updated)
        if previous_ref and previous_ref != updated.image_ref:
            await self._images.delete(previous_ref)
        return updated

    async def _clear_image(
        self,
        working_set: WorkingSet[ModelT],
        repo: BaseRepository[ModelT],
        entity: ModelT,
    ) -> ModelT:
        current = self._require(working_set, entity)
        previous_ref = current.image_ref
        updated = await repo.clear_image(current)
        working_set.replace(updated)
        if previous_ref:
            await self._images.delete(previous_ref)
        return updated

    async def _delete(
        self,
        working_set: WorkingSet[ModelT],
        repo: BaseRepository[ModelT],
        entity: ModelT,
    ) -> None:
        current = self._require(working_set, entity)
        logger.debug(f"{repo.kind} count before deletion: {len(working_set)}")
        await repo.delete(current)
        if current.image_ref:
            await self._images.delete(current.image_ref)
        working_set.remove(current)
        logger.debug(f"{repo.kind} count after deletion: {len(working_set)}")

    async def _toggle(
        self,
        working_set: WorkingSet[ModelT],
        repo: BaseRepository[ModelT],
        entity: ModelT,
    ) -> bool:
        current = working_set.find(entity)
        if current is None:
            return False
        logger.debug(f"Toggling favorite for {repo.kind}: {current.id}")
        working_set.replace(await repo.toggle_favorite(current))
        return True

    async def _store_image(self, data: bytes) -> str | None:
        """Save uploaded bytes; a failure leaves the entity without image."""
        try:
            return await self._images.save(data)
        except ImageStoreError as e:
            logger.error(f"Image not stored: {e}")
            return None


def _entity_id(member: Any) -> str:
    """Accept either an entity or a bare id."""
    return member if isinstance(member, str) else member.id

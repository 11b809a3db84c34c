"""Base repository with generic catalog operations.

Provides CRUD, filtered fetch and substring search for one entity
type. Each repository instance serializes every operation behind its
own ``asyncio.Lock``: concurrent callers observe one call at a time, in
the order they were issued. No lock is shared between repositories.

Read paths degrade gracefully (errors are logged and an empty result
is returned). Write paths commit immediately and raise
``CommitFailedError`` when the commit fails.
"""

import asyncio
from collections.abc import Iterable, Sequence
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import ColumnElement, Select, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.interfaces import LoaderOption

from movielibrary.database.connection import DatabaseConnection
from movielibrary.database.exceptions import (
    CommitFailedError,
    EntityNotFoundError,
    UnsupportedFilterError,
)
from movielibrary.database.models.base import Base
from movielibrary.database.repositories.filters import Filter, MembershipFilter, ScalarFilter
from movielibrary.database.schemas import EntityUpdate
from movielibrary.utils.logger import setup_logger

logger = setup_logger("database.repositories")

# Generic type variable bound to Base model
ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Generic repository providing common catalog operations.

    Subclasses declare the model, its relationship collections, the
    related model for each collection, the update schema and the filter
    criteria they accept.

    Attributes:
        model: SQLAlchemy model class.
        relations: Relationship collection names on the model.
        related_models: Model class behind each relationship.
        update_schema: Pydantic schema for partial updates.
        supported_filters: Criterion classes accepted by ``fetch``.
        image_field: Column holding the owned image reference, if any.
    """

    model: type[ModelT]
    relations: ClassVar[tuple[str, ...]] = ()
    related_models: ClassVar[dict[str, type[Base]]] = {}
    update_schema: ClassVar[type[EntityUpdate]] = EntityUpdate
    supported_filters: ClassVar[tuple[type, ...]] = ()
    image_field: ClassVar[str | None] = None

    def __init__(self, database: DatabaseConnection) -> None:
        """Initialize repository.

        Args:
            database: Shared database connection.
        """
        self._database = database
        self._lock = asyncio.Lock()

    @property
    def kind(self) -> str:
        """Entity type name used in logs and errors."""
        return self.model.__name__

    # -------------------------------------------------------------------------
    # Query building
    # -------------------------------------------------------------------------

    def _load_options(self) -> list[LoaderOption]:
        """Eager-loading options applied to every query.

        Returned entities are detached from their session, so every
        collection a caller may read has to be loaded up front.
        """
        return []

    def _select(self) -> Select[tuple[ModelT]]:
        """Base SELECT with eager loading and deterministic ordering."""
        return (
            select(self.model)
            .options(*self._load_options())
            .order_by(self.model.name, self.model.id)
        )

    def _compile_filters(
        self,
        filters: Iterable[Filter] | None,
    ) -> tuple[list[ColumnElement[bool]], list[MembershipFilter]]:
        """Split criteria into SQL conditions and in-memory checks.

        Args:
            filters: Criteria to combine with AND semantics.

        Returns:
            Tuple of (SQL conditions, membership filters).

        Raises:
            UnsupportedFilterError: If a criterion does not apply.
        """
        conditions: list[ColumnElement[bool]] = []
        membership: list[MembershipFilter] = []
        for criterion in filters or ():
            if not isinstance(criterion, self.supported_filters):
                raise UnsupportedFilterError(
                    f"{type(criterion).__name__} does not apply to {self.kind}"
                )
            if isinstance(criterion, ScalarFilter):
                conditions.append(criterion.clause(self.model))
            else:
                membership.append(criterion)
        return conditions, membership

    async def _query(self, *conditions: ColumnElement[bool]) -> list[ModelT]:
        """Run a SELECT; errors propagate to the caller."""
        async with self._database.async_session() as session:
            result = await session.scalars(self._select().where(*conditions))
            return list(result.all())

    async def _get_fresh(self, entity_id: str) -> ModelT | None:
        """Load one entity in a new session."""
        async with self._database.async_session() as session:
            stmt = self._select().where(self.model.id == entity_id)
            return (await session.scalars(stmt)).first()

    async def _load_for_write(self, session: AsyncSession, entity_id: str) -> ModelT:
        """Load the persisted row to modify inside *session*.

        Raises:
            EntityNotFoundError: If no row has this id.
        """
        row = await session.get(self.model, entity_id, options=self._load_options())
        if row is None:
            logger.warning(f"{self.kind} {entity_id} not found in store")
            raise EntityNotFoundError(self.kind, entity_id)
        return row

    async def _resolve(
        self,
        session: AsyncSession,
        relation: str,
        ids: Sequence[str],
    ) -> list[Base]:
        """Load related rows by id, preserving the requested order.

        Raises:
            EntityNotFoundError: If a related id is not persisted.
        """
        related = self.related_models[relation]
        unique_ids = list(dict.fromkeys(ids))
        result = await session.scalars(select(related).where(related.id.in_(unique_ids)))
        by_id = {row.id: row for row in result.all()}
        missing = [related_id for related_id in unique_ids if related_id not in by_id]
        if missing:
            raise EntityNotFoundError(related.__name__, missing[0])
        return [by_id[related_id] for related_id in unique_ids]

    async def _commit(self, session: AsyncSession, action: str, entity_id: str) -> None:
        """Commit immediately; a failure here is unrecoverable.

        Raises:
            CommitFailedError: If the flush or commit fails.
        """
        try:
            await session.commit()
        except SQLAlchemyError as e:
            logger.critical(f"Commit failed during {action} of {self.kind} {entity_id}: {e}")
            raise CommitFailedError(action, entity_id, e) from e

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def fetch_all(self) -> list[ModelT]:
        """Retrieve every entity sorted by name then id.

        Returns:
            All entities, or an empty list if the store cannot be read.
        """
        async with self._lock:
            try:
                return await self._query()
            except SQLAlchemyError as e:
                logger.error(f"Error fetching {self.kind} list: {e}")
                return []

    async def fetch(self, filters: Iterable[Filter] | None) -> list[ModelT]:
        """Retrieve entities matching every criterion.

        Args:
            filters: Criteria combined with AND. ``None`` fetches all.

        Returns:
            Matching entities sorted by name then id, or an empty list
            if the store cannot be read.

        Raises:
            UnsupportedFilterError: If a criterion does not apply.
        """
        conditions, membership = self._compile_filters(filters)
        async with self._lock:
            try:
                rows = await self._query(*conditions)
            except SQLAlchemyError as e:
                logger.error(f"Error fetching filtered {self.kind} list: {e}")
                return []
        return [row for row in rows if all(check.matches(row) for check in membership)]

    async def search(self, term: str | None) -> list[ModelT]:
        """Case-insensitive substring search over name and summary.

        Args:
            term: Text to look for. Empty or None returns everything.

        Returns:
            Matching entities, or an empty list on read failure.
        """
        if not term:
            return await self.fetch_all()
        condition = or_(
            self.model.name.icontains(term, autoescape=True),
            self.model.summary.icontains(term, autoescape=True),
        )
        async with self._lock:
            try:
                return await self._query(condition)
            except SQLAlchemyError as e:
                logger.error(f"Error searching {self.kind} for '{term}': {e}")
                return []

    async def get(self, entity_id: str) -> ModelT | None:
        """Retrieve a fresh copy of one entity.

        Args:
            entity_id: Entity identifier.

        Returns:
            Entity or None if absent or unreadable.
        """
        async with self._lock:
            try:
                return await self._get_fresh(entity_id)
            except SQLAlchemyError as e:
                logger.error(f"Error fetching {self.kind} {entity_id}: {e}")
                return None

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def add(self, entity: ModelT) -> ModelT:
        """Insert a new entity and commit.

        Related entities are matched by id against the store; they must
        already be persisted. No duplicate-name check happens here.

        Args:
            entity: New entity.

        Returns:
            Freshly loaded copy of the inserted entity.

        Raises:
            EntityNotFoundError: If a related entity is not persisted.
            CommitFailedError: If the commit fails.
        """
        async with self._lock:
            async with self._database.async_session() as session:
                for relation in self.relations:
                    members = getattr(entity, relation)
                    if members:
                        ids = [member.id for member in members]
                        setattr(entity, relation, await self._resolve(session, relation, ids))
                session.add(entity)
                await self._commit(session, "add", entity.id)
            logger.debug(f"Added {self.kind} {entity.id}")
            return await self._get_fresh(entity.id)

    async def update(self, entity: ModelT, changes: EntityUpdate | dict[str, Any]) -> ModelT:
        """Apply a partial update and commit.

        Args:
            entity: Entity to update (only its id is used).
            changes: Update schema instance or mapping of fields to set.

        Returns:
            Freshly loaded copy of the updated entity.

        Raises:
            EntityNotFoundError: If the entity or a related id is absent.
            CommitFailedError: If the commit fails.
        """
        if not isinstance(changes, BaseModel):
            changes = self.update_schema.model_validate(changes)
        async with self._lock:
            async with self._database.async_session() as session:
                row = await self._load_for_write(session, entity.id)
                for key, value in changes.scalar_changes(self.relations).items():
                    setattr(row, key, value)
                for relation, ids in changes.relation_changes(self.relations).items():
                    setattr(row, relation, await self._resolve(session, relation, ids))
                await self._commit(session, "update", entity.id)
            return await self._get_fresh(entity.id)

    async def clear_relation(self, entity: ModelT, relation: str) -> ModelT:
        """Empty one relationship collection and commit.

        Args:
            entity: Entity to modify.
            relation: Relationship name (e.g. 'actors').

        Returns:
            Freshly loaded copy of the entity.

        Raises:
            ValueError: If the model has no such relationship.
            EntityNotFoundError: If the entity is absent.
            CommitFailedError: If the commit fails.
        """
        if relation not in self.relations:
            raise ValueError(f"{self.kind} has no relationship '{relation}'")
        async with self._lock:
            async with self._database.async_session() as session:
                row = await self._load_for_write(session, entity.id)
                setattr(row, relation, [])
                await self._commit(session, f"clear {relation}", entity.id)
            return await self._get_fresh(entity.id)

    async def clear_image(self, entity: ModelT) -> ModelT:
        """Drop the image reference of an entity and commit.

        ``update`` treats ``None`` as "unchanged", so removing an image
        goes through here. The image file itself is left alone.

        Args:
            entity: Entity to modify.

        Returns:
            Freshly loaded copy of the entity.

        Raises:
            ValueError: If the model carries no image.
            EntityNotFoundError: If the entity is absent.
            CommitFailedError: If the commit fails.
        """
        if self.image_field is None:
            raise ValueError(f"{self.kind} has no image")
        async with self._lock:
            async with self._database.async_session() as session:
                row = await self._load_for_write(session, entity.id)
                setattr(row, self.image_field, None)
                await self._commit(session, "clear image", entity.id)
            return await self._get_fresh(entity.id)

    async def delete(self, entity: ModelT) -> None:
        """Delete an entity and detach it from every related entity.

        Args:
            entity: Entity to delete.

        Raises:
            EntityNotFoundError: If the entity is absent.
            CommitFailedError: If the commit fails.
        """
        async with self._lock:
            async with self._database.async_session() as session:
                row = await self._load_for_write(session, entity.id)
                await session.delete(row)
                await self._commit(session, "delete", entity.id)
            logger.debug(f"Deleted {self.kind} {entity.id}")

    async def toggle_favorite(self, entity: ModelT) -> ModelT:
        """Flip the persisted favorite flag and commit.

        The stored value is flipped, not the caller's copy, so two
        concurrent toggles cancel out instead of losing an update.

        Args:
            entity: Entity to toggle.

        Returns:
            Freshly loaded copy of the entity.

        Raises:
            EntityNotFoundError: If the entity is absent.
            CommitFailedError: If the commit fails.
        """
        async with self._lock:
            async with self._database.async_session() as session:
                row = await self._load_for_write(session, entity.id)
                row.is_favorite = not row.is_favorite
                await self._commit(session, "toggle favorite", entity.id)
            return await self._get_fresh(entity.id)

"""Pydantic schemas for partial updates.

Only fields the caller actually sets are applied (``model_fields_set``).
Relationship fields hold related entity ids; absent, ``None`` or an
empty list all mean "leave the relationship alone". Clearing a
relationship goes through ``clear_relation`` instead.

Scalar fields follow the same rule: ``None`` leaves the stored value
alone. Image references are removed with ``clear_image``.
"""

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# BASE
# =============================================================================


class EntityUpdate(BaseModel):
    """Common update fields."""

    model_config = ConfigDict(extra="forbid")

    summary: str | None = None

    def scalar_changes(self, relations: tuple[str, ...]) -> dict[str, object]:
        """Explicitly set, non-null scalar fields.

        Args:
            relations: Names of relationship fields to leave out.

        Returns:
            Field name to new value mapping.
        """
        data = self.model_dump(exclude_unset=True, exclude_none=True)
        return {key: value for key, value in data.items() if key not in relations}

    def relation_changes(self, relations: tuple[str, ...]) -> dict[str, list[str]]:
        """Relationship fields carrying a non-empty id list.

        Args:
            relations: Relationship field names of the entity.

        Returns:
            Relationship name to ordered id list mapping.
        """
        changes = {}
        for relation in relations:
            ids = getattr(self, relation, None)
            if relation in self.model_fields_set and ids:
                changes[relation] = list(ids)
        return changes


# =============================================================================
# ENTITIES
# =============================================================================


class MovieUpdate(EntityUpdate):
    """Partial movie update."""

    title: str | None = Field(default=None, min_length=1)
    poster_ref: str | None = None
    rating: int | None = None
    release_year: int | None = None
    actors: list[str] | None = None
    genres: list[str] | None = None


class ActorUpdate(EntityUpdate):
    """Partial actor update."""

    name: str | None = Field(default=None, min_length=1)
    photo_ref: str | None = None
    movies: list[str] | None = None


class GenreUpdate(EntityUpdate):
    """Partial genre update."""

    name: str | None = Field(default=None, min_length=1)
    movies: list[str] | None = None

"""SQLAlchemy declarative base and common mixins.

Provides the foundation for all ORM models with common
columns and behaviors.
"""

from typing import Any
from uuid import uuid4

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    All models should inherit from this class to be part
    of the same metadata and support table creation.
    """

    pass


class CatalogEntryMixin:
    """Columns and identity semantics shared by movies, actors and genres.

    The id is generated when the object is constructed rather than at
    flush time, so a new entity can be compared, hashed and referenced
    before it is persisted. Two instances are equal iff their ids match;
    content fields play no part, so a stale copy still equals the
    persisted row.
    """

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    summary: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_favorite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("id", str(uuid4()))
        kwargs.setdefault("is_favorite", False)
        super().__init__(**kwargs)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))

"""Filter criteria for repository queries.

Scalar criteria compile to SQL conditions and run inside the storage
query. Membership criteria need to walk a relationship collection, so
they are evaluated in memory over the query result.

Usage:
    movies = await movie_repo.fetch([
        NameFilter("alien"),
        FavoriteFilter(True),
        GenresFilter({horror.id, scifi.id}),
    ])
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, ClassVar

from sqlalchemy import ColumnElement

# =============================================================================
# SCALAR CRITERIA
# =============================================================================


class ScalarFilter(ABC):
    """Criterion pushed into the SQL WHERE clause."""

    @abstractmethod
    def clause(self, model: Any) -> ColumnElement[bool]:
        """Build the SQL condition for *model*."""


@dataclass(frozen=True)
class NameFilter(ScalarFilter):
    """Case-insensitive substring match on the name (title for movies)."""

    name: str

    def clause(self, model: Any) -> ColumnElement[bool]:
        return model.name.icontains(self.name, autoescape=True)


@dataclass(frozen=True)
class FavoriteFilter(ScalarFilter):
    """Exact match on the favorite flag."""

    is_favorite: bool

    def clause(self, model: Any) -> ColumnElement[bool]:
        return model.is_favorite == self.is_favorite


@dataclass(frozen=True)
class RatingFilter(ScalarFilter):
    """Exact rating match (movies only)."""

    rating: int

    def clause(self, model: Any) -> ColumnElement[bool]:
        return model.rating == self.rating


@dataclass(frozen=True)
class ReleaseYearFilter(ScalarFilter):
    """Exact release year match (movies only)."""

    year: int

    def clause(self, model: Any) -> ColumnElement[bool]:
        return model.release_year == self.year


# =============================================================================
# MEMBERSHIP CRITERIA
# =============================================================================


@dataclass(frozen=True, init=False)
class MembershipFilter:
    """Entity must be linked to at least one of ``ids`` through ``relation``.

    An empty id set matches nothing.
    """

    ids: frozenset[str]

    relation: ClassVar[str] = ""

    def __init__(self, ids: Iterable[str]) -> None:
        object.__setattr__(self, "ids", frozenset(ids))

    def matches(self, entity: Any) -> bool:
        """Check the relationship collection of *entity*."""
        return any(related.id in self.ids for related in getattr(entity, self.relation))


@dataclass(frozen=True, init=False)
class GenresFilter(MembershipFilter):
    """Movies having a genre among the given ids."""

    relation: ClassVar[str] = "genres"


@dataclass(frozen=True, init=False)
class ActorsFilter(MembershipFilter):
    """Movies featuring an actor among the given ids."""

    relation: ClassVar[str] = "actors"


@dataclass(frozen=True, init=False)
class MoviesFilter(MembershipFilter):
    """Actors or genres linked to a movie among the given ids."""

    relation: ClassVar[str] = "movies"


Filter = ScalarFilter | MembershipFilter

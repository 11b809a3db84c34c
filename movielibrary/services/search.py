"""Cross-entity search.

Runs the same substring query against movies, actors and genres
concurrently and returns three independent lists. There is no merged
ranking: each list keeps its repository ordering.
"""

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from movielibrary.database.models import Actor, Genre, Movie
from movielibrary.database.repositories import ActorRepository, GenreRepository, MovieRepository
from movielibrary.database.repositories.filters import Filter
from movielibrary.utils.logger import setup_logger

logger = setup_logger("services.search")


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass
class SearchResults:
    """Matches grouped by entity type.

    Attributes:
        movies: Matching movies.
        actors: Matching actors.
        genres: Matching genres.
    """

    movies: list[Movie] = field(default_factory=list)
    actors: list[Actor] = field(default_factory=list)
    genres: list[Genre] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Number of matches across all types."""
        return len(self.movies) + len(self.actors) + len(self.genres)


# =============================================================================
# SEARCH INDEX
# =============================================================================


class SearchIndex:
    """Search coordinator over the three repositories.

    A failing entity type contributes an empty list; the other two
    are still returned.
    """

    def __init__(
        self,
        movie_repo: MovieRepository,
        actor_repo: ActorRepository,
        genre_repo: GenreRepository,
    ) -> None:
        self._movie_repo = movie_repo
        self._actor_repo = actor_repo
        self._genre_repo = genre_repo

    async def fetch_by_partial_string(self, term: str | None) -> SearchResults:
        """Find entities whose name or summary contains *term*.

        Args:
            term: Case-insensitive substring. Empty or None matches all.

        Returns:
            Matches grouped by entity type.
        """
        results = await asyncio.gather(
            self._movie_repo.search(term),
            self._actor_repo.search(term),
            self._genre_repo.search(term),
            return_exceptions=True,
        )
        search_results = self._collect(results)
        logger.debug(f"Search '{term or ''}' matched {search_results.total} entities")
        return search_results

    async def fetch_all(self) -> SearchResults:
        """Every movie, actor and genre."""
        results = await asyncio.gather(
            self._movie_repo.fetch_all(),
            self._actor_repo.fetch_all(),
            self._genre_repo.fetch_all(),
            return_exceptions=True,
        )
        return self._collect(results)

    async def fetch_movies(self, filters: Iterable[Filter] | None = None) -> list[Movie]:
        return await self._movie_repo.fetch(filters)

    async def fetch_actors(self, filters: Iterable[Filter] | None = None) -> list[Actor]:
        return await self._actor_repo.fetch(filters)

    async def fetch_genres(self, filters: Iterable[Filter] | None = None) -> list[Genre]:
        return await self._genre_repo.fetch(filters)

    @staticmethod
    def _collect(results: list[Any]) -> SearchResults:
        lists = []
        for kind, result in zip(("movies", "actors", "genres"), results, strict=True):
            if isinstance(result, Exception):
                logger.error(f"Search over {kind} failed: {result}")
                lists.append([])
            elif isinstance(result, BaseException):
                raise result
            else:
                lists.append(result)
        return SearchResults(*lists)

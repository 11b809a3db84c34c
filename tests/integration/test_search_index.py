"""Integration tests for SearchIndex."""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from movielibrary.database.models import Actor, Genre, Movie
from movielibrary.database.repositories import (
    ActorRepository,
    FavoriteFilter,
    GenreRepository,
    MovieRepository,
    NameFilter,
)
from movielibrary.services.search import SearchIndex, SearchResults


@pytest.fixture
async def populated(
    movie_repo: MovieRepository,
    actor_repo: ActorRepository,
    genre_repo: GenreRepository,
) -> None:
    scifi = await genre_repo.add(Genre(name="Science Fiction", summary="Space and aliens"))
    await genre_repo.add(Genre(name="Crime", summary="Heists"))
    weaver = await actor_repo.add(Actor(name="Sigourney Weaver", summary="Played Ripley"))
    await actor_repo.add(Actor(name="Al Pacino"))
    await movie_repo.add(Movie(title="Alien", release_year=1979, actors=[weaver], genres=[scifi]))
    await movie_repo.add(Movie(title="Heat", release_year=1995, summary="A heist in LA"))


class TestSearchResults:
    """SearchResults totals."""

    @staticmethod
    def test_total() -> None:
        """Total counts every list."""
        results = SearchResults(movies=[Movie(title="Heat", release_year=1995)])
        assert results.total == 1

    @staticmethod
    def test_defaults_empty() -> None:
        """A fresh result holds nothing."""
        assert SearchResults().total == 0


@pytest.mark.usefixtures("populated")
class TestFetchByPartialString:
    """fetch_by_partial_string() over the three entity types."""

    @staticmethod
    async def test_three_independent_lists(search_index: SearchIndex):
        """Each entity type is searched on its own."""
        results = await search_index.fetch_by_partial_string("alien")

        assert [m.title for m in results.movies] == ["Alien"]
        assert results.actors == []
        assert [g.name for g in results.genres] == ["Science Fiction"]

    @staticmethod
    async def test_summary_matches(search_index: SearchIndex):
        """Summaries are searched case-insensitively."""
        results = await search_index.fetch_by_partial_string("HEIST")

        assert [m.title for m in results.movies] == ["Heat"]
        assert [g.name for g in results.genres] == ["Crime"]

    @staticmethod
    async def test_actor_summary(search_index: SearchIndex):
        """Actor summaries are searched."""
        results = await search_index.fetch_by_partial_string("ripley")
        assert [a.name for a in results.actors] == ["Sigourney Weaver"]

    @staticmethod
    async def test_empty_term_returns_everything(search_index: SearchIndex):
        """An empty term returns every entity."""
        results = await search_index.fetch_by_partial_string("")
        assert (len(results.movies), len(results.actors), len(results.genres)) == (2, 2, 2)

        everything = await search_index.fetch_all()
        assert everything.total == results.total

    @staticmethod
    async def test_none_term(search_index: SearchIndex):
        """A None term behaves like an empty one."""
        assert (await search_index.fetch_by_partial_string(None)).total == 6

    @staticmethod
    async def test_no_match(search_index: SearchIndex):
        """An unmatched term returns nothing."""
        assert (await search_index.fetch_by_partial_string("zzz")).total == 0

    @staticmethod
    async def test_failing_type_yields_empty_list(search_index: SearchIndex):
        """A read failure empties only its own list."""
        failure = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("locked")))
        with patch.object(ActorRepository, "_query", failure):
            results = await search_index.fetch_by_partial_string("a")

        assert results.actors == []
        assert results.movies
        assert results.genres

    @staticmethod
    async def test_unexpected_error_isolated(search_index: SearchIndex):
        """Any error in one search leaves the others intact."""
        with patch.object(GenreRepository, "search", AsyncMock(side_effect=RuntimeError("boom"))):
            results = await search_index.fetch_by_partial_string("Heat")

        assert results.genres == []
        assert [m.title for m in results.movies] == ["Heat"]


@pytest.mark.usefixtures("populated")
class TestFilteredFetch:
    """Filtered fetches per entity type."""

    @staticmethod
    async def test_fetch_movies(search_index: SearchIndex):
        """Movies are fetched by criteria."""
        assert [m.title for m in await search_index.fetch_movies([NameFilter("he")])] == ["Heat"]

    @staticmethod
    async def test_fetch_without_filters(search_index: SearchIndex):
        """No criteria fetches everything."""
        assert len(await search_index.fetch_actors()) == 2
        assert len(await search_index.fetch_genres()) == 2

    @staticmethod
    async def test_fetch_favorites(search_index: SearchIndex):
        """No genre is a favorite yet."""
        assert await search_index.fetch_genres([FavoriteFilter(True)]) == []

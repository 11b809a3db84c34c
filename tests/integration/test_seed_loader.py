"""Integration tests for SeedLoader.

Run:
    pytest tests/integration/test_seed_loader.py -v
"""

import json
from pathlib import Path

import pytest

from movielibrary.database.exceptions import SeedLoadError
from movielibrary.database.importer import SeedLoader
from movielibrary.database.importer.schemas import SEED_DATASET, SeedMovie
from movielibrary.database.repositories import ActorRepository, GenreRepository, MovieRepository
from movielibrary.images.store import ImageStore, is_generated
from movielibrary.services.catalog import CatalogService
from movielibrary.settings import Settings

RECORDS = [
    {
        "title": "Alien",
        "posterAssetName": "alien",
        "summary": "In space no one can hear you scream.",
        "rating": 5,
        "releaseYear": 1979,
        "genres": [{"name": "Horror"}, {"name": "Science Fiction"}],
        "actors": [{"name": "Sigourney Weaver", "posterAssetName": "weaver"}],
    },
    {
        "title": "Aliens",
        "posterAssetName": "aliens",
        "rating": 5,
        "releaseYear": 1986,
        "genres": [{"name": "Action"}, {"name": "Science Fiction"}],
        "actors": [
            {"name": "Sigourney Weaver", "posterAssetName": "weaver"},
            {"name": "Michael Biehn", "posterAssetName": "biehn"},
        ],
    },
]


@pytest.fixture
def seed_loader(catalog: CatalogService, image_store: ImageStore, test_settings: Settings):
    return SeedLoader(catalog, image_store, test_settings.seed.resolved_seed_file)


class TestCollectAssetNames:
    """collect_asset_names() over validated records."""

    @staticmethod
    def test_unique_in_order() -> None:
        """Posters and photos are collected once, in dataset order."""
        names = SeedLoader.collect_asset_names(SEED_DATASET.validate_python(RECORDS))

        assert names == ["alien", "weaver", "aliens", "biehn"]

    @staticmethod
    def test_skips_empty_and_generated() -> None:
        """Generated references are already in managed storage."""
        record = SeedMovie(
            title="Heat",
            release_year=1995,
            poster_asset_name="1b4e28ba-2fa1-11d2-883f-0016d3cca427.jpg",
        )
        assert SeedLoader.collect_asset_names([record]) == []

    @staticmethod
    def test_hyphenated_asset_name_collected() -> None:
        """A hyphen alone does not make a name generated."""
        record = SeedMovie(title="Heat", release_year=1995, poster_asset_name="heat-poster")
        assert SeedLoader.collect_asset_names([record]) == ["heat-poster"]


class TestLoad:
    """load() over in-memory records."""

    @staticmethod
    async def test_shared_actor_created_once(
        seed_loader: SeedLoader,
        actor_repo: ActorRepository,
        genre_repo: GenreRepository,
        movie_repo: MovieRepository,
    ):
        """Actors and genres shared by movies are created once."""
        result = await seed_loader.load(RECORDS)

        actors = await actor_repo.fetch_all()
        assert [a.name for a in actors] == ["Michael Biehn", "Sigourney Weaver"]
        weaver = actors[1]
        assert [m.title for m in weaver.movies] == ["Alien", "Aliens"]

        genres = await genre_repo.fetch_all()
        assert [g.name for g in genres] == ["Action", "Horror", "Science Fiction"]

        assert len(await movie_repo.fetch_all()) == 2
        assert result.movies_created == 2
        assert result.actors_created == 2
        assert result.genres_created == 3

    @staticmethod
    async def test_bundled_images_migrated(
        seed_loader: SeedLoader,
        movie_repo: MovieRepository,
        actor_repo: ActorRepository,
        bundled_asset,
    ):
        """Shipped assets are moved into managed storage."""
        bundled_asset("alien", 300, 450)
        bundled_asset("weaver", 400, 400)

        result = await seed_loader.load(RECORDS)

        assert result.images_migrated == 2
        alien, aliens = await movie_repo.fetch_all()
        assert is_generated(alien.poster_ref)
        # No asset shipped for this one; the bundled name is kept
        assert aliens.poster_ref == "aliens"

        weaver = (await actor_repo.fetch_all())[1]
        assert is_generated(weaver.photo_ref)

    @staticmethod
    async def test_existing_entities_reused(
        seed_loader: SeedLoader,
        catalog: CatalogService,
        genre_repo: GenreRepository,
    ):
        """A listed genre is linked, not recreated."""
        await catalog.create_genre("Horror", "Already here")

        result = await seed_loader.load(RECORDS)

        assert result.genres_created == 2
        horror = [g for g in await genre_repo.fetch_all() if g.name == "Horror"]
        assert len(horror) == 1
        assert horror[0].summary == "Already here"
        assert [m.title for m in horror[0].movies] == ["Alien"]

    @staticmethod
    async def test_catalog_lists_updated(seed_loader: SeedLoader, catalog: CatalogService):
        """The catalog working lists see the imported entities."""
        await seed_loader.load(RECORDS)

        assert len(catalog.movies) == 2
        assert len(catalog.actors) == 2
        assert len(catalog.genres) == 3

    @staticmethod
    async def test_running_twice_duplicates_movies(
        seed_loader: SeedLoader, movie_repo: MovieRepository, actor_repo: ActorRepository
    ):
        """Movies are not deduplicated across runs; actors are."""
        await seed_loader.load(RECORDS)
        second = await seed_loader.load(RECORDS)

        assert second.actors_created == 0
        assert len(await movie_repo.fetch_all()) == 4
        assert len(await actor_repo.fetch_all()) == 2

    @staticmethod
    async def test_invalid_record(seed_loader: SeedLoader, movie_repo: MovieRepository):
        """An invalid record aborts before anything is written."""
        with pytest.raises(SeedLoadError):
            await seed_loader.load([{"title": "No year"}])

        assert await movie_repo.fetch_all() == []


class TestLoadFile:
    """load_file() and load_bundled()."""

    @staticmethod
    async def test_load_file(seed_loader: SeedLoader, tmp_path: Path):
        """A JSON file on disk is imported."""
        seed_file = tmp_path / "seed.json"
        seed_file.write_text(json.dumps(RECORDS), encoding="utf-8")

        result = await seed_loader.load_file(seed_file)

        assert result.movies_created == 2
        assert result.duration_seconds >= 0

    @staticmethod
    async def test_missing_file(seed_loader: SeedLoader, tmp_path: Path):
        """A missing file is a SeedLoadError."""
        with pytest.raises(SeedLoadError):
            await seed_loader.load_file(tmp_path / "absent.json")

    @staticmethod
    async def test_malformed_json(seed_loader: SeedLoader, tmp_path: Path):
        """Malformed JSON is a SeedLoadError."""
        seed_file = tmp_path / "seed.json"
        seed_file.write_text("[{not json", encoding="utf-8")

        with pytest.raises(SeedLoadError):
            await seed_loader.load_file(seed_file)

    @staticmethod
    async def test_bundled_dataset(
        seed_loader: SeedLoader, movie_repo: MovieRepository, actor_repo: ActorRepository
    ):
        """The dataset shipped with the package imports cleanly."""
        result = await seed_loader.load_bundled()

        movies = await movie_repo.fetch_all()
        assert result.movies_created == len(movies) == 5
        names = [a.name for a in await actor_repo.fetch_all()]
        assert names.count("Sigourney Weaver") == 1
        assert names.count("Michael Biehn") == 1

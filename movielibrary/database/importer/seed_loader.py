"""Seed dataset importer.

Populates an empty catalog from the bundled JSON dataset:
    1. Validate the records
    2. Migrate every bundled image into managed storage
    3. Create genres and actors, reusing any listed with the same name
    4. Create the movies linked to them

The loader does not remember having run; the caller guards it with a
one-shot flag. A run that fails midway keeps what it already added.
"""

import time
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from movielibrary.database.exceptions import SeedLoadError
from movielibrary.database.importer.schemas import SEED_DATASET, SeedActor, SeedGenre, SeedMovie
from movielibrary.database.models import Actor, Genre
from movielibrary.images.store import ImageStore, is_generated
from movielibrary.services.catalog import CatalogService
from movielibrary.utils.logger import setup_logger

logger = setup_logger("database.importer.seed")


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass
class SeedResult:
    """Results from a seed run.

    Attributes:
        movies_created: Movies inserted.
        actors_created: Actors inserted.
        genres_created: Genres inserted.
        images_migrated: Bundled images copied into managed storage.
        duration_seconds: Total execution time.
    """

    movies_created: int = 0
    actors_created: int = 0
    genres_created: int = 0
    images_migrated: int = 0
    duration_seconds: float = 0.0


# =============================================================================
# SEED LOADER
# =============================================================================


class SeedLoader:
    """Imports the seed dataset through the catalog service.

    Usage:
        loader = SeedLoader(catalog, images, settings.seed.resolved_seed_file)
        result = await loader.load_bundled()
    """

    def __init__(self, catalog: CatalogService, images: ImageStore, seed_file: Path) -> None:
        """Initialize seed loader.

        Args:
            catalog: Catalog service used for every write.
            images: Image store used to migrate bundled images.
            seed_file: Bundled JSON dataset.
        """
        self._catalog = catalog
        self._images = images
        self._seed_file = seed_file

    async def load_bundled(self) -> SeedResult:
        """Import the bundled dataset."""
        return await self.load_file(self._seed_file)

    async def load_file(self, path: Path) -> SeedResult:
        """Import a JSON dataset from *path*.

        Raises:
            SeedLoadError: If the file cannot be read or decoded.
        """
        logger.info(f"Loading seed dataset from {path}")
        try:
            records = SEED_DATASET.validate_json(path.read_bytes())
        except OSError as e:
            raise SeedLoadError(f"Seed file unreadable: {path}: {e}") from e
        except ValidationError as e:
            raise SeedLoadError(f"Invalid seed file {path}: {e}") from e
        return await self.load(records)

    async def load(self, records: Iterable[SeedMovie | Mapping[str, Any]]) -> SeedResult:
        """Import already parsed records.

        Args:
            records: Seed movies, as models or raw camelCase mappings.

        Returns:
            SeedResult with statistics.

        Raises:
            SeedLoadError: If a record is invalid.
        """
        start_time = time.perf_counter()
        movies = self._validate(records)
        result = SeedResult()

        # Stage 1: Bundled images
        asset_names = self.collect_asset_names(movies)
        logger.info(f"Detected {len(asset_names)} unique asset images to migrate")
        mapping = await self._images.migrate_bundled(asset_names)
        result.images_migrated = len(mapping)

        # Stage 2: Entities, genres and actors before their movies
        await self._catalog.refresh()
        for record in movies:
            genres = [await self._resolve_genre(genre, result) for genre in record.genres]
            actors = [await self._resolve_actor(actor, mapping, result) for actor in record.actors]
            await self._catalog.create_movie(
                title=record.title,
                release_year=record.release_year,
                summary=record.summary,
                rating=record.rating,
                actors=actors,
                genres=genres,
                poster_ref=_image_ref(record.poster_asset_name, mapping),
            )
            result.movies_created += 1

        result.duration_seconds = time.perf_counter() - start_time
        self._log_results(result)
        return result

    @staticmethod
    def collect_asset_names(records: Sequence[SeedMovie]) -> list[str]:
        """Bundled image names referenced by *records*, first seen first.

        Empty names and names that are already generated references are
        left out.
        """
        names: list[str] = []
        for record in records:
            candidates = [record.poster_asset_name, *(a.poster_asset_name for a in record.actors)]
            for name in candidates:
                if name and not is_generated(name) and name not in names:
                    names.append(name)
        return names

    # =========================================================================
    # Entity resolution
    # =========================================================================

    async def _resolve_genre(self, record: SeedGenre, result: SeedResult) -> Genre:
        existing = self._catalog.find_genre(record.name)
        if existing is not None:
            return existing
        result.genres_created += 1
        return await self._catalog.create_genre(name=record.name, summary=record.summary)

    async def _resolve_actor(
        self,
        record: SeedActor,
        mapping: Mapping[str, str],
        result: SeedResult,
    ) -> Actor:
        existing = self._catalog.find_actor(record.name)
        if existing is not None:
            return existing
        result.actors_created += 1
        return await self._catalog.create_actor(
            name=record.name,
            summary=record.summary,
            photo_ref=_image_ref(record.poster_asset_name, mapping),
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _validate(records: Iterable[SeedMovie | Mapping[str, Any]]) -> list[SeedMovie]:
        try:
            return [
                record if isinstance(record, SeedMovie) else SeedMovie.model_validate(record)
                for record in records
            ]
        except ValidationError as e:
            raise SeedLoadError(f"Invalid seed record: {e}") from e

    @staticmethod
    def _log_results(result: SeedResult) -> None:
        logger.info("=" * 60)
        logger.info("SEED IMPORT COMPLETE")
        logger.info(f"  Movies created: {result.movies_created}")
        logger.info(f"  Actors created: {result.actors_created}")
        logger.info(f"  Genres created: {result.genres_created}")
        logger.info(f"  Images migrated: {result.images_migrated}")
        logger.info(f"  Duration: {result.duration_seconds:.2f}s")
        logger.info("=" * 60)


def _image_ref(asset_name: str, mapping: Mapping[str, str]) -> str | None:
    """Migrated reference for *asset_name*, else the name itself."""
    if not asset_name:
        return None
    return mapping.get(asset_name, asset_name)

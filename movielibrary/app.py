"""Composition root.

Builds every catalog component from settings and wires them together.
Nothing in the library reaches for a global instance; callers hold the
``CatalogApp`` returned here.

Usage:
    app = build_catalog(settings)
    async with app:
        await app.catalog.refresh()
        results = await app.search.fetch_by_partial_string("alien")
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from types import TracebackType

from movielibrary.database.connection import DatabaseConnection
from movielibrary.database.importer.seed_loader import SeedLoader
from movielibrary.database.repositories import ActorRepository, GenreRepository, MovieRepository
from movielibrary.images.cache import ImageCache
from movielibrary.images.store import ImageStore
from movielibrary.services.catalog import CatalogService
from movielibrary.services.search import SearchIndex
from movielibrary.settings import Settings
from movielibrary.utils.logger import configure_logging, setup_logger

logger = setup_logger("app")


# =============================================================================
# SEED MARKER
# =============================================================================


class SeedMarker:
    """One-shot flag recording that the seed dataset was imported.

    Attributes:
        path: Marker file location.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def is_set(self) -> bool:
        return self.path.exists()

    def set(self) -> None:
        """Create the marker, stamped with the current time."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(datetime.now().isoformat(), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


# =============================================================================
# APPLICATION
# =============================================================================


@dataclass
class CatalogApp:
    """Wired catalog components sharing one database and one image cache.

    Attributes:
        settings: Settings the components were built from.
        database: Database connection.
        image_cache: Decoded image cache.
        images: Image store.
        movies: Movie repository.
        actors: Actor repository.
        genres: Genre repository.
        catalog: Working-set catalog service.
        search: Cross-entity search.
        seed_loader: Seed dataset importer.
        seed_marker: One-shot seed flag.
    """

    settings: Settings
    database: DatabaseConnection
    image_cache: ImageCache
    images: ImageStore
    movies: MovieRepository
    actors: ActorRepository
    genres: GenreRepository
    catalog: CatalogService
    search: SearchIndex
    seed_loader: SeedLoader
    seed_marker: SeedMarker

    async def start(self) -> None:
        """Prepare directories and logging, then create the schema."""
        self.settings.paths.ensure_directories()
        log_dir = self.settings.paths.logs_dir if self.settings.logging.to_file else None
        configure_logging(self.settings.logging.level, log_dir)
        await self.database.create_all()
        logger.info(f"Catalog ready in {self.settings.paths.data_dir}")

    async def close(self) -> None:
        """Release the connection pool."""
        await self.database.dispose()

    async def __aenter__(self) -> "CatalogApp":
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()


def build_catalog(settings: Settings | None = None) -> CatalogApp:
    """Construct every catalog component.

    Args:
        settings: Application settings. Loaded from the environment if None.

    Returns:
        Unstarted CatalogApp.
    """
    settings = settings if settings is not None else Settings()

    database = DatabaseConnection(settings)
    image_cache = ImageCache(
        count_limit=settings.images.cache_count_limit,
        cost_limit=settings.images.cache_cost_limit,
    )
    images = ImageStore(
        images_dir=settings.paths.images_dir,
        bundled_dir=settings.bundled_assets_dir,
        cache=image_cache,
        config=settings.images,
    )

    movies = MovieRepository(database)
    actors = ActorRepository(database)
    genres = GenreRepository(database)

    catalog = CatalogService(movies, actors, genres, images)

    return CatalogApp(
        settings=settings,
        database=database,
        image_cache=image_cache,
        images=images,
        movies=movies,
        actors=actors,
        genres=genres,
        catalog=catalog,
        search=SearchIndex(movies, actors, genres),
        seed_loader=SeedLoader(catalog, images, settings.seed.resolved_seed_file),
        seed_marker=SeedMarker(settings.paths.seed_marker),
    )

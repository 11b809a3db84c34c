"""Shared pytest fixtures for catalog tests."""

from collections.abc import AsyncGenerator, Callable
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from movielibrary.database.connection import DatabaseConnection
from movielibrary.database.repositories import ActorRepository, GenreRepository, MovieRepository
from movielibrary.images.cache import ImageCache
from movielibrary.images.store import ImageStore
from movielibrary.services.catalog import CatalogService
from movielibrary.services.search import SearchIndex
from movielibrary.settings import Settings

ImageFactory = Callable[..., bytes]


def make_image_bytes(
    width: int = 400,
    height: int = 300,
    fmt: str = "PNG",
    color: tuple[int, int, int] = (200, 30, 30),
) -> bytes:
    """Encode a solid-color image."""
    img = Image.new("RGB", (width, height), color=color)
    buffer = BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


def make_noise_bytes(width: int = 400, height: int = 300) -> bytes:
    """Encode a hard-to-compress noise image as PNG."""
    channels = [Image.effect_noise((width, height), 80 + 10 * i) for i in range(3)]
    img = Image.merge("RGB", channels)
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture(autouse=True)
def mock_env_for_tests(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate settings from the developer environment."""
    for var in [
        "DATABASE_URL",
        "DB_FILENAME",
        "DB_ECHO",
        "LOG_LEVEL",
        "LOG_TO_FILE",
        "SEED_FILE",
        "IMAGE_TARGET_ASPECT",
        "IMAGE_ASPECT_TOLERANCE",
        "IMAGE_COMPRESSION_QUALITY",
        "IMAGE_CACHE_COUNT",
        "IMAGE_CACHE_COST",
    ]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("DEBUG", "false")


@pytest.fixture
def test_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Settings rooted in a temporary data directory."""
    assets_dir = tmp_path / "assets"
    assets_dir.mkdir()
    monkeypatch.setenv("MOVIELIBRARY_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("BUNDLED_ASSETS_DIR", str(assets_dir))
    return Settings()


@pytest.fixture
async def database(test_settings: Settings) -> AsyncGenerator[DatabaseConnection, None]:
    """File-backed SQLite database with the schema created."""
    test_settings.paths.ensure_directories()
    db = DatabaseConnection(test_settings)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def movie_repo(database: DatabaseConnection) -> MovieRepository:
    return MovieRepository(database)


@pytest.fixture
def actor_repo(database: DatabaseConnection) -> ActorRepository:
    return ActorRepository(database)


@pytest.fixture
def genre_repo(database: DatabaseConnection) -> GenreRepository:
    return GenreRepository(database)


@pytest.fixture
def image_cache() -> ImageCache:
    return ImageCache()


@pytest.fixture
def image_store(test_settings: Settings, image_cache: ImageCache) -> ImageStore:
    return ImageStore(
        images_dir=test_settings.paths.images_dir,
        bundled_dir=test_settings.bundled_assets_dir,
        cache=image_cache,
        config=test_settings.images,
    )


@pytest.fixture
def catalog(
    movie_repo: MovieRepository,
    actor_repo: ActorRepository,
    genre_repo: GenreRepository,
    image_store: ImageStore,
) -> CatalogService:
    return CatalogService(movie_repo, actor_repo, genre_repo, image_store)


@pytest.fixture
def search_index(
    movie_repo: MovieRepository,
    actor_repo: ActorRepository,
    genre_repo: GenreRepository,
) -> SearchIndex:
    return SearchIndex(movie_repo, actor_repo, genre_repo)


@pytest.fixture
def image_bytes() -> ImageFactory:
    """Factory producing encoded test images."""
    return make_image_bytes


@pytest.fixture
def bundled_asset(test_settings: Settings) -> Callable[..., Path]:
    """Factory writing an image into the bundled assets directory."""

    def _write(name: str, width: int = 320, height: int = 240, suffix: str = ".png") -> Path:
        path = test_settings.bundled_assets_dir / f"{name}{suffix}"
        path.write_bytes(make_image_bytes(width, height))
        return path

    return _write


@pytest.fixture
def noise_bytes() -> Callable[..., bytes]:
    """Factory producing a noisy PNG that compresses poorly."""
    return make_noise_bytes

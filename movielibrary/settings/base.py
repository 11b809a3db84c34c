"""Base configuration settings.

Contains foundational settings for paths, logging, and seeding.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# =============================================================================
# PACKAGE PATHS
# =============================================================================

_PACKAGE_ROOT = Path(__file__).parent.parent
_DEFAULT_DATA_DIR = Path.home() / ".movielibrary"


# =============================================================================
# PATH SETTINGS
# =============================================================================


class PathsSettings(BaseSettings):
    """Data, image storage and logs paths configuration.

    Attributes:
        data_root: Per-install data directory override.
    """

    data_root: Path | None = Field(default=None, alias="MOVIELIBRARY_DATA_DIR")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def data_dir(self) -> Path:
        """Root data directory (database, images, logs)."""
        return self.data_root or _DEFAULT_DATA_DIR

    @property
    def images_dir(self) -> Path:
        """Managed storage for generated images."""
        return self.data_dir / "images"

    @property
    def logs_dir(self) -> Path:
        """Application logs."""
        return self.data_dir / "logs"

    @property
    def resources_dir(self) -> Path:
        """Resources bundled with the package (seed data, assets)."""
        return _PACKAGE_ROOT / "resources"

    @property
    def seed_marker(self) -> Path:
        """Marker file written once the seed dataset has been imported."""
        return self.data_dir / ".seeded"

    def ensure_directories(self) -> None:
        """Create the writable directories if missing."""
        directories = [
            self.data_dir,
            self.images_dir,
            self.logs_dir,
        ]
        for directory in directories:
            directory.mkdir(parents=True, exist_ok=True)


# =============================================================================
# LOGGING SETTINGS
# =============================================================================


class LoggingSettings(BaseSettings):
    """Logging configuration.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        to_file: Whether to also write dated log files.
    """

    level: str = Field(default="INFO", alias="LOG_LEVEL")
    to_file: bool = Field(default=False, alias="LOG_TO_FILE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid LOG_LEVEL. Valid: {valid_levels}")
        return v_upper


# =============================================================================
# SEED SETTINGS
# =============================================================================


class SeedSettings(BaseSettings):
    """Seed dataset configuration.

    Attributes:
        seed_file: JSON seed dataset. Defaults to the bundled one.
    """

    seed_file: Path | None = Field(default=None, alias="SEED_FILE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def resolved_seed_file(self) -> Path:
        """Seed file to read."""
        return self.seed_file or _PACKAGE_ROOT / "resources" / "seed_movies.json"

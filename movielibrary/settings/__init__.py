"""Centralized configuration for the movie library.

All configuration values are sourced from environment variables
(optionally through a .env file) and have safe defaults, so the
library runs without any configuration.

Usage:
    from movielibrary.settings import Settings

    settings = Settings()

    settings.paths.images_dir
    settings.images.target_aspect
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from movielibrary.settings.base import LoggingSettings, PathsSettings, SeedSettings
from movielibrary.settings.database import DatabaseSettings
from movielibrary.settings.images import ImageSettings

__all__ = [
    # Main
    "Settings",
    # Base
    "PathsSettings",
    "LoggingSettings",
    "SeedSettings",
    # Storage
    "DatabaseSettings",
    "ImageSettings",
]


# =============================================================================
# GLOBAL SETTINGS
# =============================================================================


class Settings(BaseSettings):
    """Global application settings.

    Aggregates all configuration sections into a single object.
    """

    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    paths: PathsSettings = Field(default_factory=PathsSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    seed: SeedSettings = Field(default_factory=SeedSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    images: ImageSettings = Field(default_factory=ImageSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        valid_envs = {"development", "production", "test"}
        v_lower = v.lower()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid ENVIRONMENT. Valid: {valid_envs}")
        return v_lower

    @property
    def database_url(self) -> str:
        """Async database URL resolved against the data directory."""
        return self.database.async_url(self.paths.data_dir)

    @property
    def bundled_assets_dir(self) -> Path:
        """Directory holding bundled static images."""
        return self.images.bundled_dir or self.paths.resources_dir / "assets"


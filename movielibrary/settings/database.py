"""Database configuration settings.

SQLite storage location and engine options.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """SQLite database configuration.

    Attributes:
        url: Full connection URL (overrides the file location).
        filename: Database file name inside the data directory.
        echo: Log emitted SQL.
        timeout: Seconds to wait on a locked database.
    """

    url: str | None = Field(default=None, alias="DATABASE_URL")
    filename: str = Field(default="movielibrary.db", alias="DB_FILENAME")
    echo: bool = Field(default=False, alias="DB_ECHO")
    timeout: int = Field(default=30, alias="DB_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def async_url(self, data_dir: Path) -> str:
        """Generate asynchronous SQLite connection URL.

        Args:
            data_dir: Directory holding the database file.

        Returns:
            SQLAlchemy URL using the aiosqlite driver.
        """
        if self.url and self.url.startswith("sqlite://"):
            return "sqlite+aiosqlite://" + self.url.removeprefix("sqlite://")
        if self.url:
            return self.url
        return f"sqlite+aiosqlite:///{data_dir / self.filename}"

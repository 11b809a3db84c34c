"""SQLite connection management with SQLAlchemy 2.0 asyncio.

Provides asynchronous database sessions over the aiosqlite driver
with lifecycle management. One instance is created by the composition
root and handed to every repository.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from movielibrary.database.models import Base
from movielibrary.settings import Settings
from movielibrary.utils.logger import setup_logger

logger = setup_logger("database.connection")


class DatabaseConnection:
    """Manages the async engine and session factory.

    Attributes:
        _url: SQLAlchemy database URL.
        _async_engine: SQLAlchemy async engine.
        _async_session_factory: Async session factory.

    Example:
        ```python
        db = DatabaseConnection(settings)
        await db.create_all()
        async with db.async_session() as session:
            await session.execute(text("SELECT 1"))
        ```
    """

    def __init__(self, settings: Settings) -> None:
        """Create the engine and session factory.

        Args:
            settings: Application settings.
        """
        self._url = settings.database_url
        self._async_engine = self._create_async_engine(settings)
        self._async_session_factory = self._create_async_session_factory()

    def _create_async_engine(self, settings: Settings) -> AsyncEngine:
        """Create asynchronous SQLAlchemy engine.

        SQLite enforces foreign keys only when asked to, on every new
        connection; the association rows rely on ON DELETE CASCADE.

        Args:
            settings: Application settings.

        Returns:
            SQLAlchemy AsyncEngine.
        """
        connect_args: dict[str, Any] = {}
        if self._url.startswith("sqlite"):
            connect_args["timeout"] = settings.database.timeout

        engine = create_async_engine(
            self._url,
            echo=settings.database.echo or settings.debug,
            connect_args=connect_args,
        )

        if self._url.startswith("sqlite"):
            event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        return engine

    def _create_async_session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Create asynchronous session factory.

        Returns:
            Configured async_sessionmaker for async sessions.
        """
        return async_sessionmaker(
            bind=self._async_engine,
            autoflush=False,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def async_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a transactional async session scope.

        Automatically commits on success, rolls back on exception,
        and closes the session when done.

        Yields:
            SQLAlchemy AsyncSession instance.

        Raises:
            Exception: Re-raises any exception after rollback.
        """
        session = self._async_session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def create_all(self) -> None:
        """Create all tables that do not exist yet."""
        async with self._async_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready")

    async def drop_all(self) -> None:
        """Drop all catalog tables."""
        async with self._async_engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("Database schema dropped")

    async def check_connection(self) -> bool:
        """Test database connectivity with a simple query.

        Returns:
            True if connection successful, False otherwise.
        """
        try:
            async with self.async_session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database connection check failed: {e}")
            return False

    async def dispose(self) -> None:
        """Dispose the connection pool and release resources.

        Should be called during application shutdown.
        """
        await self._async_engine.dispose()

    @property
    def async_engine(self) -> AsyncEngine:
        """Get the underlying async engine.

        Returns:
            SQLAlchemy AsyncEngine instance.
        """
        return self._async_engine


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    """Turn on foreign key enforcement for a fresh SQLite connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

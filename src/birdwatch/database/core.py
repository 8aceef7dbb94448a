import contextlib
import logging
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,  # type: ignore[attr-defined]
    create_async_engine,
)
from sqlmodel import SQLModel

logger = logging.getLogger(__name__)


def casefold(value: Any) -> Any:  # noqa: ANN401
    """Unicode case folding for SQL text; SQLite's lower() only folds ASCII."""
    return value.casefold() if isinstance(value, str) else value


def register_sql_functions(dbapi_connection: Any, connection_record: Any) -> None:  # noqa: ANN401
    """Make Python helpers callable from SQL on every new connection."""
    dbapi_connection.create_function("casefold", 1, casefold)


class CoreDatabaseService:
    """Provides an interface for database operations, including initialization."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self.db_url = f"sqlite+aiosqlite:///{self.db_path}"

        self.async_engine = create_async_engine(
            self.db_url,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        event.listen(self.async_engine.sync_engine, "connect", register_sql_functions)

        # expire_on_commit=False keeps returned records readable after the session closes
        self.async_session_local = async_sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.async_engine,
            class_=AsyncSession,
        )

    async def initialize(self) -> None:
        """Create all tables and apply startup pragmas."""
        # Model modules register their tables on SQLModel.metadata when imported
        import birdwatch.birds.models  # noqa: F401
        import birdwatch.sightings.models  # noqa: F401

        async with self.async_engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

        await self._apply_startup_optimizations()

    @contextlib.asynccontextmanager
    async def get_async_db(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide an async database session for dependency injection."""
        async with self.async_session_local() as session:
            yield session

    async def _apply_startup_optimizations(self) -> None:
        """Apply one-time SQLite pragmas."""
        async with self.get_async_db() as session:
            try:
                await session.execute(text("PRAGMA journal_mode = WAL"))
                await session.execute(text("PRAGMA synchronous = NORMAL"))
                await session.execute(text("PRAGMA temp_store = MEMORY"))
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.warning("Failed to apply startup optimizations: %s", e)

    async def ping(self) -> bool:
        """Check that the database answers a trivial query."""
        async with self.get_async_db() as session:
            try:
                await session.execute(text("SELECT 1"))
                return True
            except SQLAlchemyError as e:
                logger.warning("Database ping failed: %s", e)
                return False

    async def clear_database(self) -> None:
        """Clear all data from the database tables."""
        async with self.get_async_db() as session:
            try:
                for table in SQLModel.metadata.sorted_tables:
                    await session.execute(table.delete())
                await session.commit()
                logger.info("Database cleared successfully")
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("Error clearing database: %s", e)
                raise

    async def dispose(self) -> None:
        """Dispose of database engines to release resources.

        This should be called when the CoreDatabaseService is no longer needed,
        especially in tests, to prevent file descriptor leaks.
        """
        if hasattr(self, "async_engine") and self.async_engine:
            await self.async_engine.dispose()
            logger.debug("Async database engine disposed")

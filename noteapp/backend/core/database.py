"""
Database Configuration.

SQLAlchemy async engine and session management for the local notes
database. A single Database instance is constructed by the composition
root (see noteapp.backend.core.dependencies) and handed to repositories;
there is no module-level engine.

Usage:
    database = Database(get_database_url())
    await database.create_all()

    async with database.session() as session:
        ...                          # reads

    async with database.transaction() as session:
        ...                          # writes, serialized and committed
"""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from noteapp.backend.core.logging import get_logger
from noteapp.backend.models.base import Base

logger = get_logger(__name__)


def _set_sqlite_pragmas(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()


class Database:
    """
    Owner of the engine, the session factory and the write lock.

    Reads use independent sessions and see only committed data. Writes go
    through transaction(), which holds the write lock for the duration of
    the transaction so no two writes interleave.
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        self._engine: AsyncEngine = create_async_engine(url, echo=echo)
        if url.startswith("sqlite") and ":memory:" not in url:
            event.listen(self._engine.sync_engine, "connect", _set_sqlite_pragmas)
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self._write_lock = asyncio.Lock()
        logger.debug("Database engine created", extra={"url": url})

    @property
    def engine(self) -> AsyncEngine:
        """Get the database engine."""
        return self._engine

    async def create_all(self) -> None:
        """Create all tables that do not exist yet."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a read-only session."""
        async with self._session_factory() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a session for a single write transaction.

        Commits on success and rolls back on error. Writers are serialized.
        """
        async with self._write_lock:
            async with self._session_factory() as session:
                try:
                    yield session
                    await session.commit()
                except Exception:
                    await session.rollback()
                    raise

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self._engine.dispose()
        logger.debug("Database engine disposed")

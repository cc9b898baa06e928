"""Database configuration and session management."""

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


class Database:
    """Owns the async engine and session factory for one application instance.

    Constructed explicitly and attached to ``app.state`` by the lifespan
    handler, so tests can point it at a throwaway database.
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        self.echo = echo
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not connected")
        return self._engine

    async def connect(self, create_schema: bool = True) -> None:
        """Create the engine and, optionally, the schema."""
        if self._engine is not None:
            return

        engine_kwargs = {"echo": self.echo}
        if self.url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        else:
            engine_kwargs["pool_pre_ping"] = True

        self._engine = create_async_engine(self.url, **engine_kwargs)

        if self.url.startswith("sqlite"):
            # SQLite only enforces ON DELETE CASCADE with foreign keys switched on
            event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self._sessionmaker = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        if create_schema:
            # Register models on the metadata before creating tables
            import memo_api.models  # noqa: F401

            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

        logger.info("Database connected", extra={"dialect": self._engine.dialect.name})

    async def dispose(self) -> None:
        """Release pooled connections."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        logger.info("Database disposed")

    def session(self) -> AsyncSession:
        """Open a new session."""
        if self._sessionmaker is None:
            raise RuntimeError("Database is not connected")
        return self._sessionmaker()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session."""
    database: Database = request.app.state.db
    async with database.session() as session:
        try:
            yield session
        finally:
            await session.close()

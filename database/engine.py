"""
Persistence gateway.

A Database owns one async engine (and therefore one bounded connection
pool) for the lifetime of the process. It is created by the application
factory, stored on app.state and handed to request handlers through the
get_db dependency.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from core.config import Settings

logger = logging.getLogger("database_engine")


# Base class for declarative models
class Base(DeclarativeBase):
    pass


class Database:
    """Owns the connection pool and hands out sessions and transactions."""

    def __init__(self, url: str, **engine_kwargs: Any):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a pooled gateway from the DB_* settings."""
        return cls(
            settings.database_dsn,
            echo=False,
            pool_size=settings.db_pool_size,
            max_overflow=0,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
            pool_pre_ping=True,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Session for single statements; callers commit their own writes."""
        async with self.session_factory() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """
        Atomic unit of work on one pooled connection.

        Commits when the block exits normally, rolls back on any exception
        and re-raises it. The connection goes back to the pool on every
        exit path.
        """
        async with self.session_factory() as session:
            try:
                async with session.begin():
                    yield session
            except Exception:
                logger.warning("Transaction rolled back", exc_info=True)
                raise

    async def init_db(self) -> None:
        """Create tables that do not exist yet."""
        # Register every model on Base.metadata
        import database.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        """Return True when the database answers a trivial query."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.error("Database ping failed", exc_info=True)
            return False

    async def close(self) -> None:
        """Close database engine and connections."""
        await self.engine.dispose()


# Dependency to get DB session
async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    database: Database = request.app.state.db
    async with database.session() as session:
        yield session


def get_database(request: Request) -> Database:
    """Dependency returning the gateway itself, for multi-statement transactions."""
    return request.app.state.db

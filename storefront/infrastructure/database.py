"""Database Session Manager — async connection pool with automatic rollback and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - transaction() commits only on clean exit: one unit of work, all or nothing
    - All SQLAlchemy exceptions mapped to PersistenceError (core/errors.py)
    - SQLite connections enforce foreign keys (PRAGMA foreign_keys=ON)

Design Decisions:
    - One manager per process, created on startup and handed to repositories by
      reference (no module-level singleton)
    - expire_on_commit=False: prevents lazy-load issues in async context
    - from_engine(): tests wrap an in-memory engine without pool arguments
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)

from storefront.core.errors import PersistenceError
from storefront.db.base import Base
import storefront.models  # noqa: F401  (populate Base.metadata)

logger = logging.getLogger(__name__)


# Most specific first: IntegrityError and OperationalError are DBAPIError subclasses.
_FAILURE_KINDS: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Integrity constraint violated", "commit"),
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
)


def _classify(exc: SQLAlchemyError) -> tuple[str, str]:
    for kind, message, operation in _FAILURE_KINDS:
        if isinstance(exc, kind):
            return message, operation
    return "Database operation failed", "unknown"


def _enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        if database_url.startswith("sqlite"):
            engine = create_async_engine(database_url)
        else:
            engine = create_async_engine(
                database_url,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
                pool_recycle=3600,
            )
        self._bind(engine)

    @classmethod
    def from_engine(cls, engine: AsyncEngine) -> "DatabaseSessionManager":
        manager = cls.__new__(cls)
        manager._bind(engine)
        return manager

    def _bind(self, engine: AsyncEngine) -> None:
        self.engine = engine
        if engine.dialect.name == "sqlite":
            _enable_sqlite_foreign_keys(engine)
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session; any SQLAlchemy failure rolls back and becomes PersistenceError."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            message, operation = _classify(e)
            logger.error(f"{message}: {e}")
            raise PersistenceError(message, operation) from e
        finally:
            await session.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session committed on clean exit, rolled back otherwise."""
        async with self.session() as session:
            yield session
            await session.commit()

    async def create_schema(self) -> None:
        """Create all tables known to Base.metadata (idempotent)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    """Build the process-wide manager; the lifespan hands it to the service container."""
    return DatabaseSessionManager(database_url, **kwargs)

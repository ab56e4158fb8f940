"""Database Session Manager — async connection pool with automatic rollback and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - SQLAlchemy exceptions and driver bind overflows are mapped to
      StorageFailureError (core/errors.py) carrying the failed operation name
    - Pool sizing only applied to server databases (SQLite picks its own pool)

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
      (ADR: no global import side effects)
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import inspect, text

from pet_provider.core.errors import StorageFailureError

logger = logging.getLogger(__name__)


def create_engine_for_url(
    database_url: str, pool_size: int = 20, max_overflow: int = 10,
) -> AsyncEngine:
    """Async engine with pooling tuned per backend."""
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, pool_pre_ping=True)
    return create_async_engine(
        database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str | None = None, pool_size: int = 20,
        max_overflow: int = 10, engine: AsyncEngine | None = None,
    ):
        if engine is None:
            if not database_url:
                raise ValueError("database_url or engine is required")
            engine = create_engine_for_url(database_url, pool_size, max_overflow)
        self.engine = engine
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(
        self, operation: str = "query",
    ) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}", extra={"operation": operation})
            raise StorageFailureError("Integrity constraint violated", operation) from e
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}", extra={"operation": operation})
            raise StorageFailureError("Connection or operational error", operation) from e
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}", extra={"operation": operation})
            raise StorageFailureError("Database driver error", operation) from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}", extra={"operation": operation})
            raise StorageFailureError("Database operation failed", operation) from e
        except OverflowError as e:
            # Raised by the driver while binding, outside the DBAPI error tree.
            await session.rollback()
            logger.error(f"DB bind overflow: {e}", extra={"operation": operation})
            raise StorageFailureError("Integer value out of range", operation) from e
        finally:
            await session.close()

    async def create_all(self, metadata) -> None:
        """Create every table in metadata (dev databases and tests)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session("ping") as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def has_table(self, name: str) -> bool:
        """Check that table name exists in the connected database."""
        try:
            async with self.engine.connect() as conn:
                return await conn.run_sync(
                    lambda sync_conn: inspect(sync_conn).has_table(name),
                )
        except SQLAlchemyError as e:
            logger.error(f"DB table check failed: {e}", extra={"operation": "inspect"})
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager

"""Card Store Sessions — async engine, per-request sessions, store-failure mapping.

Invariants:
    - A session that raises rolls back before the error leaves this module
    - Every SQLAlchemyError surfaces as DatabaseError (503), never as a raw driver error
    - The DatabaseError names the failed step (constraint/connection/driver/statement)
      and carries no SQL or bind values

Design Decisions:
    - Singleton db_manager created in the FastAPI lifespan, not at import time
    - Pool sizing applies to server databases only; SQLite engines keep SQLAlchemy's
      default pool (pool_size/max_overflow are invalid there)
    - expire_on_commit=False: Card values are read after commit in insert()
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from cashcard.core.errors import DatabaseError

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError/OperationalError are DBAPIErrors.
_FAILURE_STEPS: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "constraint", "Card row violates a table constraint"),
    (OperationalError, "connection", "Card store unreachable or schema missing"),
    (DBAPIError, "driver", "Card store driver rejected the statement"),
    (SQLAlchemyError, "statement", "Card store operation failed"),
)


def to_database_error(exc: SQLAlchemyError) -> DatabaseError:
    """Translate a SQLAlchemy exception into the API's 503 error."""
    for exc_type, step, message in _FAILURE_STEPS:
        if isinstance(exc, exc_type):
            break
    return DatabaseError(message, step)


class DatabaseSessionManager:
    """Owns the card store engine and hands out request-scoped sessions."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_options: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_options.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_options)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            error = to_database_error(e)
            logger.error(
                f"Card store {error.operation} failure: {type(e).__name__}",
                extra={"error_code": error.code},
            )
            raise error from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Readiness: can a session run a trivial statement?"""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except (DatabaseError, OSError) as e:
            logger.error(f"Card store health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session

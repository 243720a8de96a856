"""Database Session Manager — async connection pool, transaction boundaries, error mapping.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Every multi-step mutation runs inside unit_of_work(): one commit or one rollback
    - Connection pool uses pool_pre_ping for stale connection detection
    - SQLAlchemy exceptions leave this module only as DatabaseError / ConcurrencyError

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: returned entities stay readable after commit in async code
    - IntegrityError at commit means a concurrent writer won a uniqueness race
      (membership primary key, pending-invitation index); surfaced as retryable
      ConcurrencyError so the caller can re-run the whole unit of work
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

from teambuilder.core.errors import ConcurrencyError, DatabaseError, TeamBuilderError

logger = logging.getLogger(__name__)


def translate_db_error(exc: SQLAlchemyError, operation: str) -> TeamBuilderError:
    """Map a SQLAlchemy failure onto the error hierarchy."""
    if isinstance(exc, IntegrityError):
        logger.warning(f"Uniqueness conflict during {operation}: {exc.orig}")
        return ConcurrencyError("Conflicting concurrent update; retry the request")
    if isinstance(exc, OperationalError):
        logger.error(f"DB operational error during {operation}: {exc}")
        return DatabaseError("Connection or operational error", operation)
    if isinstance(exc, DBAPIError):
        logger.error(f"DB driver error during {operation}: {exc}")
        return DatabaseError("Database driver error", operation)
    logger.error(f"SQLAlchemy error during {operation}: {exc}")
    return DatabaseError("Database operation failed", operation)


class DatabaseSessionManager:
    """Owns the engine and hands out request-scoped sessions."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Request-scoped session; rolled back and translated on DB failure."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            raise translate_db_error(e, "request")
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """SELECT 1 round-trip for the readiness probe."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except TeamBuilderError as e:
            logger.error(f"DB health check failed: {e.message}")
            return False
        except OSError as e:
            logger.error(f"DB health check failed: {e}")
            return False


@asynccontextmanager
async def unit_of_work(db: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """All-or-nothing block: commit on clean exit, rollback on any exception.

    Domain errors raised inside the block are re-raised unchanged after rollback.
    """
    try:
        yield db
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        raise translate_db_error(e, "commit")
    except BaseException:
        await db.rollback()
        raise


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session

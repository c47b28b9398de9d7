"""Database Session Manager - async engine, unit-of-work sessions, readiness probe.

Invariants:
    - A session that exits with an exception is rolled back before it is closed
    - SQLAlchemy failures leave this module as taxonomy errors: a unique-constraint
      violation becomes ConflictError (409), anything else DatabaseError (503)
    - WorkboardError raised inside a session passes through unchanged

Design Decisions:
    - One manager per process, created by the FastAPI lifespan (init_db)
    - expire_on_commit=False: views are built from entities after commit
    - Pool sizing only for server databases; SQLite pools reject it
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from workboard.core.errors import ConflictError, DatabaseError, WorkboardError

logger = logging.getLogger(__name__)

# Most specific first; the first match wins
_OPERATION_BY_ERROR: tuple[tuple[type[SQLAlchemyError], str], ...] = (
    (OperationalError, "connect"),
    (DBAPIError, "query"),
)


def translate_error(exc: SQLAlchemyError) -> WorkboardError:
    """Map a store exception onto the error taxonomy."""
    if isinstance(exc, IntegrityError):
        return ConflictError("The change conflicts with existing data")
    for error_type, operation in _OPERATION_BY_ERROR:
        if isinstance(exc, error_type):
            return DatabaseError(type(exc).__name__, operation)
    return DatabaseError(type(exc).__name__, "transaction")


class DatabaseSessionManager:
    """Owns the engine and hands out request-scoped sessions."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Store failure, rolled back: {e}")
            raise translate_error(e) from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """True when a trivial query round-trips."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session

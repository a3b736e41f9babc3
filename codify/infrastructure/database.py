"""Transaction Scope — bounded async connection pool with begin/commit/rollback discipline.

Invariants:
    - transaction() checks out exactly one pooled connection for its whole body
    - Normal exit commits; any exception rolls back before propagating
    - CodifyError (domain guard) propagates unchanged after rollback
    - Every other failure leaves as StorageFailure carrying the original cause
    - The session is closed on every exit path, so the connection always
      returns to the pool
    - Pool is bounded (pool_size + max_overflow) and acquisition times out

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - Services never touch db_manager: they receive the AsyncSession handle
    - expire_on_commit=False: prevents lazy-load issues in async context
    - constraint_violation() is the one place that reads driver error codes;
      services use it to decide which IntegrityErrors are domain outcomes
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)

from codify.core.errors import CodifyError, StorageFailure

logger = logging.getLogger(__name__)


UNIQUE_VIOLATION = "unique"
FOREIGN_KEY_VIOLATION = "foreign_key"

# PostgreSQL SQLSTATEs; SQLite only reports the violation in its message
_SQLSTATE_VIOLATIONS = {
    "23505": UNIQUE_VIOLATION,
    "23503": FOREIGN_KEY_VIOLATION,
}
_SQLITE_VIOLATIONS = {
    "UNIQUE constraint failed": UNIQUE_VIOLATION,
    "FOREIGN KEY constraint failed": FOREIGN_KEY_VIOLATION,
}


def constraint_violation(exc: IntegrityError) -> str | None:
    """Classify an IntegrityError as UNIQUE_VIOLATION, FOREIGN_KEY_VIOLATION or None."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in _SQLSTATE_VIOLATIONS:
        return _SQLSTATE_VIOLATIONS[sqlstate]
    message = str(orig)
    for marker, violation in _SQLITE_VIOLATIONS.items():
        if marker in message:
            return violation
    return None


def _to_storage_failure(exc: BaseException) -> StorageFailure:
    """Map a raw driver/ORM exception to StorageFailure."""
    if isinstance(exc, PoolTimeoutError):
        return StorageFailure("Connection pool exhausted", "acquire", exc)
    if isinstance(exc, IntegrityError):
        return StorageFailure("Integrity constraint violated", "commit", exc)
    if isinstance(exc, OperationalError):
        return StorageFailure("Connection or operational error", "execute", exc)
    if isinstance(exc, DBAPIError):
        return StorageFailure("Database driver error", "query", exc)
    if isinstance(exc, SQLAlchemyError):
        return StorageFailure("Database operation failed", "unknown", exc)
    return StorageFailure(f"Unexpected error: {type(exc).__name__}", "transaction", exc)


class DatabaseSessionManager:
    """Owns the engine/pool and hands out transactional and read sessions."""

    def __init__(
        self,
        database_url: str | None = None,
        pool_size: int = 10,
        max_overflow: int = 5,
        pool_timeout: float = 30.0,
        engine: AsyncEngine | None = None,
    ):
        if engine is None:
            if database_url is None:
                raise ValueError("database_url or engine is required")
            engine = create_async_engine(
                database_url, **_pool_options(
                    database_url, pool_size, max_overflow, pool_timeout,
                ),
            )
        self.engine = engine
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Run the body in one transaction on one pooled connection."""
        session = self._session_factory()
        try:
            async with session.begin():
                yield session
        except CodifyError as e:
            logger.info(
                f"Transaction rolled back: {e.message}",
                extra={"error_code": e.code},
            )
            raise
        except Exception as e:
            failure = _to_storage_failure(e)
            logger.error(
                f"Transaction rolled back: {e}",
                extra={"error_code": failure.code, "operation": failure.operation},
            )
            raise failure from e
        finally:
            await session.close()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a non-transactional read session."""
        session = self._session_factory()
        try:
            yield session
        except CodifyError:
            await session.rollback()
            raise
        except SQLAlchemyError as e:
            await session.rollback()
            failure = _to_storage_failure(e)
            logger.error(
                f"Read failed: {e}",
                extra={"error_code": failure.code, "operation": failure.operation},
            )
            raise failure from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for the readiness route)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except StorageFailure as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


def _pool_options(
    database_url: str, pool_size: int, max_overflow: int, pool_timeout: float,
) -> dict:
    # SQLite uses a static/null pool that rejects sizing arguments
    if make_url(database_url).get_backend_name() == "sqlite":
        return {}
    return {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_timeout": pool_timeout,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


def get_db_manager() -> DatabaseSessionManager:
    """FastAPI dependency: routes open their own transaction() on it."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for read-only sessions."""
    async with get_db_manager().session() as session:
        yield session


"""Database Session Manager — async engine, sessions with rollback, error mapping.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Write sessions commit before leaving the context; a failed commit rolls back
    - SQLAlchemy exceptions mapped to StoreError (reads) or StoreCommitError (writes)
    - On a StaticPool engine (in-memory SQLite) sessions run one at a time: they
      share a single DBAPI connection, and an overlapping rollback would discard
      another session's pending writes

Design Decisions:
    - In-memory SQLite uses StaticPool: every session must see the same database
    - Pool sizing only applies to server databases (PostgreSQL via asyncpg)
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import asyncio
import logging
from contextlib import asynccontextmanager, nullcontext
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool

from docmapper.core.errors import ErrorContext, StoreCommitError, StoreError
from docmapper.db.base import Base
# Imported so Base.metadata has the documents table before create_all
from docmapper.models.document_record import DocumentRecord  # noqa: F401
from docmapper.infrastructure import json_codec

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError and OperationalError are DBAPIErrors
_ERROR_MESSAGES: tuple[tuple[type[SQLAlchemyError], str], ...] = (
    (IntegrityError, "Integrity constraint violated"),
    (OperationalError, "Connection or operational error"),
    (DBAPIError, "Database driver error"),
    (SQLAlchemyError, "Database operation failed"),
)


def describe_db_error(error: SQLAlchemyError) -> str:
    for error_type, message in _ERROR_MESSAGES:
        if isinstance(error, error_type):
            return message
    return "Database operation failed"


def engine_options(
    database_url: str, pool_size: int, max_overflow: int, echo: bool = False,
) -> dict:
    """Engine keyword arguments appropriate for the URL's backend."""
    options: dict = {
        "echo": echo,
        "json_serializer": json_codec.dumps,
        "json_deserializer": json_codec.loads,
    }
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        if url.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
        return options
    options.update(
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        pool_recycle=3600,
    )
    return options


class DatabaseSessionManager:
    """Owns the engine; hands out sessions that map driver errors to StoreError."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
        echo: bool = False,
    ):
        self.engine = create_async_engine(
            database_url,
            **engine_options(database_url, pool_size, max_overflow, echo),
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self._connection_lock: asyncio.Lock | None = (
            asyncio.Lock() if isinstance(self.engine.pool, StaticPool) else None
        )

    def _exclusive(self):
        """Lock held for a whole session on single-connection engines; no-op otherwise."""
        return self._connection_lock or nullcontext()

    @asynccontextmanager
    async def session(
        self, operation: str = "query", write: bool = False,
        context: ErrorContext | None = None,
    ) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback; write sessions commit on exit."""
        error_cls = StoreCommitError if write else StoreError
        async with self._exclusive():
            session = self._session_factory()
            try:
                yield session
                if write:
                    await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                message = describe_db_error(e)
                logger.error(
                    f"{message}: {e}",
                    extra={
                        "operation": operation,
                        "collection": context.collection if context else None,
                    },
                )
                raise error_cls(message, operation, context) from e
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def create_schema(self) -> None:
        """Create the documents table if it does not exist."""
        async with self._exclusive(), self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_schema(self) -> None:
        async with self._exclusive(), self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session("health_check") as db:
                await db.execute(text("SELECT 1"))
            return True
        except StoreError as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()

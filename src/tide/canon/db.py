# src/tide/canon/db.py
"""Database handle, scoped sessions, transactions and schema setup."""

from __future__ import annotations

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from tide.config import DatabaseConfig, config
from tide.core.logs import EventType, Priority, get_event_logger
from tide.models import Base

from .errors import PersistenceError

event_logger = get_event_logger()


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Engine plus session factory for one database URL.

    Handlers receive a :class:`Database` instead of reaching for a module
    global, so tests and scripts can point the service at any store.
    """

    def __init__(self, url: str, *, echo: bool = False, **engine_kwargs: Any) -> None:
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)
        if self.dialect == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self.sessionmaker = async_sessionmaker(
            bind=self.engine, class_=AsyncSession, expire_on_commit=False
        )

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session that is closed on every exit path."""
        async with self.sessionmaker() as session:
            yield session

    @asynccontextmanager
    async def transaction(self, operation: str = "transaction") -> AsyncIterator[AsyncSession]:
        """Yield a session inside ``BEGIN``/``COMMIT``.

        Any exception rolls the transaction back before it propagates;
        driver and constraint failures surface as :class:`PersistenceError`.
        """
        start_time = time.time()
        try:
            async with self.sessionmaker() as session:
                async with session.begin():
                    yield session
        except SQLAlchemyError as exc:
            duration = time.time() - start_time
            event_logger.log(
                EventType.ERROR_ROLLBACK,
                f"Rolled back {operation}",
                Priority.CRITICAL,
                metadata={
                    "operation": operation,
                    "duration": duration,
                    "error_type": type(exc).__name__,
                    "success": False,
                },
            )
            raise PersistenceError(f"Failed to {operation}: {exc}") from exc

        event_logger.log(
            EventType.DATABASE_OPERATION,
            f"Committed {operation}",
            Priority.NORMAL,
            metadata={
                "operation": operation,
                "duration": time.time() - start_time,
                "success": True,
            },
        )

    def _ensure_sqlite_directory(self) -> None:
        url = make_url(self.url)
        database = url.database
        if self.dialect != "sqlite" or not database or database == ":memory:":
            return
        if database.startswith("file:"):
            return
        Path(database).parent.mkdir(parents=True, exist_ok=True)

    async def ensure_schema(self) -> None:
        """Create every table that does not exist yet."""
        start_time = time.time()
        self._ensure_sqlite_directory()
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as exc:
            event_logger.log_error_handling_start(
                error_type=type(exc).__name__,
                error_msg=str(exc),
                context="Database schema initialization",
                metadata={"operation": "schema_ensure"},
            )
            raise PersistenceError(f"Failed to initialize schema: {exc}") from exc

        event_logger.log(
            EventType.DATABASE_OPERATION,
            "Database schema ready",
            Priority.HIGH,
            metadata={
                "operation": "schema_ensure",
                "duration": time.time() - start_time,
                "success": True,
            },
        )

    async def dispose(self) -> None:
        await self.engine.dispose()


def create_database(settings: DatabaseConfig | None = None, **engine_kwargs: Any) -> Database:
    """Build a :class:`Database` from configuration."""
    settings = settings or config.database
    return Database(settings.url, echo=settings.echo, **engine_kwargs)


__all__ = ["Database", "create_database"]

"""
SQL engine management using SQLAlchemy 2.0.

Wraps engine creation, schema setup and error translation for the SQL
repositories. The database URL is treated as an opaque string; SQLite
gets foreign-key enforcement switched on for every connection.
"""

import contextlib
import logging
from collections.abc import Iterator
from datetime import UTC, datetime

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from taskledger.domain.shared.errors import PersistenceError
from taskledger.infrastructure.storage.schema import metadata

logger = logging.getLogger(__name__)

IN_MEMORY_SQLITE_URLS = {"sqlite://", "sqlite:///:memory:"}


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # noqa: ARG001
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class SqlStorage:
    """Owner of the SQLAlchemy engine shared by the SQL repositories.

    Example:
        storage = SqlStorage("sqlite:///tasks.db")
        storage.initialize()
        tasks = SqlTaskRepository(storage)
    """

    def __init__(self, database_url: str, echo: bool = False) -> None:
        """
        Args:
            database_url: SQLAlchemy URL, e.g. ``sqlite:///path/to/tasks.db``.
            echo: Log every SQL statement (debugging aid).
        """
        self.database_url = database_url
        engine_kwargs: dict = {"echo": echo}

        # A private :memory: database only survives on a single shared connection
        if database_url in IN_MEMORY_SQLITE_URLS:
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}

        try:
            self.engine: Engine = create_engine(database_url, **engine_kwargs)
        except (SQLAlchemyError, ValueError) as e:
            raise PersistenceError("open database", f"{database_url}: {e}") from e

        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

    def initialize(self) -> None:
        """Create any missing tables. Existing tables are left untouched."""
        logger.info(f"Initializing database schema at {self.engine.url!r}")
        with translate_errors("initialize schema"):
            metadata.create_all(self.engine)

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()


@contextlib.contextmanager
def translate_errors(operation: str) -> Iterator[None]:
    """Re-raise SQLAlchemy errors as PersistenceError naming ``operation``."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Database operation failed: {operation}: {e}")
        raise PersistenceError(operation, str(e)) from e


def to_db_timestamp(value: datetime | None) -> datetime | None:
    """Convert an aware datetime to naive UTC for storage."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value


def from_db_timestamp(value: datetime | None) -> datetime | None:
    """Attach UTC to a naive timestamp read from storage."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)

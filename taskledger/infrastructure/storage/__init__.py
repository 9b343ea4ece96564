"""Storage infrastructure for taskledger.

Two interchangeable backends implement the task and tag repository
contracts:

- SQL: SQLAlchemy Core over any supported engine (SQLite by default)
- Memory: process-local maps, for tests and short-lived sessions
"""

import logging
from typing import NamedTuple

from taskledger.config import StorageConfig
from taskledger.domain.clock import Clock
from taskledger.domain.tag.repository import TagRepository
from taskledger.domain.task.repository import TaskRepository
from taskledger.infrastructure.storage.memory import (
    InMemoryStore,
    InMemoryTagRepository,
    InMemoryTaskRepository,
)
from taskledger.infrastructure.storage.sql_repositories import (
    SqlTagRepository,
    SqlTaskRepository,
)
from taskledger.infrastructure.storage.sql_storage import SqlStorage

logger = logging.getLogger(__name__)


class Repositories(NamedTuple):
    """The pair of repositories a use case needs."""

    tasks: TaskRepository
    tags: TagRepository


def in_memory_repositories(clock: Clock | None = None) -> Repositories:
    """Build both repositories over one fresh in-memory store."""
    store = InMemoryStore()
    return Repositories(
        tasks=InMemoryTaskRepository(store, clock),
        tags=InMemoryTagRepository(store, clock),
    )


def sql_repositories(database_url: str, clock: Clock | None = None) -> Repositories:
    """Build both repositories over one SQL engine, creating tables if missing."""
    storage = SqlStorage(database_url)
    storage.initialize()
    return Repositories(
        tasks=SqlTaskRepository(storage, clock),
        tags=SqlTagRepository(storage, clock),
    )


def build_repositories(config: StorageConfig) -> Repositories:
    """Build the repositories selected by the storage configuration."""
    logger.debug(f"Using {config.backend} storage backend")
    if config.backend == "memory":
        return in_memory_repositories()
    return sql_repositories(config.database_url)


__all__ = [
    "Repositories",
    "build_repositories",
    "in_memory_repositories",
    "sql_repositories",
    "SqlStorage",
    "SqlTaskRepository",
    "SqlTagRepository",
    "InMemoryStore",
    "InMemoryTaskRepository",
    "InMemoryTagRepository",
]

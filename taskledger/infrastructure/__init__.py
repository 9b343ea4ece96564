"""Infrastructure layer for taskledger.

Exports:
    Storage:
        - build_repositories: Repositories selected by configuration
        - in_memory_repositories / sql_repositories: Explicit backends
        - Repositories: (tasks, tags) pair
"""

from taskledger.infrastructure.storage import (
    Repositories,
    build_repositories,
    in_memory_repositories,
    sql_repositories,
)

__all__ = [
    "Repositories",
    "build_repositories",
    "in_memory_repositories",
    "sql_repositories",
]

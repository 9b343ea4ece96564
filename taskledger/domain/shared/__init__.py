"""Shared domain building blocks.

- Result monad returned by the application use cases
- Error taxonomy raised by domain and repository code
- Base domain event model
- Generic repository contract with the shared save logic

Example usage:
    >>> from taskledger.domain.shared import Err, Ok, Result, TrackerError, ValidationError
    >>>
    >>> def find_title(task_id: int) -> Result[str, TrackerError]:
    ...     if task_id == 0:
    ...         return Err(ValidationError("0 is reserved"))
    ...     return Ok("Buy milk")
"""

from taskledger.domain.shared.errors import (
    NotFoundError,
    PersistenceError,
    ReferentialIntegrityError,
    TrackerError,
    ValidationError,
)
from taskledger.domain.shared.events import DomainEvent
from taskledger.domain.shared.repository import Repository
from taskledger.domain.shared.result import (
    Err,
    Ok,
    Result,
    is_err,
    is_ok,
    map_result,
    unwrap,
)

__all__ = [
    # Result monad
    "Ok",
    "Err",
    "Result",
    "is_ok",
    "is_err",
    "map_result",
    "unwrap",
    # Errors
    "TrackerError",
    "ValidationError",
    "NotFoundError",
    "ReferentialIntegrityError",
    "PersistenceError",
    # Domain events
    "DomainEvent",
    # Repositories
    "Repository",
]

"""Storage-agnostic repository contract.

``Repository`` fixes the insert-vs-update branching of ``save`` once,
for every backend. Backends only supply the primitive row operations
(``_insert``/``_update``) and the reads, so swapping the SQL backend for
the in-memory one never changes how identities are allocated or
timestamps are written.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Generic, Protocol, TypeVar

from taskledger.domain.clock import Clock, utc_now
from taskledger.domain.shared.errors import NotFoundError, PersistenceError

logger = logging.getLogger(__name__)


class Identity(Protocol):
    value: int


class Identified(Protocol):
    @property
    def id(self) -> Identity | None: ...


A = TypeVar("A", bound=Identified)
I = TypeVar("I", bound=Identity)  # noqa: E741


class Repository(ABC, Generic[A, I]):
    """Base class for aggregate repositories.

    Subclasses set ``entity_name`` and implement the abstract methods.

    Args:
        clock: Source of the timestamps written on update. Defaults to
            the current UTC time.
    """

    entity_name: str = "aggregate"

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or utc_now

    # ------------------------------------------------------------------
    # Public contract
    # ------------------------------------------------------------------

    @abstractmethod
    def find_by_id(self, aggregate_id: I) -> A | None:
        """Return the aggregate with this id, or None if absent."""

    @abstractmethod
    def find_all(self) -> list[A]:
        """Return every stored aggregate, in no particular order."""

    @abstractmethod
    def delete(self, aggregate_id: I) -> bool:
        """Remove the aggregate. Returns False if it did not exist."""

    def save(self, aggregate: A) -> A:
        """Insert or update an aggregate and return the stored version.

        An aggregate without an id is inserted and receives a fresh id
        that is strictly greater than any id issued before (ids are
        never reused, even after deletes). An aggregate with an id is
        updated in place: ``created_at`` is preserved and ``updated_at``
        is rewritten from the repository clock.

        The returned aggregate is reloaded from the backend and has an
        empty event buffer; drain events from the argument instead.

        Raises:
            NotFoundError: If the aggregate has an id that is not stored.
            PersistenceError: If the backend fails.
        """
        if aggregate.id is None:
            new_id = self._insert(aggregate)
            logger.debug(f"Inserted {self.entity_name} #{new_id.value}")
            stored_id = new_id
        else:
            if not self._update(aggregate, self._clock()):
                raise NotFoundError(self.entity_name, aggregate.id.value)
            logger.debug(f"Updated {self.entity_name} #{aggregate.id.value}")
            stored_id = aggregate.id

        saved = self.find_by_id(stored_id)
        if saved is None:
            raise PersistenceError(
                f"save {self.entity_name}",
                f"#{stored_id.value} vanished after write",
            )
        return saved

    # ------------------------------------------------------------------
    # Backend primitives
    # ------------------------------------------------------------------

    @abstractmethod
    def _insert(self, aggregate: A) -> I:
        """Store a new aggregate with its own timestamps; return the allocated id."""

    @abstractmethod
    def _update(self, aggregate: A, updated_at: datetime) -> bool:
        """Overwrite a stored aggregate except ``created_at``.

        Returns False if no row with the aggregate's id exists.
        """

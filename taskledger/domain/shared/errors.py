"""Error taxonomy for taskledger.

Domain and repository code raise these exceptions. The application
layer converts them into ``Err`` results so that interfaces can report
them without catching anything themselves.
"""

from collections.abc import Iterable


class TrackerError(Exception):
    """Base class for all expected taskledger failures."""


class ValidationError(TrackerError, ValueError):
    """A value object or aggregate rejected its input.

    Always surfaced to the caller immediately, never retried.
    """


class NotFoundError(TrackerError):
    """An edit or delete addressed an id that does not exist."""

    def __init__(self, entity: str, entity_id: int) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} #{entity_id} does not exist")


class ReferentialIntegrityError(TrackerError):
    """A cross-entity reference rule was violated.

    Raised when a tag still referenced by tasks is deleted, or when a
    task references tag ids that do not exist. Every offending id is
    listed, not only the first one found.

    Attributes:
        entity: Kind of the offending ids ("tag" or "task").
        ids: Sorted offending ids.
    """

    def __init__(self, message: str, entity: str, ids: Iterable[int]) -> None:
        self.entity = entity
        self.ids = sorted(set(ids))
        joined = ", ".join(str(i) for i in self.ids)
        super().__init__(f"{message}: {entity} ids [{joined}]")

    @classmethod
    def missing_tags(cls, ids: Iterable[int]) -> "ReferentialIntegrityError":
        """Build the error for task writes that reference unknown tags."""
        return cls("Referenced tags do not exist", "tag", ids)

    @classmethod
    def tag_in_use(cls, tag_id: int, task_ids: Iterable[int]) -> "ReferentialIntegrityError":
        """Build the error for deleting a tag that tasks still reference."""
        return cls(f"Tag #{tag_id} is still referenced", "task", task_ids)


class PersistenceError(TrackerError):
    """A storage backend failed.

    Attributes:
        operation: Short description of the failed repository call.
    """

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} failed: {detail}")

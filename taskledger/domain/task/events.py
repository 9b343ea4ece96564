"""Task domain events.

Immutable records of invariant-relevant task changes. They live only
within one command's execution: the aggregate buffers them, and the
application layer drains them after a successful save.

``task_id`` is None for tasks that had not been persisted yet when the
event was recorded.
"""

from datetime import datetime

from taskledger.domain.shared.events import DomainEvent


class TitleChanged(DomainEvent):
    """Event raised when a task is renamed."""

    task_id: int | None
    old_title: str
    new_title: str


class TaskCompleted(DomainEvent):
    """Event raised when a task enters the completed status."""

    task_id: int | None
    completed_at: datetime


class TagAdded(DomainEvent):
    """Event raised when a tag reference is added to a task."""

    task_id: int | None
    tag_id: int


class TagRemoved(DomainEvent):
    """Event raised when a tag reference is removed from a task."""

    task_id: int | None
    tag_id: int

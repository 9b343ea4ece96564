"""Base domain event infrastructure.

Domain events are immutable records of something that happened to an
aggregate during one command. Aggregates buffer them; the application
layer drains the buffer after a successful save and drops it otherwise.
Events are never persisted or replayed.

Example usage:
    >>> class TaskArchived(DomainEvent):
    ...     task_id: int | None
    ...
    >>> event = TaskArchived(task_id=3)
    >>> print(f"{event.name} occurred at {event.occurred_at}")
"""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field


class DomainEvent(BaseModel):
    """Base class for all domain events.

    Attributes:
        event_id: Unique identifier for this event instance.
        occurred_at: UTC timestamp when the event occurred.
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = {"frozen": True}

    @property
    def name(self) -> str:
        """Event type name, e.g. ``"TaskCompleted"``."""
        return type(self).__name__

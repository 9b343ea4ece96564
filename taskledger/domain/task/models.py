"""Task domain models.

``TaskAggregate`` is the aggregate root for tasks. It is a Pydantic
model so it can be dumped for DTO projection, but all changes go
through its methods, which keep the invariants:

- ``completed_at`` is set if and only if ``status`` is COMPLETED
- ``title`` always holds a validated ``TaskTitle``
- ``tags`` never contains duplicates

Tags are referenced by id only; whether the ids exist is checked by
the application layer, which can reach the tag repository.
"""

from collections.abc import Iterable
from datetime import date, datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from taskledger.domain.shared.errors import ValidationError
from taskledger.domain.shared.events import DomainEvent
from taskledger.domain.task.events import TagAdded, TagRemoved, TaskCompleted, TitleChanged
from taskledger.domain.types import (
    DueDate,
    TagId,
    TaskDescription,
    TaskId,
    TaskTitle,
    utc_now,
)


class Status(str, Enum):
    """Lifecycle status of a task.

    Values are the lowercase names written to storage.
    """

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, text: str) -> "Status":
        """Parse a status from user or storage input.

        Accepts the stored value, the display name and the short filter
        aliases (todo, progress, done), case-insensitively.

        Raises:
            ValidationError: If the text names no status.
        """
        key = text.strip().lower().replace("-", "_")
        status = _STATUS_ALIASES.get(key)
        if status is None:
            raise ValidationError(f"Invalid status: {text!r}")
        return status

    @property
    def display_name(self) -> str:
        return _STATUS_DISPLAY[self]


_STATUS_ALIASES = {
    "pending": Status.PENDING,
    "todo": Status.PENDING,
    "in_progress": Status.IN_PROGRESS,
    "inprogress": Status.IN_PROGRESS,
    "progress": Status.IN_PROGRESS,
    "completed": Status.COMPLETED,
    "done": Status.COMPLETED,
}

_STATUS_DISPLAY = {
    Status.PENDING: "Pending",
    Status.IN_PROGRESS: "InProgress",
    Status.COMPLETED: "Completed",
}


class Priority(str, Enum):
    """Task priority, from LOW to CRITICAL."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def parse(cls, text: str) -> "Priority":
        """Parse a priority name case-insensitively.

        Raises:
            ValidationError: If the text names no priority.
        """
        try:
            return cls(text.strip().lower())
        except ValueError as e:
            raise ValidationError(f"Invalid priority: {text!r}") from e

    @property
    def rank(self) -> int:
        """Numeric rank used for sorting (LOW=1 .. CRITICAL=4)."""
        return _PRIORITY_RANK[self]

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


_PRIORITY_RANK = {
    Priority.LOW: 1,
    Priority.MEDIUM: 2,
    Priority.HIGH: 3,
    Priority.CRITICAL: 4,
}


class DueDateStatus(str, Enum):
    """Where an open task's due date falls relative to today."""

    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    DUE_THIS_WEEK = "due_this_week"
    NO_DUE_DATE = "no_due_date"


def _unique_tags(tag_ids: Iterable[TagId]) -> list[TagId]:
    seen: set[TagId] = set()
    unique: list[TagId] = []
    for tag_id in tag_ids:
        if tag_id not in seen:
            seen.add(tag_id)
            unique.append(tag_id)
    return unique


class TaskAggregate(BaseModel):
    """Aggregate root for a single task.

    Build new tasks with ``create`` (no id yet) and rehydrate stored ones
    with ``reconstruct``. Invariant-relevant mutations append domain
    events to a private buffer that ``take_events`` drains.

    An ``id`` of None means the task has not been persisted yet.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: TaskId | None = None
    title: TaskTitle
    description: TaskDescription = Field(default_factory=TaskDescription)
    status: Status = Status.PENDING
    priority: Priority = Priority.MEDIUM
    tags: list[TagId] = Field(default_factory=list)
    due_date: DueDate | None = None
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    _events: list[DomainEvent] = PrivateAttr(default_factory=list)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        title: TaskTitle,
        description: TaskDescription | None = None,
        status: Status = Status.PENDING,
        priority: Priority = Priority.MEDIUM,
        tag_ids: Iterable[TagId] = (),
        due_date: DueDate | None = None,
    ) -> "TaskAggregate":
        """Create a new, not yet persisted task.

        Timestamps are set to now and the event buffer starts empty. A
        task created directly as COMPLETED gets ``completed_at`` = now.
        """
        now = utc_now()
        return cls(
            id=None,
            title=title,
            description=description or TaskDescription(),
            status=status,
            priority=priority,
            tags=_unique_tags(tag_ids),
            due_date=due_date,
            completed_at=now if status is Status.COMPLETED else None,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def reconstruct(
        cls,
        id: TaskId,
        title: TaskTitle,
        description: TaskDescription,
        status: Status,
        priority: Priority,
        tags: Iterable[TagId],
        due_date: DueDate | None,
        completed_at: datetime | None,
        created_at: datetime,
        updated_at: datetime,
    ) -> "TaskAggregate":
        """Rehydrate a stored task. Used by repositories only.

        Historical events are never replayed; the buffer starts empty.

        Raises:
            ValidationError: If the stored fields break the completion invariant.
        """
        if (status is Status.COMPLETED) != (completed_at is not None):
            raise ValidationError(
                f"Task #{id}: completed_at must be set exactly when status is completed"
            )
        return cls(
            id=id,
            title=title,
            description=description,
            status=status,
            priority=priority,
            tags=_unique_tags(tags),
            due_date=due_date,
            completed_at=completed_at,
            created_at=created_at,
            updated_at=updated_at,
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def rename(self, new_title: TaskTitle) -> None:
        """Change the title and record TitleChanged."""
        if not isinstance(new_title, TaskTitle):
            raise ValidationError("rename expects a TaskTitle")
        old_title = self.title
        self.title = new_title
        self._touch()
        self._record(
            TitleChanged(task_id=self._id_value, old_title=old_title.value, new_title=new_title.value)
        )

    def change_description(self, description: TaskDescription) -> None:
        self.description = description
        self._touch()

    def change_priority(self, priority: Priority) -> None:
        self.priority = priority
        self._touch()

    def change_status(self, new_status: Status) -> None:
        """Move the task to ``new_status``.

        Every transition between the three statuses is allowed. Entering
        COMPLETED stamps ``completed_at`` and records TaskCompleted;
        leaving COMPLETED clears ``completed_at``. Setting the current
        status again changes nothing.
        """
        if not isinstance(new_status, Status):
            raise ValidationError(f"Invalid status: {new_status!r}")
        if new_status is self.status:
            return

        now = self._touch()
        self.status = new_status
        if new_status is Status.COMPLETED:
            self.completed_at = now
            self._record(TaskCompleted(task_id=self._id_value, completed_at=now))
        else:
            self.completed_at = None

    def add_tag(self, tag_id: TagId) -> None:
        """Reference a tag. Adding a tag that is already present is a no-op."""
        if not isinstance(tag_id, TagId):
            raise ValidationError("add_tag expects a TagId")
        if tag_id in self.tags:
            return
        self.tags.append(tag_id)
        self._touch()
        self._record(TagAdded(task_id=self._id_value, tag_id=tag_id.value))

    def remove_tag(self, tag_id: TagId) -> None:
        """Drop a tag reference. Removing an absent tag is a no-op."""
        if tag_id not in self.tags:
            return
        self.tags.remove(tag_id)
        self._touch()
        self._record(TagRemoved(task_id=self._id_value, tag_id=tag_id.value))

    def replace_tags(self, tag_ids: Iterable[TagId]) -> None:
        """Make the tag set equal to ``tag_ids``.

        Emits TagRemoved/TagAdded for each difference; unchanged tags
        produce no events.
        """
        wanted = _unique_tags(tag_ids)
        for tag_id in wanted:
            if not isinstance(tag_id, TagId):
                raise ValidationError("replace_tags expects TagId values")
        for tag_id in [t for t in self.tags if t not in wanted]:
            self.remove_tag(tag_id)
        for tag_id in wanted:
            self.add_tag(tag_id)

    def set_due_date(self, due_date: DueDate | None) -> None:
        """Set or clear the due date. No event is recorded."""
        self.due_date = due_date
        self._touch()

    def take_events(self) -> list[DomainEvent]:
        """Drain and return the buffered events."""
        events, self._events = self._events, []
        return events

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def pending_events(self) -> tuple[DomainEvent, ...]:
        """Buffered events, without draining them."""
        return tuple(self._events)

    def has_tag(self, tag_id: TagId) -> bool:
        return tag_id in self.tags

    def is_overdue(self, today: date) -> bool:
        """True if the task is open and its due date is before ``today``.

        A completed task is never overdue.
        """
        if self.status is Status.COMPLETED or self.due_date is None:
            return False
        return self.due_date.is_before(today)

    def due_date_status(self, today: date) -> DueDateStatus | None:
        """Bucket an open task by due date; None for completed tasks or far-off dates."""
        if self.status is Status.COMPLETED:
            return None
        if self.due_date is None:
            return DueDateStatus.NO_DUE_DATE
        due = self.due_date.value
        if due < today:
            return DueDateStatus.OVERDUE
        if due == today:
            return DueDateStatus.DUE_TODAY
        if due <= today + timedelta(days=7):
            return DueDateStatus.DUE_THIS_WEEK
        return None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @property
    def _id_value(self) -> int | None:
        return self.id.value if self.id is not None else None

    def _touch(self) -> datetime:
        now = utc_now()
        # Keep updated_at monotonic even if the clock is coarse
        if now < self.updated_at:
            now = self.updated_at
        self.updated_at = now
        return now

    def _record(self, event: DomainEvent) -> None:
        self._events.append(event)

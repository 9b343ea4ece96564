"""Data transfer objects for taskledger.

Plain Pydantic records exchanged with interfaces (CLI, TUI, scripts).
Responses hold only primitive, string and date fields so they can be
serialized directly; requests carry raw user input that the use cases
validate into value objects.
"""

from collections.abc import Mapping
from datetime import date, datetime

from pydantic import BaseModel, Field

from taskledger.domain.tag.models import TagAggregate
from taskledger.domain.task.models import DueDateStatus, Priority, Status, TaskAggregate
from taskledger.domain.task.statistics import TaskStats
from taskledger.domain.types import TagId

NO_TAG_LABEL = "(no tag)"


# =============================================================================
# Response DTOs
# =============================================================================


class TagInfo(BaseModel):
    """A tag reference resolved to its name."""

    id: int
    name: str


class TaskDTO(BaseModel):
    """Projection of a task with its tag names resolved."""

    id: int
    title: str
    description: str
    status: str
    priority: str
    tags: list[TagInfo] = Field(default_factory=list)
    due_date: date | None = None
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_aggregate(cls, task: TaskAggregate, tag_names: Mapping[int, str]) -> "TaskDTO":
        """Project a persisted task.

        Tag ids missing from ``tag_names`` are left out of ``tags``.
        """
        return cls(
            id=task.id.value,
            title=task.title.value,
            description=task.description.value,
            status=task.status.value,
            priority=task.priority.value,
            tags=[
                TagInfo(id=tag_id.value, name=tag_names[tag_id.value])
                for tag_id in task.tags
                if tag_id.value in tag_names
            ],
            due_date=task.due_date.value if task.due_date else None,
            completed_at=task.completed_at,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class TagDTO(BaseModel):
    """Projection of a tag."""

    id: int
    name: str
    description: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_aggregate(cls, tag: TagAggregate) -> "TagDTO":
        return cls(
            id=tag.id.value,
            name=tag.name.value,
            description=tag.description.value,
            created_at=tag.created_at,
            updated_at=tag.updated_at,
        )


class StatsDTO(BaseModel):
    """Task statistics keyed by stored status/priority values and tag names.

    Every status, priority and due-date bucket appears, with 0 when empty.
    """

    total: int
    completion_percent: float
    by_status: dict[str, int]
    by_priority: dict[str, int]
    by_due_date: dict[str, int]
    by_tag: dict[str, int]
    priority_status: dict[str, dict[str, int]]

    @classmethod
    def from_stats(cls, stats: TaskStats, tag_names: Mapping[int, str]) -> "StatsDTO":
        by_tag: dict[str, int] = {}
        for tag_id, count in stats.by_tag.items():
            label = _tag_label(tag_id, tag_names)
            by_tag[label] = by_tag.get(label, 0) + count

        return cls(
            total=stats.total,
            completion_percent=stats.completion_percent,
            by_status={status.value: stats.status_count(status) for status in Status},
            by_priority={p.value: stats.priority_count(p) for p in Priority},
            by_due_date={b.value: stats.due_date_count(b) for b in DueDateStatus},
            by_tag=by_tag,
            priority_status={
                p.value: {s.value: stats.priority_status.get((p, s), 0) for s in Status}
                for p in Priority
            },
        )


def _tag_label(tag_id: TagId | None, tag_names: Mapping[int, str]) -> str:
    if tag_id is None:
        return NO_TAG_LABEL
    return tag_names.get(tag_id.value, f"#{tag_id.value}")


# =============================================================================
# Request DTOs
# =============================================================================


class CreateTaskRequest(BaseModel):
    """Raw input for adding a task. Omitted status/priority use the defaults."""

    title: str
    description: str = ""
    status: str | None = None
    priority: str | None = None
    tags: list[int] = Field(default_factory=list)
    due_date: date | None = None


class UpdateTaskRequest(BaseModel):
    """Raw input for editing a task. None means "leave unchanged".

    ``tags`` replaces the whole tag set when given (an empty list clears
    it). ``clear_due_date`` removes the due date.
    """

    title: str | None = None
    description: str | None = None
    status: str | None = None
    priority: str | None = None
    tags: list[int] | None = None
    due_date: date | None = None
    clear_due_date: bool = False


class CreateTagRequest(BaseModel):
    """Raw input for adding a tag."""

    name: str
    description: str | None = None


class UpdateTagRequest(BaseModel):
    """Raw input for editing a tag. None means "leave unchanged"."""

    name: str | None = None
    description: str | None = None

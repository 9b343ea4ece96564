"""Task statistics.

Pure aggregation over a list of tasks: counts by status, priority,
due-date bucket and tag, plus a priority x status matrix.
"""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from taskledger.domain.task.models import DueDateStatus, Priority, Status, TaskAggregate
from taskledger.domain.types import TagId


@dataclass(frozen=True)
class TaskStats:
    """Snapshot of task counts.

    Attributes:
        total: Number of tasks counted
        by_status: Count per status
        by_priority: Count per priority
        by_due_date: Count per due-date bucket, open tasks only
        by_tag: Count per tag id; None counts tasks without tags
        priority_status: Count per (priority, status) pair
    """

    total: int
    by_status: dict[Status, int] = field(default_factory=dict)
    by_priority: dict[Priority, int] = field(default_factory=dict)
    by_due_date: dict[DueDateStatus, int] = field(default_factory=dict)
    by_tag: dict[TagId | None, int] = field(default_factory=dict)
    priority_status: dict[tuple[Priority, Status], int] = field(default_factory=dict)

    def status_count(self, status: Status) -> int:
        return self.by_status.get(status, 0)

    def priority_count(self, priority: Priority) -> int:
        return self.by_priority.get(priority, 0)

    def due_date_count(self, bucket: DueDateStatus) -> int:
        return self.by_due_date.get(bucket, 0)

    @property
    def completion_percent(self) -> float:
        """Share of completed tasks, rounded to one decimal."""
        if self.total == 0:
            return 0.0
        return round(self.status_count(Status.COMPLETED) / self.total * 100, 1)


def calculate_stats(tasks: Iterable[TaskAggregate], today: date) -> TaskStats:
    """Count tasks along every reporting dimension.

    Completed tasks are left out of the due-date buckets, and open tasks
    due more than a week out fall in no bucket.

    Args:
        tasks: Tasks to count.
        today: Reference date for the due-date buckets.

    Returns:
        TaskStats for the given tasks.
    """
    total = 0
    by_status: Counter[Status] = Counter()
    by_priority: Counter[Priority] = Counter()
    by_due_date: Counter[DueDateStatus] = Counter()
    by_tag: Counter[TagId | None] = Counter()
    priority_status: Counter[tuple[Priority, Status]] = Counter()

    for task in tasks:
        total += 1
        by_status[task.status] += 1
        by_priority[task.priority] += 1
        priority_status[(task.priority, task.status)] += 1

        bucket = task.due_date_status(today)
        if bucket is not None:
            by_due_date[bucket] += 1

        if task.tags:
            for tag_id in task.tags:
                by_tag[tag_id] += 1
        else:
            by_tag[None] += 1

    return TaskStats(
        total=total,
        by_status=dict(by_status),
        by_priority=dict(by_priority),
        by_due_date=dict(by_due_date),
        by_tag=dict(by_tag),
        priority_status=dict(priority_status),
    )

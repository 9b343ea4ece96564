"""In-memory repository implementations.

Process-local storage for tests and short-lived sessions. Both
repositories share one ``InMemoryStore`` so that the task/tag relation
and the referential-integrity checks behave exactly like the SQL
backend's three tables.

Every operation takes the store's lock: id allocation is atomic and a
read never sees a half-written entry. Rows are stored as plain
snapshots, so aggregates handed out can be mutated freely without
touching stored state until they are saved.
"""

import itertools
import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import date, datetime

from taskledger.domain.shared.errors import PersistenceError, ReferentialIntegrityError
from taskledger.domain.clock import Clock
from taskledger.domain.tag.models import TagAggregate
from taskledger.domain.tag.repository import TagRepository
from taskledger.domain.task.models import Priority, Status, TaskAggregate
from taskledger.domain.task.repository import TaskRepository
from taskledger.domain.types import (
    DueDate,
    TagDescription,
    TagId,
    TagName,
    TaskDescription,
    TaskId,
    TaskTitle,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _TaskRow:
    title: str
    description: str
    status: str
    priority: str
    due_date: date | None
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class _TagRow:
    name: str
    description: str
    created_at: datetime
    updated_at: datetime


@dataclass
class InMemoryStore:
    """Shared state behind the in-memory repositories.

    Mirrors the SQL layout: a task table, a tag table and a set of
    (task_id, tag_id) pairs. Id counters only ever move forward.
    """

    tasks: dict[int, _TaskRow] = field(default_factory=dict)
    tags: dict[int, _TagRow] = field(default_factory=dict)
    task_tags: set[tuple[int, int]] = field(default_factory=set)
    lock: threading.RLock = field(default_factory=threading.RLock)
    _task_ids: itertools.count = field(default_factory=lambda: itertools.count(1))
    _tag_ids: itertools.count = field(default_factory=lambda: itertools.count(1))

    def next_task_id(self) -> int:
        with self.lock:
            return next(self._task_ids)

    def next_tag_id(self) -> int:
        with self.lock:
            return next(self._tag_ids)

    def tag_ids_of(self, task_id: int) -> list[int]:
        with self.lock:
            return sorted(tag for task, tag in self.task_tags if task == task_id)

    def task_ids_with(self, tag_id: int) -> list[int]:
        with self.lock:
            return sorted(task for task, tag in self.task_tags if tag == tag_id)

    def check_tags_exist(self, tag_ids: list[TagId]) -> None:
        with self.lock:
            missing = {tag_id.value for tag_id in tag_ids} - self.tags.keys()
        if missing:
            raise ReferentialIntegrityError.missing_tags(missing)

    def replace_task_tags(self, task_id: int, tag_ids: list[TagId]) -> None:
        with self.lock:
            self.task_tags = {pair for pair in self.task_tags if pair[0] != task_id}
            self.task_tags.update((task_id, tag_id.value) for tag_id in tag_ids)


# ============================================================================
# Tasks
# ============================================================================


def _task_to_row(task: TaskAggregate) -> _TaskRow:
    return _TaskRow(
        title=task.title.value,
        description=task.description.value,
        status=task.status.value,
        priority=task.priority.value,
        due_date=task.due_date.value if task.due_date else None,
        completed_at=task.completed_at,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


def _row_to_task(task_id: int, row: _TaskRow, tag_ids: list[int]) -> TaskAggregate:
    return TaskAggregate.reconstruct(
        id=TaskId(task_id),
        title=TaskTitle(row.title),
        description=TaskDescription(row.description),
        status=Status(row.status),
        priority=Priority(row.priority),
        tags=[TagId(tag_id) for tag_id in tag_ids],
        due_date=DueDate(row.due_date) if row.due_date is not None else None,
        completed_at=row.completed_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class InMemoryTaskRepository(TaskRepository):
    """Task repository over an ``InMemoryStore``."""

    def __init__(self, store: InMemoryStore | None = None, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self.store = store or InMemoryStore()

    def find_by_id(self, aggregate_id: TaskId) -> TaskAggregate | None:
        with self.store.lock:
            row = self.store.tasks.get(aggregate_id.value)
            if row is None:
                return None
            return _row_to_task(aggregate_id.value, row, self.store.tag_ids_of(aggregate_id.value))

    def find_all(self) -> list[TaskAggregate]:
        with self.store.lock:
            return [
                _row_to_task(task_id, row, self.store.tag_ids_of(task_id))
                for task_id, row in sorted(self.store.tasks.items())
            ]

    def find_ids_by_tag(self, tag_id: TagId) -> list[TaskId]:
        return [TaskId(task_id) for task_id in self.store.task_ids_with(tag_id.value)]

    def delete(self, aggregate_id: TaskId) -> bool:
        with self.store.lock:
            if self.store.tasks.pop(aggregate_id.value, None) is None:
                return False
            self.store.replace_task_tags(aggregate_id.value, [])
        logger.debug(f"Deleted task #{aggregate_id.value}")
        return True

    def _insert(self, aggregate: TaskAggregate) -> TaskId:
        with self.store.lock:
            self.store.check_tags_exist(aggregate.tags)
            task_id = self.store.next_task_id()
            self.store.tasks[task_id] = _task_to_row(aggregate)
            self.store.replace_task_tags(task_id, aggregate.tags)
        return TaskId(task_id)

    def _update(self, aggregate: TaskAggregate, updated_at: datetime) -> bool:
        task_id = aggregate.id.value
        with self.store.lock:
            existing = self.store.tasks.get(task_id)
            if existing is None:
                return False
            self.store.check_tags_exist(aggregate.tags)
            self.store.tasks[task_id] = replace(
                _task_to_row(aggregate),
                created_at=existing.created_at,
                updated_at=updated_at,
            )
            self.store.replace_task_tags(task_id, aggregate.tags)
        return True


# ============================================================================
# Tags
# ============================================================================


def _row_to_tag(tag_id: int, row: _TagRow) -> TagAggregate:
    return TagAggregate.reconstruct(
        id=TagId(tag_id),
        name=TagName(row.name),
        description=TagDescription(row.description),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class InMemoryTagRepository(TagRepository):
    """Tag repository over an ``InMemoryStore``."""

    def __init__(self, store: InMemoryStore | None = None, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self.store = store or InMemoryStore()

    def find_by_id(self, aggregate_id: TagId) -> TagAggregate | None:
        with self.store.lock:
            row = self.store.tags.get(aggregate_id.value)
            return _row_to_tag(aggregate_id.value, row) if row is not None else None

    def find_all(self) -> list[TagAggregate]:
        with self.store.lock:
            return [_row_to_tag(tag_id, row) for tag_id, row in sorted(self.store.tags.items())]

    def find_by_name(self, name: str) -> TagAggregate | None:
        wanted = name.strip()
        with self.store.lock:
            for tag_id, row in self.store.tags.items():
                if row.name == wanted:
                    return _row_to_tag(tag_id, row)
        return None

    def delete(self, aggregate_id: TagId) -> bool:
        tag_id = aggregate_id.value
        with self.store.lock:
            referencing = self.store.task_ids_with(tag_id)
            if referencing:
                raise ReferentialIntegrityError.tag_in_use(tag_id, referencing)
            if self.store.tags.pop(tag_id, None) is None:
                return False
        logger.debug(f"Deleted tag #{tag_id}")
        return True

    def _insert(self, aggregate: TagAggregate) -> TagId:
        with self.store.lock:
            self._check_unique_name(aggregate.name.value, None, "insert tag")
            tag_id = self.store.next_tag_id()
            self.store.tags[tag_id] = _TagRow(
                name=aggregate.name.value,
                description=aggregate.description.value,
                created_at=aggregate.created_at,
                updated_at=aggregate.updated_at,
            )
        return TagId(tag_id)

    def _update(self, aggregate: TagAggregate, updated_at: datetime) -> bool:
        tag_id = aggregate.id.value
        with self.store.lock:
            existing = self.store.tags.get(tag_id)
            if existing is None:
                return False
            self._check_unique_name(aggregate.name.value, tag_id, f"update tag #{tag_id}")
            self.store.tags[tag_id] = replace(
                existing,
                name=aggregate.name.value,
                description=aggregate.description.value,
                updated_at=updated_at,
            )
        return True

    def _check_unique_name(self, name: str, own_id: int | None, operation: str) -> None:
        for tag_id, row in self.store.tags.items():
            if row.name == name and tag_id != own_id:
                raise PersistenceError(operation, f"UNIQUE constraint failed: tags.name ({name!r})")

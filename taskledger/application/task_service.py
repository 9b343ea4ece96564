"""Task application service.

Orchestrates the task use cases over the task and tag repositories.
Mutating use cases follow one shape: validate every input into value
objects, check referenced tags exist, apply the aggregate operations,
save, drain the domain events and project the result to a DTO. All
checks run before any mutation, so a rejected call leaves no partial
state behind.

Every function returns ``Ok(value)`` or ``Err(TrackerError)``.
"""

from datetime import date
from enum import Enum

from taskledger.application.common import drain_events, require_tags, tag_names_for, use_case
from taskledger.application.dto import (
    CreateTaskRequest,
    StatsDTO,
    TaskDTO,
    UpdateTaskRequest,
)
from taskledger.domain.shared.errors import NotFoundError
from taskledger.domain.tag.repository import TagRepository
from taskledger.domain.task.models import Priority, Status, TaskAggregate
from taskledger.domain.task.repository import TaskRepository
from taskledger.domain.task.specification import (
    ByKeyword,
    ByPriority,
    ByStatus,
    ByTag,
    Overdue,
    SearchField,
    Specification,
)
from taskledger.domain.task.statistics import calculate_stats
from taskledger.domain.types import DueDate, TagId, TaskDescription, TaskId, TaskTitle


class SortKey(str, Enum):
    """Fields a task list can be sorted by."""

    PRIORITY = "priority"
    DUE_DATE = "due_date"
    CREATED_AT = "created_at"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# =============================================================================
# Commands
# =============================================================================


@use_case
def add_task(
    tasks: TaskRepository,
    tags: TagRepository,
    request: CreateTaskRequest,
) -> TaskDTO:
    """Create and store a new task.

    Status defaults to pending and priority to medium.

    Returns:
        Ok(TaskDTO) for the stored task, or Err with ValidationError /
        ReferentialIntegrityError / PersistenceError.
    """
    title = TaskTitle(request.title)
    description = TaskDescription(request.description)
    status = Status.parse(request.status) if request.status else Status.PENDING
    priority = Priority.parse(request.priority) if request.priority else Priority.MEDIUM
    tag_ids = [TagId(tag_id) for tag_id in request.tags]
    due_date = DueDate(request.due_date) if request.due_date else None

    require_tags(tags, tag_ids)

    task = TaskAggregate.create(title, description, status, priority, tag_ids, due_date)
    saved = tasks.save(task)
    drain_events(task, saved.id.value)
    return TaskDTO.from_aggregate(saved, tag_names_for(tags, [saved]))


@use_case
def edit_task(
    tasks: TaskRepository,
    tags: TagRepository,
    task_id: int,
    request: UpdateTaskRequest,
) -> TaskDTO:
    """Apply the given changes to an existing task.

    Fields left as None are unchanged. ``request.tags`` replaces the tag
    set; every unknown tag id is reported in a single error.

    Returns:
        Ok(TaskDTO) for the updated task, or Err with ValidationError /
        NotFoundError / ReferentialIntegrityError / PersistenceError.
    """
    identity = TaskId(task_id)
    title = TaskTitle(request.title) if request.title is not None else None
    description = (
        TaskDescription(request.description) if request.description is not None else None
    )
    status = Status.parse(request.status) if request.status is not None else None
    priority = Priority.parse(request.priority) if request.priority is not None else None
    tag_ids = [TagId(t) for t in request.tags] if request.tags is not None else None
    due_date = DueDate(request.due_date) if request.due_date is not None else None

    task = tasks.find_by_id(identity)
    if task is None:
        raise NotFoundError("task", task_id)
    if tag_ids is not None:
        require_tags(tags, tag_ids)

    if title is not None and title != task.title:
        task.rename(title)
    if description is not None:
        task.change_description(description)
    if status is not None:
        task.change_status(status)
    if priority is not None:
        task.change_priority(priority)
    if tag_ids is not None:
        task.replace_tags(tag_ids)
    if request.clear_due_date:
        task.set_due_date(None)
    elif due_date is not None:
        task.set_due_date(due_date)

    saved = tasks.save(task)
    drain_events(task, task_id)
    return TaskDTO.from_aggregate(saved, tag_names_for(tags, [saved]))


@use_case
def delete_task(tasks: TaskRepository, task_id: int) -> int:
    """Delete a task and its tag associations.

    Returns:
        Ok(task_id), or Err(NotFoundError) if the task does not exist.
    """
    if not tasks.delete(TaskId(task_id)):
        raise NotFoundError("task", task_id)
    return task_id


# =============================================================================
# Queries
# =============================================================================


def task_filter(
    status: str | None = None,
    priority: str | None = None,
    tag_id: int | None = None,
    overdue_on: date | None = None,
) -> Specification | None:
    """Build the specification for the given list filters.

    Every given filter must hold (they are combined with ``and_``).
    Returns None when no filter was requested.

    Raises:
        ValidationError: If a filter value is invalid.
    """
    specs: list[Specification] = []
    if status is not None:
        specs.append(ByStatus(Status.parse(status)))
    if priority is not None:
        specs.append(ByPriority(Priority.parse(priority)))
    if tag_id is not None:
        specs.append(ByTag(TagId(tag_id)))
    if overdue_on is not None:
        specs.append(Overdue(overdue_on))

    if not specs:
        return None
    combined = specs[0]
    for spec in specs[1:]:
        combined = combined.and_(spec)
    return combined


def sort_tasks(
    items: list[TaskAggregate],
    key: SortKey,
    order: SortOrder = SortOrder.ASC,
) -> list[TaskAggregate]:
    """Sort tasks by ``key``; tasks with a due date come before those without."""
    if key is SortKey.PRIORITY:
        ordered = sorted(items, key=lambda t: t.priority.rank)
    elif key is SortKey.DUE_DATE:
        ordered = sorted(
            items,
            key=lambda t: (t.due_date is None, t.due_date.value if t.due_date else date.min),
        )
    else:
        ordered = sorted(items, key=lambda t: t.created_at)
    if order is SortOrder.DESC:
        ordered.reverse()
    return ordered


@use_case
def list_tasks(
    tasks: TaskRepository,
    tags: TagRepository,
    spec: Specification | None = None,
    sort_key: SortKey | None = None,
    order: SortOrder = SortOrder.ASC,
) -> list[TaskDTO]:
    """List tasks, optionally filtered by ``spec`` and sorted.

    Without a sort key tasks come back in ascending id order.
    """
    found = tasks.find_by_specification(spec) if spec is not None else tasks.find_all()
    found.sort(key=lambda t: t.id.value)
    if sort_key is not None:
        found = sort_tasks(found, sort_key, order)
    names = tag_names_for(tags, found)
    return [TaskDTO.from_aggregate(task, names) for task in found]


@use_case
def search_tasks(
    tasks: TaskRepository,
    tags: TagRepository,
    query: str,
    field: SearchField = SearchField.ALL,
) -> list[TaskDTO]:
    """Find tasks whose text contains every whitespace-separated keyword."""
    found = tasks.find_by_specification(ByKeyword.from_query(query, field))
    found.sort(key=lambda t: t.id.value)
    names = tag_names_for(tags, found)
    return [TaskDTO.from_aggregate(task, names) for task in found]


@use_case
def show_task(tasks: TaskRepository, tags: TagRepository, task_id: int) -> TaskDTO | None:
    """Return one task, or Ok(None) if it does not exist."""
    task = tasks.find_by_id(TaskId(task_id))
    if task is None:
        return None
    return TaskDTO.from_aggregate(task, tag_names_for(tags, [task]))


@use_case
def show_stats(tasks: TaskRepository, tags: TagRepository, today: date) -> StatsDTO:
    """Count tasks by status, priority, due date and tag."""
    all_tasks = tasks.find_all()
    stats = calculate_stats(all_tasks, today)
    return StatsDTO.from_stats(stats, tag_names_for(tags, all_tasks))

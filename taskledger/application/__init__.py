"""Application service layer for taskledger.

Use cases that orchestrate the domain over the task and tag
repositories and project results into DTOs. Each returns a Result.

Services:
    task_service - add/edit/delete/list/show/search tasks, statistics
    tag_service - add/edit/delete/list/show tags

Example usage:
    >>> from taskledger.application import CreateTaskRequest, add_task
    >>> from taskledger.domain.shared import is_ok
    >>>
    >>> result = add_task(tasks, tags, CreateTaskRequest(title="Buy milk"))
    >>> if is_ok(result):
    ...     print(f"Added task #{result.value.id}")
"""

from taskledger.application.dto import (
    CreateTagRequest,
    CreateTaskRequest,
    StatsDTO,
    TagDTO,
    TagInfo,
    TaskDTO,
    UpdateTagRequest,
    UpdateTaskRequest,
)
from taskledger.application.tag_service import (
    add_tag,
    delete_tag,
    edit_tag,
    list_tags,
    show_tag,
)
from taskledger.application.task_service import (
    SortKey,
    SortOrder,
    add_task,
    delete_task,
    edit_task,
    list_tasks,
    search_tasks,
    show_stats,
    show_task,
    task_filter,
)

__all__ = [
    # DTOs
    "TaskDTO",
    "TagDTO",
    "TagInfo",
    "StatsDTO",
    "CreateTaskRequest",
    "UpdateTaskRequest",
    "CreateTagRequest",
    "UpdateTagRequest",
    # Task service
    "add_task",
    "edit_task",
    "delete_task",
    "list_tasks",
    "search_tasks",
    "show_task",
    "show_stats",
    "task_filter",
    "SortKey",
    "SortOrder",
    # Tag service
    "add_tag",
    "edit_tag",
    "delete_tag",
    "list_tags",
    "show_tag",
]

"""Task CLI commands.

Thin wrappers that turn command-line options into requests for the
task use cases and print the results.
"""

from datetime import date
from typing import Optional

import typer

from taskledger.application import (
    CreateTaskRequest,
    SortKey,
    SortOrder,
    UpdateTaskRequest,
    add_task,
    delete_task,
    edit_task,
    list_tasks,
    search_tasks,
    show_stats,
    show_task,
    task_filter,
)
from taskledger.domain.shared import TrackerError
from taskledger.domain.task.specification import SearchField
from taskledger.domain.types import DueDate
from taskledger.interfaces.cli.common import (
    get_repositories,
    print_error,
    print_info,
    print_separator,
    print_success,
    print_task,
    render_task_table,
    unwrap_or_exit,
)

app = typer.Typer(help="Task management commands")


def _parse_due(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return DueDate.parse(value).value
    except TrackerError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


@app.command("add")
def add(
    title: str = typer.Argument(..., help="Task title"),
    description: str = typer.Option("", "--description", "-d", help="Task description"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="pending, in_progress, completed"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="low, medium, high, critical"),
    tags: list[int] = typer.Option([], "--tag", "-t", help="Tag id (repeatable)"),
    due: Optional[str] = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)"),
) -> None:
    """Add a new task."""
    repos = get_repositories()
    request = CreateTaskRequest(
        title=title,
        description=description,
        status=status,
        priority=priority,
        tags=tags,
        due_date=_parse_due(due),
    )
    task = unwrap_or_exit(add_task(repos.tasks, repos.tags, request))
    print_success(f"Added task #{task.id}: {task.title}")


@app.command("list")
def list_command(
    status: Optional[str] = typer.Option(None, "--status", "-s", help="Filter: todo, progress, done, ..."),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="Filter by priority"),
    tag: Optional[int] = typer.Option(None, "--tag", "-t", help="Filter by tag id"),
    overdue: bool = typer.Option(False, "--overdue", help="Only open tasks past their due date"),
    sort: Optional[SortKey] = typer.Option(None, "--sort", help="Sort key"),
    order: SortOrder = typer.Option(SortOrder.ASC, "--order", help="Sort order"),
) -> None:
    """List tasks."""
    repos = get_repositories()
    try:
        spec = task_filter(
            status=status,
            priority=priority,
            tag_id=tag,
            overdue_on=date.today() if overdue else None,
        )
    except TrackerError as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    found = unwrap_or_exit(list_tasks(repos.tasks, repos.tags, spec, sort, order))
    if not found:
        print_info("No tasks found.")
        return
    render_task_table(found)


@app.command("show")
def show(task_id: int = typer.Argument(..., help="Task id")) -> None:
    """Show one task in detail."""
    repos = get_repositories()
    task = unwrap_or_exit(show_task(repos.tasks, repos.tags, task_id))
    if task is None:
        print_error(f"task #{task_id} does not exist")
        raise typer.Exit(1)
    print_task(task)


@app.command("edit")
def edit(
    task_id: int = typer.Argument(..., help="Task id"),
    title: Optional[str] = typer.Option(None, "--title", help="New title"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="New status"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="New priority"),
    tags: Optional[list[int]] = typer.Option(None, "--tag", "-t", help="Replace tags (repeatable)"),
    clear_tags: bool = typer.Option(False, "--clear-tags", help="Remove every tag"),
    due: Optional[str] = typer.Option(None, "--due", help="New due date (YYYY-MM-DD)"),
    clear_due: bool = typer.Option(False, "--clear-due", help="Remove the due date"),
) -> None:
    """Edit an existing task."""
    repos = get_repositories()
    request = UpdateTaskRequest(
        title=title,
        description=description,
        status=status,
        priority=priority,
        tags=[] if clear_tags else (tags or None),
        due_date=_parse_due(due),
        clear_due_date=clear_due,
    )
    task = unwrap_or_exit(edit_task(repos.tasks, repos.tags, task_id, request))
    print_success(f"Updated task #{task.id}: {task.title}")


@app.command("delete")
def delete(task_id: int = typer.Argument(..., help="Task id")) -> None:
    """Delete a task."""
    repos = get_repositories()
    unwrap_or_exit(delete_task(repos.tasks, task_id))
    print_success(f"Deleted task #{task_id}")


@app.command("search")
def search(
    query: str = typer.Argument(..., help="Whitespace-separated keywords"),
    field: SearchField = typer.Option(SearchField.ALL, "--field", "-f", help="Field to search"),
) -> None:
    """Search tasks by keyword."""
    repos = get_repositories()
    found = unwrap_or_exit(search_tasks(repos.tasks, repos.tags, query, field))
    if not found:
        print_info(f"No tasks match '{query}'.")
        return
    render_task_table(found)


@app.command("stats")
def stats() -> None:
    """Show task statistics."""
    repos = get_repositories()
    summary = unwrap_or_exit(show_stats(repos.tasks, repos.tags, date.today()))

    print_separator()
    typer.echo(f"Tasks: {summary.total} ({summary.completion_percent}% completed)")
    print_separator()
    typer.echo("By status:")
    for name, count in summary.by_status.items():
        typer.echo(f"  {name:<14} {count}")
    typer.echo("By priority:")
    for name, count in summary.by_priority.items():
        typer.echo(f"  {name:<14} {count}")
    typer.echo("By due date (open tasks):")
    for name, count in summary.by_due_date.items():
        typer.echo(f"  {name:<14} {count}")
    typer.echo("By tag:")
    for name, count in sorted(summary.by_tag.items()):
        typer.echo(f"  {name:<14} {count}")

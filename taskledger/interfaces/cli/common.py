"""Shared utilities for taskledger CLI commands.

- Repository wiring from configuration
- Result unwrapping with uniform error reporting
- Formatted output helpers (error, success, info)
- Table rendering with rich
"""

from typing import TypeVar

import typer
from rich.console import Console
from rich.table import Table

from taskledger.application.dto import TagDTO, TaskDTO
from taskledger.config import load_config
from taskledger.domain.shared import Err, Result, TrackerError
from taskledger.infrastructure.storage import Repositories, build_repositories

T = TypeVar("T")

_repositories: Repositories | None = None


def get_repositories() -> Repositories:
    """Build (once per process) the repositories named by the configuration."""
    global _repositories
    if _repositories is None:
        _repositories = build_repositories(load_config().storage)
    return _repositories


def reset_repositories() -> None:
    """Forget the cached repositories so the next call re-reads configuration."""
    global _repositories
    _repositories = None


def unwrap_or_exit(result: Result[T, TrackerError]) -> T:
    """Return the Ok value, or print the error and exit with status 1."""
    if isinstance(result, Err):
        print_error(str(result.error))
        raise typer.Exit(1)
    return result.value


def print_error(msg: str) -> None:
    """Print a formatted error message."""
    typer.echo(typer.style(f"Error: {msg}", fg=typer.colors.RED), err=True)


def print_success(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.GREEN))


def print_info(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.BLUE))


def print_separator(char: str = "=", width: int = 60) -> None:
    typer.echo(char * width)


def _console() -> Console:
    # Built per call so output goes to whatever stdout is current (CliRunner swaps it)
    return Console()


def render_task_table(tasks: list[TaskDTO]) -> None:
    """Print tasks as a table."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Status")
    table.add_column("Priority")
    table.add_column("Due")
    table.add_column("Tags")
    for task in tasks:
        table.add_row(
            str(task.id),
            task.title,
            task.status,
            task.priority,
            task.due_date.isoformat() if task.due_date else "-",
            ", ".join(tag.name for tag in task.tags) or "-",
        )
    _console().print(table)


def render_tag_table(tags: list[TagDTO]) -> None:
    """Print tags as a table."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Description")
    for tag in tags:
        table.add_row(str(tag.id), tag.name, tag.description or "-")
    _console().print(table)


def print_task(task: TaskDTO) -> None:
    """Print every field of one task."""
    print_separator()
    typer.echo(f"Task #{task.id}: {task.title}")
    print_separator()
    typer.echo(f"Status:      {task.status}")
    typer.echo(f"Priority:    {task.priority}")
    typer.echo(f"Tags:        {', '.join(t.name for t in task.tags) or '-'}")
    typer.echo(f"Due date:    {task.due_date.isoformat() if task.due_date else '-'}")
    if task.completed_at:
        typer.echo(f"Completed:   {task.completed_at:%Y-%m-%d %H:%M}")
    typer.echo(f"Created:     {task.created_at:%Y-%m-%d %H:%M}")
    typer.echo(f"Updated:     {task.updated_at:%Y-%m-%d %H:%M}")
    if task.description:
        typer.echo("")
        typer.echo(task.description)


__all__ = [
    "get_repositories",
    "reset_repositories",
    "unwrap_or_exit",
    "print_error",
    "print_success",
    "print_info",
    "print_separator",
    "render_task_table",
    "render_tag_table",
    "print_task",
]

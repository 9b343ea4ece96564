"""CLI interface for taskledger using Typer.

Usage:
    taskledger task add "Write report" -p high --due 2026-11-01
    taskledger task list --status todo --sort due_date
    taskledger tag add work
    taskledger stats

The CLI is structured as:
- app: Main Typer application
- commands/: Command groups (task, tag)
- common.py: Shared utilities for CLI commands
- main.py: Entry point that runs the app
"""

import logging
from typing import Optional

import typer

from taskledger import __version__
from taskledger.interfaces.cli.commands import tag, task

app = typer.Typer(
    name="taskledger",
    help="Track tasks with tags, priorities and due dates",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"taskledger version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    """taskledger - a small task tracker."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# =============================================================================
# Register Command Groups
# =============================================================================

app.add_typer(task.app, name="task")
app.add_typer(tag.app, name="tag")


# =============================================================================
# Top-Level Shortcuts
# =============================================================================


@app.command("stats")
def stats() -> None:
    """Show task statistics (shortcut for 'task stats')."""
    task.stats()

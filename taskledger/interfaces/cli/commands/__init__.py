"""CLI command groups for taskledger.

Command groups:
- task: add, list, show, edit, delete, search, stats
- tag: add, list, show, edit, delete

Each group is a Typer app registered with the main app through
app.add_typer().
"""

from taskledger.interfaces.cli.commands import tag, task

__all__ = ["task", "tag"]

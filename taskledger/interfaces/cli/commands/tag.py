"""Tag CLI commands."""

from typing import Optional

import typer

from taskledger.application import (
    CreateTagRequest,
    UpdateTagRequest,
    add_tag,
    delete_tag,
    edit_tag,
    list_tags,
    show_tag,
)
from taskledger.interfaces.cli.common import (
    get_repositories,
    print_error,
    print_info,
    print_success,
    render_tag_table,
    unwrap_or_exit,
)

app = typer.Typer(help="Tag management commands")


@app.command("add")
def add(
    name: str = typer.Argument(..., help="Tag name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Tag description"),
) -> None:
    """Add a new tag."""
    repos = get_repositories()
    tag = unwrap_or_exit(add_tag(repos.tags, CreateTagRequest(name=name, description=description)))
    print_success(f"Added tag #{tag.id}: {tag.name}")


@app.command("list")
def list_command() -> None:
    """List tags."""
    repos = get_repositories()
    tags = unwrap_or_exit(list_tags(repos.tags))
    if not tags:
        print_info("No tags found.")
        return
    render_tag_table(tags)


@app.command("show")
def show(tag_id: int = typer.Argument(..., help="Tag id")) -> None:
    """Show one tag."""
    repos = get_repositories()
    tag = unwrap_or_exit(show_tag(repos.tags, tag_id))
    if tag is None:
        print_error(f"tag #{tag_id} does not exist")
        raise typer.Exit(1)
    typer.echo(f"Tag #{tag.id}: {tag.name}")
    if tag.description:
        typer.echo(tag.description)
    typer.echo(f"Created: {tag.created_at:%Y-%m-%d %H:%M}")


@app.command("edit")
def edit(
    tag_id: int = typer.Argument(..., help="Tag id"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
) -> None:
    """Rename a tag or change its description."""
    repos = get_repositories()
    request = UpdateTagRequest(name=name, description=description)
    tag = unwrap_or_exit(edit_tag(repos.tags, tag_id, request))
    print_success(f"Updated tag #{tag.id}: {tag.name}")


@app.command("delete")
def delete(tag_id: int = typer.Argument(..., help="Tag id")) -> None:
    """Delete a tag. Fails while any task still uses it."""
    repos = get_repositories()
    unwrap_or_exit(delete_tag(repos.tasks, repos.tags, tag_id))
    print_success(f"Deleted tag #{tag_id}")

"""Minion management CLI commands.

Commands for creating, editing, inspecting and deleting minions.
"""

from typing import Optional

import typer

from minions.domain.minion import MinionStatus, Priority, format_version
from minions.interfaces.cli.common import (
    db_option,
    format_minion_line,
    get_manager,
    get_minion_service,
    get_store,
    print_error,
    print_header,
    print_info,
    print_success,
    run,
)

app = typer.Typer(help="Minion management commands")


@app.command("add")
def add(
    title: str = typer.Argument(..., help="Minion title"),
    description: str = typer.Option("", "--description", "-d", help="Description"),
    minion_type: str = typer.Option("task", "--type", "-t", help="Minion type"),
    priority: Priority = typer.Option(Priority.MEDIUM, "--priority", help="Priority"),
    minion_id: Optional[str] = typer.Option(None, "--id", help="Explicit id (default: random UUID)"),
    db: db_option = None,
) -> None:
    """Create a new minion."""
    service = get_minion_service(db)
    minion = run(
        service.create_minion(
            title,
            id=minion_id,
            description=description,
            type=minion_type,
            priority=priority,
        )
    )
    print_success(f"Created {minion.id} ({minion.title})")


@app.command("list")
def list_minions(
    all_: bool = typer.Option(False, "--all", "-a", help="Include archived and deleted"),
    db: db_option = None,
) -> None:
    """List minions."""
    minions = run(get_store(db).list())
    shown = [m for m in minions if all_ or m.is_available()]
    if not shown:
        print_info("No minions.")
        return
    for minion in shown:
        typer.echo(format_minion_line(minion))


@app.command("show")
def show(
    minion_id: str = typer.Argument(..., help="Minion id"),
    db: db_option = None,
) -> None:
    """Show a minion with its relationships."""
    minion = run(get_store(db).get(minion_id))
    if minion is None:
        print_error(f"Minion not found: {minion_id}")
        raise typer.Exit(1)

    print_header(f"{minion.title}  v{format_version(minion)}")
    typer.echo(f"id:        {minion.id}")
    typer.echo(f"type:      {minion.type}")
    typer.echo(f"status:    {minion.status.value}")
    typer.echo(f"priority:  {minion.priority.value}")
    if minion.description:
        typer.echo(f"\n{minion.description}\n")
    typer.echo(f"parent:    {minion.parent_id or '-'}")
    typer.echo(f"children:  {', '.join(minion.children) or '-'}")
    deps = ", ".join(f"{d.id}@{d.version}" for d in minion.dependencies)
    typer.echo(f"depends:   {deps or '-'}")
    dependents = ", ".join(d.id for d in minion.dependent_on)
    typer.echo(f"needed by: {dependents or '-'}")


@app.command("edit")
def edit(
    minion_id: str = typer.Argument(..., help="Minion id"),
    title: Optional[str] = typer.Option(None, "--title", help="New title"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
    status: Optional[MinionStatus] = typer.Option(None, "--status", help="New status"),
    priority: Optional[Priority] = typer.Option(None, "--priority", help="New priority"),
    user_version: Optional[str] = typer.Option(None, "--user-version", help="Set the user version"),
    db: db_option = None,
) -> None:
    """Edit a minion; major/minor versions bump automatically."""
    updates = {
        key: value
        for key, value in {
            "title": title,
            "description": description,
            "status": status,
            "priority": priority,
        }.items()
        if value is not None
    }
    minion = run(get_minion_service(db).edit_minion(minion_id, updates, user_version))
    print_success(f"{minion.id} is now v{format_version(minion)}")


@app.command("bump")
def bump(
    minion_id: str = typer.Argument(..., help="Minion id"),
    down: bool = typer.Option(False, "--down", help="Decrement instead of increment"),
    db: db_option = None,
) -> None:
    """Step the user version component."""
    version = run(get_minion_service(db).bump_user_version(minion_id, -1 if down else 1))
    print_success(f"{minion_id} is now v{version.user}.{version.major}.{version.minor}")


@app.command("archive")
def archive(
    minion_id: str = typer.Argument(..., help="Minion id"),
    restore: bool = typer.Option(False, "--restore", help="Unarchive instead"),
    db: db_option = None,
) -> None:
    """Archive (or restore) a minion."""
    run(get_minion_service(db).archive_minion(minion_id, archived=not restore))
    print_success(f"{'Restored' if restore else 'Archived'} {minion_id}")


@app.command("delete")
def delete(
    minion_id: str = typer.Argument(..., help="Minion id"),
    db: db_option = None,
) -> None:
    """Delete a minion and detach all its relationships."""
    run(get_manager(db).delete_minion(minion_id))
    print_success(f"Deleted {minion_id}")


@app.command("parent")
def parent(
    minion_id: str = typer.Argument(..., help="Minion id"),
    parent_id: Optional[str] = typer.Argument(None, help="New parent id (omit to detach)"),
    db: db_option = None,
) -> None:
    """Move a minion under a parent, or detach it."""
    run(get_manager(db).set_parent(minion_id, parent_id))
    if parent_id:
        print_success(f"{minion_id} is now a child of {parent_id}")
    else:
        print_success(f"{minion_id} detached from its parent")

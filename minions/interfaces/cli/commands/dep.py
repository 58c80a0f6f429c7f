"""Dependency CLI commands.

Commands for adding, removing and re-pinning dependencies, and for
reviewing which pinned versions have drifted.
"""

from typing import Optional

import typer

from minions.domain.minion import (
    ParseError,
    available_dependencies,
    dependency_status,
    filter_options,
)
from minions.interfaces.cli.common import (
    db_option,
    get_manager,
    get_store,
    print_error,
    print_info,
    print_success,
    print_warning,
    run,
)

app = typer.Typer(help="Dependency management commands")


@app.command("add")
def add(
    owner_id: str = typer.Argument(..., help="Minion that depends"),
    candidate_id: str = typer.Argument(..., help="Minion depended upon"),
    max_dependencies: Optional[int] = typer.Option(None, "--max", help="Override the dependency limit"),
    db: db_option = None,
) -> None:
    """Add a dependency pinned at the candidate's current version."""
    dep = run(get_manager(db).add_dependency(owner_id, candidate_id, max_dependencies))
    print_success(f"{owner_id} now depends on {candidate_id}@{dep.version}")


@app.command("rm")
def remove(
    owner_id: str = typer.Argument(..., help="Minion that depends"),
    candidate_id: str = typer.Argument(..., help="Minion depended upon"),
    db: db_option = None,
) -> None:
    """Remove a dependency."""
    run(get_manager(db).remove_dependency(owner_id, candidate_id))
    print_success(f"{owner_id} no longer depends on {candidate_id}")


@app.command("set")
def set_dependencies(
    owner_id: str = typer.Argument(..., help="Minion whose dependencies are replaced"),
    candidate_ids: Optional[list[str]] = typer.Argument(None, help="Complete list of dependency ids"),
    db: db_option = None,
) -> None:
    """Replace the whole dependency list."""
    final = run(get_manager(db).replace_dependencies(owner_id, candidate_ids or []))
    print_success(f"{owner_id} depends on {len(final)} minion(s)")


@app.command("pin")
def pin(
    owner_id: str = typer.Argument(..., help="Minion that depends"),
    candidate_id: str = typer.Argument(..., help="Minion depended upon"),
    version: str = typer.Argument(..., help="Version to pin, e.g. 1.2.0"),
    db: db_option = None,
) -> None:
    """Re-pin a dependency to another version."""
    dep = run(get_manager(db).change_version(owner_id, candidate_id, version))
    print_success(f"{owner_id} -> {candidate_id} pinned at {dep.version}")


@app.command("list")
def list_dependencies(
    owner_id: str = typer.Argument(..., help="Minion whose dependencies to show"),
    db: db_option = None,
) -> None:
    """Show dependencies with their drift status."""
    minions = run(get_store(db).list())
    owner = next((m for m in minions if m.id == owner_id), None)
    if owner is None:
        print_error(f"Minion not found: {owner_id}")
        raise typer.Exit(1)

    try:
        rows = dependency_status(owner, minions)
    except ParseError as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    if not rows:
        print_info(f"{owner_id} has no dependencies.")
        return

    outdated = 0
    for row in rows:
        line = f"{row.minion.id}  pinned {row.dependency.version}  live {row.live_version}  {row.minion.title}"
        if row.is_outdated:
            outdated += 1
            typer.echo(typer.style(f"{line}  [outdated: {row.diff}]", fg=typer.colors.YELLOW))
        else:
            typer.echo(line)
    if outdated:
        print_warning(f"{outdated} dependency pin(s) behind the live version")


@app.command("options")
def options(
    owner_id: str = typer.Argument(..., help="Minion the picker is for"),
    search: str = typer.Option("", "--search", "-s", help="Filter by title"),
    db: db_option = None,
) -> None:
    """List minions that can be added as dependencies."""
    minions = run(get_store(db).list())
    owner = next((m for m in minions if m.id == owner_id), None)
    selected = owner.dependencies if owner else []

    found = filter_options(available_dependencies(owner_id, selected, minions), search)
    if not found:
        print_info("No candidates.")
        return
    for opt in found:
        typer.echo(f"{opt.value}  v{opt.version}  {opt.priority.value:<6} {opt.status.value:<11} {opt.label}")


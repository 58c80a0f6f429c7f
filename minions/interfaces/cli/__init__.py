"""CLI interface for Minions using Typer.

Usage:
    minions minion add "Write docs"     # Create a minion
    minions dep add A B                  # A depends on B
    minions dep list A                   # Show pins and drift
    minions graph show A                 # Relationship graph around A
    minions reconcile                    # Repair back-references

The CLI is structured as:
- app: Main Typer application
- commands/: Individual command groups (minion, dep, graph)
- common.py: Shared utilities for CLI commands
- main.py: Entry point that runs the app
"""

from typing import Optional

import typer

from minions import __version__
from minions.interfaces.cli.commands import dep, graph, minion
from minions.interfaces.cli.common import configure_logging, db_option

app = typer.Typer(
    name="minions",
    help="Hierarchical task management with versioned dependencies",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"minions version {__version__}")
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
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Minions - tasks with parents, children and pinned dependencies."""
    configure_logging(verbose)


# =============================================================================
# Register Command Groups
# =============================================================================

app.add_typer(minion.app, name="minion")
app.add_typer(dep.app, name="dep")
app.add_typer(graph.app, name="graph")


# =============================================================================
# Top-Level Shortcuts for Common Commands
# =============================================================================


@app.command("search")
def search(
    term: str = typer.Argument(..., help="Text to look for"),
    db: db_option = None,
) -> None:
    """Search minions (shortcut for 'graph search')."""
    graph.search(term, db=db)


@app.command("reconcile")
def reconcile(
    dry_run: bool = typer.Option(False, "--dry-run", help="Report without writing"),
    db: db_option = None,
) -> None:
    """Repair back-references (shortcut for 'graph reconcile')."""
    graph.reconcile_command(dry_run=dry_run, db=db)


__all__ = ["app"]

"""Relationship graph CLI commands.

Commands for inspecting the dependency/parent graph, searching for
minions and repairing back-references.
"""

import json

import typer

from minions.domain.minion import EdgeKind, build_relationship_graph, reconcile, search_minions
from minions.interfaces.cli.common import (
    db_option,
    format_minion_line,
    get_manager,
    get_store,
    print_header,
    print_info,
    print_success,
    print_warning,
    run,
)

app = typer.Typer(help="Relationship graph commands")

_EDGE_ARROWS = {
    EdgeKind.DEPENDENCY: "--depends-->",
    EdgeKind.PARENT_CHILD: "--parent-of-->",
    EdgeKind.PARENT_DEPENDENCY: "==parent&depends==>",
}


@app.command("show")
def show(
    root_id: str = typer.Argument(..., help="Minion to center the graph on"),
    as_json: bool = typer.Option(False, "--json", help="Print canvas JSON"),
    db: db_option = None,
) -> None:
    """Show everything reachable from a minion."""
    graph = build_relationship_graph(root_id, run(get_store(db).list()))

    if as_json:
        typer.echo(json.dumps(graph.to_flow(), indent=2))
        return

    if not graph.nodes:
        print_info(f"Nothing to show for {root_id} (missing, archived or deleted).")
        return

    print_header(f"GRAPH: {root_id}  ({len(graph.nodes)} nodes, {len(graph.edges)} edges)")
    for node in graph.nodes:
        typer.echo(f"({node.position.x:>6.0f}, {node.position.y:>6.0f})  {format_minion_line(node.minion)}")
    if graph.edges:
        typer.echo("")
    for edge in graph.edges:
        typer.echo(f"{edge.source} {_EDGE_ARROWS[edge.kind]} {edge.target}")


@app.command("search")
def search(
    term: str = typer.Argument(..., help="Text to look for in title or description"),
    db: db_option = None,
) -> None:
    """Find minions to jump to."""
    found = search_minions(term, run(get_store(db).list()))
    if not found:
        print_info("No matches.")
        return
    for minion in found:
        typer.echo(format_minion_line(minion))


@app.command("reconcile")
def reconcile_command(
    dry_run: bool = typer.Option(False, "--dry-run", help="Report without writing"),
    db: db_option = None,
) -> None:
    """Rebuild dependent_on and children from the authoritative fields."""
    if dry_run:
        report = reconcile(run(get_store(db).list()))
    else:
        report = run(get_manager(db).reconcile())

    if report.is_consistent:
        print_success("Graph is consistent.")
        return

    verb = "Would fix" if dry_run else "Fixed"
    for minion_id, partial in report.updates.items():
        print_warning(f"{verb} {minion_id}: {', '.join(sorted(partial))}")

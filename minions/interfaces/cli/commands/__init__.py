"""CLI command groups for Minions.

Command groups:
- minion: Minion creation, edits and lifecycle
- dep: Dependency edges and version pins
- graph: Relationship graph, search and reconciliation

Each command group is a Typer app registered with the main app
using app.add_typer().
"""

from minions.interfaces.cli.commands import dep, graph, minion

__all__ = ["minion", "dep", "graph"]

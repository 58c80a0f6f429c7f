"""Relationship graph for the dependency canvas.

Builds a positioned node/edge graph covering everything reachable from
a root minion through dependency and parent/child relationships.

All functions in this module are pure - no I/O, no side effects.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .models import Minion, index_minions

# Layout offsets, in canvas pixels
SIBLING_SPACING = 350
LEVEL_HEIGHT = 200
DEPENDENCY_OFFSET_X = -400
CHILD_OFFSET_X = -200


class EdgeKind(str, Enum):
    """Relationship an edge represents."""

    DEPENDENCY = "dependency"
    PARENT_CHILD = "parent-child"
    # A dependency on the owner's own parent or child
    PARENT_DEPENDENCY = "parent-dependency"


EDGE_STYLES: dict[EdgeKind, dict[str, Any]] = {
    EdgeKind.DEPENDENCY: {"stroke": "#94a3b8", "strokeWidth": 2},
    EdgeKind.PARENT_CHILD: {"stroke": "#22c55e", "strokeWidth": 2},
    EdgeKind.PARENT_DEPENDENCY: {"stroke": "#9333ea", "strokeWidth": 3, "strokeDasharray": "5 5"},
}


class Position(BaseModel):
    x: float
    y: float


class GraphNode(BaseModel):
    """A minion placed on the canvas."""

    id: str
    position: Position
    minion: Minion


class GraphEdge(BaseModel):
    """A directed relationship between two placed minions."""

    id: str
    source: str
    target: str
    kind: EdgeKind


class RelationshipGraph(BaseModel):
    """Nodes and edges rooted at a single minion."""

    root_id: str
    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)

    def node_ids(self) -> list[str]:
        return [node.id for node in self.nodes]

    def to_flow(self) -> dict[str, list[dict[str, Any]]]:
        """Render the graph in the shape the web canvas consumes."""
        return {
            "nodes": [
                {
                    "id": node.id,
                    "type": "minion",
                    "position": node.position.model_dump(),
                    "data": node.minion.model_dump(mode="json", by_alias=True),
                    "draggable": False,
                    "selectable": True,
                }
                for node in self.nodes
            ],
            "edges": [
                {
                    "id": edge.id,
                    "source": edge.source,
                    "target": edge.target,
                    "kind": edge.kind.value,
                    "style": EDGE_STYLES[edge.kind],
                    "type": "smoothstep",
                    "animated": True,
                }
                for edge in self.edges
            ],
        }


def build_relationship_graph(root_id: str, minions: list[Minion]) -> RelationshipGraph:
    """Build the relationship graph reachable from ``root_id``.

    Each reachable minion becomes exactly one node, placed on its first
    visit. Dependencies are laid out above their owner and children
    below, siblings spaced by their index. Archived and soft-deleted
    minions produce no node or edge, and the walk does not continue
    past them.

    Args:
        root_id: Minion to center the graph on.
        minions: Snapshot of the full minion set.

    Returns:
        RelationshipGraph; empty if the root is missing or unavailable.
    """
    index = index_minions(minions)
    graph = RelationshipGraph(root_id=root_id)

    root = index.get(root_id)
    if root is None or not root.is_available():
        return graph

    processed: set[str] = set()
    edge_ids: set[str] = set()
    stack: list[tuple[str, float, float]] = [(root_id, 0, 0)]

    def add_edge(edge_id: str, source: str, target: str, kind: EdgeKind) -> None:
        if edge_id in edge_ids:
            return
        edge_ids.add(edge_id)
        graph.edges.append(GraphEdge(id=edge_id, source=source, target=target, kind=kind))

    while stack:
        minion_id, x, y = stack.pop()
        if minion_id in processed:
            continue
        minion = index[minion_id]
        processed.add(minion_id)
        graph.nodes.append(GraphNode(id=minion_id, position=Position(x=x, y=y), minion=minion))

        upcoming: list[tuple[str, float, float]] = []

        for i, dep in enumerate(minion.dependencies):
            target = index.get(dep.id)
            if target is None or not target.is_available():
                continue
            is_family = minion.parent_id == dep.id or dep.id in minion.children
            kind = EdgeKind.PARENT_DEPENDENCY if is_family else EdgeKind.DEPENDENCY
            add_edge(f"{minion_id}-{dep.id}", minion_id, dep.id, kind)
            upcoming.append(
                (dep.id, x + DEPENDENCY_OFFSET_X + i * SIBLING_SPACING, y - LEVEL_HEIGHT)
            )

        for i, child_id in enumerate(minion.children):
            child = index.get(child_id)
            if child is None or not child.is_available():
                continue
            add_edge(f"{minion_id}-{child_id}-child", minion_id, child_id, EdgeKind.PARENT_CHILD)
            upcoming.append(
                (child_id, x + CHILD_OFFSET_X + i * SIBLING_SPACING, y + LEVEL_HEIGHT)
            )

        # Reverse so the first dependency is expanded next, as a recursive walk would
        stack.extend(reversed(upcoming))

    return graph


def search_minions(term: str, minions: list[Minion]) -> list[Minion]:
    """Find available minions whose title or description contains ``term``.

    Matching is case-insensitive. Used by the canvas "jump to node" box.
    """
    needle = term.lower()
    return [
        minion
        for minion in minions
        if minion.is_available()
        and (needle in minion.title.lower() or needle in (minion.description or "").lower())
    ]

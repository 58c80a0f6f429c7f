"""Dependency and parent validation over a minion snapshot.

All functions in this module are pure - no I/O, no side effects.
Walks use an explicit stack so deep graphs cannot exhaust the
interpreter's recursion limit.
"""

from collections.abc import Iterator

from minions.domain.shared import Err, Ok, Result

from .errors import InvalidReason
from .models import Minion, index_minions


def validate_dependency(
    current_id: str,
    candidate_id: str,
    minions: list[Minion],
) -> Result[None, InvalidReason]:
    """Decide whether ``current_id -> candidate_id`` may be added.

    Checks run in order: self-reference, candidate existence, candidate
    availability, then a cycle walk from the candidate.

    Args:
        current_id: Minion that would declare the dependency.
        candidate_id: Minion that would be depended upon.
        minions: Snapshot of the full minion set.

    Returns:
        Ok(None) if the edge keeps the graph acyclic, otherwise
        Err(InvalidReason).
    """
    if candidate_id == current_id:
        return Err(InvalidReason.SELF_DEPENDENCY)

    index = index_minions(minions)
    candidate = index.get(candidate_id)
    if candidate is None:
        return Err(InvalidReason.NOT_FOUND)
    if not candidate.is_available():
        return Err(InvalidReason.CANDIDATE_UNAVAILABLE)

    if _reaches_chain(current_id, candidate, index):
        return Err(InvalidReason.CYCLE_DETECTED)
    return Ok(None)


def has_cycle(current_id: str, candidate_id: str, minions: list[Minion]) -> bool:
    """Check if depending on ``candidate_id`` would close a cycle."""
    index = index_minions(minions)
    candidate = index.get(candidate_id)
    if candidate is None:
        return False
    return _reaches_chain(current_id, candidate, index)


def _reaches_chain(current_id: str, candidate: Minion, index: dict[str, Minion]) -> bool:
    """Depth-first walk along ``dependencies`` starting at the candidate.

    ``chain`` holds the ids on the current path, seeded with the minion
    that would own the new edge. Ids are added before descending and
    removed on backtrack, so two paths meeting at a shared dependency
    (a diamond) are not mistaken for a cycle. Subtrees already walked to
    completion are remembered in ``cleared`` and skipped.
    """
    chain: set[str] = {current_id}
    cleared: set[str] = set()
    stack: list[tuple[str | None, Iterator[str]]] = [
        (None, iter(candidate.dependency_ids()))
    ]

    while stack:
        node_id, pending = stack[-1]
        dep_id = next(pending, None)

        if dep_id is None:
            stack.pop()
            if node_id is not None:
                chain.discard(node_id)
                cleared.add(node_id)
            continue

        if dep_id in chain:
            return True
        if dep_id in cleared:
            continue

        dep = index.get(dep_id)
        if dep is None:
            continue

        chain.add(dep_id)
        stack.append((dep_id, iter(dep.dependency_ids())))

    return False


def is_descendant(ancestor_id: str, candidate_id: str, minions: list[Minion]) -> bool:
    """Check if ``candidate_id`` sits somewhere below ``ancestor_id``.

    Walks the ``parent_id`` chain upward from the candidate. A minion
    may not adopt one of its own descendants as parent.
    """
    index = index_minions(minions)
    seen: set[str] = set()
    node = index.get(candidate_id)

    while node is not None and node.parent_id is not None:
        if node.parent_id == ancestor_id:
            return True
        # Corrupt parent loops must not hang the walk
        if node.parent_id in seen:
            return False
        seen.add(node.parent_id)
        node = index.get(node.parent_id)

    return False


def validate_parent(
    current_id: str,
    parent_id: str,
    minions: list[Minion],
) -> Result[None, InvalidReason]:
    """Decide whether ``parent_id`` may become the parent of ``current_id``."""
    if parent_id == current_id:
        return Err(InvalidReason.SELF_DEPENDENCY)

    parent = index_minions(minions).get(parent_id)
    if parent is None:
        return Err(InvalidReason.NOT_FOUND)
    if not parent.is_available():
        return Err(InvalidReason.CANDIDATE_UNAVAILABLE)
    if is_descendant(current_id, parent_id, minions):
        return Err(InvalidReason.CYCLE_DETECTED)
    return Ok(None)

"""Rebuild denormalized inverse lists from the authoritative fields.

``dependencies`` and ``parent_id`` are authoritative. ``dependent_on``
and ``children`` are derived from them and can drift when one half of a
two-sided write fails. ``reconcile`` computes the corrections without
touching storage; the dependency manager applies them.

All functions in this module are pure - no I/O, no side effects.
"""

from typing import Any

from pydantic import BaseModel, Field

from .models import Dependency, Minion, index_minions


class ReconcileReport(BaseModel):
    """Corrections needed to make the minion set consistent.

    Attributes:
        updates: Partial updates keyed by minion id. Only minions whose
            stored lists differ from the derived ones appear.
    """

    updates: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @property
    def is_consistent(self) -> bool:
        return not self.updates


def reconcile(minions: list[Minion]) -> ReconcileReport:
    """Compute the updates that restore bidirectional consistency.

    - Dependencies on minions that no longer exist are dropped.
    - ``dependent_on`` of each minion lists exactly the minions whose
      ``dependencies`` reference it. Existing mirror records are kept in
      their stored order; missing ones are appended.
    - A ``parent_id`` naming a missing minion is cleared.
    - ``children`` of each minion lists exactly the minions whose
      ``parent_id`` names it, again keeping stored order.

    Args:
        minions: Snapshot of the full minion set.

    Returns:
        ReconcileReport with one partial update per inconsistent minion.
    """
    index = index_minions(minions)
    report = ReconcileReport()

    def record(minion_id: str, field: str, value: Any) -> None:
        report.updates.setdefault(minion_id, {})[field] = value

    dependents: dict[str, list[tuple[str, Dependency]]] = {m.id: [] for m in minions}
    child_ids: dict[str, list[str]] = {m.id: [] for m in minions}

    for minion in minions:
        kept = [dep for dep in minion.dependencies if dep.id in index]
        if len(kept) != len(minion.dependencies):
            record(minion.id, "dependencies", kept)
        for dep in kept:
            if all(owner_id != minion.id for owner_id, _ in dependents[dep.id]):
                dependents[dep.id].append((minion.id, dep))

        if minion.parent_id is not None:
            if minion.parent_id in index:
                child_ids[minion.parent_id].append(minion.id)
            else:
                record(minion.id, "parent_id", None)

    for minion in minions:
        expected = dict(dependents[minion.id])
        derived = _merge_mirrors(minion, expected)
        if derived != minion.dependent_on:
            record(minion.id, "dependent_on", derived)

        expected_children = child_ids[minion.id]
        ordered = [cid for cid in dict.fromkeys(minion.children) if cid in expected_children]
        ordered += [cid for cid in expected_children if cid not in ordered]
        if ordered != minion.children:
            record(minion.id, "children", ordered)

    return report


def _merge_mirrors(minion: Minion, expected: dict[str, Dependency]) -> list[Dependency]:
    """Keep valid stored mirror records, append the missing ones."""
    merged: list[Dependency] = []
    seen: set[str] = set()

    for mirror in minion.dependent_on:
        if mirror.id in expected and mirror.id not in seen:
            merged.append(mirror)
            seen.add(mirror.id)

    for owner_id, forward in expected.items():
        if owner_id in seen:
            continue
        merged.append(
            Dependency(
                id=owner_id,
                minion_id=minion.id,
                version=forward.current_version,
                current_version=forward.current_version,
            )
        )

    return merged

"""Selectable dependency and parent options for editor pickers.

All functions in this module are pure - no I/O, no side effects.
"""

from collections.abc import Sequence
from typing import TypeVar

from pydantic import BaseModel

from minions.domain.shared import is_ok

from .models import PRIORITY_ORDER, Dependency, Minion, MinionStatus, Priority
from .validation import is_descendant, validate_dependency
from .version import format_version

OptionT = TypeVar("OptionT", bound="_Option")


class _Option(BaseModel):
    value: str
    label: str
    status: MinionStatus
    priority: Priority
    version: str


class DependencyOption(_Option):
    """A minion that may be added as a dependency."""


class ParentOption(_Option):
    """A minion that may become the parent."""

    children: int
    has_parent: bool


def available_dependencies(
    current_id: str,
    selected: list[Dependency],
    minions: list[Minion],
) -> list[DependencyOption]:
    """List minions the current minion may newly depend on.

    Excludes the minion itself, archived or deleted minions, minions
    already selected and any candidate that fails validation. Sorted by
    priority (urgent first), then open before completed, then title.

    Args:
        current_id: Minion whose dependency editor is open.
        selected: Dependencies already chosen in the editor.
        minions: Snapshot of the full minion set.
    """
    selected_ids = {dep.id for dep in selected}
    options: list[DependencyOption] = []

    for minion in minions:
        if minion.id == current_id or not minion.is_available():
            continue
        if minion.id in selected_ids:
            continue
        if not is_ok(validate_dependency(current_id, minion.id, minions)):
            continue

        options.append(
            DependencyOption(
                value=minion.id,
                label=minion.title,
                status=minion.status,
                priority=minion.priority,
                version=format_version(minion),
            )
        )

    return sorted(
        options,
        key=lambda opt: (
            PRIORITY_ORDER[opt.priority],
            opt.status == MinionStatus.COMPLETED,
            opt.label,
        ),
    )


def available_parents(current_id: str, minions: list[Minion]) -> list[ParentOption]:
    """List minions that may become the parent of the current minion.

    Excludes the minion itself, archived or deleted minions and its own
    descendants. Sorted open before completed, then by priority, then
    title.
    """
    options = [
        ParentOption(
            value=minion.id,
            label=minion.title,
            status=minion.status,
            priority=minion.priority,
            version=format_version(minion),
            children=len(minion.children),
            has_parent=minion.parent_id is not None,
        )
        for minion in minions
        if minion.id != current_id
        and minion.is_available()
        and not is_descendant(current_id, minion.id, minions)
    ]

    return sorted(
        options,
        key=lambda opt: (
            opt.status == MinionStatus.COMPLETED,
            PRIORITY_ORDER[opt.priority],
            opt.label,
        ),
    )


def filter_options(options: Sequence[OptionT], search: str) -> list[OptionT]:
    """Keep options whose label contains ``search``, ignoring case."""
    needle = search.lower()
    return [opt for opt in options if needle in opt.label.lower()]

"""Version drift between pinned dependencies and live minions.

``Dependency.current_version`` is a snapshot taken when an edge is added
or re-pinned and is never consulted here: the live version is always
read from the dependency's minion.

All functions in this module are pure - no I/O, no side effects.
"""

from pydantic import BaseModel

from .models import Dependency, Minion, index_minions
from .version import compare_versions, format_version, parse_version

_COMPONENT_LABELS = ("User", "Major", "Minor")


class VersionHistoryEntry(BaseModel):
    """A version offered for pinning in the dependency table."""

    version: str
    is_current: bool
    is_selected: bool


class DependencyStatus(BaseModel):
    """A dependency joined with its live minion for display."""

    dependency: Dependency
    minion: Minion
    live_version: str
    is_outdated: bool
    diff: str | None = None
    history: list[VersionHistoryEntry]


def is_outdated(dependency: Dependency, candidate: Minion | None) -> bool:
    """Check if the candidate's live version is newer than the pin.

    A missing candidate is never outdated. A pin newer than the live
    version is not outdated either.
    """
    if candidate is None:
        return False
    return compare_versions(format_version(candidate), dependency.version) > 0


def version_diff(dependency: Dependency, candidate: Minion | None) -> str | None:
    """Describe which version components differ between pin and live.

    Returns:
        Comma-separated list such as ``"Major version change, Minor
        version change"``, an empty string if nothing differs, or None if
        the candidate is missing.
    """
    if candidate is None:
        return None

    live = parse_version(format_version(candidate))
    pinned = parse_version(dependency.version)

    changes = [
        f"{label} version change"
        for label, left, right in zip(_COMPONENT_LABELS, live, pinned)
        if left != right
    ]
    return ", ".join(changes)


def version_history(
    candidate: Minion,
    dependencies: list[Dependency],
) -> list[VersionHistoryEntry]:
    """List the versions a dependency on ``candidate`` can be pinned to.

    Always contains the live version; the pinned version is added when it
    differs. Sorted newest first.

    Args:
        candidate: The depended-upon minion.
        dependencies: The depending minion's dependency list.
    """
    current = format_version(candidate)
    selected = next((dep for dep in dependencies if dep.id == candidate.id), None)

    entries = [
        VersionHistoryEntry(
            version=current,
            is_current=True,
            is_selected=selected is not None and selected.version == current,
        )
    ]
    if selected is not None and selected.version != current:
        entries.append(
            VersionHistoryEntry(version=selected.version, is_current=False, is_selected=True)
        )

    return sorted(entries, key=lambda entry: parse_version(entry.version), reverse=True)


def dependency_status(owner: Minion, minions: list[Minion]) -> list[DependencyStatus]:
    """Join each of the owner's dependencies with its live minion.

    Dependencies whose target no longer exists are left out.
    """
    index = index_minions(minions)
    rows: list[DependencyStatus] = []

    for dep in owner.dependencies:
        target = index.get(dep.id)
        if target is None:
            continue
        rows.append(
            DependencyStatus(
                dependency=dep,
                minion=target,
                live_version=format_version(target),
                is_outdated=is_outdated(dep, target),
                diff=version_diff(dep, target),
                history=version_history(target, owner.dependencies),
            )
        )

    return rows

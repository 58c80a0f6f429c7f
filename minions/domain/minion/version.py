"""Version formatting, comparison and edit-driven bumping.

All functions in this module are pure - no I/O, no side effects.
"""

from typing import Any

from .errors import ParseError
from .models import Minion, MinionVersion

NULL_VERSION = "0.0.0"

# Fields whose change bumps the major or minor component. Changed fields
# not listed here count as minor.
VERSION_CHANGE_RULES: dict[str, str] = {
    "title": "minor",
    "description": "minor",
    "status": "major",
    "priority": "major",
    "due_date": "minor",
    "estimated_time": "minor",
    "tags": "minor",
    "labels": "minor",
    "parent_id": "major",
    "dependencies": "major",
    "recurring": "major",
}

# Bookkeeping fields that never bump the version
_UNVERSIONED_FIELDS = frozenset(
    {"id", "version", "updated_at", "created_at", "dependent_on", "children"}
)


def format_version(minion: Minion | None) -> str:
    """Render a minion's version as ``user.major.minor``.

    A missing minion yields ``0.0.0``.
    """
    if minion is None:
        return NULL_VERSION
    v = minion.version
    return f"{v.user}.{v.major}.{v.minor}"


def parse_version(value: str) -> tuple[int, int, int]:
    """Parse ``user.major.minor`` into three integers.

    Raises:
        ParseError: If there are not exactly three components or any
            component is not a non-negative integer.
    """
    parts = value.split(".") if isinstance(value, str) else []
    if len(parts) != 3 or not all(part.isascii() and part.isdigit() for part in parts):
        raise ParseError(value)
    user, major, minor = (int(part) for part in parts)
    return user, major, minor


def compare_versions(a: str, b: str) -> int:
    """Compare two version strings.

    Components are compared as integers in the order user, major,
    minor; the first differing component decides.

    Returns:
        Negative if a < b, zero if equal, positive if a > b.
    """
    a_parts = parse_version(a)
    b_parts = parse_version(b)
    for left, right in zip(a_parts, b_parts):
        if left != right:
            return left - right
    return 0


def classify_changes(original: Minion, updates: dict[str, Any]) -> dict[str, int]:
    """Count major and minor changes in a partial update.

    Only fields whose value actually differs from the original count.

    Args:
        original: Minion before the edit.
        updates: Partial update keyed by field name.

    Returns:
        Dict with ``major`` and ``minor`` counts.
    """
    counts = {"major": 0, "minor": 0}
    for field, new_value in updates.items():
        if field in _UNVERSIONED_FIELDS or field not in Minion.model_fields:
            continue
        if _normalize(getattr(original, field)) == _normalize(new_value):
            continue
        counts[VERSION_CHANGE_RULES.get(field, "minor")] += 1
    return counts


def bump_version(
    original: Minion,
    updates: dict[str, Any],
    user: str | None = None,
) -> MinionVersion:
    """Compute the version a minion gets after applying ``updates``.

    Args:
        original: Minion before the edit.
        updates: Partial update keyed by field name.
        user: Explicit user component, or None to keep the current one.

    Returns:
        New MinionVersion with major/minor advanced by the change counts.
    """
    current_user, current_major, current_minor = parse_version(format_version(original))
    counts = classify_changes(original, updates)
    if user is not None:
        current_user = parse_version(f"{user}.0.0")[0]
    return MinionVersion(
        user=str(current_user),
        major=str(current_major + counts["major"]),
        minor=str(current_minor + counts["minor"]),
    )


def _normalize(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump()
    if isinstance(value, list):
        return [_normalize(item) for item in value]
    return value

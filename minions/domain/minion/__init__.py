"""Minion domain - dependency and version graph.

All exports are pure (no I/O, no side effects).

Key Types:
    Minion - A task with hierarchy, dependencies and a version
    Dependency - Pinned-version edge between two minions
    MinionVersion - user.major.minor version triple
    RelationshipGraph - Positioned nodes and edges for the canvas

Version Functions:
    format_version - Render a minion's version
    compare_versions - Order two version strings
    bump_version - Version after an edit

Validation Functions:
    validate_dependency - Self, availability and cycle checks
    validate_parent - Self, availability and descendant checks

Read-side Functions:
    build_relationship_graph - Node/edge graph rooted at a minion
    is_outdated / version_diff / version_history - Drift reporting
    available_dependencies / available_parents - Picker options
    reconcile - Rebuild dependent_on and children
"""

from .candidates import (
    DependencyOption,
    ParentOption,
    available_dependencies,
    available_parents,
    filter_options,
)
from .drift import (
    DependencyStatus,
    VersionHistoryEntry,
    dependency_status,
    is_outdated,
    version_diff,
    version_history,
)
from .errors import (
    CandidateUnavailableError,
    CycleDetectedError,
    InvalidReason,
    LimitExceededError,
    MinionError,
    NotFoundError,
    ParseError,
    PartialWriteError,
    SelfDependencyError,
    StoreError,
    ValidationError,
    error_for,
)
from .graph import (
    EdgeKind,
    GraphEdge,
    GraphNode,
    RelationshipGraph,
    build_relationship_graph,
    search_minions,
)
from .models import (
    Dependency,
    Minion,
    MinionStatus,
    MinionVersion,
    Priority,
    index_minions,
)
from .reconcile import ReconcileReport, reconcile
from .validation import (
    has_cycle,
    is_descendant,
    validate_dependency,
    validate_parent,
)
from .version import (
    NULL_VERSION,
    VERSION_CHANGE_RULES,
    bump_version,
    classify_changes,
    compare_versions,
    format_version,
    parse_version,
)

__all__ = [
    # Models
    "Minion",
    "MinionStatus",
    "MinionVersion",
    "Priority",
    "Dependency",
    "index_minions",
    # Errors
    "InvalidReason",
    "MinionError",
    "ValidationError",
    "SelfDependencyError",
    "CycleDetectedError",
    "CandidateUnavailableError",
    "NotFoundError",
    "LimitExceededError",
    "PartialWriteError",
    "StoreError",
    "ParseError",
    "error_for",
    # Version
    "NULL_VERSION",
    "VERSION_CHANGE_RULES",
    "format_version",
    "parse_version",
    "compare_versions",
    "classify_changes",
    "bump_version",
    # Validation
    "validate_dependency",
    "validate_parent",
    "has_cycle",
    "is_descendant",
    # Drift
    "VersionHistoryEntry",
    "DependencyStatus",
    "is_outdated",
    "version_diff",
    "version_history",
    "dependency_status",
    # Graph
    "EdgeKind",
    "GraphNode",
    "GraphEdge",
    "RelationshipGraph",
    "build_relationship_graph",
    "search_minions",
    # Candidates
    "DependencyOption",
    "ParentOption",
    "available_dependencies",
    "available_parents",
    "filter_options",
    # Reconciliation
    "ReconcileReport",
    "reconcile",
]

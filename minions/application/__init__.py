"""Application service layer for Minions.

Services orchestrate domain operations against a task store.

Services:
    dependency_service - Dependency edges, parents, deletion, reconciliation
    minion_service - Minion creation and versioned edits

Example usage:
    >>> from minions.application import DependencyManager
    >>> from minions.infrastructure.storage import MemoryTaskStore
    >>>
    >>> manager = DependencyManager(MemoryTaskStore(minions))
    >>> await manager.add_dependency("a", "b")
"""

from minions.application.dependency_service import (
    DEFAULT_MAX_DEPENDENCIES,
    DependencyManager,
)
from minions.application.minion_service import MinionService

__all__ = [
    "DependencyManager",
    "DEFAULT_MAX_DEPENDENCIES",
    "MinionService",
]

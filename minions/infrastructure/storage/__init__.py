"""Storage infrastructure for Minions.

Provides the task store protocol and its backends.
"""

from minions.infrastructure.storage.json_storage import JsonStorage
from minions.infrastructure.storage.repositories import JsonTaskStore
from minions.infrastructure.storage.store import (
    BaseTaskStore,
    MemoryTaskStore,
    StoreChange,
    TaskStore,
)

__all__ = [
    "JsonStorage",
    "TaskStore",
    "BaseTaskStore",
    "MemoryTaskStore",
    "JsonTaskStore",
    "StoreChange",
]

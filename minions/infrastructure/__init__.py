"""Infrastructure layer for Minions.

Exports:
    Storage:
        - JsonStorage: Low-level JSON file I/O
        - TaskStore: Store protocol used by the dependency manager
        - MemoryTaskStore: In-process store
        - JsonTaskStore: JSON-file store keyed by database key
"""

from minions.infrastructure.storage import (
    JsonStorage,
    JsonTaskStore,
    MemoryTaskStore,
    StoreChange,
    TaskStore,
)

__all__ = [
    "JsonStorage",
    "TaskStore",
    "MemoryTaskStore",
    "JsonTaskStore",
    "StoreChange",
]

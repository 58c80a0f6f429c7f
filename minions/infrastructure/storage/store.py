"""Task store protocol and the in-memory backend.

The dependency manager only ever talks to a ``TaskStore``. Every
operation is a coroutine and raises ``StoreError`` on failure. After a
mutation commits, subscribers receive a ``StoreChange`` so views can
refresh without a global broadcast.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, Literal, Protocol

from pydantic import ValidationError as PydanticValidationError

from minions.domain.minion.errors import StoreError
from minions.domain.minion.models import Minion
from minions.domain.shared.events import DomainEvent

logger = logging.getLogger(__name__)


class StoreChange(DomainEvent):
    """Event published after a committed store mutation."""

    operation: Literal["create", "update", "delete"]
    minion_id: str


Subscriber = Callable[[StoreChange], None]


class TaskStore(Protocol):
    """Persistence operations the dependency core depends on."""

    async def list(self) -> list[Minion]: ...

    async def get(self, minion_id: str) -> Minion | None: ...

    async def create(self, minion: Minion) -> None: ...

    async def update(self, minion_id: str, partial: dict[str, Any]) -> None: ...

    async def delete(self, minion_id: str) -> None: ...

    def subscribe(self, callback: Subscriber) -> Callable[[], None]: ...


class BaseTaskStore:
    """Store operations over a table of minions loaded as a whole.

    Subclasses provide ``_read`` and ``_write`` for the whole table; this
    class implements the per-record operations, merging, validation and
    change notification on top of them.
    """

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    async def _read(self) -> list[Minion]:
        raise NotImplementedError

    async def _write(self, minions: list[Minion]) -> None:
        raise NotImplementedError

    async def list(self) -> list[Minion]:
        return [m.model_copy(deep=True) for m in await self._read()]

    async def get(self, minion_id: str) -> Minion | None:
        for minion in await self._read():
            if minion.id == minion_id:
                return minion.model_copy(deep=True)
        return None

    async def create(self, minion: Minion) -> None:
        minions = await self._read()
        if any(m.id == minion.id for m in minions):
            raise StoreError("create", minion.id, "minion already exists")
        minions.append(minion.model_copy(deep=True))
        await self._write(minions)
        self._publish("create", minion.id)

    async def update(self, minion_id: str, partial: dict[str, Any]) -> None:
        unknown = set(partial) - set(Minion.model_fields)
        if unknown:
            raise StoreError("update", minion_id, f"unknown fields: {sorted(unknown)}")

        minions = await self._read()
        for i, current in enumerate(minions):
            if current.id != minion_id:
                continue
            merged = {**current.model_dump(), **partial, "id": minion_id}
            if "updated_at" not in partial:
                merged["updated_at"] = datetime.now(UTC)
            try:
                minions[i] = Minion.model_validate(merged)
            except PydanticValidationError as e:
                raise StoreError("update", minion_id, f"invalid data: {e}") from e
            await self._write(minions)
            self._publish("update", minion_id)
            return

        raise StoreError("update", minion_id, "minion not found")

    async def delete(self, minion_id: str) -> None:
        minions = await self._read()
        remaining = [m for m in minions if m.id != minion_id]
        if len(remaining) == len(minions):
            raise StoreError("delete", minion_id, "minion not found")
        await self._write(remaining)
        self._publish("delete", minion_id)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a change callback.

        Returns:
            Function that removes the callback again.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self, operation: Literal["create", "update", "delete"], minion_id: str) -> None:
        change = StoreChange(operation=operation, minion_id=minion_id)
        for callback in list(self._subscribers):
            try:
                callback(change)
            except Exception:
                # The write already committed; a broken view must not undo it
                logger.exception(f"Subscriber failed handling {operation} of {minion_id}")


class MemoryTaskStore(BaseTaskStore):
    """Task store that keeps minions in process memory."""

    def __init__(self, minions: list[Minion] | None = None) -> None:
        super().__init__()
        self._minions: list[Minion] = [m.model_copy(deep=True) for m in minions or []]

    async def _read(self) -> list[Minion]:
        return list(self._minions)

    async def _write(self, minions: list[Minion]) -> None:
        self._minions = list(minions)

"""File-backed task store.

One JSON document per database key holds every table of that database,
in the layout the web client uses: ``{"minions": [...], ...}``. Tables
other than ``minions`` are preserved untouched on write.
"""

import asyncio
import logging
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from minions.config import MinionsSettings
from minions.domain.minion.errors import StoreError
from minions.domain.minion.models import Minion
from minions.domain.shared.result import Err
from minions.infrastructure.storage.json_storage import JsonStorage, Tables
from minions.infrastructure.storage.store import BaseTaskStore

logger = logging.getLogger(__name__)

MINIONS_TABLE = "minions"


class JsonTaskStore(BaseTaskStore):
    """Task store persisting minions to a JSON file.

    File I/O runs in a worker thread so the event loop is not blocked.
    """

    def __init__(self, path: Path, storage: JsonStorage | None = None) -> None:
        """Initialize the store.

        Args:
            path: JSON document holding the database.
            storage: JsonStorage instance to use. Creates new one if not provided.
        """
        super().__init__()
        self.path = path
        self._storage = storage or JsonStorage()

    @classmethod
    def from_settings(cls, settings: MinionsSettings, db_key: str | None = None) -> "JsonTaskStore":
        return cls(settings.database_path(db_key))

    async def _load_tables(self) -> Tables:
        result = await asyncio.to_thread(self._storage.load_tables, self.path)
        if isinstance(result, Err):
            logger.error(result.error)
            raise StoreError("list", None, result.error)
        return result.value

    async def _read(self) -> list[Minion]:
        records = (await self._load_tables()).get(MINIONS_TABLE, [])
        if not isinstance(records, list):
            raise StoreError("list", None, f"Table {MINIONS_TABLE!r} in {self.path} is not a list")
        try:
            return [Minion.model_validate(item) for item in records]
        except PydanticValidationError as e:
            raise StoreError("list", None, f"Invalid minion data in {self.path}: {e}") from e

    async def _write(self, minions: list[Minion]) -> None:
        tables = await self._load_tables()
        tables[MINIONS_TABLE] = [m.model_dump(mode="json", by_alias=True) for m in minions]

        result = await asyncio.to_thread(self._storage.save_tables, self.path, tables)
        if isinstance(result, Err):
            logger.error(result.error)
            raise StoreError("write", None, result.error)

"""Minion application service.

Creates and edits minions through a task store. Edits bump the version
according to which fields changed; relationship fields are owned by the
dependency manager and cannot be edited here.
"""

import logging
from typing import Any
from uuid import uuid4

from minions.domain.minion import (
    Minion,
    MinionVersion,
    NotFoundError,
    bump_version,
    parse_version,
)
from minions.infrastructure.storage.store import TaskStore

logger = logging.getLogger(__name__)

# Managed by DependencyManager so both halves stay in step
RELATIONSHIP_FIELDS = frozenset({"dependencies", "dependent_on", "parent_id", "children"})


class MinionService:
    """Create, edit and archive minions."""

    def __init__(self, store: TaskStore) -> None:
        self.store = store

    async def create_minion(self, title: str, **fields: Any) -> Minion:
        """Create a minion at version 0.0.0.

        Args:
            title: Minion title.
            **fields: Any other non-relationship Minion fields.

        Raises:
            ValueError: If relationship fields are passed.
        """
        _reject_relationship_fields(fields)
        minion_id = fields.pop("id", None) or str(uuid4())
        minion = Minion(id=minion_id, title=title, **fields)
        await self.store.create(minion)
        logger.info(f"Created minion {minion.id}")
        return minion

    async def edit_minion(
        self,
        minion_id: str,
        updates: dict[str, Any],
        user_version: str | None = None,
    ) -> Minion:
        """Apply an edit and bump the version.

        Args:
            minion_id: Minion to edit.
            updates: Partial update keyed by field name.
            user_version: New user version component, or None to keep it.

        Returns:
            The updated minion.
        """
        _reject_relationship_fields(updates)
        original = await self.store.get(minion_id)
        if original is None:
            raise NotFoundError(f"Minion not found: {minion_id}")

        version = bump_version(original, updates, user=user_version)
        await self.store.update(minion_id, {**updates, "version": version})
        logger.info(f"Edited {minion_id}, now at {version.user}.{version.major}.{version.minor}")

        updated = await self.store.get(minion_id)
        if updated is None:
            raise NotFoundError(f"Minion not found: {minion_id}")
        return updated

    async def bump_user_version(self, minion_id: str, delta: int = 1) -> MinionVersion:
        """Step the manual user version component up or down.

        The component never goes below zero.
        """
        minion = await self.store.get(minion_id)
        if minion is None:
            raise NotFoundError(f"Minion not found: {minion_id}")

        user = parse_version(f"{minion.version.user}.0.0")[0]
        version = minion.version.model_copy(update={"user": str(max(0, user + delta))})
        await self.store.update(minion_id, {"version": version})
        return version

    async def archive_minion(self, minion_id: str, archived: bool = True) -> None:
        await self.store.update(minion_id, {"archived": archived})


def _reject_relationship_fields(fields: dict[str, Any]) -> None:
    blocked = RELATIONSHIP_FIELDS.intersection(fields)
    if blocked:
        raise ValueError(
            f"Relationship fields {sorted(blocked)} must be changed through the dependency manager"
        )

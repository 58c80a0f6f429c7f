"""Dependency application service.

Mutates dependency and parent relationships through a task store while
keeping the denormalized inverse lists in step. Every operation reloads
a fresh snapshot and validates against it right before writing; a
validity result computed earlier (for a picker list, say) is never
trusted.

Writes are sequential and not atomic. If the first write of an
operation fails nothing is committed and the ``StoreError`` propagates.
If a later write fails, a ``PartialWriteError`` names the committed and
the failed minion; run ``reconcile`` to repair the inverse lists.
"""

import logging
from collections.abc import Sequence
from typing import Any

from minions.domain.minion import (
    Dependency,
    LimitExceededError,
    Minion,
    NotFoundError,
    PartialWriteError,
    ReconcileReport,
    SelfDependencyError,
    StoreError,
    error_for,
    format_version,
    index_minions,
    parse_version,
    reconcile,
    validate_dependency,
    validate_parent,
)
from minions.domain.shared import Err
from minions.infrastructure.storage.store import TaskStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPENDENCIES = 10


class DependencyManager:
    """Add, remove, replace and re-pin dependency edges.

    Example:
        manager = DependencyManager(MemoryTaskStore(minions))
        dep = await manager.add_dependency("a", "b")
        await manager.change_version("a", "b", "1.0.0")
    """

    def __init__(self, store: TaskStore, max_dependencies: int = DEFAULT_MAX_DEPENDENCIES) -> None:
        self.store = store
        self.max_dependencies = max_dependencies

    # ── dependency edges ─────────────────────────────────────────

    async def add_dependency(
        self,
        owner_id: str,
        candidate_id: str,
        max_dependencies: int | None = None,
    ) -> Dependency:
        """Declare that ``owner_id`` depends on ``candidate_id``.

        The candidate's live version is captured as both the pinned and
        the current version. Adding an edge that already exists returns
        the existing record without writing.

        Raises:
            SelfDependencyError: If owner and candidate are the same.
            NotFoundError: If either minion does not exist.
            LimitExceededError: If the owner already has the maximum
                number of dependencies.
            CycleDetectedError: If the edge would close a cycle.
            CandidateUnavailableError: If the candidate is archived or deleted.
            PartialWriteError: If the owner was updated but the
                candidate's back-reference was not.
        """
        if owner_id == candidate_id:
            raise SelfDependencyError()

        limit = self.max_dependencies if max_dependencies is None else max_dependencies
        minions = await self.store.list()
        index = index_minions(minions)
        owner = _require(index, owner_id)

        existing = owner.find_dependency(candidate_id)
        if existing is not None:
            return existing

        if len(owner.dependencies) >= limit:
            raise LimitExceededError(f"Maximum {limit} dependencies allowed")

        self._validate(owner_id, candidate_id, minions)

        candidate = index[candidate_id]
        version = format_version(candidate)
        dependency = Dependency(
            id=candidate_id,
            minion_id=owner_id,
            version=version,
            current_version=version,
        )
        mirror = Dependency(
            id=owner_id,
            minion_id=candidate_id,
            version=version,
            current_version=version,
        )

        await self._write_sequence(
            [
                (owner_id, {"dependencies": [*owner.dependencies, dependency]}),
                (candidate_id, {"dependent_on": _with_mirror(candidate.dependent_on, mirror)}),
            ]
        )
        logger.info(f"Added dependency {owner_id} -> {candidate_id} pinned at {version}")
        return dependency

    async def remove_dependency(self, owner_id: str, candidate_id: str) -> None:
        """Remove the edge ``owner_id -> candidate_id`` and its back-reference.

        Removing an edge that does not exist is not an error; whichever
        half is still present gets cleaned up.
        """
        index = index_minions(await self.store.list())
        owner = index.get(owner_id)
        candidate = index.get(candidate_id)

        writes: list[tuple[str, dict[str, Any]]] = []
        if owner is not None and owner.find_dependency(candidate_id) is not None:
            writes.append(
                (owner_id, {"dependencies": _without(owner.dependencies, candidate_id)})
            )
        if candidate is not None and any(m.id == owner_id for m in candidate.dependent_on):
            writes.append(
                (candidate_id, {"dependent_on": _without(candidate.dependent_on, owner_id)})
            )

        if not writes:
            return
        await self._write_sequence(writes)
        logger.info(f"Removed dependency {owner_id} -> {candidate_id}")

    async def replace_dependencies(
        self,
        owner_id: str,
        new_dependencies: Sequence[Dependency | str],
        max_dependencies: int | None = None,
    ) -> list[Dependency]:
        """Replace the owner's whole dependency list.

        Entries may be minion ids or Dependency records. Edges present in
        both the old and new list are left untouched. Every added edge is
        validated before anything is written; one invalid candidate fails
        the whole operation.

        Args:
            owner_id: Minion whose dependency list is replaced.
            new_dependencies: Desired dependencies. Ids are pinned at the
                candidate's live version; records keep their pinned version.
            max_dependencies: Override of the manager's limit.

        Returns:
            The owner's new dependency list.
        """
        limit = self.max_dependencies if max_dependencies is None else max_dependencies
        minions = await self.store.list()
        index = index_minions(minions)
        owner = _require(index, owner_id)

        old_by_id = {dep.id: dep for dep in owner.dependencies}
        requested: dict[str, Dependency | str] = {}
        for entry in new_dependencies:
            dep_id = entry if isinstance(entry, str) else entry.id
            requested.setdefault(dep_id, entry)

        added_ids = [dep_id for dep_id in requested if dep_id not in old_by_id]
        removed_ids = [dep_id for dep_id in old_by_id if dep_id not in requested]

        if not added_ids and not removed_ids:
            return owner.dependencies

        if added_ids and len(requested) > limit:
            raise LimitExceededError(f"Maximum {limit} dependencies allowed")

        for dep_id in added_ids:
            self._validate(owner_id, dep_id, minions)

        final: list[Dependency] = []
        for dep_id, entry in requested.items():
            if dep_id in old_by_id:
                final.append(old_by_id[dep_id])
                continue
            live = format_version(index[dep_id])
            pinned = live if isinstance(entry, str) else entry.version
            parse_version(pinned)
            final.append(
                Dependency(id=dep_id, minion_id=owner_id, version=pinned, current_version=live)
            )

        writes: list[tuple[str, dict[str, Any]]] = [(owner_id, {"dependencies": final})]
        for dep_id in removed_ids:
            target = index.get(dep_id)
            if target is not None and any(m.id == owner_id for m in target.dependent_on):
                writes.append((dep_id, {"dependent_on": _without(target.dependent_on, owner_id)}))
        for dep in final:
            if dep.id not in added_ids:
                continue
            target = index[dep.id]
            mirror = Dependency(
                id=owner_id,
                minion_id=dep.id,
                version=dep.current_version,
                current_version=dep.current_version,
            )
            writes.append((dep.id, {"dependent_on": _with_mirror(target.dependent_on, mirror)}))

        await self._write_sequence(writes)
        logger.info(
            f"Replaced dependencies of {owner_id}: "
            f"+{len(added_ids)} -{len(removed_ids)}"
        )
        return final

    async def change_version(
        self,
        owner_id: str,
        candidate_id: str,
        new_version: str,
    ) -> Dependency:
        """Re-pin an existing dependency to ``new_version``.

        ``current_version`` is refreshed from the candidate's live
        version. Graph structure is not touched.

        Raises:
            ParseError: If ``new_version`` is malformed.
            NotFoundError: If the owner or the edge does not exist.
        """
        parse_version(new_version)

        index = index_minions(await self.store.list())
        owner = _require(index, owner_id)
        existing = owner.find_dependency(candidate_id)
        if existing is None:
            raise NotFoundError(f"{owner_id} does not depend on {candidate_id}")

        updated = existing.model_copy(
            update={
                "version": new_version,
                "current_version": format_version(index.get(candidate_id)),
            }
        )
        dependencies = [updated if dep.id == candidate_id else dep for dep in owner.dependencies]

        await self._write_sequence([(owner_id, {"dependencies": dependencies})])
        logger.info(f"Pinned {owner_id} -> {candidate_id} at {new_version}")
        return updated

    # ── hierarchy and lifecycle ──────────────────────────────────

    async def set_parent(self, minion_id: str, parent_id: str | None) -> None:
        """Move a minion under ``parent_id``, or detach it with None.

        Raises:
            SelfDependencyError: If a minion is made its own parent.
            NotFoundError: If either minion does not exist.
            CandidateUnavailableError: If the parent is archived or deleted.
            CycleDetectedError: If the parent is one of the minion's descendants.
        """
        minions = await self.store.list()
        index = index_minions(minions)
        minion = _require(index, minion_id)

        if parent_id == minion.parent_id:
            return
        if parent_id is not None:
            result = validate_parent(minion_id, parent_id, minions)
            if isinstance(result, Err):
                raise error_for(result.error)

        writes: list[tuple[str, dict[str, Any]]] = [(minion_id, {"parent_id": parent_id})]
        old_parent = index.get(minion.parent_id) if minion.parent_id else None
        if old_parent is not None:
            writes.append(
                (old_parent.id, {"children": [c for c in old_parent.children if c != minion_id]})
            )
        if parent_id is not None:
            new_parent = index[parent_id]
            if minion_id not in new_parent.children:
                writes.append((parent_id, {"children": [*new_parent.children, minion_id]}))

        await self._write_sequence(writes)
        logger.info(f"Moved {minion_id} under {parent_id or 'top level'}")

    async def delete_minion(self, minion_id: str) -> None:
        """Delete a minion and every relationship that points at it.

        Neighbours are updated first, then the record is deleted.
        Children are detached rather than deleted.
        """
        minions = await self.store.list()
        index = index_minions(minions)
        target = _require(index, minion_id)

        writes: list[tuple[str, dict[str, Any]]] = []
        for other in minions:
            if other.id == minion_id:
                continue
            partial: dict[str, Any] = {}
            if other.find_dependency(minion_id) is not None:
                partial["dependencies"] = _without(other.dependencies, minion_id)
            if any(m.id == minion_id for m in other.dependent_on):
                partial["dependent_on"] = _without(other.dependent_on, minion_id)
            if other.parent_id == minion_id:
                partial["parent_id"] = None
            if other.id == target.parent_id and minion_id in other.children:
                partial["children"] = [c for c in other.children if c != minion_id]
            if partial:
                writes.append((other.id, partial))

        await self._write_sequence(writes)
        try:
            await self.store.delete(minion_id)
        except StoreError as e:
            if writes:
                raise PartialWriteError(writes[0][0], minion_id, e) from e
            raise
        logger.info(f"Deleted {minion_id} and detached {len(writes)} neighbour(s)")

    async def reconcile(self) -> ReconcileReport:
        """Rebuild ``dependent_on`` and ``children`` from the forward fields.

        Returns:
            The report of corrections that were applied.
        """
        report = reconcile(await self.store.list())
        if report.is_consistent:
            logger.info("Minion graph is consistent")
            return report

        logger.warning(f"Reconciling {len(report.updates)} inconsistent minion(s)")
        await self._write_sequence(list(report.updates.items()))
        return report

    # ── helpers ──────────────────────────────────────────────────

    def _validate(self, owner_id: str, candidate_id: str, minions: list[Minion]) -> None:
        result = validate_dependency(owner_id, candidate_id, minions)
        if isinstance(result, Err):
            logger.debug(f"Rejected {owner_id} -> {candidate_id}: {result.error.value}")
            raise error_for(result.error)

    async def _write_sequence(self, writes: list[tuple[str, dict[str, Any]]]) -> None:
        """Apply partial updates one after another.

        A failure on the first write propagates unchanged. A failure on
        any later write becomes a PartialWriteError.
        """
        committed: str | None = None
        for minion_id, partial in writes:
            try:
                await self.store.update(minion_id, partial)
            except StoreError as e:
                if committed is None:
                    logger.error(f"Store update of {minion_id} failed: {e}")
                    raise
                logger.warning(
                    f"Partial write: {committed} updated but {minion_id} failed: {e}"
                )
                raise PartialWriteError(committed, minion_id, e) from e
            committed = committed or minion_id


def _require(index: dict[str, Minion], minion_id: str) -> Minion:
    minion = index.get(minion_id)
    if minion is None:
        raise NotFoundError(f"Minion not found: {minion_id}")
    return minion


def _without(records: list[Dependency], minion_id: str) -> list[Dependency]:
    return [record for record in records if record.id != minion_id]


def _with_mirror(records: list[Dependency], mirror: Dependency) -> list[Dependency]:
    return [*_without(records, mirror.id), mirror]

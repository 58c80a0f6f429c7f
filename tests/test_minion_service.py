"""Tests for MinionService - creation and version-bumping edits."""

from __future__ import annotations

import pytest

from minions.application import MinionService
from minions.domain.minion import MinionStatus, NotFoundError, StoreError
from minions.infrastructure.storage import MemoryTaskStore


class TestCreateMinion:
    @pytest.mark.asyncio
    async def test_create_with_explicit_id(self):
        store = MemoryTaskStore()
        minion = await MinionService(store).create_minion("Write docs", id="docs")

        assert minion.id == "docs"
        assert (await store.get("docs")).title == "Write docs"
        assert minion.version.model_dump() == {"user": "0", "major": "0", "minor": "0"}

    @pytest.mark.asyncio
    async def test_create_generates_id(self):
        store = MemoryTaskStore()
        minion = await MinionService(store).create_minion("Anything", id=None)
        assert minion.id
        assert await store.get(minion.id) is not None

    @pytest.mark.asyncio
    async def test_relationship_fields_rejected(self):
        with pytest.raises(ValueError, match="dependency manager"):
            await MinionService(MemoryTaskStore()).create_minion("x", parent_id="p")

    @pytest.mark.asyncio
    async def test_duplicate_id(self):
        service = MinionService(MemoryTaskStore())
        await service.create_minion("one", id="same")
        with pytest.raises(StoreError):
            await service.create_minion("two", id="same")


class TestEditMinion:
    @pytest.mark.asyncio
    async def test_edit_bumps_version(self, make_minion):
        store = MemoryTaskStore([make_minion("A", title="Old", version="1.0.0")])

        updated = await MinionService(store).edit_minion(
            "A", {"title": "New", "status": MinionStatus.COMPLETED}
        )

        assert updated.title == "New"
        assert updated.status == MinionStatus.COMPLETED
        assert (updated.version.user, updated.version.major, updated.version.minor) == ("1", "1", "1")

    @pytest.mark.asyncio
    async def test_edit_sets_user_version(self, make_minion):
        store = MemoryTaskStore([make_minion("A", version="1.0.0")])
        updated = await MinionService(store).edit_minion("A", {}, user_version="4")
        assert updated.version.user == "4"

    @pytest.mark.asyncio
    async def test_edit_rejects_relationships(self, make_minion):
        store = MemoryTaskStore([make_minion("A")])
        with pytest.raises(ValueError):
            await MinionService(store).edit_minion("A", {"children": ["x"]})

    @pytest.mark.asyncio
    async def test_edit_missing(self):
        with pytest.raises(NotFoundError):
            await MinionService(MemoryTaskStore()).edit_minion("nope", {"title": "x"})

    @pytest.mark.asyncio
    async def test_edit_deleted_during_update(self, make_minion):
        class VanishingStore(MemoryTaskStore):
            async def update(self, minion_id, partial):
                await super().update(minion_id, partial)
                await self.delete(minion_id)

        store = VanishingStore([make_minion("A")])
        with pytest.raises(NotFoundError, match="Minion not found: A"):
            await MinionService(store).edit_minion("A", {"title": "x"})


class TestUserVersionAndArchive:
    @pytest.mark.asyncio
    async def test_bump_up_and_down(self, make_minion):
        store = MemoryTaskStore([make_minion("A", version="1.2.3")])
        service = MinionService(store)

        assert (await service.bump_user_version("A")).user == "2"
        down = await service.bump_user_version("A", -5)

        assert down.user == "0"
        assert (down.major, down.minor) == ("2", "3")

    @pytest.mark.asyncio
    async def test_archive_and_restore(self, make_minion):
        store = MemoryTaskStore([make_minion("A")])
        service = MinionService(store)

        await service.archive_minion("A")
        assert not (await store.get("A")).is_available()

        await service.archive_minion("A", archived=False)
        assert (await store.get("A")).is_available()

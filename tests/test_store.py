"""Tests for the task store backends."""

from __future__ import annotations

import json

import pytest

from minions.config import MinionsSettings
from minions.domain.minion import Dependency, StoreError
from minions.infrastructure.storage import JsonStorage, JsonTaskStore, MemoryTaskStore
from minions.infrastructure.storage.repositories import MINIONS_TABLE


# ═══════════════════════════════════════════════════════════════════
#  Memory store
# ═══════════════════════════════════════════════════════════════════


class TestMemoryTaskStore:
    """CRUD, copy isolation and subscriptions."""

    @pytest.mark.asyncio
    async def test_create_and_list(self, make_minion):
        store = MemoryTaskStore()
        await store.create(make_minion("A"))
        assert [m.id for m in await store.list()] == ["A"]

    @pytest.mark.asyncio
    async def test_create_duplicate_fails(self, make_minion):
        store = MemoryTaskStore([make_minion("A")])
        with pytest.raises(StoreError) as exc_info:
            await store.create(make_minion("A"))
        assert exc_info.value.operation == "create"
        assert exc_info.value.minion_id == "A"

    @pytest.mark.asyncio
    async def test_list_returns_copies(self, make_minion):
        """Mutating a listed minion does not change the store."""
        store = MemoryTaskStore([make_minion("A", title="Original")])
        (listed,) = await store.list()
        listed.title = "Changed"
        assert (await store.get("A")).title == "Original"

    @pytest.mark.asyncio
    async def test_get_missing(self):
        assert await MemoryTaskStore().get("nope") is None

    @pytest.mark.asyncio
    async def test_update_merges_partial(self, make_minion):
        store = MemoryTaskStore([make_minion("A", title="Old", description="keep")])
        before = (await store.get("A")).updated_at

        await store.update("A", {"title": "New"})

        updated = await store.get("A")
        assert updated.title == "New"
        assert updated.description == "keep"
        assert updated.updated_at >= before

    @pytest.mark.asyncio
    async def test_update_accepts_model_values(self, make_minion):
        store = MemoryTaskStore([make_minion("A")])
        dep = Dependency(id="B", minion_id="A", version="1.0.0", current_version="1.0.0")
        await store.update("A", {"dependencies": [dep]})
        assert (await store.get("A")).dependencies == [dep]

    @pytest.mark.asyncio
    async def test_update_missing(self):
        with pytest.raises(StoreError, match="not found"):
            await MemoryTaskStore().update("nope", {"title": "x"})

    @pytest.mark.asyncio
    async def test_update_unknown_field(self, make_minion):
        store = MemoryTaskStore([make_minion("A")])
        with pytest.raises(StoreError, match="unknown fields"):
            await store.update("A", {"colour": "red"})

    @pytest.mark.asyncio
    async def test_update_invalid_value(self, make_minion):
        store = MemoryTaskStore([make_minion("A")])
        with pytest.raises(StoreError, match="invalid data"):
            await store.update("A", {"status": "exploded"})

    @pytest.mark.asyncio
    async def test_delete(self, make_minion):
        store = MemoryTaskStore([make_minion("A"), make_minion("B")])
        await store.delete("A")
        assert [m.id for m in await store.list()] == ["B"]

    @pytest.mark.asyncio
    async def test_delete_missing(self):
        with pytest.raises(StoreError):
            await MemoryTaskStore().delete("nope")

    @pytest.mark.asyncio
    async def test_subscribe_and_unsubscribe(self, make_minion):
        store = MemoryTaskStore()
        changes = []
        unsubscribe = store.subscribe(changes.append)

        await store.create(make_minion("A"))
        await store.update("A", {"title": "x"})
        await store.delete("A")
        unsubscribe()
        await store.create(make_minion("B"))

        assert [(c.operation, c.minion_id) for c in changes] == [
            ("create", "A"),
            ("update", "A"),
            ("delete", "A"),
        ]

    @pytest.mark.asyncio
    async def test_failing_subscriber_does_not_undo_write(self, make_minion):
        store = MemoryTaskStore()

        def broken(change):
            raise RuntimeError("view crashed")

        store.subscribe(broken)
        await store.create(make_minion("A"))
        assert await store.get("A") is not None


# ═══════════════════════════════════════════════════════════════════
#  JSON store
# ═══════════════════════════════════════════════════════════════════


class TestJsonTaskStore:
    """Persistence through the JSON document."""

    @pytest.mark.asyncio
    async def test_missing_file_is_empty(self, tmp_path):
        store = JsonTaskStore(tmp_path / "db.json")
        assert await store.list() == []

    @pytest.mark.asyncio
    async def test_round_trip_uses_camel_case(self, tmp_path, make_minion):
        path = tmp_path / "db.json"
        store = JsonTaskStore(path)
        await store.create(make_minion("A", depends_on=["B"], parent_id="P"))

        raw = json.loads(path.read_text(encoding="utf-8"))
        record = raw[MINIONS_TABLE][0]
        assert record["parentId"] == "P"
        assert record["dependencies"][0]["minionId"] == "A"

        reopened = JsonTaskStore(path)
        (minion,) = await reopened.list()
        assert minion.parent_id == "P"
        assert minion.dependencies[0].minion_id == "A"

    @pytest.mark.asyncio
    async def test_other_tables_preserved(self, tmp_path, make_minion):
        path = tmp_path / "db.json"
        path.write_text(json.dumps({MINIONS_TABLE: [], "settings": {"theme": "dark"}}))

        await JsonTaskStore(path).create(make_minion("A"))

        raw = json.loads(path.read_text(encoding="utf-8"))
        assert raw["settings"] == {"theme": "dark"}
        assert len(raw[MINIONS_TABLE]) == 1

    @pytest.mark.asyncio
    async def test_invalid_json_is_store_error(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text("{not json")
        with pytest.raises(StoreError, match="Invalid JSON"):
            await JsonTaskStore(path).list()

    @pytest.mark.asyncio
    async def test_invalid_utf8_is_store_error(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_bytes(b'{"minions": ["\xff\xfe"]}')
        with pytest.raises(StoreError, match="Invalid UTF-8"):
            await JsonTaskStore(path).list()

    @pytest.mark.asyncio
    async def test_invalid_records_are_store_error(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text(json.dumps({MINIONS_TABLE: [{"title": "no id"}]}))
        with pytest.raises(StoreError, match="Invalid minion data"):
            await JsonTaskStore(path).list()

    @pytest.mark.asyncio
    async def test_minions_table_must_be_a_list(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text(json.dumps({MINIONS_TABLE: {"A": {}}}))
        with pytest.raises(StoreError, match="not a list"):
            await JsonTaskStore(path).list()

    def test_from_settings(self, minions_env):
        store = JsonTaskStore.from_settings(MinionsSettings(), "work")
        assert store.path == minions_env / "data" / "minionmanagementapp_work.json"


class TestJsonStorage:
    def test_save_and_load(self, tmp_path):
        storage = JsonStorage()
        path = tmp_path / "nested" / "db.json"

        assert storage.save_tables(path, {"minions": [], "tags": ["ünïcode"]}).value is None
        assert storage.load_tables(path).value == {"minions": [], "tags": ["ünïcode"]}
        assert not (tmp_path / "nested" / "db.json.tmp").exists()

    def test_missing_document_is_empty(self, tmp_path):
        assert JsonStorage().load_tables(tmp_path / "missing.json").value == {}

    def test_non_object_document(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        assert "does not hold a table object" in JsonStorage().load_tables(path).error

    def test_invalid_utf8_document(self, tmp_path):
        path = tmp_path / "latin.json"
        path.write_bytes(b'{"minions": ["\xff\xfe"]}')
        assert "Invalid UTF-8" in JsonStorage().load_tables(path).error

    def test_unserializable_tables(self, tmp_path):
        path = tmp_path / "x.json"
        result = JsonStorage().save_tables(path, {"bad": object()})
        assert "not JSON serializable" in result.error
        assert not path.exists()

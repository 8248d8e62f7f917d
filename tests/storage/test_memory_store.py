"""MemoryStore tests."""

import pytest

from daheeh.storage import KeyValueStore, MemoryStore


class TestMemoryStore:
    def test_satisfies_protocol(self):
        assert isinstance(MemoryStore(), KeyValueStore)

    @pytest.mark.asyncio
    async def test_get_missing_is_none(self):
        assert await MemoryStore().get("nope") is None

    @pytest.mark.asyncio
    async def test_set_overwrites(self):
        store = MemoryStore()
        await store.set("k", "one")
        await store.set("k", "two")
        assert await store.get("k") == "two"

    @pytest.mark.asyncio
    async def test_remove_missing_is_noop(self):
        store = MemoryStore({"a": "1"})
        await store.remove("b")
        await store.remove("a")
        assert store.keys() == []

    @pytest.mark.asyncio
    async def test_initial_data_is_copied(self):
        seed = {"a": "1"}
        store = MemoryStore(seed)
        await store.set("b", "2")
        assert seed == {"a": "1"}
        assert store.keys() == ["a", "b"]
        assert "b" in store

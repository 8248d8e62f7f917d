"""RedisStore tests against a mocked redis.asyncio client."""

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from daheeh.errors import StorageError
from daheeh.storage import KeyValueStore, RedisStore


@pytest.fixture
def client() -> AsyncMock:
    return AsyncMock()


class TestRedisStore:
    def test_satisfies_protocol(self, client):
        assert isinstance(RedisStore(client), KeyValueStore)

    @pytest.mark.asyncio
    async def test_keys_are_prefixed(self, client):
        store = RedisStore(client, prefix="test:")
        await store.set("session.mode", "guest")
        await store.remove("session.user")
        client.set.assert_awaited_once_with("test:session.mode", "guest")
        client.delete.assert_awaited_once_with("test:session.user")

    @pytest.mark.asyncio
    async def test_get_returns_str(self, client):
        client.get.return_value = "guest"
        store = RedisStore(client)
        assert await store.get("session.mode") == "guest"
        client.get.assert_awaited_once_with("daheeh:session.mode")

    @pytest.mark.asyncio
    async def test_get_decodes_bytes(self, client):
        client.get.return_value = b'{"xp": 20}'
        assert await RedisStore(client).get("progression.state") == '{"xp": 20}'

    @pytest.mark.asyncio
    async def test_get_missing(self, client):
        client.get.return_value = None
        assert await RedisStore(client).get("missing") is None

    @pytest.mark.asyncio
    async def test_errors_wrapped(self, client):
        client.get.side_effect = RedisConnectionError("refused")
        client.set.side_effect = RedisConnectionError("refused")
        client.delete.side_effect = RedisConnectionError("refused")
        store = RedisStore(client)

        with pytest.raises(StorageError) as exc_info:
            await store.get("k")
        assert exc_info.value.operation == "get"
        assert exc_info.value.key == "k"
        assert isinstance(exc_info.value.cause, RedisConnectionError)

        with pytest.raises(StorageError):
            await store.set("k", "v")
        with pytest.raises(StorageError):
            await store.remove("k")

    @pytest.mark.asyncio
    async def test_close(self, client):
        await RedisStore(client).close()
        client.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_failure_is_swallowed(self, client):
        client.aclose.side_effect = RedisConnectionError("gone")
        await RedisStore(client).close()

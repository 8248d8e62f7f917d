"""Redis-backed key-value store."""

from __future__ import annotations

import redis.asyncio as redis
import structlog

from daheeh.errors import StorageError

logger = structlog.get_logger()


class RedisStore:
    """KeyValueStore over a redis.asyncio client.

    Keys are namespaced with ``prefix`` so several installations can share
    one Redis database.
    """

    def __init__(self, client: redis.Redis, prefix: str = "daheeh:") -> None:
        self._client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, url: str, prefix: str = "daheeh:") -> RedisStore:
        """Create a store with its own connection pool."""
        client = redis.from_url(  # type: ignore[no-untyped-call]
            url,
            encoding="utf-8",
            decode_responses=True,
            max_connections=10,
        )
        return cls(client, prefix=prefix)

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> str | None:
        try:
            value = await self._client.get(self._key(key))
        except redis.RedisError as e:
            raise StorageError("get", key, e) from e
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        try:
            await self._client.set(self._key(key), value)
        except redis.RedisError as e:
            raise StorageError("set", key, e) from e

    async def remove(self, key: str) -> None:
        try:
            await self._client.delete(self._key(key))
        except redis.RedisError as e:
            raise StorageError("remove", key, e) from e

    async def close(self) -> None:
        """Close the underlying connection pool."""
        try:
            await self._client.aclose()
        except redis.RedisError:
            logger.warning("redis_close_failed", exc_info=True)

"""Key-value storage backends."""

from __future__ import annotations

from daheeh.config import Settings
from daheeh.errors import StorageError
from daheeh.storage.base import KeyValueStore
from daheeh.storage.memory import MemoryStore
from daheeh.storage.redis_store import RedisStore
from daheeh.storage.sql_store import SqlStore

__all__ = ["KeyValueStore", "MemoryStore", "RedisStore", "SqlStore", "create_store"]


async def create_store(settings: Settings) -> KeyValueStore:
    """Build the backend selected by ``settings.storage_backend``."""
    if settings.storage_backend == "memory":
        return MemoryStore()
    if settings.storage_backend == "redis":
        return RedisStore.from_url(settings.redis_url, prefix=settings.redis_key_prefix)
    if settings.storage_backend == "sqlite":
        store = SqlStore.from_url(settings.database_url)
        try:
            await store.init()
        except StorageError:
            await store.close()
            raise
        return store
    msg = f"Unknown storage backend: {settings.storage_backend}"
    raise ValueError(msg)

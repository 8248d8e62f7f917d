"""Key-value store protocol shared by every storage backend."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Async, durable, string-keyed store.

    Implementations raise ``daheeh.errors.StorageError`` on any backend
    failure. Removing a missing key is not an error.
    """

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...

    async def close(self) -> None: ...

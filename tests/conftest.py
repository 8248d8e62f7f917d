"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import date, timedelta

import pytest
import pytest_asyncio

from daheeh.auth.password import Argon2Hasher
from daheeh.auth.service import CredentialStore
from daheeh.auth.session import SessionManager
from daheeh.config import get_settings
from daheeh.errors import StorageError
from daheeh.progression.engine import ProgressionEngine
from daheeh.progression.toasts import ToastQueue
from daheeh.storage.memory import MemoryStore


class FailingStore(MemoryStore):
    """MemoryStore whose operations can be switched to raise StorageError."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_get = False
        self.fail_set = False
        self.fail_remove = False
        self.set_calls: list[str] = []

    async def get(self, key: str) -> str | None:
        if self.fail_get:
            raise StorageError("get", key, OSError("disk unavailable"))
        return await super().get(key)

    async def set(self, key: str, value: str) -> None:
        self.set_calls.append(key)
        if self.fail_set:
            raise StorageError("set", key, OSError("disk full"))
        await super().set(key, value)

    async def remove(self, key: str) -> None:
        if self.fail_remove:
            raise StorageError("remove", key, OSError("disk unavailable"))
        await super().remove(key)


class FakeClock:
    """Callable returning a controllable calendar date."""

    def __init__(self, today: date) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today

    def advance(self, days: int = 1) -> None:
        self.today = self.today + timedelta(days=days)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store() -> FailingStore:
    """Fresh in-memory store that can be told to fail."""
    return FailingStore()


@pytest.fixture
def hasher() -> Argon2Hasher:
    """argon2id with minimal cost so tests stay fast."""
    return Argon2Hasher(time_cost=1, memory_cost=1024, parallelism=1)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(date(2026, 3, 10))


@pytest.fixture
def sessions(store: FailingStore) -> SessionManager:
    return SessionManager(store)


@pytest.fixture
def credentials(store: FailingStore, hasher: Argon2Hasher, sessions: SessionManager) -> CredentialStore:
    return CredentialStore(store, hasher, sessions, password_min_length=6)


@pytest_asyncio.fixture
async def engine(store: FailingStore, clock: FakeClock) -> AsyncGenerator[ProgressionEngine, None]:
    """Hydrated ProgressionEngine with short-lived toasts."""
    eng = ProgressionEngine(store, toasts=ToastQueue(duration_seconds=0.05), clock=clock)
    await eng.hydrate()
    yield eng
    await eng.close()

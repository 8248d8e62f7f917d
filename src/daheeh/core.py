"""Process-wide composition of the identity and progression services.

Call ``init_core()`` once at startup (it hydrates the session and the
progression state before returning) and ``close_core()`` on shutdown.
If the configured store cannot be opened the core runs on an in-memory
store, so nothing persists until the next start.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

import structlog

from daheeh.auth.password import Argon2Hasher, CredentialHasher
from daheeh.auth.service import CredentialStore
from daheeh.auth.session import SessionManager
from daheeh.config import Settings, get_settings
from daheeh.progression.engine import ProgressionEngine
from daheeh.progression.toasts import ToastQueue
from daheeh.errors import StorageError
from daheeh.storage import MemoryStore, create_store
from daheeh.storage.base import KeyValueStore

logger = structlog.get_logger()


@dataclass
class Core:
    """The wired services sharing one store."""

    settings: Settings
    store: KeyValueStore
    sessions: SessionManager
    credentials: CredentialStore
    progression: ProgressionEngine

    @classmethod
    def build(
        cls,
        settings: Settings,
        store: KeyValueStore,
        *,
        hasher: CredentialHasher | None = None,
        clock: Callable[[], date] = date.today,
    ) -> Core:
        """Wire services without touching storage."""
        sessions = SessionManager(store)
        credentials = CredentialStore(
            store,
            hasher if hasher is not None else Argon2Hasher.from_settings(settings),
            sessions,
            password_min_length=settings.password_min_length,
        )
        progression = ProgressionEngine(
            store,
            xp_per_level=settings.xp_per_level,
            toasts=ToastQueue(
                duration_seconds=settings.toast_duration_seconds,
                visible_limit=settings.toast_visible_limit,
            ),
            clock=clock,
        )
        return cls(
            settings=settings,
            store=store,
            sessions=sessions,
            credentials=credentials,
            progression=progression,
        )

    async def hydrate(self) -> None:
        await self.sessions.hydrate()
        await self.progression.hydrate()

    async def close(self) -> None:
        await self.progression.close()
        await self.store.close()


_core: Core | None = None


async def init_core(
    settings: Settings | None = None,
    store: KeyValueStore | None = None,
    *,
    hasher: CredentialHasher | None = None,
    clock: Callable[[], date] = date.today,
) -> Core:
    """Build, hydrate and register the process-wide Core."""
    global _core  # noqa: PLW0603
    if _core is not None:
        msg = "Core already initialized. Call close_core() first."
        raise RuntimeError(msg)
    settings = settings or get_settings()
    if store is None:
        try:
            store = await create_store(settings)
        except StorageError:
            logger.error("storage_init_failed", storage_backend=settings.storage_backend, exc_info=True)
            store = MemoryStore()
    core = Core.build(settings, store, hasher=hasher, clock=clock)
    await core.hydrate()
    _core = core
    logger.info("core_initialized", storage_backend=settings.storage_backend)
    return core


async def close_core() -> None:
    """Tear down the process-wide Core."""
    global _core  # noqa: PLW0603
    if _core:
        await _core.close()
        _core = None


def get_core() -> Core:
    """Get the process-wide Core."""
    if _core is None:
        msg = "Core not initialized. Call init_core() first."
        raise RuntimeError(msg)
    return _core

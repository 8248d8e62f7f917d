"""
Active session ownership and persistence across restarts.

The in-memory session is the source of truth. Every mutation is applied
immediately and then written through to the store; a failed write is
logged and never reverts the in-memory change.
"""

from __future__ import annotations

import asyncio

import structlog
from pydantic import ValidationError

from daheeh.auth.schemas import AuthMode, Session, User
from daheeh.errors import StorageError
from daheeh.storage.base import KeyValueStore

logger = structlog.get_logger()

SESSION_USER_KEY = "session.user"
SESSION_MODE_KEY = "session.mode"


def restore_session(mode_raw: str | None, user_raw: str | None) -> Session:
    """Rebuild a Session from persisted values, defaulting to no session."""
    if mode_raw == AuthMode.GUEST.value:
        return Session(auth_mode=AuthMode.GUEST)

    if mode_raw == AuthMode.AUTHENTICATED.value:
        if not user_raw:
            logger.warning("session_user_missing", auth_mode=mode_raw)
            return Session()
        try:
            user = User.model_validate_json(user_raw)
        except ValidationError:
            logger.warning("session_user_corrupt", exc_info=True)
            return Session()
        return Session(auth_mode=AuthMode.AUTHENTICATED, user=user)

    return Session()


class SessionManager:
    """Owns the single active Session."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._session = Session()
        self._hydrated = False
        self._write_lock = asyncio.Lock()

    @property
    def session(self) -> Session:
        return self._session

    @property
    def is_hydrated(self) -> bool:
        return self._hydrated

    async def hydrate(self) -> Session:
        """Load the persisted session. Storage failures yield no session."""
        try:
            mode_raw = await self._store.get(SESSION_MODE_KEY)
            user_raw = await self._store.get(SESSION_USER_KEY)
        except StorageError:
            logger.warning("session_hydrate_failed", exc_info=True)
            self._session = Session()
        else:
            self._session = restore_session(mode_raw, user_raw)
        self._hydrated = True
        logger.info("session_hydrated", auth_mode=self._session.auth_mode.value)
        return self._session

    async def establish(self, user: User) -> Session:
        """Make ``user`` the authenticated identity."""
        self._session = Session(auth_mode=AuthMode.AUTHENTICATED, user=user)
        await self._persist()
        return self._session

    async def continue_as_guest(self) -> Session:
        self._session = Session(auth_mode=AuthMode.GUEST)
        await self._persist()
        return self._session

    async def logout(self) -> Session:
        self._session = Session()
        await self._persist()
        logger.info("session_logged_out")
        return self._session

    async def _persist(self) -> None:
        """Write the current session. Writes are serialized and always latest-wins."""
        async with self._write_lock:
            session = self._session
            try:
                if session.user is not None:
                    await self._store.set(SESSION_USER_KEY, session.user.model_dump_json())
                else:
                    await self._store.remove(SESSION_USER_KEY)

                if session.auth_mode == AuthMode.NONE:
                    await self._store.remove(SESSION_MODE_KEY)
                else:
                    await self._store.set(SESSION_MODE_KEY, session.auth_mode.value)
            except StorageError:
                logger.error(
                    "session_persist_failed",
                    auth_mode=session.auth_mode.value,
                    exc_info=True,
                )

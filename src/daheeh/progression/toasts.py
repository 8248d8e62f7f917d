"""Live "XP awarded" notifications with automatic expiry.

Each toast gets its own expiry task keyed by toast id. An expiry only
removes its toast if it is still the task registered for that id, so a
dismissed-then-reused id is never removed by a stale timer.
"""

from __future__ import annotations

import asyncio
import secrets
import time

from daheeh.progression.rewards import XPRewardReason, reward_label
from daheeh.progression.schemas import XPToast


def new_toast_id() -> str:
    return f"xp_{int(time.time() * 1000)}_{secrets.token_hex(5)}"


class ToastQueue:
    """Insertion-ordered toasts. Must be used from within a running event loop."""

    def __init__(self, duration_seconds: float = 3.0, visible_limit: int = 3) -> None:
        self._duration = duration_seconds
        self._visible_limit = visible_limit
        self._toasts: list[XPToast] = []
        self._timers: dict[str, asyncio.Task[None]] = {}

    @property
    def toasts(self) -> list[XPToast]:
        return list(self._toasts)

    def visible(self, limit: int | None = None) -> list[XPToast]:
        """The most recent ``limit`` toasts, oldest first."""
        n = self._visible_limit if limit is None else limit
        if n <= 0:
            return []
        return self._toasts[-n:]

    def __len__(self) -> int:
        return len(self._toasts)

    def push(self, amount: int, reason: XPRewardReason, toast_id: str | None = None) -> XPToast:
        """Append a toast and schedule its removal.

        Pushing an id that is still live replaces that toast.
        """
        toast = XPToast(
            id=toast_id or new_toast_id(),
            amount=amount,
            reason=reason,
            label=reward_label(reason),
            timestamp=int(time.time() * 1000),
        )
        self._cancel_timer(toast.id)
        self._remove(toast.id)
        self._toasts.append(toast)
        self._timers[toast.id] = asyncio.create_task(self._expire_after(toast.id))
        return toast

    def dismiss(self, toast_id: str) -> bool:
        """Remove a toast now. Unknown or already-removed ids are a no-op."""
        self._cancel_timer(toast_id)
        return self._remove(toast_id)

    def clear(self) -> None:
        """Drop every toast and cancel every pending expiry."""
        for task in self._timers.values():
            task.cancel()
        self._timers.clear()
        self._toasts.clear()

    async def _expire_after(self, toast_id: str) -> None:
        await asyncio.sleep(self._duration)
        if self._timers.get(toast_id) is asyncio.current_task():
            del self._timers[toast_id]
            self._remove(toast_id)

    def _cancel_timer(self, toast_id: str) -> None:
        task = self._timers.pop(toast_id, None)
        if task is not None:
            task.cancel()

    def _remove(self, toast_id: str) -> bool:
        before = len(self._toasts)
        self._toasts = [t for t in self._toasts if t.id != toast_id]
        return len(self._toasts) != before

"""XP awards, level derivation, daily streaks and level-up celebrations."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable
from datetime import date, datetime, timezone

from pydantic import ValidationError

from daheeh.errors import StorageError
from daheeh.progression.levels import (
    XP_PER_LEVEL,
    compute_level,
    get_rank_for_level,
    xp_progress,
    xp_to_next_level,
)
from daheeh.progression.rewards import XPRewardReason, reward_amount
from daheeh.progression.schemas import (
    AwardResult,
    GamificationState,
    LevelCelebration,
    ProgressSnapshot,
    RankInfo,
)
from daheeh.progression.streaks import effective_streak, next_streak
from daheeh.progression.toasts import ToastQueue
from daheeh.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

PROGRESSION_STATE_KEY = "progression.state"

LevelUpListener = Callable[[LevelCelebration], None]


class ProgressionEngine:
    """Owns the installation's GamificationState.

    State changes are applied synchronously, so concurrent awards on one
    event loop always compute from the latest state. Persistence follows
    each change; a failed write is logged and the in-memory state stays.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        xp_per_level: int = XP_PER_LEVEL,
        toasts: ToastQueue | None = None,
        clock: Callable[[], date] = date.today,
        ranks: list[RankInfo] | None = None,
    ) -> None:
        self._store = store
        self._xp_per_level = xp_per_level
        self._toasts = toasts if toasts is not None else ToastQueue()
        self._clock = clock
        self._ranks = ranks
        self._state = GamificationState()
        self._observed_level = 1
        self._celebrations: list[LevelCelebration] = []
        self._listeners: list[LevelUpListener] = []
        self._write_lock = asyncio.Lock()
        self._loading = True

    # -----------------------------------------------------------------------
    # Read-only views
    # -----------------------------------------------------------------------

    @property
    def state(self) -> GamificationState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def toasts(self) -> ToastQueue:
        return self._toasts

    @property
    def xp_to_next_level(self) -> int:
        return xp_to_next_level(self._state.xp, self._xp_per_level)

    @property
    def xp_progress(self) -> float:
        return xp_progress(self._state.xp, self._xp_per_level)

    @property
    def rank_info(self) -> RankInfo:
        return get_rank_for_level(self._state.level, self._ranks)

    def snapshot(self) -> ProgressSnapshot:
        return ProgressSnapshot(
            state=self._state,
            xp_to_next_level=self.xp_to_next_level,
            xp_progress=self.xp_progress,
            rank=self.rank_info,
        )

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------

    async def hydrate(self) -> GamificationState:
        """Load persisted progress. Unreadable or corrupt records yield defaults."""
        try:
            raw = await self._store.get(PROGRESSION_STATE_KEY)
        except StorageError:
            logger.warning("Failed to load progression state, starting fresh", exc_info=True)
            raw = None

        state = GamificationState()
        if raw is not None:
            try:
                state = GamificationState.model_validate_json(raw)
            except ValidationError:
                logger.warning("Corrupt progression state ignored", exc_info=True)

        level = compute_level(state.xp, self._xp_per_level)
        streak = effective_streak(state.streak, state.last_active_date, self._clock())
        self._state = state.model_copy(update={"level": level, "streak": streak})
        self._observed_level = level
        self._loading = False
        return self._state

    async def close(self) -> None:
        self._toasts.clear()

    # -----------------------------------------------------------------------
    # Awards
    # -----------------------------------------------------------------------

    async def award_xp(self, reason: XPRewardReason | str, custom_amount: int | None = None) -> AwardResult:
        """Grant XP for ``reason``.

        Raises ValueError for an unknown reason or a negative amount.
        """
        reason = XPRewardReason(reason)
        amount = reward_amount(reason, custom_amount)
        if amount < 0:
            msg = f"XP amount must not be negative, got {amount}"
            raise ValueError(msg)

        prev = self._state
        today = self._clock()
        streak = next_streak(prev.streak, prev.last_active_date, today)
        xp = prev.xp + amount
        new_state = GamificationState(
            xp=xp,
            level=compute_level(xp, self._xp_per_level),
            streak=streak,
            longest_streak=max(prev.longest_streak, streak),
            last_active_date=today,
            total_xp_earned=prev.total_xp_earned + amount,
        )
        self._state = new_state

        previous_level = self._observed_level
        leveled_up = new_state.level > previous_level
        if leveled_up:
            self._observed_level = new_state.level
            self._emit_level_up(previous_level, new_state.level)

        toast = self._toasts.push(amount, reason)
        logger.debug("Awarded %d XP for %s (total %d)", amount, reason.value, xp)

        await self._persist()

        return AwardResult(
            amount=amount,
            reason=reason,
            toast=toast,
            state=new_state,
            previous_level=previous_level,
            leveled_up=leveled_up,
        )

    def dismiss_toast(self, toast_id: str) -> None:
        self._toasts.dismiss(toast_id)

    async def reset_progress(self) -> None:
        """Back to a fresh installation and drop the persisted record."""
        self._state = GamificationState()
        self._observed_level = 1
        self._celebrations.clear()
        async with self._write_lock:
            try:
                await self._store.remove(PROGRESSION_STATE_KEY)
            except StorageError:
                logger.error("Failed to remove progression state", exc_info=True)

    async def _persist(self) -> None:
        async with self._write_lock:
            try:
                await self._store.set(PROGRESSION_STATE_KEY, self._state.model_dump_json())
            except StorageError:
                logger.error("Failed to persist progression state", exc_info=True)

    # -----------------------------------------------------------------------
    # Level-up celebrations
    # -----------------------------------------------------------------------

    def add_level_up_listener(self, listener: LevelUpListener) -> None:
        self._listeners.append(listener)

    def remove_level_up_listener(self, listener: LevelUpListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def pending_celebrations(self) -> list[LevelCelebration]:
        """Level-ups not yet acknowledged, oldest first."""
        return list(self._celebrations)

    def acknowledge_celebration(self, celebration_id: str) -> bool:
        """Mark a celebration as seen. Returns True if it was pending."""
        for i, cel in enumerate(self._celebrations):
            if cel.id == celebration_id:
                del self._celebrations[i]
                return True
        return False

    def _emit_level_up(self, old_level: int, new_level: int) -> None:
        celebration = LevelCelebration(
            id=uuid.uuid4().hex,
            old_level=old_level,
            new_level=new_level,
            rank_title=get_rank_for_level(new_level, self._ranks).title,
            created_at=datetime.now(timezone.utc),
        )
        self._celebrations.append(celebration)
        logger.info("Level up: %d -> %d (%s)", old_level, new_level, celebration.rank_title)

        for listener in list(self._listeners):
            try:
                listener(celebration)
            except Exception:
                logger.warning("Level-up listener failed", exc_info=True)

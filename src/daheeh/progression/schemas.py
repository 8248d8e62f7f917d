"""Pydantic models for progression state, toasts and rank info."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, model_validator

from daheeh.progression.rewards import XPRewardReason


# --- Rank ---


class RankInfo(BaseModel):
    """A cosmetic rank covering ``min_level``..``max_level`` (None = no upper bound)."""

    model_config = ConfigDict(frozen=True)

    title: str
    min_level: int
    max_level: int | None
    color: str
    icon: str

    @model_validator(mode="after")
    def _check_bounds(self) -> RankInfo:
        if self.max_level is not None and self.max_level < self.min_level:
            msg = f"Rank {self.title}: max_level {self.max_level} < min_level {self.min_level}"
            raise ValueError(msg)
        return self

    def contains(self, level: int) -> bool:
        if level < self.min_level:
            return False
        return self.max_level is None or level <= self.max_level


# --- State ---


class GamificationState(BaseModel):
    """Per-installation progression record."""

    model_config = ConfigDict(frozen=True)

    xp: int = 0
    level: int = 1
    streak: int = 0
    longest_streak: int = 0
    last_active_date: date | None = None
    total_xp_earned: int = 0


# --- Notifications ---


class XPToast(BaseModel):
    """Ephemeral "XP awarded" notification."""

    model_config = ConfigDict(frozen=True)

    id: str
    amount: int
    reason: XPRewardReason
    label: str
    timestamp: int  # epoch milliseconds


class LevelCelebration(BaseModel):
    """A level-up the UI has not acknowledged yet."""

    model_config = ConfigDict(frozen=True)

    id: str
    old_level: int
    new_level: int
    rank_title: str
    created_at: datetime


# --- Results / views ---


class AwardResult(BaseModel):
    amount: int
    reason: XPRewardReason
    toast: XPToast
    state: GamificationState
    previous_level: int
    leveled_up: bool = False


class ProgressSnapshot(BaseModel):
    """State plus the derived read-only views."""

    state: GamificationState
    xp_to_next_level: int
    xp_progress: float
    rank: RankInfo

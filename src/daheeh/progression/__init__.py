"""XP, levels, streaks, ranks and XP toasts."""

from daheeh.progression.engine import PROGRESSION_STATE_KEY, ProgressionEngine
from daheeh.progression.levels import RANKS, XP_PER_LEVEL, compute_level, get_rank_for_level
from daheeh.progression.rewards import XP_REWARDS, XPReward, XPRewardReason
from daheeh.progression.schemas import (
    AwardResult,
    GamificationState,
    LevelCelebration,
    ProgressSnapshot,
    RankInfo,
    XPToast,
)
from daheeh.progression.toasts import ToastQueue

__all__ = [
    "PROGRESSION_STATE_KEY",
    "RANKS",
    "XP_PER_LEVEL",
    "XP_REWARDS",
    "AwardResult",
    "GamificationState",
    "LevelCelebration",
    "ProgressSnapshot",
    "ProgressionEngine",
    "RankInfo",
    "ToastQueue",
    "XPReward",
    "XPRewardReason",
    "XPToast",
    "compute_level",
    "get_rank_for_level",
]

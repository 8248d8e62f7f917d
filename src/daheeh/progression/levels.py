"""Level and rank computation.

Levels are linear: every XP_PER_LEVEL points is one level, starting at 1.
Ranks are cosmetic buckets over contiguous level ranges.
"""

from __future__ import annotations

import logging

from daheeh.progression.schemas import RankInfo

logger = logging.getLogger(__name__)

XP_PER_LEVEL = 500

RANKS: list[RankInfo] = [
    RankInfo(title="Novice", min_level=1, max_level=4, color="#8E8E93", icon="star"),
    RankInfo(title="Scholar", min_level=5, max_level=9, color="#10B981", icon="award"),
    RankInfo(title="Elite", min_level=10, max_level=19, color="#7209B7", icon="zap"),
    RankInfo(title="Daheeh", min_level=20, max_level=None, color="#F59E0B", icon="crown"),
]


def compute_level(xp: int, xp_per_level: int = XP_PER_LEVEL) -> int:
    """Level for a given XP total. level(0) == 1."""
    return xp // xp_per_level + 1


def xp_to_next_level(xp: int, xp_per_level: int = XP_PER_LEVEL) -> int:
    """XP still needed to reach the next level."""
    return compute_level(xp, xp_per_level) * xp_per_level - xp


def xp_progress(xp: int, xp_per_level: int = XP_PER_LEVEL) -> float:
    """Fraction of the current level completed, in [0, 1)."""
    return (xp % xp_per_level) / xp_per_level


def get_rank_for_level(level: int, ranks: list[RankInfo] | None = None) -> RankInfo:
    """First rank whose range contains ``level``; the last rank otherwise."""
    table = RANKS if ranks is None else ranks
    for rank in table:
        if rank.contains(level):
            return rank
    logger.warning("No rank covers level %d, falling back to %s", level, table[-1].title)
    return table[-1]


def validate_rank_table(ranks: list[RankInfo]) -> None:
    """
    Check that ``ranks`` covers every level >= 1 with no gaps or overlaps.

    Raises ValueError describing the first problem found.
    """
    if not ranks:
        msg = "Rank table is empty"
        raise ValueError(msg)
    if ranks[0].min_level != 1:
        msg = f"First rank must start at level 1, got {ranks[0].min_level}"
        raise ValueError(msg)
    for current, following in zip(ranks, ranks[1:]):
        if current.max_level is None:
            msg = f"Only the last rank may be open-ended, {current.title} is not last"
            raise ValueError(msg)
        if following.min_level != current.max_level + 1:
            msg = f"Ranks {current.title} and {following.title} are not contiguous"
            raise ValueError(msg)
    if ranks[-1].max_level is not None:
        msg = f"Last rank {ranks[-1].title} must be open-ended"
        raise ValueError(msg)


validate_rank_table(RANKS)

"""XP reward table keyed by the action that earned it."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class XPRewardReason(str, Enum):
    SUMMARY = "summary"
    QUIZ_CORRECT = "quiz_correct"
    STUDY_PLAN = "study_plan"
    EXPLANATION = "explanation"
    STREAK_BONUS = "streak_bonus"


class XPReward(BaseModel):
    """Default XP for a reason, with the label shown on its toast."""

    model_config = ConfigDict(frozen=True)

    amount: int
    label: str


XP_REWARDS: dict[XPRewardReason, XPReward] = {
    XPRewardReason.SUMMARY: XPReward(amount=50, label="Summary Created"),
    XPRewardReason.QUIZ_CORRECT: XPReward(amount=20, label="Correct Answer"),
    XPRewardReason.STUDY_PLAN: XPReward(amount=100, label="Study Plan Created"),
    XPRewardReason.EXPLANATION: XPReward(amount=30, label="Concept Explained"),
    XPRewardReason.STREAK_BONUS: XPReward(amount=25, label="Streak Bonus"),
}


def reward_amount(reason: XPRewardReason | str, custom_amount: int | None = None) -> int:
    """Resolve the XP for ``reason``; ``custom_amount`` wins when given."""
    if custom_amount is not None:
        return custom_amount
    return XP_REWARDS[XPRewardReason(reason)].amount


def reward_label(reason: XPRewardReason | str) -> str:
    return XP_REWARDS[XPRewardReason(reason)].label

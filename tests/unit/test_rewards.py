"""XP reward table tests."""

import pytest
from pydantic import ValidationError

from daheeh.progression.rewards import XP_REWARDS, XPRewardReason, reward_amount, reward_label


class TestRewardTable:
    @pytest.mark.parametrize(
        "reason,amount",
        [
            ("summary", 50),
            ("quiz_correct", 20),
            ("study_plan", 100),
            ("explanation", 30),
            ("streak_bonus", 25),
        ],
    )
    def test_default_amounts(self, reason, amount):
        assert reward_amount(reason) == amount

    def test_every_reason_has_an_entry(self):
        assert set(XP_REWARDS) == set(XPRewardReason)
        assert all(entry.label for entry in XP_REWARDS.values())

    def test_entries_are_frozen(self):
        with pytest.raises(ValidationError):
            XP_REWARDS[XPRewardReason.SUMMARY].amount = 1

    def test_labels(self):
        assert reward_label("quiz_correct") == "Correct Answer"
        assert reward_label(XPRewardReason.STUDY_PLAN) == "Study Plan Created"

    def test_custom_amount_overrides(self):
        assert reward_amount(XPRewardReason.SUMMARY, 7) == 7

    def test_custom_zero_is_respected(self):
        assert reward_amount(XPRewardReason.SUMMARY, 0) == 0

    def test_unknown_reason(self):
        with pytest.raises(ValueError):
            reward_amount("bogus")

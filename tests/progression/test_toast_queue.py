"""ToastQueue tests: ordering, visibility window and expiry."""

import asyncio

import pytest

from daheeh.progression.rewards import XPRewardReason
from daheeh.progression.toasts import ToastQueue, new_toast_id


class TestToastIds:
    def test_format(self):
        toast_id = new_toast_id()
        prefix, millis, token = toast_id.split("_")
        assert prefix == "xp"
        assert millis.isdigit()
        assert len(token) == 10

    def test_unique(self):
        assert len({new_toast_id() for _ in range(200)}) == 200


class TestToastQueue:
    @pytest.mark.asyncio
    async def test_insertion_order(self):
        queue = ToastQueue(duration_seconds=60)
        pushed = [queue.push(n, XPRewardReason.SUMMARY) for n in (1, 2, 3, 4, 5)]
        assert queue.toasts == pushed
        assert len(queue) == 5
        queue.clear()

    @pytest.mark.asyncio
    async def test_visible_shows_most_recent(self):
        queue = ToastQueue(duration_seconds=60, visible_limit=3)
        pushed = [queue.push(n, XPRewardReason.QUIZ_CORRECT) for n in range(5)]
        assert queue.visible() == pushed[-3:]
        assert queue.visible(1) == pushed[-1:]
        assert queue.visible(0) == []
        queue.clear()

    @pytest.mark.asyncio
    async def test_expires_after_duration(self):
        queue = ToastQueue(duration_seconds=0.05)
        queue.push(50, XPRewardReason.SUMMARY)
        assert len(queue) == 1
        await asyncio.sleep(0.15)
        assert len(queue) == 0

    @pytest.mark.asyncio
    async def test_dismiss(self):
        queue = ToastQueue(duration_seconds=60)
        toast = queue.push(50, XPRewardReason.SUMMARY)
        assert queue.dismiss(toast.id) is True
        assert queue.dismiss(toast.id) is False
        assert queue.dismiss("unknown") is False
        assert queue.toasts == []

    @pytest.mark.asyncio
    async def test_reused_id_not_removed_by_stale_timer(self):
        queue = ToastQueue(duration_seconds=0.1)
        queue.push(10, XPRewardReason.SUMMARY, toast_id="xp_fixed")
        await asyncio.sleep(0.06)
        queue.dismiss("xp_fixed")
        queue.push(20, XPRewardReason.SUMMARY, toast_id="xp_fixed")

        # the first timer would have fired by now
        await asyncio.sleep(0.06)
        assert [t.amount for t in queue.toasts] == [20]

        await asyncio.sleep(0.1)
        assert queue.toasts == []

    @pytest.mark.asyncio
    async def test_push_live_id_replaces_toast(self):
        queue = ToastQueue(duration_seconds=0.1)
        other = queue.push(5, XPRewardReason.EXPLANATION)
        queue.push(10, XPRewardReason.SUMMARY, toast_id="xp_fixed")
        queue.push(20, XPRewardReason.SUMMARY, toast_id="xp_fixed")
        assert [t.amount for t in queue.toasts] == [5, 20]
        assert queue.dismiss("xp_fixed") is True
        assert queue.toasts == [other]
        queue.clear()

    @pytest.mark.asyncio
    async def test_toast_carries_reward_label(self):
        queue = ToastQueue(duration_seconds=60)
        toast = queue.push(20, XPRewardReason.QUIZ_CORRECT)
        assert toast.label == "Correct Answer"
        queue.clear()

    @pytest.mark.asyncio
    async def test_clear_cancels_pending_expiry(self):
        queue = ToastQueue(duration_seconds=0.05)
        queue.push(50, XPRewardReason.SUMMARY)
        queue.clear()
        queue.push(20, XPRewardReason.QUIZ_CORRECT)
        assert len(queue) == 1
        queue.clear()
        assert len(queue) == 0

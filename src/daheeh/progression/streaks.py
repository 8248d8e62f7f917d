"""Daily streak arithmetic on local calendar dates."""

from __future__ import annotations

from datetime import date, datetime


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def is_same_day(first: date | datetime, second: date | datetime) -> bool:
    """Same year, month and day."""
    return _as_date(first) == _as_date(second)


def days_between(earlier: date | datetime, later: date | datetime) -> int:
    """Whole calendar days from ``earlier`` to ``later`` (negative if reversed)."""
    return (_as_date(later) - _as_date(earlier)).days


def is_consecutive_day(last: date | datetime, current: date | datetime) -> bool:
    """True if ``last`` is exactly the calendar day before ``current``."""
    return days_between(last, current) == 1


def next_streak(streak: int, last_active: date | None, today: date) -> int:
    """Streak after an activity on ``today``.

    - no previous activity: 1
    - already active today: unchanged
    - active yesterday: +1
    - anything else, including a last date in the future: 1
    """
    if last_active is None:
        return 1
    if is_same_day(last_active, today):
        return streak
    if is_consecutive_day(last_active, today):
        return streak + 1
    return 1


def effective_streak(streak: int, last_active: date | None, today: date) -> int:
    """Streak as it should be shown on load: 0 once a full day was missed."""
    if last_active is None:
        return streak
    if is_same_day(last_active, today) or is_consecutive_day(last_active, today):
        return streak
    return 0

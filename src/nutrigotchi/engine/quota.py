"""Daily action quota with a civil-day reset.

The counter only climbs on actions that actually paid out, so the
"N of 5 used today" figure never passes the limit.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class QuotaWindow:
    """Quota counter as seen by today's action.

    Attributes:
        count: Rewarded actions already taken today.
        reset_date: Civil date the counter now belongs to.
        was_reset: Whether a new day started the counter over.
    """

    count: int
    reset_date: date
    was_reset: bool


@dataclass(frozen=True)
class QuotaStatus:
    """Read-only view of today's quota for display."""

    used: int
    limit: int

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.used)

    @property
    def reached(self) -> bool:
        return self.used >= self.limit


def open_quota_window(count: int, last_reset_date: date | None, today: date) -> QuotaWindow:
    """Reset the counter if its date is before today.

    A missing reset date counts as before today.
    """
    if last_reset_date is None or last_reset_date < today:
        return QuotaWindow(count=0, reset_date=today, was_reset=True)
    return QuotaWindow(count=count, reset_date=last_reset_date, was_reset=False)


def can_earn_rewards(count: int, limit: int, is_fainted: bool) -> bool:
    """Whether an action may pay out.

    ``is_fainted`` is the faint flag before the action, so the revival
    turn does not pay.
    """
    return count < limit and not is_fainted


def next_quota_count(count: int, rewards_granted: bool) -> int:
    """Counter to persist after the action."""
    return count + 1 if rewards_granted else count


__all__ = [
    "QuotaWindow",
    "QuotaStatus",
    "open_quota_window",
    "can_earn_rewards",
    "next_quota_count",
]

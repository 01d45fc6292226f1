"""Streak continuity, shield consumption and the streak XP multiplier."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from nutrigotchi.engine.calendar import classify_day
from nutrigotchi.engine.config import StreakTier
from nutrigotchi.models.enums import DayRelation


@dataclass(frozen=True)
class StreakOutcome:
    """Result of advancing a streak by one action.

    Attributes:
        streak_days: Streak length after the action.
        shield_consumed: Whether the shield absorbed a gap.
        shield_active: Shield flag to persist.
        relation: How the previous action date related to today.
    """

    streak_days: int
    shield_consumed: bool
    shield_active: bool
    relation: DayRelation


def advance_streak(
    streak_days: int,
    last_action_date: date | None,
    shield_active: bool,
    today: date,
) -> StreakOutcome:
    """Advance the streak for an action taken today.

    A second action on the same day leaves the streak alone. A missed day
    resets it to one unless a shield is active, in which case the streak
    is held and the shield is used up.
    """
    relation = classify_day(last_action_date, today)

    if relation is DayRelation.FIRST:
        return StreakOutcome(1, False, shield_active, relation)
    if relation is DayRelation.SAME_DAY:
        return StreakOutcome(streak_days, False, shield_active, relation)
    if relation is DayRelation.CONSECUTIVE:
        return StreakOutcome(streak_days + 1, False, shield_active, relation)
    if shield_active:
        return StreakOutcome(streak_days, True, False, relation)
    return StreakOutcome(1, False, False, relation)


def streak_multiplier(streak_days: int, tiers: Sequence[StreakTier]) -> float:
    """XP multiplier for a streak length.

    Args:
        streak_days: The streak after this action's transition.
        tiers: Tiers sorted from the highest ``min_days`` down.

    Returns:
        The multiplier of the highest tier reached, or 1.0.
    """
    for tier in tiers:
        if streak_days >= tier.min_days:
            return tier.multiplier
    return 1.0


def streak_bonus_percent(multiplier: float) -> int:
    """Express a multiplier as a bonus percentage (1.10 -> 10)."""
    return round((multiplier - 1.0) * 100)


__all__ = [
    "StreakOutcome",
    "advance_streak",
    "streak_multiplier",
    "streak_bonus_percent",
]

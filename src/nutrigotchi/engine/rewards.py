"""Reward calculation.

Only XP is modulated. The order matters once flooring is involved:

1. base XP for the category
2. streak multiplier, floored
3. sick penalty when ``0 < health <= sick_threshold``, floored
4. everything zeroed when the action may not pay out

Gold is the base value or zero. Multiplication runs on Decimal so that
``floor(25 * 1.10)`` is 27 rather than whatever binary floats round to.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal

from nutrigotchi.engine.config import ProgressionConfig


@dataclass(frozen=True)
class Reward:
    """Gold and XP paid for one action.

    Attributes:
        gold: Gold earned.
        xp: XP earned.
        sick_penalty_applied: Whether the sick multiplier reduced XP.
    """

    gold: int
    xp: int
    sick_penalty_applied: bool = False


def floor_multiply(value: int, multiplier: float) -> int:
    """``floor(value * multiplier)`` without binary float drift."""
    product = Decimal(value) * Decimal(str(multiplier))
    return int(product.to_integral_value(rounding=ROUND_FLOOR))


def is_sick(health_points: int, sick_threshold: int) -> bool:
    """Sick for reward purposes: above zero but at or below the threshold."""
    return 0 < health_points <= sick_threshold


def calculate_reward(
    category: str,
    config: ProgressionConfig,
    *,
    streak_multiplier: float,
    health_points: int,
    can_earn: bool,
) -> Reward:
    """Compute the reward for one action.

    Args:
        category: Reward table key.
        config: Rule configuration.
        streak_multiplier: Multiplier for the streak after this action.
        health_points: Health before this action's regeneration.
        can_earn: Whether quota and faint status allow a payout.

    Returns:
        The Reward.

    Raises:
        InvalidInputError: If the category is unknown.
    """
    base = config.base_reward(category)

    xp = floor_multiply(base.xp, streak_multiplier)

    sick = is_sick(health_points, config.sick_threshold)
    if sick:
        xp = floor_multiply(xp, config.sick_multiplier)

    if not can_earn:
        return Reward(gold=0, xp=0, sick_penalty_applied=False)

    return Reward(gold=base.gold, xp=xp, sick_penalty_applied=sick)


__all__ = [
    "Reward",
    "floor_multiply",
    "is_sick",
    "calculate_reward",
]

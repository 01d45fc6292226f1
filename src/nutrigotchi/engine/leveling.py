"""Level progression with strict-reset leveling.

Experience accumulates towards ``max_xp(level)``. Reaching or passing the
threshold grants exactly one level and discards every point of overflow:
the new level always starts at zero XP. A single action therefore never
skips levels, even when a misconfigured reward is larger than a whole
level's requirement.

The curve itself is configuration. Any strictly increasing positive
function of level works; two shapes ship with the engine.

Example:
    >>> progress = apply_xp(current_xp=90, level=1, xp_earned=35, max_xp=LinearXpCurve(100))
    >>> progress.new_level, progress.new_xp, progress.leveled_up
    (2, 0, True)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from nutrigotchi.core.exceptions import ConfigurationError


XpCurve = Callable[[int], int]


@dataclass(frozen=True)
class LinearXpCurve:
    """``max_xp(level) = level * step``; the live product's curve."""

    step: int = 100

    def __call__(self, level: int) -> int:
        return max(1, level) * self.step


@dataclass(frozen=True)
class QuadraticXpCurve:
    """``max_xp(level) = level**2 * step``; steeper late game."""

    step: int = 100

    def __call__(self, level: int) -> int:
        level = max(1, level)
        return level * level * self.step


def curve_from_name(name: Literal["linear", "quadratic"], step: int) -> XpCurve:
    """Build one of the shipped curves by name.

    Raises:
        ConfigurationError: If the name or step is invalid.
    """
    if step < 1:
        raise ConfigurationError(f"XP curve step must be positive, got {step}", config_key="xp_curve_step")
    if name == "linear":
        return LinearXpCurve(step)
    if name == "quadratic":
        return QuadraticXpCurve(step)
    raise ConfigurationError(f"Unknown XP curve: {name!r}", config_key="xp_curve")


def xp_threshold(max_xp: XpCurve, level: int) -> int:
    """Evaluate the curve, rejecting non-positive thresholds.

    Raises:
        ConfigurationError: If the curve returns something other than a positive int.
    """
    threshold = max_xp(level)
    if not isinstance(threshold, int) or isinstance(threshold, bool) or threshold < 1:
        raise ConfigurationError(
            f"XP curve returned invalid threshold {threshold!r} for level {level}",
            config_key="max_xp",
            details={"level": level},
        )
    return threshold


@dataclass(frozen=True)
class LevelProgress:
    """Outcome of adding experience.

    Attributes:
        new_xp: XP inside the (possibly new) level.
        new_level: Level after the action.
        new_max_xp: Threshold of ``new_level``.
        leveled_up: Whether a level was gained.
    """

    new_xp: int
    new_level: int
    new_max_xp: int
    leveled_up: bool


def apply_xp(current_xp: int, level: int, xp_earned: int, max_xp: XpCurve) -> LevelProgress:
    """Add earned XP using the strict-reset rule.

    Args:
        current_xp: XP inside the current level.
        level: Current level.
        xp_earned: XP granted by this action (may be zero).
        max_xp: The experience curve.

    Returns:
        The resulting LevelProgress.
    """
    accumulated = current_xp + xp_earned
    threshold = xp_threshold(max_xp, level)

    if accumulated < threshold:
        return LevelProgress(
            new_xp=accumulated,
            new_level=level,
            new_max_xp=threshold,
            leveled_up=False,
        )

    # Overflow is discarded, never carried into the next level
    new_level = level + 1
    return LevelProgress(
        new_xp=0,
        new_level=new_level,
        new_max_xp=xp_threshold(max_xp, new_level),
        leveled_up=True,
    )


__all__ = [
    "XpCurve",
    "LinearXpCurve",
    "QuadraticXpCurve",
    "curve_from_name",
    "xp_threshold",
    "LevelProgress",
    "apply_xp",
]

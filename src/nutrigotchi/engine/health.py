"""Health regeneration and mood derivation."""

from __future__ import annotations

from nutrigotchi.engine.config import ProgressionConfig
from nutrigotchi.engine.faint import FaintOutcome
from nutrigotchi.models.enums import Mood


def next_health(health_points: int, faint: FaintOutcome, config: ProgressionConfig) -> int:
    """Health after an action.

    Revival sets health to the revive value, a fainted pet does not
    regenerate, and a healthy pet recovers up to the cap.
    """
    if faint.revived:
        return config.faint_revive_health
    if faint.is_fainted:
        return health_points
    return min(config.max_health, health_points + config.health_recovery)


def derive_mood(health_points: int, is_fainted: bool, config: ProgressionConfig) -> Mood:
    """Mood is a pure function of health and faint status."""
    if is_fainted or health_points < config.sick_threshold:
        return Mood.SICK
    if health_points >= config.happy_threshold:
        return Mood.HAPPY
    return Mood.NEUTRAL


__all__ = [
    "next_health",
    "derive_mood",
]

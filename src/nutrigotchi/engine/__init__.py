"""Progression engine: pure rules for one player action.

The engine owns the truth about rewards. Each sub-module implements one
rule and the orchestrator composes them in a fixed order:

- calendar: civil-day classification in the configured timezone
- faint: incapacitation and revival
- streak: consecutive-day tracking, shield and multiplier tiers
- quota: the daily reward limit
- rewards: gold and XP after streak and sickness modifiers
- leveling: strict-reset level-up over a pluggable XP curve
- health: recovery and mood
- messages: headline selection
- reversal: undoing a recorded action
"""

from __future__ import annotations

from nutrigotchi.engine.calendar import CivilCalendar, classify_day
from nutrigotchi.engine.config import BaseReward, ProgressionConfig, StreakTier
from nutrigotchi.engine.leveling import (
    LinearXpCurve,
    QuadraticXpCurve,
    XpCurve,
    apply_xp,
    curve_from_name,
)
from nutrigotchi.engine.orchestrator import ProgressionEngine, Transition
from nutrigotchi.engine.quota import QuotaStatus


__all__ = [
    "CivilCalendar",
    "classify_day",
    "BaseReward",
    "ProgressionConfig",
    "StreakTier",
    "XpCurve",
    "LinearXpCurve",
    "QuadraticXpCurve",
    "apply_xp",
    "curve_from_name",
    "ProgressionEngine",
    "Transition",
    "QuotaStatus",
]

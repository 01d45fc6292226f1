"""Enumeration types for the NutriGotchi progression engine."""

from __future__ import annotations

from enum import StrEnum


class Mood(StrEnum):
    """Displayed mood of the pet.

    Always derived from health and faint status; never set on its own.
    """

    HAPPY = "happy"
    NEUTRAL = "neutral"
    SICK = "sick"


class DayRelation(StrEnum):
    """How a stored civil date relates to today."""

    FIRST = "first"
    """No date was stored yet."""

    SAME_DAY = "same_day"
    CONSECUTIVE = "consecutive"
    """The stored date is exactly yesterday."""

    GAP = "gap"
    """Anything else, including a stored date after today."""


class MessageKind(StrEnum):
    """Headline message chosen for a transition, highest priority first."""

    REVIVED = "revived"
    STILL_FAINTED = "still_fainted"
    DAILY_LIMIT = "daily_limit"
    LEVEL_UP = "level_up"
    STREAK_MILESTONE = "streak_milestone"
    SUCCESS = "success"


__all__ = [
    "Mood",
    "DayRelation",
    "MessageKind",
]

"""Headline message selection for a transition.

Exactly one message is shown per action, picked by priority:
revived, still fainted, daily limit, level up, streak milestone, success.
The receipt still carries every lower-priority fact as structured fields.
"""

from __future__ import annotations

from dataclasses import dataclass

from nutrigotchi.models.enums import MessageKind


MESSAGE_TEMPLATES: dict[MessageKind, str] = {
    MessageKind.REVIVED: "Your NutriGotchi is back on its feet! Welcome back. HP: {health}",
    MessageKind.STILL_FAINTED: (
        "Meal eaten ({recovery_count}/{threshold} to revive). Your NutriGotchi is still passed out..."
    ),
    MessageKind.DAILY_LIMIT: (
        "Cooked! But today's reward limit is used up ({limit}/day). Come back tomorrow!"
    ),
    MessageKind.LEVEL_UP: "LEVEL UP! You are now level {level}!",
    MessageKind.STREAK_MILESTONE: "{streak_days}-day streak! XP bonus +{bonus_percent}%!",
    MessageKind.SUCCESS: "Nice! Dish cooked successfully!",
}

UNDO_TEMPLATE = "Cook undone. -{gold} gold -{xp} XP -{savings} savings"


@dataclass(frozen=True)
class MessageFacts:
    """Facts the message priority is decided on."""

    revived: bool
    still_fainted: bool
    hit_daily_limit: bool
    leveled_up: bool
    streak_days: int
    health: int
    recovery_count: int
    threshold: int
    limit: int
    level: int
    bonus_percent: int
    milestone_interval: int


def is_streak_milestone(streak_days: int, interval: int) -> bool:
    """A positive multiple of the milestone interval."""
    return streak_days > 0 and streak_days % interval == 0


def select_message_kind(facts: MessageFacts) -> MessageKind:
    """Pick the highest-priority applicable message."""
    if facts.revived:
        return MessageKind.REVIVED
    if facts.still_fainted:
        return MessageKind.STILL_FAINTED
    if facts.hit_daily_limit:
        return MessageKind.DAILY_LIMIT
    if facts.leveled_up:
        return MessageKind.LEVEL_UP
    if is_streak_milestone(facts.streak_days, facts.milestone_interval):
        return MessageKind.STREAK_MILESTONE
    return MessageKind.SUCCESS


def render_message(kind: MessageKind, facts: MessageFacts) -> str:
    """Fill the template for ``kind`` from the facts."""
    return MESSAGE_TEMPLATES[kind].format(
        health=facts.health,
        recovery_count=facts.recovery_count,
        threshold=facts.threshold,
        limit=facts.limit,
        level=facts.level,
        streak_days=facts.streak_days,
        bonus_percent=facts.bonus_percent,
    )


__all__ = [
    "MESSAGE_TEMPLATES",
    "UNDO_TEMPLATE",
    "MessageFacts",
    "is_streak_milestone",
    "select_message_kind",
    "render_message",
]

"""Rule configuration injected into the progression engine.

ProgressionConfig holds every constant the rules depend on, the reward
table and the experience curve. It is built once (usually from
RuleSettings.to_config) and shared by all transitions.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from nutrigotchi.core.constants import (
    BASE_REWARDS,
    DAILY_LIMIT,
    FAINT_RECOVERY_THRESHOLD,
    FAINT_REVIVE_HEALTH,
    HAPPY_THRESHOLD,
    HEALTH_RECOVERY,
    MAX_HEALTH,
    SICK_MULTIPLIER,
    SICK_THRESHOLD,
    STREAK_MILESTONE_INTERVAL,
    STREAK_TIERS,
    XP_CURVE_STEP,
)
from nutrigotchi.core.exceptions import ConfigurationError, InvalidInputError
from nutrigotchi.engine.leveling import LinearXpCurve, XpCurve


class StreakTier(BaseModel):
    """XP multiplier unlocked once a streak reaches ``min_days``."""

    model_config = ConfigDict(frozen=True)

    min_days: int = Field(ge=1)
    multiplier: float = Field(gt=0)


class BaseReward(BaseModel):
    """Gold and XP paid for one category before any modifiers."""

    model_config = ConfigDict(frozen=True)

    gold: int = Field(ge=0)
    xp: int = Field(ge=0)


def _default_tiers() -> tuple[StreakTier, ...]:
    return tuple(StreakTier(min_days=days, multiplier=mult) for days, mult in STREAK_TIERS)


def _default_rewards() -> dict[str, BaseReward]:
    return {name: BaseReward(gold=gold, xp=xp) for name, (gold, xp) in BASE_REWARDS.items()}


class ProgressionConfig(BaseModel):
    """Everything the engine needs besides the snapshot and the action.

    Attributes:
        daily_limit: Rewarded actions allowed per civil day.
        sick_threshold: Health at or below which XP is reduced; below it the pet is sick.
        sick_multiplier: XP multiplier while sick.
        happy_threshold: Health at or above which the pet is happy.
        health_recovery: Health regained per action while not fainted.
        max_health: Health cap.
        faint_recovery_threshold: Actions needed to revive.
        faint_revive_health: Health after reviving.
        streak_tiers: Multiplier tiers, kept sorted from highest ``min_days`` down.
        streak_milestone_interval: Streak lengths divisible by this are celebrated.
        base_rewards: Reward table keyed by category.
        max_xp: Experience curve, level -> XP needed to level up.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    daily_limit: int = Field(default=DAILY_LIMIT, ge=1)
    sick_threshold: int = Field(default=SICK_THRESHOLD, ge=0)
    sick_multiplier: float = Field(default=SICK_MULTIPLIER, gt=0, le=1)
    happy_threshold: int = Field(default=HAPPY_THRESHOLD, ge=0)
    health_recovery: int = Field(default=HEALTH_RECOVERY, ge=0)
    max_health: int = Field(default=MAX_HEALTH, ge=1, le=MAX_HEALTH)
    faint_recovery_threshold: int = Field(default=FAINT_RECOVERY_THRESHOLD, ge=1)
    faint_revive_health: int = Field(default=FAINT_REVIVE_HEALTH, ge=1)
    streak_tiers: tuple[StreakTier, ...] = Field(default_factory=_default_tiers)
    streak_milestone_interval: int = Field(default=STREAK_MILESTONE_INTERVAL, ge=1)
    base_rewards: dict[str, BaseReward] = Field(default_factory=_default_rewards)
    max_xp: XpCurve = Field(default_factory=lambda: LinearXpCurve(XP_CURVE_STEP))

    @field_validator("streak_tiers", mode="after")
    @classmethod
    def sort_tiers(cls, value: tuple[StreakTier, ...]) -> tuple[StreakTier, ...]:
        """Order tiers from the longest streak down and reject duplicates."""
        days = [tier.min_days for tier in value]
        if len(days) != len(set(days)):
            raise ConfigurationError(
                "Streak tiers must have distinct min_days",
                config_key="streak_tiers",
                details={"min_days": days},
            )
        return tuple(sorted(value, key=lambda tier: tier.min_days, reverse=True))

    @model_validator(mode="after")
    def validate_thresholds(self) -> ProgressionConfig:
        """Keep health thresholds inside the health range and in order.

        Raises:
            ConfigurationError: If thresholds are inconsistent.
        """
        if self.faint_revive_health > self.max_health:
            raise ConfigurationError(
                f"faint_revive_health ({self.faint_revive_health}) exceeds max_health ({self.max_health})",
                config_key="faint_revive_health",
            )
        if not self.sick_threshold <= self.happy_threshold <= self.max_health:
            raise ConfigurationError(
                "Expected sick_threshold <= happy_threshold <= max_health",
                config_key="happy_threshold",
                details={
                    "sick_threshold": self.sick_threshold,
                    "happy_threshold": self.happy_threshold,
                    "max_health": self.max_health,
                },
            )
        if not self.base_rewards:
            raise ConfigurationError("Reward table is empty", config_key="base_rewards")
        return self

    def base_reward(self, category: str) -> BaseReward:
        """Look up the reward row for a category.

        Raises:
            InvalidInputError: If the category is not in the table.
        """
        try:
            return self.base_rewards[category]
        except KeyError:
            raise InvalidInputError(
                f"Unknown reward category: {category!r}",
                field="category",
                details={"known_categories": sorted(self.base_rewards)},
            ) from None


__all__ = [
    "StreakTier",
    "BaseReward",
    "ProgressionConfig",
]

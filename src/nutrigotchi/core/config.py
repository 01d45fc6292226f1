"""Configuration management for NutriGotchi.

Centralized configuration using pydantic-settings, supporting environment
variables, .env files and runtime overrides.

Example:
    >>> from nutrigotchi.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.rules.daily_limit
    5

Environment Variables:
    NUTRIGOTCHI_TIMEZONE: IANA timezone that defines the civil day
    NUTRIGOTCHI_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    NUTRIGOTCHI_RULES_DAILY_LIMIT: Rewarded actions per day
    NUTRIGOTCHI_RULES_XP_CURVE: Experience curve ('linear' or 'quadratic')
    NUTRIGOTCHI_DATABASE_PATH: Path to the SQLite database
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from nutrigotchi.core import constants
from nutrigotchi.core.exceptions import ConfigurationError


if TYPE_CHECKING:
    from nutrigotchi.engine.config import ProgressionConfig


class RuleSettings(BaseSettings):
    """Tunable progression rules.

    Attributes:
        daily_limit: Rewarded actions per civil day.
        sick_threshold: Health at or below which XP is reduced.
        sick_multiplier: XP multiplier while sick.
        happy_threshold: Health at or above which the pet is happy.
        health_recovery: Health regained per action.
        faint_recovery_threshold: Actions needed to revive a fainted pet.
        faint_revive_health: Health after reviving.
        streak_tiers: ``[min_days, multiplier]`` pairs.
        streak_milestone_interval: Streak lengths celebrated in the action message.
        base_rewards: Category -> ``{"gold": .., "xp": ..}``.
        xp_curve: Shape of the experience curve.
        xp_curve_step: Scale of the experience curve.
    """

    model_config = SettingsConfigDict(
        env_prefix="NUTRIGOTCHI_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    daily_limit: int = Field(default=constants.DAILY_LIMIT, ge=1, le=100)
    sick_threshold: int = Field(default=constants.SICK_THRESHOLD, ge=0, le=constants.MAX_HEALTH)
    sick_multiplier: float = Field(default=constants.SICK_MULTIPLIER, gt=0, le=1)
    happy_threshold: int = Field(default=constants.HAPPY_THRESHOLD, ge=0, le=constants.MAX_HEALTH)
    health_recovery: int = Field(default=constants.HEALTH_RECOVERY, ge=0, le=constants.MAX_HEALTH)
    faint_recovery_threshold: int = Field(default=constants.FAINT_RECOVERY_THRESHOLD, ge=1, le=50)
    faint_revive_health: int = Field(default=constants.FAINT_REVIVE_HEALTH, ge=1, le=constants.MAX_HEALTH)
    streak_tiers: list[tuple[int, float]] = Field(
        default_factory=lambda: sorted(tuple(tier) for tier in constants.STREAK_TIERS),
        description="(min_days, multiplier) pairs",
    )
    streak_milestone_interval: int = Field(default=constants.STREAK_MILESTONE_INTERVAL, ge=1, le=365)
    base_rewards: dict[str, dict[str, int]] = Field(
        default_factory=lambda: {
            name: {"gold": gold, "xp": xp} for name, (gold, xp) in constants.BASE_REWARDS.items()
        },
        description="Reward table keyed by category",
    )
    xp_curve: Literal["linear", "quadratic"] = Field(default="linear")
    xp_curve_step: int = Field(default=constants.XP_CURVE_STEP, ge=1)

    @field_validator("streak_tiers", mode="after")
    @classmethod
    def validate_streak_tiers(cls, value: list[tuple[int, float]]) -> list[tuple[int, float]]:
        """Longer streaks must never earn a smaller multiplier.

        Raises:
            ConfigurationError: If the tiers are not monotonic.
        """
        ordered = sorted(value)
        for (low_days, low_mult), (high_days, high_mult) in zip(ordered, ordered[1:]):
            if high_days == low_days or high_mult < low_mult:
                raise ConfigurationError(
                    f"Streak tier {high_days}d x{high_mult} does not exceed {low_days}d x{low_mult}",
                    config_key="streak_tiers",
                )
        return ordered

    @model_validator(mode="after")
    def validate_health_thresholds(self) -> RuleSettings:
        """Ensure the sick threshold lies below the happy threshold.

        Raises:
            ConfigurationError: If sick_threshold > happy_threshold.
        """
        if self.sick_threshold > self.happy_threshold:
            raise ConfigurationError(
                f"sick_threshold ({self.sick_threshold}) must not exceed "
                f"happy_threshold ({self.happy_threshold})",
                config_key="sick_threshold",
            )
        return self

    def to_config(self) -> ProgressionConfig:
        """Build the engine's ProgressionConfig from these settings."""
        from nutrigotchi.engine.config import BaseReward, ProgressionConfig, StreakTier
        from nutrigotchi.engine.leveling import curve_from_name

        return ProgressionConfig(
            daily_limit=self.daily_limit,
            sick_threshold=self.sick_threshold,
            sick_multiplier=self.sick_multiplier,
            happy_threshold=self.happy_threshold,
            health_recovery=self.health_recovery,
            faint_recovery_threshold=self.faint_recovery_threshold,
            faint_revive_health=self.faint_revive_health,
            streak_tiers=tuple(StreakTier(min_days=d, multiplier=m) for d, m in self.streak_tiers),
            streak_milestone_interval=self.streak_milestone_interval,
            base_rewards={name: BaseReward(**row) for name, row in self.base_rewards.items()},
            max_xp=curve_from_name(self.xp_curve, self.xp_curve_step),
        )


class StorageSettings(BaseSettings):
    """Configuration for the SQLite store.

    Attributes:
        database_path: Path to the SQLite database file.
        busy_timeout_seconds: How long a writer waits for the database lock.
    """

    model_config = SettingsConfigDict(
        env_prefix="NUTRIGOTCHI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default=Path("data/nutrigotchi.db"),
        description="Path to SQLite database",
    )
    busy_timeout_seconds: float = Field(default=5.0, gt=0, le=120)


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Log at DEBUG regardless of log_level.
        log_level: Application logging level.
        json_logs: Render logs as JSON.
        timezone: IANA timezone defining the civil day.
        reject_duplicate_actions: Refuse a source_ref that was already recorded.
        rules: Progression rules.
        storage: Storage settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="NUTRIGOTCHI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(default="NutriGotchi", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(default=False, description="Render logs as JSON")
    timezone: str = Field(default=constants.DEFAULT_TIMEZONE, description="Civil-day timezone")
    reject_duplicate_actions: bool = Field(
        default=False,
        description="Refuse actions whose source_ref already has a ledger row",
    )

    rules: RuleSettings = Field(default_factory=RuleSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    @field_validator("timezone", mode="after")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Reject timezones zoneinfo does not know.

        Raises:
            ConfigurationError: If the timezone is unknown.
        """
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigurationError(f"Unknown timezone: {value!r}", config_key="timezone") from exc
        return value

    @property
    def effective_log_level(self) -> str:
        """Debug mode forces DEBUG regardless of ``log_level``."""
        return "DEBUG" if self.debug else self.log_level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "RuleSettings",
    "StorageSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]

"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the NutriGotchi test suite.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

import pytest

from nutrigotchi.engine.calendar import CivilCalendar
from nutrigotchi.engine.config import ProgressionConfig
from nutrigotchi.engine.orchestrator import ProgressionEngine
from nutrigotchi.models.player import ActionEvent, PlayerState, create_player_state


if TYPE_CHECKING:
    from collections.abc import Generator


# 05:00 UTC is 12:00 in Jakarta, far from any civil-day boundary
NOON_JAKARTA_UTC_HOUR = 5
DAY_ONE = date(2025, 3, 10)


def at_noon(day: date) -> datetime:
    """An aware instant at noon Jakarta time on ``day``."""
    return datetime(day.year, day.month, day.day, NOON_JAKARTA_UTC_HOUR, tzinfo=timezone.utc)


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from nutrigotchi.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def reset_database_singleton() -> Generator[None, None, None]:
    """Drop the global database instance around each test."""
    from nutrigotchi.storage.database import reset_database

    reset_database()
    yield
    reset_database()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "NUTRIGOTCHI_DEBUG": "true",
        "NUTRIGOTCHI_LOG_LEVEL": "DEBUG",
        "NUTRIGOTCHI_TIMEZONE": "Europe/Amsterdam",
        "NUTRIGOTCHI_RULES_DAILY_LIMIT": "3",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def config() -> ProgressionConfig:
    """Provide the default rule configuration."""
    return ProgressionConfig()


@pytest.fixture
def calendar() -> CivilCalendar:
    """Provide the default Jakarta calendar."""
    return CivilCalendar("Asia/Jakarta")


@pytest.fixture
def engine(config: ProgressionConfig, calendar: CivilCalendar) -> ProgressionEngine:
    """Provide an engine with default rules."""
    return ProgressionEngine(config, calendar=calendar)


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def noon() -> Callable[[date], datetime]:
    """Provide the noon-in-Jakarta instant builder."""
    return at_noon


@pytest.fixture
def today() -> date:
    """The civil date most tests act on."""
    return DAY_ONE


@pytest.fixture
def fresh_state() -> PlayerState:
    """Provide the state of a newly created player."""
    return create_player_state()


@pytest.fixture
def make_state(today: date) -> Callable[..., PlayerState]:
    """Factory for a player who already acted yesterday.

    Keyword arguments override any field.
    """

    def _make(**overrides: Any) -> PlayerState:
        defaults: dict[str, Any] = {
            "streak_days": 1,
            "last_action_date": today - timedelta(days=1),
            "last_quota_reset_date": today - timedelta(days=1),
            "daily_action_count": 1,
        }
        return create_player_state(**{**defaults, **overrides})

    return _make


@pytest.fixture
def make_event(today: date) -> Callable[..., ActionEvent]:
    """Factory for actions taken at noon on ``today`` unless told otherwise."""
    counter = iter(range(1, 1_000_000))

    def _make(
        category: str = "tier1",
        *,
        day: date | None = None,
        occurred_at: datetime | None = None,
        source_ref: str | None = None,
        savings: int = 0,
    ) -> ActionEvent:
        return ActionEvent(
            category=category,
            occurred_at=occurred_at or at_noon(day or today),
            source_ref=source_ref or f"recipe-{next(counter)}",
            savings=savings,
        )

    return _make

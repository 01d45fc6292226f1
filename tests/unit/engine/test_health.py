"""Tests for health regeneration and mood."""

from __future__ import annotations

import pytest

from nutrigotchi.engine.config import ProgressionConfig
from nutrigotchi.engine.faint import FaintOutcome
from nutrigotchi.engine.health import derive_mood, next_health
from nutrigotchi.models.enums import Mood


HEALTHY = FaintOutcome(was_fainted=False, is_fainted=False, recovery_count=0, revived=False)
STILL_FAINTED = FaintOutcome(was_fainted=True, is_fainted=True, recovery_count=1, revived=False)
REVIVED = FaintOutcome(was_fainted=True, is_fainted=False, recovery_count=0, revived=True)


class TestNextHealth:
    """Tests for the next_health function."""

    def test_recovery(self, config: ProgressionConfig) -> None:
        """Test a healthy pet regains health."""
        assert next_health(50, HEALTHY, config) == 58

    def test_capped(self, config: ProgressionConfig) -> None:
        """Test recovery stops at the cap."""
        assert next_health(96, HEALTHY, config) == 100

    def test_fainted_does_not_regenerate(self, config: ProgressionConfig) -> None:
        """Test a fainted pet stays at its health."""
        assert next_health(0, STILL_FAINTED, config) == 0

    def test_revival_sets_health(self, config: ProgressionConfig) -> None:
        """Test revival sets the revive health."""
        assert next_health(0, REVIVED, config) == 20


class TestDeriveMood:
    """Tests for the derive_mood function."""

    @pytest.mark.parametrize(
        ("health", "expected"),
        [
            (0, Mood.SICK),
            (19, Mood.SICK),
            (20, Mood.NEUTRAL),
            (59, Mood.NEUTRAL),
            (60, Mood.HAPPY),
            (100, Mood.HAPPY),
        ],
    )
    def test_thresholds(self, config: ProgressionConfig, health: int, expected: Mood) -> None:
        """Test mood bands by health."""
        assert derive_mood(health, False, config) is expected

    def test_fainted_is_sick(self, config: ProgressionConfig) -> None:
        """Test a fainted pet is always sick."""
        assert derive_mood(100, True, config) is Mood.SICK

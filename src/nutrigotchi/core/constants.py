"""Default rule constants for the NutriGotchi progression engine.

These values mirror the live product and seed RuleSettings, which builds the
ProgressionConfig the engine runs on, so each rule can be overridden from the
environment. MAX_HEALTH also bounds the health field of PlayerState.
"""

from __future__ import annotations

# =============================================================================
# Daily Quota
# =============================================================================

DAILY_LIMIT = 5
"""Maximum number of rewarded actions per civil day."""

# =============================================================================
# Health & Mood
# =============================================================================

MAX_HEALTH = 100
"""Upper bound for a pet's health points."""

SICK_THRESHOLD = 20
"""At or below this health (and above zero) XP is reduced; below it the pet is sick."""

SICK_MULTIPLIER = 0.75
"""XP multiplier applied while the pet is sick."""

HAPPY_THRESHOLD = 60
"""Health at or above which the pet is happy."""

HEALTH_RECOVERY = 8
"""Health regained per action while not fainted."""

# =============================================================================
# Faint & Revival
# =============================================================================

FAINT_RECOVERY_THRESHOLD = 3
"""Number of actions a fainted pet needs to revive."""

FAINT_REVIVE_HEALTH = 20
"""Health a pet wakes up with after reviving."""

# =============================================================================
# Streaks
# =============================================================================

# (min_days, xp multiplier), highest tier first
STREAK_TIERS: tuple[tuple[int, float], ...] = (
    (30, 1.50),
    (14, 1.20),
    (7, 1.10),
)

STREAK_MILESTONE_INTERVAL = 7
"""Streak lengths divisible by this are celebrated in the action message."""

# =============================================================================
# Rewards
# =============================================================================

# category -> (gold, xp); tier1..tier3 are the Hemat / Balance / Premium recipe types
# and meal_a..meal_d the nutrition grades of a logged meal
BASE_REWARDS: dict[str, tuple[int, int]] = {
    "tier1": (15, 25),
    "tier2": (25, 35),
    "tier3": (40, 50),
    "meal_a": (25, 30),
    "meal_b": (25, 20),
    "meal_c": (10, 10),
    "meal_d": (10, 5),
}

# =============================================================================
# Leveling
# =============================================================================

XP_CURVE_STEP = 100
"""Experience needed per level on the default linear curve (level * step)."""

# =============================================================================
# Calendar
# =============================================================================

DEFAULT_TIMEZONE = "Asia/Jakarta"
"""Civil timezone used for every day boundary (WIB, UTC+7)."""

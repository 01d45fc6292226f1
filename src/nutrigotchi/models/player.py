"""Player snapshot, action and receipt models.

PlayerState is an immutable snapshot owned by the persistence layer. The
engine receives one, never mutates it, and returns a validated successor.
RewardReceipt and LedgerEntry are the transient and durable records of a
single transition.

Example:
    >>> state = create_player_state()
    >>> state.level, state.health_points, state.mood
    (1, 100, <Mood.HAPPY: 'happy'>)
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Self
from uuid import uuid4

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, ValidationError

from nutrigotchi.core.constants import MAX_HEALTH
from nutrigotchi.core.exceptions import InvalidInputError
from nutrigotchi.models.enums import MessageKind, Mood


def _wrap_validation_error(model: str, exc: ValidationError) -> InvalidInputError:
    """Convert a pydantic ValidationError into the engine's InvalidInputError."""
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    return InvalidInputError(
        f"Malformed {model}: {first.get('msg', str(exc))}",
        field=location or None,
        details={"error_count": exc.error_count()},
    )


# =============================================================================
# Player State
# =============================================================================


class PlayerState(BaseModel):
    """Persisted progression state of one player's pet.

    Attributes:
        level: Current level (1 or more).
        current_xp: Experience inside the current level.
        health_points: Pet health, 0 to 100.
        mood: Displayed mood, derived from health and faint status.
        wallet_balance: Spendable gold.
        total_savings_accrued: Money saved by cooking instead of buying.
        streak_days: Consecutive civil days with an action.
        last_action_date: Civil date of the last action, if any.
        streak_shield_active: Whether a shield will absorb the next gap.
        is_fainted: Whether the pet is incapacitated.
        faint_recovery_count: Actions taken towards revival.
        daily_action_count: Rewarded actions on the quota day.
        last_quota_reset_date: Civil date the quota counter belongs to.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    level: int = Field(default=1, ge=1, description="Pet level")
    current_xp: int = Field(default=0, ge=0, description="XP inside the current level")
    health_points: int = Field(default=MAX_HEALTH, ge=0, le=MAX_HEALTH)
    mood: Mood = Field(default=Mood.HAPPY)

    wallet_balance: int = Field(default=0, ge=0, description="Gold balance")
    total_savings_accrued: int = Field(default=0, ge=0)

    streak_days: int = Field(default=0, ge=0)
    last_action_date: date | None = Field(default=None)
    streak_shield_active: bool = Field(default=False)

    is_fainted: bool = Field(default=False)
    faint_recovery_count: int = Field(default=0, ge=0)

    daily_action_count: int = Field(default=0, ge=0)
    last_quota_reset_date: date | None = Field(default=None)

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> Self:
        """Build a snapshot from a stored record.

        Raises:
            InvalidInputError: If the record violates the state invariants.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise _wrap_validation_error("player state", exc) from exc

    def evolve(self, **changes: Any) -> Self:
        """Return a validated copy with the given fields replaced.

        Raises:
            InvalidInputError: If the result violates the state invariants.
        """
        return type(self).from_record({**self.model_dump(), **changes})


def create_player_state(**overrides: Any) -> PlayerState:
    """Create the state a new account starts with.

    Args:
        **overrides: Fields to set instead of the defaults.

    Returns:
        A fresh PlayerState.
    """
    return PlayerState.from_record(overrides)


# =============================================================================
# Action Event
# =============================================================================


class ActionEvent(BaseModel):
    """A single reward-granting action, such as cooking a recipe.

    The category is opaque to the engine apart from selecting a row of the
    reward table. ``occurred_at`` must be timezone-aware so it can be
    placed on the configured civil calendar.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    category: str = Field(min_length=1, description="Reward table key")
    occurred_at: AwareDatetime = Field(description="When the action happened")
    source_ref: str = Field(min_length=1, description="Opaque id of the source record")
    savings: int = Field(default=0, ge=0, description="Money saved versus buying")

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> Self:
        """Build an event from untrusted data.

        Raises:
            InvalidInputError: If the data is malformed.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise _wrap_validation_error("action event", exc) from exc


# =============================================================================
# Receipts
# =============================================================================


class RewardReceipt(BaseModel):
    """Everything one transition produced.

    The receipt carries every input a ledger row or a user-facing message
    needs, so callers never re-derive rules.
    """

    model_config = ConfigDict(frozen=True)

    category: str
    source_ref: str
    occurred_at: datetime
    action_date: date

    gold_earned: int
    xp_earned: int
    savings_earned: int

    new_xp: int
    new_level: int
    new_max_xp: int
    leveled_up: bool

    new_health: int
    new_mood: Mood

    new_wallet_balance: int
    new_total_savings: int

    streak_days: int
    streak_multiplier: float
    streak_shield_consumed: bool

    is_fainted: bool
    faint_recovery_count: int
    revived_from_faint: bool

    daily_action_count: int
    hit_daily_limit: bool

    message_kind: MessageKind
    message: str

    @property
    def rewards_granted(self) -> bool:
        """Whether this action paid out anything."""
        return self.gold_earned > 0 or self.xp_earned > 0


class LedgerEntry(BaseModel):
    """Immutable history row, one per action including zero-reward ones.

    These rows back the history charts and the streak calendar.
    """

    model_config = ConfigDict(frozen=True)

    entry_id: str = Field(default_factory=lambda: uuid4().hex)
    player_id: str
    source_ref: str
    category: str
    occurred_at: datetime
    action_date: date

    gold_earned: int = Field(ge=0)
    xp_earned: int = Field(ge=0)
    savings_earned: int = Field(ge=0)

    streak_days: int
    hit_daily_limit: bool
    revived_from_faint: bool
    message_kind: MessageKind

    @classmethod
    def from_receipt(cls, player_id: str, receipt: RewardReceipt) -> Self:
        """Build the ledger row for a transition."""
        return cls(
            player_id=player_id,
            source_ref=receipt.source_ref,
            category=receipt.category,
            occurred_at=receipt.occurred_at,
            action_date=receipt.action_date,
            gold_earned=receipt.gold_earned,
            xp_earned=receipt.xp_earned,
            savings_earned=receipt.savings_earned,
            streak_days=receipt.streak_days,
            hit_daily_limit=receipt.hit_daily_limit,
            revived_from_faint=receipt.revived_from_faint,
            message_kind=receipt.message_kind,
        )


class ReversalReceipt(BaseModel):
    """Result of undoing a ledger entry.

    The subtracted amounts can be smaller than the entry's rewards when a
    balance would otherwise drop below zero.
    """

    model_config = ConfigDict(frozen=True)

    entry_id: str
    gold_subtracted: int
    xp_subtracted: int
    savings_subtracted: int
    new_wallet_balance: int
    new_xp: int
    new_total_savings: int
    message: str


__all__ = [
    "PlayerState",
    "ActionEvent",
    "RewardReceipt",
    "LedgerEntry",
    "ReversalReceipt",
    "create_player_state",
]

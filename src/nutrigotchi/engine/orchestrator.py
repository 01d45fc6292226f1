"""Progression orchestrator: one action, one atomic transition.

The engine is a pure function ``(PlayerState, ActionEvent) -> (PlayerState,
RewardReceipt)``. It performs no I/O, holds no mutable state and is safe to
call concurrently for different players. It is not idempotent: applying
the same event twice pays twice, so callers serialize actions per player
and decide themselves whether a source may be rewarded more than once.

Sub-steps run in a fixed order because later ones consume earlier results:

    faint -> streak -> quota -> reward -> level -> health/mood -> receipt

Example:
    >>> from datetime import datetime, timezone
    >>> engine = ProgressionEngine()
    >>> event = ActionEvent(
    ...     category="tier1",
    ...     occurred_at=datetime(2025, 1, 1, 5, tzinfo=timezone.utc),
    ...     source_ref="recipe-1",
    ... )
    >>> state, receipt = engine.apply(create_player_state(), event)
    >>> receipt.gold_earned, receipt.xp_earned, state.streak_days
    (15, 25, 1)
"""

from __future__ import annotations

from datetime import datetime
from typing import NamedTuple

from nutrigotchi.core.exceptions import InvalidInputError
from nutrigotchi.core.logging import get_logger
from nutrigotchi.engine.calendar import CivilCalendar
from nutrigotchi.engine.config import ProgressionConfig
from nutrigotchi.engine.faint import advance_faint
from nutrigotchi.engine.health import derive_mood, next_health
from nutrigotchi.engine.leveling import apply_xp, xp_threshold
from nutrigotchi.engine.messages import MessageFacts, render_message, select_message_kind
from nutrigotchi.engine.quota import (
    QuotaStatus,
    can_earn_rewards,
    next_quota_count,
    open_quota_window,
)
from nutrigotchi.engine.reversal import reverse_entry
from nutrigotchi.engine.rewards import calculate_reward
from nutrigotchi.engine.streak import advance_streak, streak_bonus_percent, streak_multiplier
from nutrigotchi.models.player import (
    ActionEvent,
    LedgerEntry,
    PlayerState,
    ReversalReceipt,
    RewardReceipt,
    create_player_state,
)


logger = get_logger(__name__)


class Transition(NamedTuple):
    """The successor state and the receipt describing how it was reached."""

    state: PlayerState
    receipt: RewardReceipt


class ProgressionEngine:
    """Applies reward-granting actions to player snapshots.

    Attributes:
        config: Rule configuration shared by every transition.
        calendar: The single civil calendar used for all day comparisons.
    """

    def __init__(
        self,
        config: ProgressionConfig | None = None,
        *,
        calendar: CivilCalendar | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Rule configuration; defaults to the product's rules.
            calendar: Civil calendar; defaults to the product's timezone.
        """
        self.config = config or ProgressionConfig()
        self.calendar = calendar or CivilCalendar()

    # =========================================================================
    # Validation
    # =========================================================================

    def validate_state(self, state: PlayerState) -> PlayerState:
        """Re-check a snapshot against every invariant.

        Field-level invariants are validated again because snapshots built
        with ``model_copy(update=...)`` or ``model_construct`` skip them.

        Returns:
            The validated snapshot.

        Raises:
            InvalidInputError: If the snapshot is not a legal resting state.
        """
        if not isinstance(state, PlayerState):
            raise InvalidInputError("Expected a PlayerState", field="state", value=type(state).__name__)
        state = PlayerState.from_record(state.model_dump())

        threshold = xp_threshold(self.config.max_xp, state.level)
        if state.current_xp >= threshold:
            raise InvalidInputError(
                f"current_xp {state.current_xp} must be below max_xp({state.level}) = {threshold}",
                field="current_xp",
            )
        if state.health_points > self.config.max_health:
            raise InvalidInputError(
                f"health_points {state.health_points} exceeds {self.config.max_health}",
                field="health_points",
            )
        if state.faint_recovery_count >= self.config.faint_recovery_threshold:
            raise InvalidInputError(
                f"faint_recovery_count {state.faint_recovery_count} must be below "
                f"{self.config.faint_recovery_threshold}",
                field="faint_recovery_count",
            )
        return state

    # =========================================================================
    # Transitions
    # =========================================================================

    def apply(self, state: PlayerState, event: ActionEvent) -> Transition:
        """Apply one action to a snapshot.

        Args:
            state: The player's current snapshot.
            event: The reward-granting action.

        Returns:
            Transition with the successor state and the receipt.

        Raises:
            InvalidInputError: If the snapshot, the event or its category is malformed.
        """
        state = self.validate_state(state)
        if not isinstance(event, ActionEvent):
            raise InvalidInputError("Expected an ActionEvent", field="event", value=type(event).__name__)
        event = ActionEvent.from_record(event.model_dump())

        config = self.config
        today = self.calendar.today(event.occurred_at)

        faint = advance_faint(state.is_fainted, state.faint_recovery_count, config.faint_recovery_threshold)
        streak = advance_streak(state.streak_days, state.last_action_date, state.streak_shield_active, today)
        window = open_quota_window(state.daily_action_count, state.last_quota_reset_date, today)
        can_earn = can_earn_rewards(window.count, config.daily_limit, state.is_fainted)

        multiplier = streak_multiplier(streak.streak_days, config.streak_tiers)
        reward = calculate_reward(
            event.category,
            config,
            streak_multiplier=multiplier,
            health_points=state.health_points,
            can_earn=can_earn,
        )

        progress = apply_xp(state.current_xp, state.level, reward.xp, config.max_xp)
        health = next_health(state.health_points, faint, config)
        mood = derive_mood(health, faint.is_fainted, config)

        daily_count = next_quota_count(window.count, can_earn)
        hit_daily_limit = window.count >= config.daily_limit
        wallet = state.wallet_balance + reward.gold
        savings = state.total_savings_accrued + event.savings

        logger.debug(
            "Progression steps resolved",
            source_ref=event.source_ref,
            today=today,
            day_relation=streak.relation.value,
            revived=faint.revived,
            still_fainted=faint.is_fainted,
            quota_count=window.count,
            quota_reset=window.was_reset,
            can_earn=can_earn,
            streak_multiplier=multiplier,
            sick_penalty=reward.sick_penalty_applied,
        )

        new_state = state.evolve(
            level=progress.new_level,
            current_xp=progress.new_xp,
            health_points=health,
            mood=mood,
            wallet_balance=wallet,
            total_savings_accrued=savings,
            streak_days=streak.streak_days,
            last_action_date=today,
            streak_shield_active=streak.shield_active,
            is_fainted=faint.is_fainted,
            faint_recovery_count=faint.recovery_count,
            daily_action_count=daily_count,
            last_quota_reset_date=window.reset_date,
        )

        facts = MessageFacts(
            revived=faint.revived,
            still_fainted=faint.still_recovering,
            hit_daily_limit=hit_daily_limit,
            leveled_up=progress.leveled_up,
            streak_days=streak.streak_days,
            health=health,
            recovery_count=faint.recovery_count,
            threshold=config.faint_recovery_threshold,
            limit=config.daily_limit,
            level=progress.new_level,
            bonus_percent=streak_bonus_percent(multiplier),
            milestone_interval=config.streak_milestone_interval,
        )
        kind = select_message_kind(facts)

        receipt = RewardReceipt(
            category=event.category,
            source_ref=event.source_ref,
            occurred_at=event.occurred_at,
            action_date=today,
            gold_earned=reward.gold,
            xp_earned=reward.xp,
            savings_earned=event.savings,
            new_xp=progress.new_xp,
            new_level=progress.new_level,
            new_max_xp=progress.new_max_xp,
            leveled_up=progress.leveled_up,
            new_health=health,
            new_mood=mood,
            new_wallet_balance=wallet,
            new_total_savings=savings,
            streak_days=streak.streak_days,
            streak_multiplier=multiplier,
            streak_shield_consumed=streak.shield_consumed,
            is_fainted=faint.is_fainted,
            faint_recovery_count=faint.recovery_count,
            revived_from_faint=faint.revived,
            daily_action_count=daily_count,
            hit_daily_limit=hit_daily_limit,
            message_kind=kind,
            message=render_message(kind, facts),
        )

        logger.info(
            "Action applied",
            source_ref=event.source_ref,
            category=event.category,
            gold_earned=reward.gold,
            xp_earned=reward.xp,
            rewards_granted=receipt.rewards_granted,
            level=progress.new_level,
            leveled_up=progress.leveled_up,
            streak_days=streak.streak_days,
            message_kind=kind.value,
        )

        return Transition(new_state, receipt)

    def reverse(self, state: PlayerState, entry: LedgerEntry) -> tuple[PlayerState, ReversalReceipt]:
        """Take back what a ledger entry paid. See ``reverse_entry``."""
        state = self.validate_state(state)
        new_state, receipt = reverse_entry(state, entry)
        logger.info(
            "Action reversed",
            entry_id=entry.entry_id,
            gold_subtracted=receipt.gold_subtracted,
            xp_subtracted=receipt.xp_subtracted,
            savings_subtracted=receipt.savings_subtracted,
        )
        return new_state, receipt

    def quota_status(self, state: PlayerState, instant: datetime) -> QuotaStatus:
        """Today's quota usage, applying the day-boundary reset read-only."""
        window = open_quota_window(
            state.daily_action_count,
            state.last_quota_reset_date,
            self.calendar.today(instant),
        )
        return QuotaStatus(used=window.count, limit=self.config.daily_limit)

    def new_player(self) -> PlayerState:
        """Snapshot for a freshly created account."""
        return create_player_state()


__all__ = [
    "Transition",
    "ProgressionEngine",
]

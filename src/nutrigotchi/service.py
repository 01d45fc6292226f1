"""Progression service: the imperative shell around the engine.

Loads a snapshot, applies one action through the pure engine and persists
the successor state together with its ledger row in one write
transaction. Transactions take SQLite's write lock up front, so actions on
the same player are applied one at a time.

Example:
    >>> service = ProgressionService()
    >>> player_id = service.create_player()
    >>> recorded = service.record_action(player_id, category="tier1", source_ref="recipe-7")
    >>> recorded.receipt.gold_earned
    15
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import NamedTuple

from nutrigotchi.core.config import Settings, get_settings
from nutrigotchi.core.exceptions import DuplicateActionError, InvalidInputError
from nutrigotchi.core.logging import bind_context, clear_context, configure_logging, get_logger
from nutrigotchi.engine.calendar import CivilCalendar
from nutrigotchi.engine.orchestrator import ProgressionEngine
from nutrigotchi.engine.quota import QuotaStatus
from nutrigotchi.models.player import (
    ActionEvent,
    LedgerEntry,
    PlayerState,
    ReversalReceipt,
    RewardReceipt,
)
from nutrigotchi.storage.database import Database, get_database


logger = get_logger(__name__)


class RecordedAction(NamedTuple):
    """A persisted action: its ledger row and the receipt for display."""

    entry: LedgerEntry
    receipt: RewardReceipt


class ProgressionService:
    """Applies player actions against durable storage.

    Attributes:
        settings: Application settings.
        engine: The pure progression engine.
        database: Snapshot and ledger store.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        database: Database | None = None,
        engine: ProgressionEngine | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            settings: Settings to use; defaults to ``get_settings()``.
                Its logging fields configure structlog.
            database: Store to use; defaults to the global database.
            engine: Engine to use; built from the settings' rules and timezone.
        """
        self.settings = settings or get_settings()
        configure_logging(
            level=self.settings.effective_log_level,
            json_format=self.settings.json_logs,
            app_name=self.settings.app_name,
            app_version=self.settings.app_version,
        )
        self.engine = engine or ProgressionEngine(
            self.settings.rules.to_config(),
            calendar=CivilCalendar(self.settings.timezone),
        )
        self.database = database or get_database()

    # =========================================================================
    # Players
    # =========================================================================

    def create_player(self, player_id: str | None = None) -> str:
        """Create a player with a fresh snapshot and return its id."""
        return self.database.create_player(self.engine.new_player(), player_id)

    def get_player(self, player_id: str) -> PlayerState:
        """Load a player's current snapshot.

        Raises:
            PlayerNotFoundError: If the player does not exist.
        """
        return self.database.get_player(player_id)

    # =========================================================================
    # Actions
    # =========================================================================

    def record_action(
        self,
        player_id: str,
        *,
        category: str,
        source_ref: str,
        occurred_at: datetime | None = None,
        savings: int = 0,
    ) -> RecordedAction:
        """Apply one action and persist the result.

        Args:
            player_id: The acting player.
            category: Reward table key, e.g. ``"tier2"`` or ``"meal_a"``.
            source_ref: Opaque id of the source record (a recipe or a food log).
            occurred_at: When it happened; defaults to now.
            savings: Money saved versus buying the dish.

        Returns:
            The stored ledger row and the receipt.

        Raises:
            InvalidInputError: If the event or the stored snapshot is malformed.
            PlayerNotFoundError: If the player does not exist.
            DuplicateActionError: If duplicates are rejected and the source was recorded.
        """
        bind_context(player_id=player_id, source_ref=source_ref)
        try:
            event = ActionEvent.from_record(
                {
                    "category": category,
                    "source_ref": source_ref,
                    "occurred_at": occurred_at or datetime.now(timezone.utc),
                    "savings": savings,
                }
            )
            with self.database.transaction() as tx:
                if self.settings.reject_duplicate_actions and tx.has_source_ref(player_id, source_ref):
                    raise DuplicateActionError(
                        "Action already recorded",
                        source_ref=source_ref,
                        player_id=player_id,
                    )

                state = tx.load_player(player_id)
                new_state, receipt = self.engine.apply(state, event)
                entry = LedgerEntry.from_receipt(player_id, receipt)

                tx.save_player(player_id, new_state)
                tx.append_ledger(entry)
        except InvalidInputError as exc:
            logger.error("Action rejected", error=exc.message, details=exc.details)
            raise
        finally:
            clear_context()

        return RecordedAction(entry, receipt)

    def undo_action(self, player_id: str, entry_id: str) -> ReversalReceipt:
        """Delete a ledger row and take back what it paid.

        Raises:
            LedgerEntryNotFoundError: If the entry does not exist for this player.
            PlayerNotFoundError: If the player does not exist.
        """
        bind_context(player_id=player_id, entry_id=entry_id)
        try:
            with self.database.transaction() as tx:
                entry = tx.get_ledger_entry(entry_id, player_id=player_id)
                state = tx.load_player(player_id)
                new_state, receipt = self.engine.reverse(state, entry)

                tx.delete_ledger_entry(entry_id)
                tx.save_player(player_id, new_state)
        finally:
            clear_context()

        return receipt

    # =========================================================================
    # Queries
    # =========================================================================

    def ledger_for(self, player_id: str, *, limit: int | None = None) -> list[LedgerEntry]:
        """A player's ledger rows, newest first."""
        return self.database.get_ledger(player_id, limit=limit)

    def activity_dates(self, player_id: str, start: date, end: date) -> list[date]:
        """Civil dates in ``[start, end]`` on which the player acted, ascending."""
        return self.database.get_activity_dates(player_id, start, end)

    def quota_status(self, player_id: str, instant: datetime | None = None) -> QuotaStatus:
        """Today's quota usage for a player."""
        state = self.database.get_player(player_id)
        return self.engine.quota_status(state, instant or datetime.now(timezone.utc))


__all__ = [
    "RecordedAction",
    "ProgressionService",
]

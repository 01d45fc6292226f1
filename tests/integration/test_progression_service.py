"""Integration tests for the SQLite-backed progression service."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

from nutrigotchi.core.config import Settings
from nutrigotchi.core.exceptions import (
    DuplicateActionError,
    InvalidInputError,
    LedgerEntryNotFoundError,
    PlayerNotFoundError,
)
from nutrigotchi.models.enums import MessageKind
from nutrigotchi.models.player import create_player_state
from nutrigotchi.service import ProgressionService
from nutrigotchi.storage.database import Database


Noon = Callable[[date], datetime]


@pytest.fixture
def database(tmp_path: Path) -> Database:
    """Provide a fresh database file."""
    return Database(tmp_path / "nutrigotchi.db")


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Provide default settings isolated from any local .env."""
    monkeypatch.chdir(tmp_path)
    return Settings()


@pytest.fixture
def service(settings: Settings, database: Database) -> ProgressionService:
    """Provide a service over the temporary database."""
    return ProgressionService(settings, database=database)


class TestPlayers:
    """Tests for player creation and lookup."""

    def test_create_and_get(self, service: ProgressionService) -> None:
        """Test a created player can be loaded."""
        player_id = service.create_player()

        state = service.get_player(player_id)

        assert state.level == 1
        assert state.health_points == 100

    def test_explicit_id(self, service: ProgressionService) -> None:
        """Test a caller-chosen id is kept."""
        assert service.create_player("user-7") == "user-7"
        assert service.get_player("user-7").wallet_balance == 0

    def test_missing_player(self, service: ProgressionService) -> None:
        """Test loading an unknown player raises PlayerNotFoundError."""
        with pytest.raises(PlayerNotFoundError):
            service.get_player("nobody")


class TestRecordAction:
    """Tests for recording actions."""

    def test_persists_state_and_ledger(self, service: ProgressionService, noon: Noon, today: date) -> None:
        """Test one action updates the snapshot and appends a ledger row."""
        player_id = service.create_player()

        entry, receipt = service.record_action(
            player_id,
            category="tier2",
            source_ref="recipe-1",
            occurred_at=noon(today),
            savings=8000,
        )

        state = service.get_player(player_id)
        assert state.wallet_balance == 25
        assert state.current_xp == 35
        assert state.total_savings_accrued == 8000
        assert state.streak_days == 1
        assert receipt.message_kind is MessageKind.SUCCESS

        ledger = service.ledger_for(player_id)
        assert [row.entry_id for row in ledger] == [entry.entry_id]
        assert ledger[0].occurred_at == noon(today)
        assert ledger[0].savings_earned == 8000

    def test_meal_log(self, service: ProgressionService, noon: Noon, today: date) -> None:
        """Test a logged meal is paid and recorded like a cooked recipe."""
        player_id = service.create_player()
        service.record_action(player_id, category="tier1", source_ref="recipe-1", occurred_at=noon(today))

        entry, receipt = service.record_action(
            player_id,
            category="meal_b",
            source_ref="food-log-1",
            occurred_at=noon(today) + timedelta(hours=1),
        )

        state = service.get_player(player_id)
        assert receipt.gold_earned == 25
        assert receipt.xp_earned == 20
        assert state.wallet_balance == 15 + 25
        assert state.current_xp == 25 + 20
        assert state.daily_action_count == 2
        assert entry.category == "meal_b"
        assert service.ledger_for(player_id)[0].source_ref == "food-log-1"

    def test_zero_reward_actions_are_logged(self, service: ProgressionService, noon: Noon, today: date) -> None:
        """Test actions past the daily limit still get a ledger row."""
        player_id = service.create_player()

        receipts = [
            service.record_action(
                player_id,
                category="tier1",
                source_ref=f"recipe-{i}",
                occurred_at=noon(today) + timedelta(minutes=i),
            ).receipt
            for i in range(6)
        ]

        assert receipts[-1].hit_daily_limit is True
        assert receipts[-1].gold_earned == 0
        assert service.get_player(player_id).wallet_balance == 5 * 15
        assert len(service.ledger_for(player_id)) == 6
        assert service.quota_status(player_id, noon(today)).reached is True

    def test_ledger_newest_first_with_limit(self, service: ProgressionService, noon: Noon, today: date) -> None:
        """Test ledger ordering and limit."""
        player_id = service.create_player()
        for i in range(3):
            service.record_action(
                player_id,
                category="tier1",
                source_ref=f"recipe-{i}",
                occurred_at=noon(today) + timedelta(hours=i),
            )

        ledger = service.ledger_for(player_id, limit=2)

        assert [row.source_ref for row in ledger] == ["recipe-2", "recipe-1"]

    def test_invalid_category_rolls_back(self, service: ProgressionService, noon: Noon, today: date) -> None:
        """Test a rejected action leaves no trace."""
        player_id = service.create_player()

        with pytest.raises(InvalidInputError):
            service.record_action(player_id, category="tier9", source_ref="r", occurred_at=noon(today))

        assert service.get_player(player_id).wallet_balance == 0
        assert service.ledger_for(player_id) == []

    def test_naive_timestamp_rejected(self, service: ProgressionService) -> None:
        """Test naive timestamps are refused before touching storage."""
        player_id = service.create_player()

        with pytest.raises(InvalidInputError):
            service.record_action(
                player_id,
                category="tier1",
                source_ref="r",
                occurred_at=datetime(2025, 3, 10, 12),
            )

    def test_unknown_player(self, service: ProgressionService, noon: Noon, today: date) -> None:
        """Test recording for an unknown player raises PlayerNotFoundError."""
        with pytest.raises(PlayerNotFoundError):
            service.record_action("nobody", category="tier1", source_ref="r", occurred_at=noon(today))

    def test_repeat_source_allowed_by_default(self, service: ProgressionService, noon: Noon, today: date) -> None:
        """Test re-cooking the same recipe pays again."""
        player_id = service.create_player()

        service.record_action(player_id, category="tier1", source_ref="recipe-1", occurred_at=noon(today))
        service.record_action(player_id, category="tier1", source_ref="recipe-1", occurred_at=noon(today))

        assert service.get_player(player_id).wallet_balance == 30

    def test_duplicate_rejection(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        database: Database,
        noon: Noon,
        today: date,
    ) -> None:
        """Test duplicate sources are refused when switched on."""
        monkeypatch.chdir(tmp_path)
        service = ProgressionService(Settings(reject_duplicate_actions=True), database=database)
        player_id = service.create_player()
        service.record_action(player_id, category="tier1", source_ref="recipe-1", occurred_at=noon(today))

        with pytest.raises(DuplicateActionError) as exc_info:
            service.record_action(player_id, category="tier1", source_ref="recipe-1", occurred_at=noon(today))

        assert exc_info.value.details["source_ref"] == "recipe-1"
        assert service.get_player(player_id).wallet_balance == 15

    def test_rules_from_settings(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        database: Database,
        noon: Noon,
        today: date,
    ) -> None:
        """Test the engine is built from the configured rules."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("NUTRIGOTCHI_RULES_DAILY_LIMIT", "1")
        service = ProgressionService(Settings(), database=database)
        player_id = service.create_player()

        service.record_action(player_id, category="tier1", source_ref="a", occurred_at=noon(today))
        second = service.record_action(player_id, category="tier1", source_ref="b", occurred_at=noon(today))

        assert second.receipt.hit_daily_limit is True


class TestUndoAction:
    """Tests for undoing actions."""

    def test_undo_takes_back_rewards(self, service: ProgressionService, noon: Noon, today: date) -> None:
        """Test undo subtracts rewards and removes the ledger row."""
        player_id = service.create_player()
        first = service.record_action(player_id, category="tier1", source_ref="a", occurred_at=noon(today))
        service.record_action(player_id, category="tier2", source_ref="b", occurred_at=noon(today))

        receipt = service.undo_action(player_id, first.entry.entry_id)

        state = service.get_player(player_id)
        assert receipt.gold_subtracted == 15
        assert state.wallet_balance == 25
        assert state.current_xp == 35
        assert [row.source_ref for row in service.ledger_for(player_id)] == ["b"]

    def test_undo_unknown_entry(self, service: ProgressionService) -> None:
        """Test undoing a missing entry raises LedgerEntryNotFoundError."""
        player_id = service.create_player()

        with pytest.raises(LedgerEntryNotFoundError):
            service.undo_action(player_id, "missing")

    def test_undo_other_players_entry(self, service: ProgressionService, noon: Noon, today: date) -> None:
        """Test an entry cannot be undone through another player."""
        owner = service.create_player()
        other = service.create_player()
        recorded = service.record_action(owner, category="tier1", source_ref="a", occurred_at=noon(today))

        with pytest.raises(LedgerEntryNotFoundError):
            service.undo_action(other, recorded.entry.entry_id)

        assert len(service.ledger_for(owner)) == 1


class TestQueries:
    """Tests for read-only queries."""

    def test_activity_dates(self, service: ProgressionService, noon: Noon, today: date) -> None:
        """Test distinct active days are returned in order."""
        player_id = service.create_player()
        for offset in (0, 0, 1, 3):
            day = today + timedelta(days=offset)
            service.record_action(player_id, category="tier1", source_ref=f"r{offset}", occurred_at=noon(day))

        dates = service.activity_dates(player_id, today, today + timedelta(days=2))

        assert dates == [today, today + timedelta(days=1)]

    def test_quota_status_next_day(self, service: ProgressionService, noon: Noon, today: date) -> None:
        """Test the quota reads as fresh on a new day."""
        player_id = service.create_player()
        service.record_action(player_id, category="tier1", source_ref="a", occurred_at=noon(today))

        assert service.quota_status(player_id, noon(today)).used == 1
        assert service.quota_status(player_id, noon(today + timedelta(days=1))).used == 0


class TestDatabase:
    """Tests for the storage layer itself."""

    def test_schema_idempotent(self, tmp_path: Path) -> None:
        """Test opening the same file twice keeps its data."""
        path = tmp_path / "db" / "nutrigotchi.db"
        first = Database(path)
        player_id = first.create_player(create_player_state(wallet_balance=9))

        second = Database(path)

        assert second.get_player(player_id).wallet_balance == 9

    def test_transaction_rollback(self, database: Database) -> None:
        """Test an exception inside a transaction discards its writes."""
        player_id = database.create_player(create_player_state())

        with pytest.raises(RuntimeError), database.transaction() as tx:
            tx.save_player(player_id, create_player_state(wallet_balance=500))
            raise RuntimeError("boom")

        assert database.get_player(player_id).wallet_balance == 0

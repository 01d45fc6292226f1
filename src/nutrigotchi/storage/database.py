"""SQLite persistence for player snapshots and the reward ledger.

Provides storage for:
- Player snapshots (one row per player, replaced on every transition)
- Ledger rows (one immutable row per action, including zero-reward ones)

Writes for one action happen inside a single ``BEGIN IMMEDIATE``
transaction. SQLite grants one writer at a time, so at most one
transition per player is ever in flight, and a failure anywhere rolls the
whole action back.
"""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any
from uuid import uuid4

from nutrigotchi.core.exceptions import (
    LedgerEntryNotFoundError,
    PlayerNotFoundError,
    StorageError,
)
from nutrigotchi.core.logging import get_logger
from nutrigotchi.models.enums import MessageKind
from nutrigotchi.models.player import LedgerEntry, PlayerState


logger = get_logger(__name__)


_LEDGER_COLUMNS = """
    id, player_id, source_ref, category, occurred_at, action_date,
    gold_earned, xp_earned, savings_earned, streak_days,
    hit_daily_limit, revived_from_faint, message_kind
"""


def _ledger_from_row(row: sqlite3.Row) -> LedgerEntry:
    """Create a ledger entry from a database row."""
    return LedgerEntry(
        entry_id=row["id"],
        player_id=row["player_id"],
        source_ref=row["source_ref"],
        category=row["category"],
        occurred_at=datetime.fromisoformat(row["occurred_at"]),
        action_date=date.fromisoformat(row["action_date"]),
        gold_earned=row["gold_earned"],
        xp_earned=row["xp_earned"],
        savings_earned=row["savings_earned"],
        streak_days=row["streak_days"],
        hit_daily_limit=bool(row["hit_daily_limit"]),
        revived_from_faint=bool(row["revived_from_faint"]),
        message_kind=MessageKind(row["message_kind"]),
    )


# =============================================================================
# Transaction
# =============================================================================


class PlayerTransaction:
    """Reads and writes bound to one open write transaction.

    Obtained from ``Database.transaction()``; every call runs on the same
    connection and commits or rolls back together.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def load_player(self, player_id: str) -> PlayerState:
        """Load a player snapshot.

        Raises:
            PlayerNotFoundError: If the player does not exist.
            InvalidInputError: If the stored snapshot is corrupt.
        """
        row = self._conn.execute(
            "SELECT state_json FROM players WHERE id = ?", (player_id,)
        ).fetchone()
        if row is None:
            raise PlayerNotFoundError("Player not found", player_id=player_id)
        return PlayerState.from_record(json.loads(row["state_json"]))

    def insert_player(self, player_id: str, state: PlayerState) -> None:
        now = datetime.now(timezone.utc).isoformat()
        self._conn.execute(
            """
            INSERT INTO players (id, state_json, created_at, updated_at)
            VALUES (?, ?, ?, ?)
            """,
            (player_id, state.model_dump_json(), now, now),
        )

    def save_player(self, player_id: str, state: PlayerState) -> None:
        """Replace a player's snapshot.

        Raises:
            PlayerNotFoundError: If the player does not exist.
        """
        cursor = self._conn.execute(
            "UPDATE players SET state_json = ?, updated_at = ? WHERE id = ?",
            (state.model_dump_json(), datetime.now(timezone.utc).isoformat(), player_id),
        )
        if cursor.rowcount == 0:
            raise PlayerNotFoundError("Player not found", player_id=player_id)

    def append_ledger(self, entry: LedgerEntry) -> None:
        self._conn.execute(
            f"""
            INSERT INTO ledger ({_LEDGER_COLUMNS}, recorded_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                entry.entry_id,
                entry.player_id,
                entry.source_ref,
                entry.category,
                entry.occurred_at.astimezone(timezone.utc).isoformat(),
                entry.action_date.isoformat(),
                entry.gold_earned,
                entry.xp_earned,
                entry.savings_earned,
                entry.streak_days,
                int(entry.hit_daily_limit),
                int(entry.revived_from_faint),
                entry.message_kind.value,
                datetime.now(timezone.utc).isoformat(),
            ),
        )

    def get_ledger_entry(self, entry_id: str, *, player_id: str | None = None) -> LedgerEntry:
        """Fetch one ledger row, optionally scoped to a player.

        Raises:
            LedgerEntryNotFoundError: If it does not exist.
        """
        query = f"SELECT {_LEDGER_COLUMNS} FROM ledger WHERE id = ?"
        params: tuple[Any, ...] = (entry_id,)
        if player_id is not None:
            query += " AND player_id = ?"
            params = (entry_id, player_id)

        row = self._conn.execute(query, params).fetchone()
        if row is None:
            raise LedgerEntryNotFoundError("Ledger entry not found", entry_id=entry_id)
        return _ledger_from_row(row)

    def delete_ledger_entry(self, entry_id: str) -> None:
        self._conn.execute("DELETE FROM ledger WHERE id = ?", (entry_id,))

    def has_source_ref(self, player_id: str, source_ref: str) -> bool:
        row = self._conn.execute(
            "SELECT 1 FROM ledger WHERE player_id = ? AND source_ref = ? LIMIT 1",
            (player_id, source_ref),
        ).fetchone()
        return row is not None


# =============================================================================
# Database Class
# =============================================================================


class Database:
    """SQLite database for NutriGotchi persistence.

    Database location defaults to the configured ``database_path``.
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: str | Path, *, busy_timeout_seconds: float = 5.0) -> None:
        """Initialize database.

        Args:
            db_path: Path to the database file.
            busy_timeout_seconds: How long to wait for the write lock.
        """
        self.db_path = Path(db_path)
        self.busy_timeout_seconds = busy_timeout_seconds

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

        logger.info("Database initialized", path=str(self.db_path))

    @contextmanager
    def _get_connection(self, *, immediate: bool = False) -> Generator[sqlite3.Connection, None, None]:
        """Open a connection inside an explicit transaction.

        Args:
            immediate: Take the write lock up front (``BEGIN IMMEDIATE``).

        Raises:
            StorageError: If SQLite reports an error.
        """
        try:
            conn = sqlite3.connect(
                str(self.db_path),
                timeout=self.busy_timeout_seconds,
                isolation_level=None,
            )
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open database: {exc}", details={"path": str(self.db_path)}) from exc

        conn.row_factory = sqlite3.Row
        try:
            conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
            yield conn
            conn.execute("COMMIT")
        except sqlite3.Error as exc:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise StorageError(f"Database operation failed: {exc}") from exc
        except Exception:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Initialize database schema."""
        with self._get_connection(immediate=True) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS players (
                    id TEXT PRIMARY KEY,
                    state_json TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS ledger (
                    id TEXT PRIMARY KEY,
                    player_id TEXT NOT NULL REFERENCES players(id),
                    source_ref TEXT NOT NULL,
                    category TEXT NOT NULL,
                    occurred_at TEXT NOT NULL,
                    action_date TEXT NOT NULL,
                    gold_earned INTEGER NOT NULL,
                    xp_earned INTEGER NOT NULL,
                    savings_earned INTEGER NOT NULL,
                    streak_days INTEGER NOT NULL,
                    hit_daily_limit INTEGER NOT NULL,
                    revived_from_faint INTEGER NOT NULL,
                    message_kind TEXT NOT NULL,
                    recorded_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_ledger_player_date
                ON ledger(player_id, action_date)
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_ledger_player_source
                ON ledger(player_id, source_ref)
            """)

            conn.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (self.SCHEMA_VERSION,),
            )

    @contextmanager
    def transaction(self) -> Generator[PlayerTransaction, None, None]:
        """Open a write transaction holding the database write lock.

        Example:
            >>> with db.transaction() as tx:
            ...     state = tx.load_player("p-1")
            ...     tx.save_player("p-1", state)
        """
        with self._get_connection(immediate=True) as conn:
            yield PlayerTransaction(conn)

    # =========================================================================
    # Player Operations
    # =========================================================================

    def create_player(self, state: PlayerState, player_id: str | None = None) -> str:
        """Insert a new player.

        Args:
            state: Initial snapshot.
            player_id: Id to use; generated when omitted.

        Returns:
            The player id.
        """
        player_id = player_id or uuid4().hex
        with self.transaction() as tx:
            tx.insert_player(player_id, state)

        logger.info("Created player", player_id=player_id)
        return player_id

    def get_player(self, player_id: str) -> PlayerState:
        """Load a player snapshot.

        Raises:
            PlayerNotFoundError: If the player does not exist.
        """
        with self._get_connection() as conn:
            return PlayerTransaction(conn).load_player(player_id)

    # =========================================================================
    # Ledger Operations
    # =========================================================================

    def get_ledger(self, player_id: str, *, limit: int | None = None) -> list[LedgerEntry]:
        """Ledger rows of a player, newest first."""
        query = f"""
            SELECT {_LEDGER_COLUMNS} FROM ledger
            WHERE player_id = ? ORDER BY occurred_at DESC, recorded_at DESC
        """
        params: tuple[Any, ...] = (player_id,)
        if limit is not None:
            query += " LIMIT ?"
            params = (player_id, limit)

        with self._get_connection() as conn:
            return [_ledger_from_row(row) for row in conn.execute(query, params).fetchall()]

    def get_activity_dates(self, player_id: str, start: date, end: date) -> list[date]:
        """Distinct civil dates with at least one ledger row, inclusive range."""
        with self._get_connection() as conn:
            rows = conn.execute(
                """
                SELECT DISTINCT action_date FROM ledger
                WHERE player_id = ? AND action_date BETWEEN ? AND ?
                ORDER BY action_date
                """,
                (player_id, start.isoformat(), end.isoformat()),
            ).fetchall()
        return [date.fromisoformat(row["action_date"]) for row in rows]


# =============================================================================
# Singleton Instance
# =============================================================================


_database_instance: Database | None = None


def get_database() -> Database:
    """Get the global database instance built from settings."""
    global _database_instance

    if _database_instance is None:
        from nutrigotchi.core.config import get_settings

        storage = get_settings().storage
        _database_instance = Database(
            storage.database_path,
            busy_timeout_seconds=storage.busy_timeout_seconds,
        )

    return _database_instance


def reset_database() -> None:
    """Drop the cached global instance (for tests and reconfiguration)."""
    global _database_instance
    _database_instance = None


__all__ = [
    "Database",
    "PlayerTransaction",
    "get_database",
    "reset_database",
]

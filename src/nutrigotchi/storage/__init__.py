"""Storage module for NutriGotchi persistence.

Provides SQLite-based storage for:
- Player snapshots
- The per-action reward ledger
"""

from nutrigotchi.storage.database import (
    Database,
    PlayerTransaction,
    get_database,
    reset_database,
)

__all__ = [
    "Database",
    "PlayerTransaction",
    "get_database",
    "reset_database",
]

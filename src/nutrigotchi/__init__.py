"""NutriGotchi - player progression engine for a cooking companion pet.

Turns each cooked recipe into gold, experience, health and streak progress
for the player's virtual pet.

ARCHITECTURE:
- The engine is a pure function of (PlayerState, ActionEvent)
- All time comparisons happen on one civil calendar (Asia/Jakarta by default)
- Persistence and per-player serialization live in the service layer

Example:
    >>> from nutrigotchi import ProgressionService
    >>>
    >>> service = ProgressionService()
    >>> player_id = service.create_player()
    >>> recorded = service.record_action(player_id, category="tier2", source_ref="recipe-42")
    >>> print(recorded.receipt.message)
"""

from __future__ import annotations

from nutrigotchi.core.config import Settings, get_settings
from nutrigotchi.core.exceptions import (
    ConfigurationError,
    InvalidInputError,
    NutrigotchiError,
    StorageError,
)
from nutrigotchi.engine.config import ProgressionConfig
from nutrigotchi.engine.orchestrator import ProgressionEngine, Transition
from nutrigotchi.models.enums import MessageKind, Mood
from nutrigotchi.models.player import (
    ActionEvent,
    LedgerEntry,
    PlayerState,
    ReversalReceipt,
    RewardReceipt,
    create_player_state,
)
from nutrigotchi.service import ProgressionService


__version__ = "0.1.0"
__author__ = "NutriGotchi Team"

__all__ = [
    "__version__",
    "__author__",
    # Configuration
    "Settings",
    "get_settings",
    # Exceptions
    "NutrigotchiError",
    "InvalidInputError",
    "ConfigurationError",
    "StorageError",
    # Models
    "Mood",
    "MessageKind",
    "PlayerState",
    "ActionEvent",
    "RewardReceipt",
    "LedgerEntry",
    "ReversalReceipt",
    "create_player_state",
    # Engine
    "ProgressionConfig",
    "ProgressionEngine",
    "Transition",
    # Service
    "ProgressionService",
]

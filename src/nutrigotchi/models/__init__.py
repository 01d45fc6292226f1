"""Pydantic models for player snapshots, actions and receipts."""

from __future__ import annotations

from nutrigotchi.models.enums import DayRelation, MessageKind, Mood
from nutrigotchi.models.player import (
    ActionEvent,
    LedgerEntry,
    PlayerState,
    ReversalReceipt,
    RewardReceipt,
    create_player_state,
)


__all__ = [
    "Mood",
    "DayRelation",
    "MessageKind",
    "PlayerState",
    "ActionEvent",
    "RewardReceipt",
    "LedgerEntry",
    "ReversalReceipt",
    "create_player_state",
]

"""Undoing a recorded action.

Deleting a cook from the history takes back what it paid: gold, XP and
savings are subtracted from the current balances, each clamped at zero.
Streak, quota, faint status and level are left as they are; an undone
level-up keeps its level.
"""

from __future__ import annotations

from nutrigotchi.engine.messages import UNDO_TEMPLATE
from nutrigotchi.models.player import LedgerEntry, PlayerState, ReversalReceipt


def reverse_entry(state: PlayerState, entry: LedgerEntry) -> tuple[PlayerState, ReversalReceipt]:
    """Subtract a ledger entry's rewards from a snapshot.

    Args:
        state: Current player snapshot.
        entry: The ledger row being undone.

    Returns:
        The new snapshot and a receipt of what was actually subtracted.
    """
    new_wallet = max(0, state.wallet_balance - entry.gold_earned)
    new_xp = max(0, state.current_xp - entry.xp_earned)
    new_savings = max(0, state.total_savings_accrued - entry.savings_earned)

    gold_subtracted = state.wallet_balance - new_wallet
    xp_subtracted = state.current_xp - new_xp
    savings_subtracted = state.total_savings_accrued - new_savings

    new_state = state.evolve(
        wallet_balance=new_wallet,
        current_xp=new_xp,
        total_savings_accrued=new_savings,
    )
    receipt = ReversalReceipt(
        entry_id=entry.entry_id,
        gold_subtracted=gold_subtracted,
        xp_subtracted=xp_subtracted,
        savings_subtracted=savings_subtracted,
        new_wallet_balance=new_wallet,
        new_xp=new_xp,
        new_total_savings=new_savings,
        message=UNDO_TEMPLATE.format(gold=gold_subtracted, xp=xp_subtracted, savings=savings_subtracted),
    )
    return new_state, receipt


__all__ = ["reverse_entry"]

"""Faint and revival state machine.

A pet faints when its health reaches zero; that happens outside the
engine. While fainted, every action counts towards revival and earns
nothing. The action that brings the count to exactly the threshold wakes
the pet up; the revival turn itself still pays nothing.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FaintOutcome:
    """Faint status after an action.

    Attributes:
        was_fainted: Whether the pet was fainted before the action.
        is_fainted: Whether the pet is still fainted afterwards.
        recovery_count: Recovery progress to persist.
        revived: Whether this action revived the pet.
    """

    was_fainted: bool
    is_fainted: bool
    recovery_count: int
    revived: bool

    @property
    def still_recovering(self) -> bool:
        return self.was_fainted and not self.revived


def advance_faint(is_fainted: bool, recovery_count: int, threshold: int) -> FaintOutcome:
    """Apply one action to the faint state.

    Args:
        is_fainted: Current faint flag.
        recovery_count: Actions already taken towards revival.
        threshold: Actions needed to revive.

    Returns:
        The FaintOutcome. Healthy pets pass through unchanged.
    """
    if not is_fainted:
        return FaintOutcome(
            was_fainted=False,
            is_fainted=False,
            recovery_count=recovery_count,
            revived=False,
        )

    count = recovery_count + 1
    if count == threshold:
        return FaintOutcome(was_fainted=True, is_fainted=False, recovery_count=0, revived=True)
    return FaintOutcome(was_fainted=True, is_fainted=True, recovery_count=count, revived=False)


__all__ = [
    "FaintOutcome",
    "advance_faint",
]

"""Custom exception hierarchy for the NutriGotchi progression engine.

All exceptions inherit from NutrigotchiError so callers can catch every
application error at the boundary while keeping the domain context in
``details``.

Business situations such as an exhausted daily quota, a fainted pet or a
broken streak are never raised. They are reported as data on the
RewardReceipt. Only malformed input, bad configuration and storage
problems end up here.

Example:
    >>> from nutrigotchi.core.exceptions import InvalidInputError
    >>> raise InvalidInputError("Unknown reward category", field="category")
"""

from __future__ import annotations

from typing import Any


class NutrigotchiError(Exception):
    """Base exception for all NutriGotchi errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Progression Domain Exceptions
# =============================================================================


class ProgressionError(NutrigotchiError):
    """Base exception for errors raised by the progression engine."""


class InvalidInputError(ProgressionError):
    """Raised when a player snapshot or action event is malformed.

    Callers must treat this as a programming error: log it and reject the
    request. The engine never coerces bad input into a valid state.
    """

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid input error with field context.

        Args:
            message: Human-readable error description.
            field: Name of the offending field, if known.
            value: The rejected value.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field:
            combined_details["field"] = field
        if value is not None:
            combined_details["value"] = value
        super().__init__(message, details=combined_details)


# =============================================================================
# Storage Domain Exceptions
# =============================================================================


class StorageError(NutrigotchiError):
    """Base exception for persistence failures.

    Write conflicts and connectivity problems belong to the caller; the
    engine itself performs no I/O.
    """


class PlayerNotFoundError(StorageError):
    """Raised when no player row exists for the requested id."""

    def __init__(
        self,
        message: str,
        *,
        player_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if player_id:
            combined_details["player_id"] = player_id
        super().__init__(message, details=combined_details)


class LedgerEntryNotFoundError(StorageError):
    """Raised when a ledger entry to undo does not exist."""

    def __init__(
        self,
        message: str,
        *,
        entry_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if entry_id:
            combined_details["entry_id"] = entry_id
        super().__init__(message, details=combined_details)


class DuplicateActionError(StorageError):
    """Raised when an action's source reference was already rewarded.

    Only raised when duplicate rejection is switched on in the settings.
    """

    def __init__(
        self,
        message: str,
        *,
        source_ref: str | None = None,
        player_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if source_ref:
            combined_details["source_ref"] = source_ref
        if player_id:
            combined_details["player_id"] = player_id
        super().__init__(message, details=combined_details)


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(NutrigotchiError):
    """Raised when application or rule configuration is invalid.

    This includes unknown timezones, non-ascending streak tiers and
    experience curves that return non-positive thresholds.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


__all__ = [
    "NutrigotchiError",
    "ProgressionError",
    "InvalidInputError",
    "StorageError",
    "PlayerNotFoundError",
    "LedgerEntryNotFoundError",
    "DuplicateActionError",
    "ConfigurationError",
]

"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        NutrigotchiError: Base exception for all application errors.
        InvalidInputError: Malformed player snapshot or action event.
        ConfigurationError: Configuration-related errors.
        StorageError: Persistence failures.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from nutrigotchi.core.config import (
    RuleSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from nutrigotchi.core.exceptions import (
    ConfigurationError,
    DuplicateActionError,
    InvalidInputError,
    LedgerEntryNotFoundError,
    NutrigotchiError,
    PlayerNotFoundError,
    ProgressionError,
    StorageError,
)
from nutrigotchi.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "NutrigotchiError",
    "ProgressionError",
    "InvalidInputError",
    "StorageError",
    "PlayerNotFoundError",
    "LedgerEntryNotFoundError",
    "DuplicateActionError",
    "ConfigurationError",
    # Configuration
    "RuleSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]

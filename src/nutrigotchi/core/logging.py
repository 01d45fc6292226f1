"""Structured logging for NutriGotchi.

Every transition logs through structlog. Console rendering is the default;
set ``NUTRIGOTCHI_JSON_LOGS=true`` to emit one JSON object per line.

Example:
    >>> from nutrigotchi.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Action recorded", player_id="p-1", gold_earned=25)
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger


def app_context(app_name: str, app_version: str | None) -> Processor:
    """Build a processor tagging every entry with the application."""

    def add_app_context(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("app", app_name)
        if app_version:
            event_dict.setdefault("version", app_version)
        return event_dict

    return add_app_context


def format_dates(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Render civil dates and instants as ISO strings.

    Quota days, streak dates and action timestamps are logged as values;
    without this JSON output would fall back to their repr.
    """
    for key, value in event_dict.items():
        if isinstance(value, date):
            event_dict[key] = value.isoformat()
    return event_dict


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    app_name: str = "nutrigotchi",
    app_version: str | None = None,
) -> None:
    """Configure structlog for the whole process.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Emit JSON lines instead of console output.
        app_name: Value of the ``app`` field on every entry.
        app_version: Value of the ``version`` field, omitted when None.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        app_context(app_name, app_version),
        format_dates,
    ]
    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger, typically with ``__name__``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind fields to every entry logged until ``clear_context``.

    Example:
        >>> bind_context(player_id="p-1", source_ref="recipe-42")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop all bound fields; called once an action is finished."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]

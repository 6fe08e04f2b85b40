"""Structured logging for the Pathfinder rules engine.

Engine modules never configure logging on import. They obtain loggers
through get_logger and emit key/value events. The embedding application
calls configure_logging once, usually with no arguments so the level and
renderer come from Settings (``PF_ENGINE_LOG_LEVEL``, ``PF_ENGINE_JSON_LOGS``,
``PF_ENGINE_DEBUG``).

Per-calculation fields such as the character id are bound with
bound_context. structlog keeps them in context variables, so every event
emitted inside the block carries them, and worker threads in a batch each
see only their own character.

Example:
    >>> from pathfinder_engine.core.logging import bound_context, get_logger
    >>> logger = get_logger(__name__)
    >>> with bound_context(character_id="abc"):
    ...     logger.info("Hook finished", module="Free Archetype")
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor

from pathfinder_engine.core.config import Settings, get_settings


if TYPE_CHECKING:
    from collections.abc import Iterator

    from structlog.types import EventDict, WrappedLogger


APP_NAME = "pathfinder_engine"

_STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Stamp every event with the engine's package name."""
    event_dict["app"] = APP_NAME
    return event_dict


def resolve_log_level(settings: Settings) -> str:
    """Pick the effective level name; debug mode always wins."""
    return "DEBUG" if settings.debug else settings.log_level


def configure_logging(
    settings: Settings | None = None,
    *,
    level: str | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Configure structlog and the standard library root logger.

    Explicit arguments override the values taken from settings.

    Args:
        settings: Source of ``log_level``, ``debug`` and ``json_logs``;
            defaults to get_settings().
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Render JSON lines instead of console output.
        log_file: Also append plain-text records to this file.

    Example:
        >>> configure_logging(level="DEBUG", json_format=False)
    """
    settings = settings or get_settings()
    level_name = (level or resolve_log_level(settings)).upper()
    use_json = settings.json_logs if json_format is None else json_format
    numeric_level = getattr(logging, level_name, logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    renderer: Processor
    if use_json:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format=_STDLIB_FORMAT,
        level=numeric_level,
        stream=sys.stdout,
        force=True,
    )
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(_STDLIB_FORMAT))
        logging.getLogger().addHandler(file_handler)

    get_logger(__name__).debug(
        "Logging configured",
        app_name=settings.app_name,
        level=level_name,
        json_logs=use_json,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structlog logger, typically named after the calling module."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind fields to every later event in the current context.

    Left in place until clear_context. Prefer bound_context for anything
    scoped to a single calculation.

    Example:
        >>> bind_context(campaign_id="c-42")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop every bound context field."""
    structlog.contextvars.clear_contextvars()


@contextmanager
def bound_context(**kwargs: Any) -> Iterator[None]:
    """Bind fields for the duration of a block, restoring prior values after."""
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield


__all__ = [
    "APP_NAME",
    "add_app_context",
    "configure_logging",
    "resolve_log_level",
    "get_logger",
    "bind_context",
    "clear_context",
    "bound_context",
]

"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        PathfinderEngineError: Base exception for all engine errors.
        ConfigurationError: Configuration-related errors.
        ValidationError: Malformed input errors.
        CalculationError, InvalidCharacterError, RuleModuleError:
            Calculation failures.
        CatalogueError, FeatNotFoundError: Reference-data lookup failures.

    Configuration:
        Settings: Main settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
        bound_context: Scope context fields to a block.
"""

from __future__ import annotations

from pathfinder_engine.core.config import (
    EngineSettings,
    Settings,
    ValidationSettings,
    clear_settings_cache,
    get_settings,
)
from pathfinder_engine.core.exceptions import (
    CalculationError,
    CatalogueError,
    ConfigurationError,
    FeatNotFoundError,
    InvalidCharacterError,
    PathfinderEngineError,
    RuleModuleError,
    ValidationError,
)
from pathfinder_engine.core.logging import (
    bind_context,
    bound_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "PathfinderEngineError",
    "ConfigurationError",
    "ValidationError",
    "CalculationError",
    "InvalidCharacterError",
    "RuleModuleError",
    "CatalogueError",
    "FeatNotFoundError",
    # Configuration
    "Settings",
    "EngineSettings",
    "ValidationSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "bound_context",
    "clear_context",
]

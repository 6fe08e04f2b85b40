"""Configuration management for the Pathfinder rules engine.

Centralized configuration using pydantic-settings, supporting environment
variables, .env files, and runtime overrides. Engine components accept an
explicit Settings instance and fall back to the cached get_settings().

Example:
    >>> from pathfinder_engine.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.engine.slow_module_threshold_ms
    50.0

Environment Variables:
    PF_ENGINE_LOG_LEVEL: Default level for configure_logging()
    PF_ENGINE_DEBUG: Force DEBUG logging regardless of PF_ENGINE_LOG_LEVEL
    PF_ENGINE_JSON_LOGS: Make configure_logging() emit JSON lines
    PF_ENGINE_ENGINE_SLOW_MODULE_THRESHOLD_MS: Slow rule-module warning threshold
    PF_ENGINE_ENGINE_BATCH_MAX_WORKERS: Worker threads for batch calculations
    PF_ENGINE_VALIDATION_AC_LOW_MARGIN: Allowed AC shortfall before a suggestion
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pathfinder_engine.core.constants import DEFAULT_SPEED
from pathfinder_engine.core.exceptions import ConfigurationError


class EngineSettings(BaseSettings):
    """Configuration for the calculation pipeline.

    Attributes:
        slow_module_threshold_ms: Hook duration above which a rule module
            is logged as slow.
        default_base_speed: Land speed used when the ancestry is unknown.
        batch_max_workers: Worker threads used by batch calculations.
    """

    model_config = SettingsConfigDict(
        env_prefix="PF_ENGINE_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    slow_module_threshold_ms: float = Field(
        default=50.0,
        gt=0,
        description="Slow rule-module warning threshold in milliseconds",
    )
    default_base_speed: int = Field(
        default=DEFAULT_SPEED,
        ge=0,
        description="Fallback land speed in feet",
    )
    batch_max_workers: int = Field(
        default=4,
        ge=1,
        le=64,
        description="Worker threads for batch calculations",
    )


class ValidationSettings(BaseSettings):
    """Configuration for the validation pass.

    Attributes:
        soft_min_ability_score: Level 1 scores below this produce a warning.
        soft_max_ability_score: Level 1 scores above this produce a warning.
        ac_low_margin: How far below the expected AC a character may fall
            before a suggestion is emitted.
        ac_high_margin: How far above the expected AC a character may rise
            before a plausibility warning is emitted.
    """

    model_config = SettingsConfigDict(
        env_prefix="PF_ENGINE_VALIDATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    soft_min_ability_score: int = Field(default=8, ge=1, le=30)
    soft_max_ability_score: int = Field(default=18, ge=1, le=30)
    ac_low_margin: int = Field(default=5, ge=0, le=30)
    ac_high_margin: int = Field(default=15, ge=0, le=50)

    @model_validator(mode="after")
    def validate_soft_bounds(self) -> "ValidationSettings":
        """Ensure the soft ability band is not empty.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If soft_min_ability_score >= soft_max_ability_score.
        """
        if self.soft_min_ability_score >= self.soft_max_ability_score:
            raise ConfigurationError(
                f"soft_min_ability_score ({self.soft_min_ability_score}) must be less "
                f"than soft_max_ability_score ({self.soft_max_ability_score})",
                config_key="soft_min_ability_score",
            )
        return self


class Settings(BaseSettings):
    """Main settings aggregating all configuration domains.

    Attributes:
        app_name: Name reported when logging is configured.
        debug: Force DEBUG logging.
        log_level: Logging level.
        json_logs: Emit JSON log lines.
        engine: Calculation pipeline settings.
        validation: Validation pass settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="PF_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Pathfinder Rules Engine",
        description="Application name",
    )
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(default=False, description="Emit JSON log lines")

    engine: EngineSettings = Field(default_factory=EngineSettings)
    validation: ValidationSettings = Field(default_factory=ValidationSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the engine settings singleton.

    Returns:
        The cached Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load engine settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "EngineSettings",
    "ValidationSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]

"""Custom exception hierarchy for the Pathfinder rules engine.

All exceptions inherit from PathfinderEngineError, enabling unified error
handling at the embedding application's boundary while preserving
domain-specific context in the ``details`` mapping.

Expected rule outcomes (conflicting bonuses, missing dedications, illegal
scores) are never raised. They are reported as ValidationIssue records.
The exceptions here cover configuration problems, programmer errors and
catalogue lookups that the engine converts into issues at the call site.

Example:
    >>> from pathfinder_engine.core.exceptions import FeatNotFoundError
    >>> raise FeatNotFoundError("Feat not in catalogue", feat_id="power-attack")
"""

from __future__ import annotations

from typing import Any


class PathfinderEngineError(Exception):
    """Base exception for all rules engine errors.

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
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(PathfinderEngineError):
    """Raised when engine configuration is invalid.

    This includes missing required settings, invalid values, or
    incompatible configuration combinations.
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


class ValidationError(PathfinderEngineError):
    """Raised when input data cannot be interpreted at all.

    Distinct from ValidationIssue: an issue describes a rules problem with a
    well-formed character, this exception describes malformed input such as
    an unknown fix-action token.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


# =============================================================================
# Calculation Domain Exceptions
# =============================================================================


class CalculationError(PathfinderEngineError):
    """Base exception for failures inside a character calculation."""

    def __init__(
        self,
        message: str,
        *,
        character_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize calculation error with character context.

        Args:
            message: Human-readable error description.
            character_id: Identifier of the character being calculated.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if character_id:
            combined_details["character_id"] = character_id
        super().__init__(message, details=combined_details)


class InvalidCharacterError(CalculationError):
    """Raised when the engine is handed no character or no aggregate.

    This is a programmer error in the embedding application, not a rules
    problem, so it propagates instead of becoming a validation issue.
    """


class RuleModuleError(CalculationError):
    """Raised (or recorded) when a rule module fails during a hook phase."""

    def __init__(
        self,
        message: str,
        *,
        module_name: str | None = None,
        phase: str | None = None,
        character_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize rule module error with module context.

        Args:
            message: Human-readable error description.
            module_name: Name of the failing rule module.
            phase: Hook phase that was executing.
            character_id: Identifier of the character being calculated.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if module_name:
            combined_details["module_name"] = module_name
        if phase:
            combined_details["phase"] = phase
        super().__init__(message, character_id=character_id, details=combined_details)


# =============================================================================
# Reference Data Exceptions
# =============================================================================


class CatalogueError(PathfinderEngineError):
    """Base exception for reference-data (feat catalogue) failures."""


class FeatNotFoundError(CatalogueError):
    """Raised by a feat repository when a feat id is unknown."""

    def __init__(
        self,
        message: str,
        *,
        feat_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize feat lookup error.

        Args:
            message: Human-readable error description.
            feat_id: The feat id that could not be resolved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if feat_id:
            combined_details["feat_id"] = feat_id
        super().__init__(message, details=combined_details)


__all__ = [
    # Base exception
    "PathfinderEngineError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Calculation exceptions
    "CalculationError",
    "InvalidCharacterError",
    "RuleModuleError",
    # Reference data exceptions
    "CatalogueError",
    "FeatNotFoundError",
]

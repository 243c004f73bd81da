"""Custom exception hierarchy for Adversary Forge.

The conversion engine is built from total functions that fall back to
conservative defaults, so very little is ever raised. What is raised
inherits from AdversaryForgeError, which lets callers catch everything
from this package at one boundary while keeping domain context attached.

Example:
    >>> from adversary_forge.core.exceptions import ChallengeRatingError
    >>> raise ChallengeRatingError("Unparsable challenge rating", value="1/0")
"""

from __future__ import annotations

from typing import Any


class AdversaryForgeError(Exception):
    """Base exception for all Adversary Forge errors.

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
        """Return a detailed string representation of the exception.

        Returns:
            String representation suitable for debugging.
        """
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Conversion Domain Exceptions
# =============================================================================


class ConversionError(AdversaryForgeError):
    """Base exception for errors raised while converting a creature.

    Raised when a source creature record cannot be turned into an
    adversary at all, as opposed to the many recoverable cases where
    the engine simply falls back to a default.
    """

    def __init__(
        self,
        message: str,
        *,
        creature_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize conversion error with creature context.

        Args:
            message: Human-readable error description.
            creature_name: Name of the creature being converted.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if creature_name:
            combined_details["creature_name"] = creature_name
        super().__init__(message, details=combined_details)


class ChallengeRatingError(ConversionError):
    """Raised when a challenge rating cannot be parsed.

    Every numeric formula downstream (tier, thresholds, HP, Stress,
    Evasion) depends on the challenge rating, so a malformed value is
    surfaced instead of being coerced to a default.
    """

    def __init__(
        self,
        message: str,
        *,
        value: Any | None = None,
        creature_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize challenge rating error with the offending value.

        Args:
            message: Human-readable error description.
            value: The raw challenge rating that failed to parse.
            creature_name: Name of the creature being converted.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if value is not None:
            combined_details["value"] = value
        super().__init__(message, creature_name=creature_name, details=combined_details)


class ClassificationError(ConversionError):
    """Raised when classification input is unusable.

    The classifier itself never fails; this is reserved for callers that
    hand it something other than a source creature record.
    """


class FeatureConversionError(ConversionError):
    """Raised when a single ability cannot be compiled into a feature."""

    def __init__(
        self,
        message: str,
        *,
        ability_name: str | None = None,
        creature_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize feature conversion error with ability context.

        Args:
            message: Human-readable error description.
            ability_name: Name of the ability that failed to convert.
            creature_name: Name of the creature being converted.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if ability_name:
            combined_details["ability_name"] = ability_name
        super().__init__(message, creature_name=creature_name, details=combined_details)


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(AdversaryForgeError):
    """Raised when application configuration is invalid.

    This includes invalid values or incompatible configuration
    combinations such as a confidence floor above the base confidence.
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
    # Base exception
    "AdversaryForgeError",
    # Conversion exceptions
    "ConversionError",
    "ChallengeRatingError",
    "ClassificationError",
    "FeatureConversionError",
    # Configuration exceptions
    "ConfigurationError",
]

"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        AdversaryForgeError: Base exception for all application errors.
        ChallengeRatingError: Malformed challenge rating input.
        ConfigurationError: Configuration-related errors.

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

from adversary_forge.core.config import (
    ClassifierSettings,
    ConversionSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from adversary_forge.core.exceptions import (
    AdversaryForgeError,
    ChallengeRatingError,
    ClassificationError,
    ConfigurationError,
    ConversionError,
    FeatureConversionError,
)
from adversary_forge.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)


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
    # Configuration
    "Settings",
    "ConversionSettings",
    "ClassifierSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
]

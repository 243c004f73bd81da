"""Configuration management for Adversary Forge.

Settings are loaded with pydantic-settings from environment variables and
an optional ``.env`` file. The engine reads them once per conversion, so
tests can override behavior with environment variables followed by
:func:`clear_settings_cache`.

Example:
    >>> from adversary_forge.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.classifier.base_confidence
    0.5

Environment Variables:
    ADVERSARY_FORGE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    ADVERSARY_FORGE_LOG_JSON: Emit JSON logs instead of console output
    ADVERSARY_FORGE_CONVERSION_INCLUDE_SPELLCASTING: Compile spellcasting blocks
    ADVERSARY_FORGE_CONVERSION_MAX_DESCRIPTION_SENTENCES: Sentences kept per description
    ADVERSARY_FORGE_CLASSIFIER_BASE_CONFIDENCE: Confidence before any signal agrees
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from adversary_forge.core.exceptions import ConfigurationError


class ConversionSettings(BaseSettings):
    """Configuration for the conversion pipeline.

    Attributes:
        include_legendary_features: Compile legendary actions into reactions.
        include_spellcasting: Compile spellcasting blocks into features.
        deduplicate_features: Collapse features that share a name.
        default_attack_name: Name of the fallback attack for creatures without one.
        max_description_sentences: Sentences kept when simplifying descriptions.
    """

    model_config = SettingsConfigDict(
        env_prefix="ADVERSARY_FORGE_CONVERSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    include_legendary_features: bool = Field(
        default=True,
        description="Compile legendary actions into reaction features",
    )
    include_spellcasting: bool = Field(
        default=True,
        description="Compile spellcasting blocks into features",
    )
    deduplicate_features: bool = Field(
        default=True,
        description="Collapse features that share a name",
    )
    default_attack_name: str = Field(
        default="Strike",
        min_length=1,
        description="Fallback attack name",
    )
    max_description_sentences: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Sentences kept when simplifying descriptions",
    )


class ClassifierSettings(BaseSettings):
    """Configuration for archetype classification confidence.

    Attributes:
        base_confidence: Confidence assigned once an archetype is chosen.
        signal_increment: Confidence added per agreeing signal.
        confidence_floor: Confidence of the Standard fallback.
    """

    model_config = SettingsConfigDict(
        env_prefix="ADVERSARY_FORGE_CLASSIFIER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_confidence: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Confidence before any signal agrees",
    )
    signal_increment: float = Field(
        default=0.15,
        gt=0.0,
        le=0.5,
        description="Confidence added per agreeing signal",
    )
    confidence_floor: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Confidence of the Standard fallback",
    )

    @model_validator(mode="after")
    def validate_floor_below_base(self) -> "ClassifierSettings":
        """Ensure the fallback never outranks a real classification.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If confidence_floor > base_confidence.
        """
        if self.confidence_floor > self.base_confidence:
            raise ConfigurationError(
                f"confidence_floor ({self.confidence_floor}) must not exceed "
                f"base_confidence ({self.base_confidence})",
                config_key="confidence_floor",
            )
        return self


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        log_json: Emit JSON log lines.
        conversion: Conversion pipeline settings.
        classifier: Classifier confidence settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="ADVERSARY_FORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Adversary Forge",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Emit JSON log lines",
    )

    conversion: ConversionSettings = Field(default_factory=ConversionSettings)
    classifier: ClassifierSettings = Field(default_factory=ClassifierSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    Example:
        >>> clear_settings_cache()
        >>> settings = get_settings()  # Reloads from environment
    """
    get_settings.cache_clear()


__all__ = [
    "ConversionSettings",
    "ClassifierSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]

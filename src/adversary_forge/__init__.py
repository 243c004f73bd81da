"""Adversary Forge - D&D 5E to Daggerheart adversary conversion.

Converts structured D&D 5E creature records into Daggerheart adversary
stat blocks: archetype classification, core stat conversion, costed
features and folded multiattack and legendary abilities.

Example:
    >>> from adversary_forge import SourceCreature, convert
    >>>
    >>> goblin = SourceCreature.model_validate(goblin_data)
    >>> result = convert(goblin)
    >>> result.adversary.archetype
    <AdversaryType.MINION: 'Minion'>
    >>> for line in result.log:
    ...     print(line)

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 schemas for source creatures and adversaries.
    engine: Classification, stat conversion, feature compilation and folding.
"""

from __future__ import annotations

# Core
from adversary_forge.core.config import Settings, get_settings
from adversary_forge.core.exceptions import AdversaryForgeError, ChallengeRatingError
from adversary_forge.core.logging import configure_logging, get_logger

# Models
from adversary_forge.models import (
    Adversary,
    AdversaryType,
    Attack,
    CombatRole,
    ConvertedFeature,
    SourceCreature,
)

# Engine
from adversary_forge.engine import (
    AdversaryConverter,
    ConversionOptions,
    ConversionResult,
    classify,
    convert,
    validate_adversary,
)


__version__ = "0.1.0"
__author__ = "Adversary Forge Team"
__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Core
    "AdversaryForgeError",
    "ChallengeRatingError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "Adversary",
    "AdversaryType",
    "Attack",
    "CombatRole",
    "ConvertedFeature",
    "SourceCreature",
    # Engine
    "AdversaryConverter",
    "ConversionOptions",
    "ConversionResult",
    "classify",
    "convert",
    "validate_adversary",
]

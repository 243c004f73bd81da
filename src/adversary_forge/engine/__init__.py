"""Conversion engine for Adversary Forge.

Turns D&D 5E creature records into Daggerheart adversaries.

Submodules:
    patterns: Ordered rule tables and lookup maps shared by the engine
    challenge: Challenge rating parsing and tier reference tables
    classifier: Archetype and combat role classification
    stats: Tier, difficulty, thresholds, HP, Stress and Evasion
    attacks: Standard attack conversion
    abilities: Traits, actions, reactions and spellcasting to features
    multiattack: Multiattack and legendary action folding
    converter: The full pipeline
    quality: Post-conversion quality checks

Example:
    >>> from adversary_forge.engine import convert, validate_adversary
    >>>
    >>> result = convert(creature)
    >>> report = validate_adversary(result.adversary)
    >>> print(report.summary)
"""

from __future__ import annotations

# =============================================================================
# Challenge Rating
# =============================================================================
from adversary_forge.engine.challenge import (
    TIER_DEFAULTS,
    TierDefaults,
    TierInfo,
    cr_to_tier,
    format_challenge_rating,
    get_tier_info,
    get_tier_info_for_cr,
    parse_challenge_rating,
)

# =============================================================================
# Classification
# =============================================================================
from adversary_forge.engine.classifier import (
    ClassificationResult,
    ClassificationStats,
    classification_stats,
    classify,
    classify_many,
    determine_role,
)

# =============================================================================
# Core Stats
# =============================================================================
from adversary_forge.engine.stats import (
    StatValidation,
    calculate_stress,
    calculate_thresholds,
    convert_core_stats,
    convert_evasion,
    convert_hp,
    determine_difficulty,
    summarize_core_stats,
    validate_core_stats,
)

# =============================================================================
# Attacks & Features
# =============================================================================
from adversary_forge.engine.attacks import (
    convert_attack,
    convert_attacks,
    default_attack,
)
from adversary_forge.engine.abilities import (
    FeatureSummary,
    apply_fear_effect,
    compile_features,
    convert_action,
    convert_bonus_action,
    convert_legendary_action,
    convert_legendary_resistance,
    convert_reaction,
    convert_spellcasting,
    convert_trait,
    extract_damage,
    filter_by_kind,
    simplify_description,
    summarize_features,
    total_stress_cost,
)

# =============================================================================
# Folding
# =============================================================================
from adversary_forge.engine.multiattack import (
    AttackCounts,
    FoldResult,
    LegendaryResult,
    MultiattackResult,
    SpecializationReport,
    analyze_specializations,
    fold,
    fold_legendary,
    fold_multiattack,
    parse_multiattack_counts,
    select_primary_attack,
)

# =============================================================================
# Pipeline & Quality
# =============================================================================
from adversary_forge.engine.converter import (
    AdversaryConverter,
    ConversionOptions,
    ConversionResult,
    convert,
)
from adversary_forge.engine.quality import (
    IssueSeverity,
    QualityIssue,
    QualityReport,
    validate_adversary,
)


__all__ = [
    # Challenge rating
    "TIER_DEFAULTS",
    "TierDefaults",
    "TierInfo",
    "cr_to_tier",
    "format_challenge_rating",
    "get_tier_info",
    "get_tier_info_for_cr",
    "parse_challenge_rating",
    # Classification
    "ClassificationResult",
    "ClassificationStats",
    "classification_stats",
    "classify",
    "classify_many",
    "determine_role",
    # Core stats
    "StatValidation",
    "calculate_stress",
    "calculate_thresholds",
    "convert_core_stats",
    "convert_evasion",
    "convert_hp",
    "determine_difficulty",
    "summarize_core_stats",
    "validate_core_stats",
    # Attacks
    "convert_attack",
    "convert_attacks",
    "default_attack",
    # Features
    "FeatureSummary",
    "apply_fear_effect",
    "compile_features",
    "convert_action",
    "convert_bonus_action",
    "convert_legendary_action",
    "convert_legendary_resistance",
    "convert_reaction",
    "convert_spellcasting",
    "convert_trait",
    "extract_damage",
    "filter_by_kind",
    "simplify_description",
    "summarize_features",
    "total_stress_cost",
    # Folding
    "AttackCounts",
    "FoldResult",
    "LegendaryResult",
    "MultiattackResult",
    "SpecializationReport",
    "analyze_specializations",
    "fold",
    "fold_legendary",
    "fold_multiattack",
    "parse_multiattack_counts",
    "select_primary_attack",
    # Pipeline
    "AdversaryConverter",
    "ConversionOptions",
    "ConversionResult",
    "convert",
    # Quality
    "IssueSeverity",
    "QualityIssue",
    "QualityReport",
    "validate_adversary",
]

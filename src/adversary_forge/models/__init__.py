"""Data models for Adversary Forge.

Exports the enumerations, the D&D 5E source creature record and the
Daggerheart adversary records produced by the engine.
"""

from __future__ import annotations

from adversary_forge.models.adversary import (
    Adversary,
    Attack,
    ConvertedFeature,
    CoreStats,
    DamageExpression,
    DamageThresholds,
    Feature,
    FeatureCost,
    HordeTrait,
    Movement,
    stress_cost,
)
from adversary_forge.models.enums import (
    AbilityScore,
    AdversaryType,
    AreaShape,
    AttackType,
    Attribute,
    CombatRole,
    Condition,
    CreatureSize,
    CreatureType,
    DamageType,
    Difficulty,
    FeatureCostType,
    FeatureType,
    RangeBand,
    RechargeOn,
    SourceCondition,
    SourceDamageType,
    Tier,
)
from adversary_forge.models.source import (
    CR_TO_XP,
    AbilityScores,
    ArmorClass,
    AreaOfEffect,
    AttackDamage,
    AttackRange,
    BonusAction,
    ChallengeRating,
    DamageModifiers,
    DiceFormula,
    HitPoints,
    InnateSpellcasting,
    LairAction,
    LairActions,
    LegendaryAction,
    LegendaryActions,
    LegendaryResistance,
    Multiattack,
    MultiattackEntry,
    MythicAction,
    MythicActions,
    MythicTrait,
    Reaction,
    Recharge,
    SavingThrowEffect,
    SourceAction,
    SourceAttack,
    SourceCreature,
    Speed,
    Spell,
    Spellcasting,
    TraditionalSpellcasting,
    Trait,
    Uses,
    calculate_modifier,
    proficiency_bonus_for_cr,
)


__all__ = [
    # Enums
    "AbilityScore",
    "AdversaryType",
    "AreaShape",
    "AttackType",
    "Attribute",
    "CombatRole",
    "Condition",
    "CreatureSize",
    "CreatureType",
    "DamageType",
    "Difficulty",
    "FeatureCostType",
    "FeatureType",
    "RangeBand",
    "RechargeOn",
    "SourceCondition",
    "SourceDamageType",
    "Tier",
    # Source record
    "CR_TO_XP",
    "AbilityScores",
    "ArmorClass",
    "AreaOfEffect",
    "AttackDamage",
    "AttackRange",
    "BonusAction",
    "ChallengeRating",
    "DamageModifiers",
    "DiceFormula",
    "HitPoints",
    "InnateSpellcasting",
    "LairAction",
    "LairActions",
    "LegendaryAction",
    "LegendaryActions",
    "LegendaryResistance",
    "Multiattack",
    "MultiattackEntry",
    "MythicAction",
    "MythicActions",
    "MythicTrait",
    "Reaction",
    "Recharge",
    "SavingThrowEffect",
    "SourceAction",
    "SourceAttack",
    "SourceCreature",
    "Speed",
    "Spell",
    "Spellcasting",
    "TraditionalSpellcasting",
    "Trait",
    "Uses",
    "calculate_modifier",
    "proficiency_bonus_for_cr",
    # Adversary
    "Adversary",
    "Attack",
    "ConvertedFeature",
    "CoreStats",
    "DamageExpression",
    "DamageThresholds",
    "Feature",
    "FeatureCost",
    "HordeTrait",
    "Movement",
    "stress_cost",
]

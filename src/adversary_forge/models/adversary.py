"""Pydantic V2 schemas for converted Daggerheart adversaries.

This module defines the output side of a conversion: core stats, costed
features, attacks and the assembled adversary. Everything is immutable;
the folding step produces changed copies through ``model_copy``.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

from adversary_forge.models.enums import (
    AdversaryType,
    Attribute,
    CombatRole,
    Condition,
    DamageType,
    Difficulty,
    FeatureCostType,
    FeatureType,
    RangeBand,
)


# =============================================================================
# Stats
# =============================================================================


class DamageThresholds(BaseModel):
    """Damage thresholds separating Minor, Major and Severe hits.

    Attributes:
        minor: Damage at or above this marks 1 HP.
        major: Damage at or above this marks 2 HP.
        severe: Damage at or above this marks 3 HP.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    minor: Annotated[int, Field(ge=1)]
    major: Annotated[int, Field(ge=1)]
    severe: Annotated[int, Field(ge=1)]

    @model_validator(mode="after")
    def validate_increasing(self) -> "DamageThresholds":
        """Ensure minor < major < severe.

        Returns:
            Self if validation passes.

        Raises:
            ValueError: If the thresholds are not strictly increasing.
        """
        if not self.minor < self.major < self.severe:
            raise ValueError(
                f"Thresholds must be strictly increasing, got "
                f"{self.minor}/{self.major}/{self.severe}"
            )
        return self

    def __str__(self) -> str:
        return f"{self.minor}/{self.major}/{self.severe}"


class CoreStats(BaseModel):
    """Numeric stat bundle produced by the stat converter.

    Attributes:
        tier: Power tier (1-4).
        difficulty: Difficulty band driving the thresholds.
        thresholds: Damage thresholds.
        hp: Hit points.
        stress: Base Stress before folding bonuses.
        evasion: Evasion.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    tier: Annotated[int, Field(ge=1, le=4)]
    difficulty: Difficulty
    thresholds: DamageThresholds
    hp: Annotated[int, Field(ge=1)]
    stress: Annotated[int, Field(ge=0)]
    evasion: int


# =============================================================================
# Features
# =============================================================================


class FeatureCost(BaseModel):
    """Resource spent to activate a feature."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    cost_type: FeatureCostType = FeatureCostType.STRESS
    amount: Annotated[int, Field(ge=0, le=10)] = 1

    def __str__(self) -> str:
        return f"{self.amount} {self.cost_type.value}"


def stress_cost(amount: int) -> FeatureCost | None:
    """Build a Stress cost, or no cost at all for zero.

    Args:
        amount: Stress to spend.

    Returns:
        A FeatureCost, or None when amount is 0 or less.
    """
    if amount <= 0:
        return None
    return FeatureCost(cost_type=FeatureCostType.STRESS, amount=amount)


class DamageExpression(BaseModel):
    """Daggerheart damage roll, e.g. ``2d8+3 phy``.

    Attributes:
        dice_count: Number of dice.
        dice_size: Faces on each die.
        modifier: Flat modifier.
        damage_type: Physical or magic.
        is_direct: Direct damage cannot be reduced by armor.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    dice_count: Annotated[int, Field(ge=1, le=20)]
    dice_size: Annotated[int, Field(ge=2, le=20)]
    modifier: int = 0
    damage_type: DamageType = DamageType.PHYSICAL
    is_direct: bool = False

    @property
    def average(self) -> float:
        """Expected damage of the roll."""
        return self.dice_count * (self.dice_size + 1) / 2 + self.modifier

    @property
    def notation(self) -> str:
        """Render the dice in ``XdY+Z`` form, without the damage type."""
        if self.modifier > 0:
            return f"{self.dice_count}d{self.dice_size}+{self.modifier}"
        if self.modifier < 0:
            return f"{self.dice_count}d{self.dice_size}{self.modifier}"
        return f"{self.dice_count}d{self.dice_size}"

    def with_extra_dice(self, extra: int) -> DamageExpression:
        """Return a copy with more (or fewer) dice.

        Args:
            extra: Dice to add; negative values remove dice, keeping at least one.

        Returns:
            A new DamageExpression; self is unchanged.
        """
        return self.model_copy(update={"dice_count": max(1, self.dice_count + extra)})

    def __str__(self) -> str:
        return f"{self.notation} {self.damage_type.value}"


class Feature(BaseModel):
    """A Daggerheart adversary feature.

    Attributes:
        name: Feature name.
        kind: Passive, Action or Reaction.
        cost: Activation cost, if any.
        trigger: Trigger text; required for reactions.
        description: Rules text.
        damage: Damage dealt, if any.
        target: Targeting text, e.g. "60-foot cone".
        reaction_roll_attribute: Attribute used for the Reaction Roll.
        reaction_roll_difficulty: Difficulty of the Reaction Roll.
        applied_conditions: Conditions the feature can inflict.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    kind: FeatureType
    cost: FeatureCost | None = None
    trigger: str | None = None
    description: str = ""
    damage: DamageExpression | None = None
    target: str | None = None
    reaction_roll_attribute: Attribute | None = None
    reaction_roll_difficulty: int | None = Field(default=None, ge=1)
    applied_conditions: tuple[Condition, ...] = ()

    @model_validator(mode="after")
    def validate_reaction_trigger(self) -> "Feature":
        """Ensure every reaction says what triggers it.

        Returns:
            Self if validation passes.

        Raises:
            ValueError: If a Reaction has no trigger.
        """
        if self.kind == FeatureType.REACTION and not self.trigger:
            raise ValueError(f"Reaction feature '{self.name}' requires a trigger")
        return self

    @property
    def stress_amount(self) -> int:
        """Stress spent on activation (0 for other cost types)."""
        if self.cost is None or self.cost.cost_type != FeatureCostType.STRESS:
            return 0
        return self.cost.amount


class ConvertedFeature(Feature):
    """A feature plus the audit trail of where it came from.

    Attributes:
        source_ability: Name of the D&D ability it was built from.
        conversion_notes: Human-readable notes on how it was converted.
    """

    source_ability: str = ""
    conversion_notes: str = ""


# =============================================================================
# Attacks
# =============================================================================


class Attack(BaseModel):
    """A Daggerheart standard attack.

    Attributes:
        name: Attack name.
        modifier: Attack roll modifier.
        range: Range band.
        damage: Damage on hit.
        additional_effects: Riders such as extra damage.
        melee: Whether the attack is made in melee.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    modifier: int
    range: RangeBand
    damage: DamageExpression
    additional_effects: str | None = None
    melee: bool = True

    def __str__(self) -> str:
        sign = "+" if self.modifier >= 0 else ""
        return f"{self.name}: {sign}{self.modifier} | {self.range.value} | {self.damage}"


# =============================================================================
# Adversary
# =============================================================================


class Movement(BaseModel):
    """Movement capabilities of the adversary."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    standard: RangeBand = RangeBand.CLOSE
    can_fly: bool = False
    can_swim: bool = False
    can_climb: bool = False
    can_burrow: bool = False


class HordeTrait(BaseModel):
    """Horde damage scaling: damage drops once half the HP is marked.

    Attributes:
        starting_damage: Damage while above the threshold.
        reduced_damage: Damage at or below the threshold.
        threshold: HP marked before damage drops.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    starting_damage: DamageExpression
    reduced_damage: DamageExpression
    threshold: Annotated[int, Field(ge=1)]


class Adversary(BaseModel):
    """A complete Daggerheart adversary stat block.

    Attributes:
        name: Adversary name.
        tier: Power tier (1-4).
        archetype: Adversary type.
        role: Secondary combat role, if one was clear.
        difficulty: Difficulty band.
        evasion: Evasion.
        thresholds: Damage thresholds.
        hp: Hit points.
        stress: Total Stress (base plus folding bonuses).
        attacks: Attacks; the first is the primary attack.
        features: Features in composition order.
        movement: Movement capabilities.
        horde: Horde trait, for Horde adversaries.
        tags: Search tags.
        source_system: Rules dialect of the source record.
        source_cr: Raw challenge rating of the source record.
        classification_confidence: Classifier confidence (0-1).
        classification_reasoning: Signals the classifier relied on.
        conversion_log: Step-by-step conversion notes.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    tier: Annotated[int, Field(ge=1, le=4)]
    archetype: AdversaryType
    role: CombatRole | None = None
    difficulty: Difficulty
    evasion: int
    thresholds: DamageThresholds
    hp: Annotated[int, Field(ge=1)]
    stress: Annotated[int, Field(ge=0)]
    attacks: tuple[Attack, ...] = Field(min_length=1)
    features: tuple[ConvertedFeature, ...] = ()
    movement: Movement = Field(default_factory=Movement)
    horde: HordeTrait | None = None
    tags: tuple[str, ...] = ()
    source_system: str = "D&D 5e"
    source_cr: str
    classification_confidence: Annotated[float, Field(ge=0.0, le=1.0)]
    classification_reasoning: tuple[str, ...] = ()
    conversion_log: tuple[str, ...] = ()

    @property
    def primary_attack(self) -> Attack:
        """The adversary's standard attack."""
        return self.attacks[0]

    @property
    def additional_attacks(self) -> tuple[Attack, ...]:
        """Every attack after the primary one."""
        return self.attacks[1:]

    def feature(self, name: str) -> ConvertedFeature | None:
        """Look up a feature by name.

        Args:
            name: Feature name (case-insensitive).

        Returns:
            The feature, or None if absent.
        """
        wanted = name.lower()
        for feature in self.features:
            if feature.name.lower() == wanted:
                return feature
        return None


__all__ = [
    # Stats
    "DamageThresholds",
    "CoreStats",
    # Features
    "FeatureCost",
    "stress_cost",
    "DamageExpression",
    "Feature",
    "ConvertedFeature",
    # Attacks
    "Attack",
    # Adversary
    "Movement",
    "HordeTrait",
    "Adversary",
]

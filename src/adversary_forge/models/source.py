"""Pydantic V2 schemas for D&D 5E source creature records.

This module defines the input side of a conversion: a structured monster
stat block as it would come out of a stat-block parser. Every record is
immutable. Optional sections default to ``None`` or an empty list, and
absence means "not applicable" rather than an error.
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from adversary_forge.models.enums import (
    AbilityScore,
    AreaShape,
    AttackType,
    CreatureSize,
    CreatureType,
    RechargeOn,
    SourceCondition,
    SourceDamageType,
)


# =============================================================================
# Helper Functions
# =============================================================================


def calculate_modifier(score: int) -> int:
    """Calculate an ability modifier from an ability score.

    Args:
        score: Ability score (1-30).

    Returns:
        The ability modifier, e.g. 18 -> +4, 9 -> -1.
    """
    return (score - 10) // 2


def proficiency_bonus_for_cr(cr: float) -> int:
    """Get the proficiency bonus of a creature with the given challenge rating.

    Args:
        cr: Numeric challenge rating (fractions already resolved).

    Returns:
        Proficiency bonus between +2 and +9.
    """
    if cr < 1:
        return 2
    return (math.ceil(cr) - 1) // 4 + 2


CR_TO_XP: MappingProxyType[str, int] = MappingProxyType(
    {
        "0": 10,
        "1/8": 25,
        "1/4": 50,
        "1/2": 100,
        "1": 200,
        "2": 450,
        "3": 700,
        "4": 1100,
        "5": 1800,
        "6": 2300,
        "7": 2900,
        "8": 3900,
        "9": 5000,
        "10": 5900,
        "11": 7200,
        "12": 8400,
        "13": 10000,
        "14": 11500,
        "15": 13000,
        "16": 15000,
        "17": 18000,
        "18": 20000,
        "19": 22000,
        "20": 25000,
        "21": 33000,
        "22": 41000,
        "23": 50000,
        "24": 62000,
        "25": 75000,
        "26": 90000,
        "27": 105000,
        "28": 120000,
        "29": 135000,
        "30": 155000,
    }
)
"""Experience points awarded per challenge rating."""


_RECORD_CONFIG = ConfigDict(frozen=True, extra="forbid")


# =============================================================================
# Basic Components
# =============================================================================


class DiceFormula(BaseModel):
    """A dice expression such as ``2d8+4``.

    Attributes:
        count: Number of dice rolled.
        die_size: Faces on each die.
        modifier: Flat modifier added to the roll.
    """

    model_config = _RECORD_CONFIG

    count: Annotated[int, Field(ge=1, description="Number of dice")]
    die_size: Literal[4, 6, 8, 10, 12, 20, 100] = Field(description="Die size")
    modifier: int = Field(default=0, description="Flat modifier")

    @property
    def average(self) -> float:
        """Expected value of the roll.

        Returns:
            count * (die_size + 1) / 2 + modifier.
        """
        return self.count * (self.die_size + 1) / 2 + self.modifier

    @property
    def notation(self) -> str:
        """Render the formula in standard dice notation."""
        if self.modifier > 0:
            return f"{self.count}d{self.die_size}+{self.modifier}"
        if self.modifier < 0:
            return f"{self.count}d{self.die_size}{self.modifier}"
        return f"{self.count}d{self.die_size}"


class ChallengeRating(BaseModel):
    """Challenge rating with its experience value.

    The raw rating is kept as given (``"1/4"``, ``2``, ``0.5``); it is parsed
    by the stat converter, which reports malformed values.

    Attributes:
        cr: Challenge rating as an int, float or string.
        xp: Experience points for defeating the creature.
    """

    model_config = _RECORD_CONFIG

    cr: str | int | float = Field(description="Raw challenge rating")
    xp: int | None = Field(default=None, ge=0, description="Experience points")


class ArmorClass(BaseModel):
    """Armor class with an optional armor source."""

    model_config = _RECORD_CONFIG

    value: Annotated[int, Field(ge=1, le=30, description="Armor class")]
    armor_type: str | None = Field(default=None, description="Armor source, e.g. natural armor")


class HitPoints(BaseModel):
    """Average hit points and the formula they come from."""

    model_config = _RECORD_CONFIG

    average: Annotated[int, Field(ge=1, description="Average hit points")]
    formula: DiceFormula | None = Field(default=None, description="Hit dice formula")


class AbilityScores(BaseModel):
    """The six ability scores (1-30)."""

    model_config = _RECORD_CONFIG

    STR: Annotated[int, Field(ge=1, le=30)] = 10
    DEX: Annotated[int, Field(ge=1, le=30)] = 10
    CON: Annotated[int, Field(ge=1, le=30)] = 10
    INT: Annotated[int, Field(ge=1, le=30)] = 10
    WIS: Annotated[int, Field(ge=1, le=30)] = 10
    CHA: Annotated[int, Field(ge=1, le=30)] = 10

    def score(self, ability: AbilityScore) -> int:
        """Get the raw score for an ability.

        Args:
            ability: The ability to look up.

        Returns:
            The ability score.
        """
        return getattr(self, ability.value)

    def modifier(self, ability: AbilityScore) -> int:
        """Get the modifier for an ability.

        Args:
            ability: The ability to look up.

        Returns:
            The ability modifier.
        """
        return calculate_modifier(self.score(ability))


class Speed(BaseModel):
    """Movement speeds in feet."""

    model_config = _RECORD_CONFIG

    walk: int | None = Field(default=30, ge=0, description="Walking speed")
    fly: int | None = Field(default=None, ge=0, description="Flying speed")
    hover: bool = Field(default=False, description="Can hover while flying")
    swim: int | None = Field(default=None, ge=0, description="Swimming speed")
    climb: int | None = Field(default=None, ge=0, description="Climbing speed")
    burrow: int | None = Field(default=None, ge=0, description="Burrowing speed")


class DamageModifiers(BaseModel):
    """Damage vulnerabilities, resistances and immunities."""

    model_config = _RECORD_CONFIG

    vulnerabilities: list[SourceDamageType] = Field(default_factory=list)
    resistances: list[SourceDamageType] = Field(default_factory=list)
    immunities: list[SourceDamageType] = Field(default_factory=list)


class Uses(BaseModel):
    """Limited uses per rest period, e.g. 3/Day."""

    model_config = _RECORD_CONFIG

    count: Annotated[int, Field(ge=1, description="Uses per period")]
    recharge_on: RechargeOn = Field(description="When uses come back")


class Recharge(BaseModel):
    """Recharge condition, e.g. Recharge 5-6."""

    model_config = _RECORD_CONFIG

    min_roll: Annotated[int, Field(ge=1, le=6, description="Lowest recharging d6 roll")]
    max_roll: Annotated[int, Field(ge=1, le=6, description="Highest recharging d6 roll")] = 6

    @property
    def label(self) -> str:
        """Render as it appears in a stat block."""
        if self.min_roll >= self.max_roll:
            return f"Recharge {self.max_roll}"
        return f"Recharge {self.min_roll}-{self.max_roll}"


# =============================================================================
# Traits, Attacks and Actions
# =============================================================================


class Trait(BaseModel):
    """A passive trait or special ability such as Pack Tactics."""

    model_config = _RECORD_CONFIG

    name: str = Field(min_length=1, description="Trait name")
    description: str = Field(default="", description="Full trait text")
    uses: Uses | None = None
    recharge: Recharge | None = None


class AttackRange(BaseModel):
    """Reach for melee attacks, normal/long range for ranged attacks."""

    model_config = _RECORD_CONFIG

    reach: int | None = Field(default=None, ge=0, description="Melee reach in feet")
    normal: int | None = Field(default=None, ge=0, description="Normal range in feet")
    long: int | None = Field(default=None, ge=0, description="Long range in feet")


class AttackDamage(BaseModel):
    """Damage dealt by an attack, with any riders.

    Attributes:
        dice: Damage dice.
        damage_type: D&D damage type.
        additional_damage: Extra damage riders, e.g. "plus 7 (2d6) fire damage".
    """

    model_config = _RECORD_CONFIG

    dice: DiceFormula
    damage_type: SourceDamageType
    additional_damage: list[AttackDamage] = Field(default_factory=list)


class SourceAttack(BaseModel):
    """An attack action such as Bite or Longbow.

    Attributes:
        name: Attack name.
        attack_type: Melee, ranged, or either, weapon or spell.
        to_hit: Attack bonus.
        range: Reach or range.
        target: Target text, e.g. "one target".
        damage: Damage on hit.
        additional_effects: Riders on hit (grapple, poison, ...).
    """

    model_config = _RECORD_CONFIG

    name: str = Field(min_length=1)
    attack_type: AttackType
    to_hit: int = Field(ge=-5, le=30)
    range: AttackRange = Field(default_factory=AttackRange)
    target: str = "one target"
    damage: AttackDamage
    additional_effects: str | None = None


class SavingThrowEffect(BaseModel):
    """A saving throw forced by an action."""

    model_config = _RECORD_CONFIG

    ability: AbilityScore
    dc: Annotated[int, Field(ge=1, le=40, description="Save DC")]


class AreaOfEffect(BaseModel):
    """Area covered by an action, e.g. a 60-foot cone."""

    model_config = _RECORD_CONFIG

    shape: AreaShape
    size: Annotated[int, Field(ge=1, description="Size in feet")]


class SourceAction(BaseModel):
    """A non-attack action such as a breath weapon."""

    model_config = _RECORD_CONFIG

    name: str = Field(min_length=1)
    description: str = ""
    recharge: Recharge | None = None
    uses: Uses | None = None
    saving_throw: SavingThrowEffect | None = None
    damage: AttackDamage | None = None
    area_of_effect: AreaOfEffect | None = None


class BonusAction(BaseModel):
    """A bonus action."""

    model_config = _RECORD_CONFIG

    name: str = Field(min_length=1)
    description: str = ""
    recharge: Recharge | None = None
    uses: Uses | None = None


class Reaction(BaseModel):
    """A reaction, with its trigger when the parser could extract one."""

    model_config = _RECORD_CONFIG

    name: str = Field(min_length=1)
    description: str = ""
    trigger: str | None = None


class MultiattackEntry(BaseModel):
    """One line of a structured multiattack breakdown."""

    model_config = _RECORD_CONFIG

    attack_name: str = Field(min_length=1)
    count: Annotated[int, Field(ge=1)]


class Multiattack(BaseModel):
    """Multiattack text plus its structured breakdown when parseable."""

    model_config = _RECORD_CONFIG

    description: str = ""
    attacks: list[MultiattackEntry] = Field(default_factory=list)


# =============================================================================
# Legendary, Lair and Mythic Capabilities
# =============================================================================


class LegendaryAction(BaseModel):
    """A legendary action option."""

    model_config = _RECORD_CONFIG

    name: str = Field(min_length=1)
    description: str = ""
    cost: Annotated[int, Field(ge=1, le=3, description="Legendary action points")] = 1


class LegendaryActions(BaseModel):
    """The legendary actions section.

    Attributes:
        count: Legendary action points per round.
        description: Section preamble.
        actions: Available options.
    """

    model_config = _RECORD_CONFIG

    count: Annotated[int, Field(ge=0, le=10)] = 3
    description: str | None = None
    actions: list[LegendaryAction] = Field(default_factory=list)


class LegendaryResistance(BaseModel):
    """Legendary Resistance (N/Day)."""

    model_config = _RECORD_CONFIG

    count: Annotated[int, Field(ge=1, le=10)] = 3
    description: str | None = None


class LairAction(BaseModel):
    """A lair action."""

    model_config = _RECORD_CONFIG

    description: str
    name: str | None = None


class LairActions(BaseModel):
    """The lair actions section."""

    model_config = _RECORD_CONFIG

    initiative_count: int = 20
    description: str | None = None
    actions: list[LairAction] = Field(default_factory=list)


class MythicTrait(BaseModel):
    """The trait that unlocks mythic actions."""

    model_config = _RECORD_CONFIG

    name: str = Field(min_length=1)
    description: str = ""


class MythicAction(BaseModel):
    """A mythic action option."""

    model_config = _RECORD_CONFIG

    name: str = Field(min_length=1)
    description: str = ""
    cost: Annotated[int, Field(ge=1, le=3)] = 1


class MythicActions(BaseModel):
    """The mythic actions section."""

    model_config = _RECORD_CONFIG

    trait: MythicTrait | None = None
    count: Annotated[int, Field(ge=0)] = 3
    actions: list[MythicAction] = Field(default_factory=list)


# =============================================================================
# Spellcasting
# =============================================================================


class Spell(BaseModel):
    """A spell known or prepared (level 0 for cantrips)."""

    model_config = _RECORD_CONFIG

    name: str = Field(min_length=1)
    level: Annotated[int, Field(ge=0, le=9)] = 0


class TraditionalSpellcasting(BaseModel):
    """The Spellcasting trait: prepared spells by level.

    Attributes:
        kind: Discriminator, always "traditional".
        ability: Spellcasting ability.
        spell_save_dc: Spell save DC.
        spell_attack_bonus: Spell attack bonus.
        caster_level: Caster level, if stated.
        spells: Every spell with its level; cantrips are level 0.
    """

    model_config = _RECORD_CONFIG

    kind: Literal["traditional"] = "traditional"
    ability: AbilityScore
    spell_save_dc: Annotated[int, Field(ge=1, le=40)]
    spell_attack_bonus: int = 0
    caster_level: int | None = Field(default=None, ge=1, le=20)
    spells: list[Spell] = Field(default_factory=list)

    def spells_of_level(self, *levels: int) -> list[Spell]:
        """Get the spells of the given levels, in record order.

        Args:
            *levels: Spell levels to include.

        Returns:
            Matching spells.
        """
        return [spell for spell in self.spells if spell.level in levels]

    @property
    def all_spells(self) -> list[Spell]:
        """Every spell in the block."""
        return list(self.spells)


class InnateSpellcasting(BaseModel):
    """The Innate Spellcasting trait: spells by daily frequency."""

    model_config = _RECORD_CONFIG

    kind: Literal["innate"] = "innate"
    ability: AbilityScore
    spell_save_dc: Annotated[int, Field(ge=1, le=40)]
    spell_attack_bonus: int | None = None
    at_will: list[Spell] = Field(default_factory=list)
    per_day_3: list[Spell] = Field(default_factory=list)
    per_day_2: list[Spell] = Field(default_factory=list)
    per_day_1: list[Spell] = Field(default_factory=list)

    @property
    def all_spells(self) -> list[Spell]:
        """Every spell in the block."""
        return [*self.at_will, *self.per_day_3, *self.per_day_2, *self.per_day_1]


Spellcasting = Annotated[
    TraditionalSpellcasting | InnateSpellcasting,
    Field(discriminator="kind"),
]


# =============================================================================
# Source Creature Record
# =============================================================================


class SourceCreature(BaseModel):
    """A complete D&D 5E monster stat block ready for conversion.

    Attributes:
        name: Creature name.
        size: Size category.
        creature_type: Creature type.
        subtypes: Subtype tags, e.g. "goblinoid" or "swarm".
        challenge_rating: Challenge rating and XP.
        armor_class: Armor class.
        hit_points: Hit points.
        ability_scores: The six ability scores.
        speed: Movement speeds.
        damage_modifiers: Vulnerabilities, resistances and immunities.
        condition_immunities: Conditions the creature ignores.
        traits: Passive traits.
        attacks: Attack actions.
        actions: Non-attack actions.
        bonus_actions: Bonus actions.
        reactions: Reactions.
        multiattack: Multiattack action, if any.
        legendary_actions: Legendary actions section, if any.
        legendary_resistance: Legendary resistance, if any.
        lair_actions: Lair actions section, if any.
        mythic_actions: Mythic actions section, if any.
        spellcasting: Spellcasting block, if any.
    """

    model_config = _RECORD_CONFIG

    # Identity
    name: str = Field(min_length=1, max_length=200)
    size: CreatureSize = CreatureSize.MEDIUM
    creature_type: CreatureType
    subtypes: list[str] = Field(default_factory=list)

    # Core statistics
    challenge_rating: ChallengeRating
    armor_class: ArmorClass
    hit_points: HitPoints
    ability_scores: AbilityScores = Field(default_factory=AbilityScores)
    speed: Speed = Field(default_factory=Speed)
    damage_modifiers: DamageModifiers | None = None
    condition_immunities: list[SourceCondition] = Field(default_factory=list)

    # Abilities
    traits: list[Trait] = Field(default_factory=list)
    attacks: list[SourceAttack] = Field(default_factory=list)
    actions: list[SourceAction] = Field(default_factory=list)
    bonus_actions: list[BonusAction] = Field(default_factory=list)
    reactions: list[Reaction] = Field(default_factory=list)
    multiattack: Multiattack | None = None

    # Legendary capabilities
    legendary_actions: LegendaryActions | None = None
    legendary_resistance: LegendaryResistance | None = None
    lair_actions: LairActions | None = None
    mythic_actions: MythicActions | None = None

    spellcasting: Spellcasting | None = None

    def ability_modifier(self, ability: AbilityScore) -> int:
        """Get the creature's modifier for an ability.

        Args:
            ability: The ability to look up.

        Returns:
            The ability modifier.
        """
        return self.ability_scores.modifier(ability)

    @property
    def is_spellcaster(self) -> bool:
        """Whether the creature has a spellcasting block."""
        return self.spellcasting is not None

    @property
    def is_legendary(self) -> bool:
        """Whether the creature has legendary actions or legendary resistance."""
        return self.legendary_actions is not None or self.legendary_resistance is not None


__all__ = [
    # Helpers
    "calculate_modifier",
    "proficiency_bonus_for_cr",
    "CR_TO_XP",
    # Components
    "DiceFormula",
    "ChallengeRating",
    "ArmorClass",
    "HitPoints",
    "AbilityScores",
    "Speed",
    "DamageModifiers",
    "Uses",
    "Recharge",
    # Abilities
    "Trait",
    "AttackRange",
    "AttackDamage",
    "SourceAttack",
    "SavingThrowEffect",
    "AreaOfEffect",
    "SourceAction",
    "BonusAction",
    "Reaction",
    "MultiattackEntry",
    "Multiattack",
    # Legendary
    "LegendaryAction",
    "LegendaryActions",
    "LegendaryResistance",
    "LairAction",
    "LairActions",
    "MythicTrait",
    "MythicAction",
    "MythicActions",
    # Spellcasting
    "Spell",
    "TraditionalSpellcasting",
    "InnateSpellcasting",
    "Spellcasting",
    # Record
    "SourceCreature",
]

"""Enumeration types for Adversary Forge.

Two vocabularies live side by side here: the D&D 5e vocabulary of the
source creature record, and the Daggerheart vocabulary of the converted
adversary. Lookup tables between the two live in the pattern library.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


# =============================================================================
# Source (D&D 5e) Vocabulary
# =============================================================================


class CreatureSize(StrEnum):
    """D&D 5E creature size categories."""

    TINY = "Tiny"
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"
    HUGE = "Huge"
    GARGANTUAN = "Gargantuan"


class CreatureType(StrEnum):
    """D&D 5E creature types."""

    ABERRATION = "Aberration"
    BEAST = "Beast"
    CELESTIAL = "Celestial"
    CONSTRUCT = "Construct"
    DRAGON = "Dragon"
    ELEMENTAL = "Elemental"
    FEY = "Fey"
    FIEND = "Fiend"
    GIANT = "Giant"
    HUMANOID = "Humanoid"
    MONSTROSITY = "Monstrosity"
    OOZE = "Ooze"
    PLANT = "Plant"
    UNDEAD = "Undead"


class SourceDamageType(StrEnum):
    """D&D 5E damage types."""

    ACID = "acid"
    BLUDGEONING = "bludgeoning"
    COLD = "cold"
    FIRE = "fire"
    FORCE = "force"
    LIGHTNING = "lightning"
    NECROTIC = "necrotic"
    PIERCING = "piercing"
    POISON = "poison"
    PSYCHIC = "psychic"
    RADIANT = "radiant"
    SLASHING = "slashing"
    THUNDER = "thunder"


class SourceCondition(StrEnum):
    """D&D 5E conditions."""

    BLINDED = "blinded"
    CHARMED = "charmed"
    DEAFENED = "deafened"
    EXHAUSTION = "exhaustion"
    FRIGHTENED = "frightened"
    GRAPPLED = "grappled"
    INCAPACITATED = "incapacitated"
    INVISIBLE = "invisible"
    PARALYZED = "paralyzed"
    PETRIFIED = "petrified"
    POISONED = "poisoned"
    PRONE = "prone"
    RESTRAINED = "restrained"
    STUNNED = "stunned"
    UNCONSCIOUS = "unconscious"


class AbilityScore(StrEnum):
    """D&D 5E ability score abbreviations."""

    STR = "STR"
    DEX = "DEX"
    CON = "CON"
    INT = "INT"
    WIS = "WIS"
    CHA = "CHA"


class AttackType(StrEnum):
    """How a D&D 5E attack is delivered."""

    MELEE_WEAPON = "melee_weapon"
    RANGED_WEAPON = "ranged_weapon"
    MELEE_SPELL = "melee_spell"
    RANGED_SPELL = "ranged_spell"
    MELEE_OR_RANGED_WEAPON = "melee_or_ranged_weapon"
    MELEE_OR_RANGED_SPELL = "melee_or_ranged_spell"

    @property
    def is_melee(self) -> bool:
        """Whether the attack is strictly a melee attack."""
        return self in (AttackType.MELEE_WEAPON, AttackType.MELEE_SPELL)

    @property
    def is_ranged(self) -> bool:
        """Whether the attack is strictly a ranged attack."""
        return self in (AttackType.RANGED_WEAPON, AttackType.RANGED_SPELL)

    @property
    def is_mixed(self) -> bool:
        """Whether the attack can be made in melee or at range."""
        return self in (AttackType.MELEE_OR_RANGED_WEAPON, AttackType.MELEE_OR_RANGED_SPELL)


class RechargeOn(StrEnum):
    """When a limited-use ability comes back."""

    SHORT_REST = "short rest"
    LONG_REST = "long rest"
    DAWN = "dawn"
    NEVER = "never"


class AreaShape(StrEnum):
    """Area-of-effect shapes."""

    CONE = "cone"
    CUBE = "cube"
    CYLINDER = "cylinder"
    LINE = "line"
    SPHERE = "sphere"


# =============================================================================
# Target (Daggerheart) Vocabulary
# =============================================================================


class Tier(IntEnum):
    """Daggerheart power tier (1-4)."""

    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4


class AdversaryType(StrEnum):
    """Daggerheart adversary archetypes."""

    MINION = "Minion"
    STANDARD = "Standard"
    SKULK = "Skulk"
    BRUISER = "Bruiser"
    RANGED = "Ranged"
    SUPPORT = "Support"
    LEADER = "Leader"
    HORDE = "Horde"
    SOLO = "Solo"
    SOCIAL = "Social"
    SWARM = "Swarm"


class CombatRole(StrEnum):
    """Secondary tactical role, derived independently of the archetype."""

    ARTILLERY = "Artillery"
    BRUISER = "Bruiser"
    SKIRMISHER = "Skirmisher"
    CONTROLLER = "Controller"
    SUPPORT = "Support"
    LEADER = "Leader"


class Difficulty(StrEnum):
    """Daggerheart difficulty bands driving the threshold formulas."""

    MINOR = "Minor"
    MAJOR = "Major"
    SEVERE = "Severe"


class DamageType(StrEnum):
    """Daggerheart coarse damage category."""

    PHYSICAL = "phy"
    MAGIC = "mag"

    @property
    def label(self) -> str:
        """Get the word used in rendered descriptions.

        Returns:
            'physical' or 'magic'.
        """
        return "physical" if self is DamageType.PHYSICAL else "magic"


class FeatureType(StrEnum):
    """Kinds of Daggerheart adversary features."""

    PASSIVE = "Passive"
    ACTION = "Action"
    REACTION = "Reaction"


class FeatureCostType(StrEnum):
    """Resource spent to activate a feature."""

    NONE = "None"
    STRESS = "Stress"
    FEAR = "Fear"


class RangeBand(StrEnum):
    """Daggerheart range bands."""

    MELEE = "Melee"
    VERY_CLOSE = "Very Close"
    CLOSE = "Close"
    FAR = "Far"
    VERY_FAR = "Very Far"


class Condition(StrEnum):
    """Daggerheart conditions."""

    HIDDEN = "Hidden"
    RESTRAINED = "Restrained"
    VULNERABLE = "Vulnerable"
    DISORIENTED = "Disoriented"
    INCAPACITATED = "Incapacitated"
    SWALLOWED = "Swallowed"
    FRIGHTENED = "Frightened"
    CHARMED = "Charmed"


class Attribute(StrEnum):
    """Daggerheart character attributes used for Reaction Rolls."""

    STRENGTH = "Strength"
    AGILITY = "Agility"
    FINESSE = "Finesse"
    INSTINCT = "Instinct"
    PRESENCE = "Presence"
    KNOWLEDGE = "Knowledge"


__all__ = [
    # Source vocabulary
    "CreatureSize",
    "CreatureType",
    "SourceDamageType",
    "SourceCondition",
    "AbilityScore",
    "AttackType",
    "RechargeOn",
    "AreaShape",
    # Target vocabulary
    "Tier",
    "AdversaryType",
    "CombatRole",
    "Difficulty",
    "DamageType",
    "FeatureType",
    "FeatureCostType",
    "RangeBand",
    "Condition",
    "Attribute",
]

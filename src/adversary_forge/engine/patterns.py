"""Pattern library for the conversion engine.

Every rule table the engine consults lives here as an ordered tuple of
frozen records (evaluated first-match-wins) or a read-only mapping. No
component mutates these tables, so they are safe to share between
conversions.

Tables:
    PASSIVE_TRAIT_PATTERNS: Trait text that maps to a named Passive feature.
    ACTION_COST_PATTERNS: Action names/text carrying a minimum Stress cost.
    REACTION_PATTERNS: Well-known reactions with fixed trigger and cost.
    REACTION_TRIGGER_PATTERNS: Trigger extraction from reaction text.
    DAMAGE_PATTERNS: Three layers of damage phrasing, most specific first.
    FEAR_PATTERNS: Text that makes an ability a Fear source.
    ATTRIBUTE_KEYWORD_PATTERNS: Keyword fallback for Reaction Roll attributes.
    DAMAGE_TYPE_MAP, ABILITY_TO_ATTRIBUTE, CONDITION_MAP: Lookup tables.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType

from adversary_forge.models.enums import (
    AbilityScore,
    Attribute,
    Condition,
    DamageType,
    SourceCondition,
)


# =============================================================================
# Rule Records
# =============================================================================


@dataclass(frozen=True)
class PassiveTraitPattern:
    """A trait pattern producing a named Passive feature.

    Templates are ``str.format`` strings receiving the regex groups
    positionally, so ``{0}`` is the first capture.

    Attributes:
        pattern: Compiled, case-insensitive pattern searched in the trait text.
        name_template: Template for the feature name.
        description_template: Template for the feature description.
    """

    pattern: re.Pattern[str]
    name_template: str
    description_template: str

    def render(self, match: re.Match[str]) -> tuple[str, str]:
        """Fill both templates from a match.

        Args:
            match: A match of this rule's pattern.

        Returns:
            Tuple of (feature name, feature description).
        """
        groups = tuple(group or "" for group in match.groups())
        return (
            self.name_template.format(*groups),
            self.description_template.format(*groups),
        )


@dataclass(frozen=True)
class ActionCostPattern:
    """An action pattern with a minimum Stress cost."""

    pattern: re.Pattern[str]
    stress: int


@dataclass(frozen=True)
class ReactionPattern:
    """A well-known reaction with a fixed trigger and Stress cost."""

    pattern: re.Pattern[str]
    trigger: str
    stress: int


@dataclass(frozen=True)
class DamagePattern:
    """One layer of damage phrasing.

    Attributes:
        pattern: Compiled pattern with ``count``, ``size``, ``sign``,
            ``mod`` and, for typed layers, ``type`` named groups.
        typed: Whether the layer captures a damage type word.
    """

    pattern: re.Pattern[str]
    typed: bool


def _rx(source: str) -> re.Pattern[str]:
    return re.compile(source, re.IGNORECASE)


# =============================================================================
# Passive Traits
# =============================================================================

PASSIVE_TRAIT_PATTERNS: tuple[PassiveTraitPattern, ...] = (
    PassiveTraitPattern(
        _rx(r"resistance to (\w+(?:\s*,\s*\w+)*) damage"),
        "Resistant to {0}",
        "Takes reduced damage from {0} sources.",
    ),
    PassiveTraitPattern(
        _rx(r"immun(?:e|ity) to (\w+(?:\s*,\s*\w+)*) damage"),
        "Immune to {0}",
        "Takes no damage from {0} sources.",
    ),
    PassiveTraitPattern(
        _rx(r"immun(?:e|ity) to (?:the )?(\w+(?:\s*,\s*\w+)*) condition"),
        "Immune to {0}",
        "Cannot be affected by the {0} condition.",
    ),
    PassiveTraitPattern(
        _rx(r"(darkvision|blindsight|tremorsense|truesight)"),
        "Enhanced Senses",
        "Has {0}, allowing perception in special conditions.",
    ),
    PassiveTraitPattern(
        _rx(r"magic resistance"),
        "Magic Resistance",
        "Has advantage on saving throws against spells and magical effects.",
    ),
    PassiveTraitPattern(
        _rx(r"pack tactics"),
        "Pack Tactics",
        "Gains advantage on attack rolls when an ally is within close range of the target.",
    ),
    PassiveTraitPattern(
        _rx(r"keen (hearing|sight|smell|senses)"),
        "Keen {0}",
        "Has advantage on perception checks that rely on {0}.",
    ),
    PassiveTraitPattern(
        _rx(r"spider climb"),
        "Spider Climb",
        "Can climb difficult surfaces, including upside down on ceilings.",
    ),
    PassiveTraitPattern(
        _rx(r"regeneration"),
        "Regeneration",
        "Recovers hit points at the start of its turn unless damaged by specific types.",
    ),
    PassiveTraitPattern(
        _rx(r"sunlight sensitivity"),
        "Sunlight Sensitivity",
        "Has disadvantage on attacks and perception in direct sunlight.",
    ),
    PassiveTraitPattern(
        _rx(r"amphibious"),
        "Amphibious",
        "Can breathe both air and water.",
    ),
    PassiveTraitPattern(
        _rx(r"flyby"),
        "Flyby",
        "Doesn't provoke opportunity attacks when flying out of an enemy's reach.",
    ),
    PassiveTraitPattern(
        _rx(r"incorporeal movement"),
        "Incorporeal",
        "Can move through other creatures and objects as if they were difficult terrain.",
    ),
)

# =============================================================================
# Actions & Reactions
# =============================================================================

ACTION_COST_PATTERNS: tuple[ActionCostPattern, ...] = (
    ActionCostPattern(_rx(r"breath\s*(?:weapon)?"), 2),
    ActionCostPattern(_rx(r"frightful presence"), 1),
    ActionCostPattern(_rx(r"\bgaze\b"), 1),
    ActionCostPattern(_rx(r"\bswallow\b"), 2),
    ActionCostPattern(_rx(r"change shape|shapechange"), 1),
    ActionCostPattern(_rx(r"\bteleport\b"), 1),
)

REACTION_PATTERNS: tuple[ReactionPattern, ...] = (
    ReactionPattern(_rx(r"parry"), "When hit by a melee attack", 1),
    ReactionPattern(_rx(r"shield"), "When hit by an attack or targeted by magic missile", 1),
    ReactionPattern(
        _rx(r"counterspell|counter.?spell"),
        "When a creature within range casts a spell",
        2,
    ),
    ReactionPattern(_rx(r"opportunity attack"), "When a creature moves out of reach", 0),
    ReactionPattern(_rx(r"tail attack"), "When a creature enters or attacks from behind", 0),
    ReactionPattern(_rx(r"uncanny dodge"), "When hit by an attack", 1),
)

REACTION_TRIGGER_PATTERNS: tuple[re.Pattern[str], ...] = (
    _rx(r"\bwhen\s+([^.]+)"),
    _rx(r"\bif\s+([^.]+)"),
    _rx(r"as a reaction,?\s*([^.]+)"),
    _rx(r"in response to ([^.]+)"),
)

# =============================================================================
# Damage
# =============================================================================

_DICE = r"(?P<count>\d+)d(?P<size>\d+)"
_MODIFIER = r"(?:(?P<sign>[+-])\s*(?P<mod>\d+))?"

DAMAGE_PATTERNS: tuple[DamagePattern, ...] = (
    # "19 (2d10 + 8) piercing damage"
    DamagePattern(
        _rx(rf"(?P<average>\d+)\s*\({_DICE}\s*{_MODIFIER}\)\s*(?P<type>\w+)\s*damage"),
        typed=True,
    ),
    # "2d6 + 3 fire damage"
    DamagePattern(
        _rx(rf"{_DICE}\b\s*{_MODIFIER}\s*(?P<type>\w+)\s*damage"),
        typed=True,
    ),
    # "takes 2d6 damage" or "takes 7 (2d6) damage"
    DamagePattern(
        _rx(rf"takes?\s+(?:\d+\s*\(\s*)?{_DICE}\s*{_MODIFIER}\s*\)?\s*damage"),
        typed=False,
    ),
)

AVERAGED_DAMAGE_PHRASE = _rx(
    r"\d+\s*\((\d+d\d+)\s*(?:([+-])\s*(\d+))?\)\s*(\w+)\s*damage"
)
"""Damage written with its average, rewritten by description simplification."""

BARE_DAMAGE_PHRASE = _rx(r"(?<!\*)(\d+d\d+)\b\s*(?:([+-])\s*(\d+))?\s*(\w+)\s*damage(?!\*)")
"""Damage written as bare dice, rewritten unless already emphasized."""

DAMAGE_TYPE_MAP: MappingProxyType[str, DamageType] = MappingProxyType(
    {
        # Physical
        "bludgeoning": DamageType.PHYSICAL,
        "piercing": DamageType.PHYSICAL,
        "slashing": DamageType.PHYSICAL,
        # Magic
        "acid": DamageType.MAGIC,
        "cold": DamageType.MAGIC,
        "fire": DamageType.MAGIC,
        "force": DamageType.MAGIC,
        "lightning": DamageType.MAGIC,
        "necrotic": DamageType.MAGIC,
        "poison": DamageType.MAGIC,
        "psychic": DamageType.MAGIC,
        "radiant": DamageType.MAGIC,
        "thunder": DamageType.MAGIC,
    }
)


def damage_type_for(word: str | None) -> DamageType:
    """Map a D&D damage type word onto phy/mag.

    Unrecognized or missing words count as physical.

    Args:
        word: Damage type word as written, e.g. "Fire".

    Returns:
        The Daggerheart damage type.
    """
    if not word:
        return DamageType.PHYSICAL
    return DAMAGE_TYPE_MAP.get(word.lower(), DamageType.PHYSICAL)


# =============================================================================
# Saves, Conditions & Fear
# =============================================================================

ABILITY_TO_ATTRIBUTE: MappingProxyType[AbilityScore, Attribute] = MappingProxyType(
    {
        AbilityScore.STR: Attribute.STRENGTH,
        AbilityScore.DEX: Attribute.AGILITY,
        AbilityScore.CON: Attribute.STRENGTH,
        AbilityScore.INT: Attribute.KNOWLEDGE,
        AbilityScore.WIS: Attribute.INSTINCT,
        AbilityScore.CHA: Attribute.PRESENCE,
    }
)

ATTRIBUTE_KEYWORD_PATTERNS: tuple[tuple[re.Pattern[str], Attribute], ...] = (
    (_rx(r"dodge|evade|reflex|dexterity"), Attribute.AGILITY),
    (_rx(r"resist|endure|constitution|fortitude"), Attribute.STRENGTH),
    (_rx(r"will|wisdom|charm|fear|frighten"), Attribute.INSTINCT),
    (_rx(r"spell|magic|arcane|intelligence"), Attribute.KNOWLEDGE),
    (_rx(r"persuade|intimidate|charisma|command"), Attribute.PRESENCE),
)

CONDITION_MAP: MappingProxyType[SourceCondition, Condition] = MappingProxyType(
    {
        SourceCondition.BLINDED: Condition.DISORIENTED,
        SourceCondition.CHARMED: Condition.CHARMED,
        SourceCondition.DEAFENED: Condition.DISORIENTED,
        SourceCondition.EXHAUSTION: Condition.INCAPACITATED,
        SourceCondition.FRIGHTENED: Condition.FRIGHTENED,
        SourceCondition.GRAPPLED: Condition.RESTRAINED,
        SourceCondition.INCAPACITATED: Condition.INCAPACITATED,
        SourceCondition.INVISIBLE: Condition.HIDDEN,
        SourceCondition.PARALYZED: Condition.INCAPACITATED,
        SourceCondition.PETRIFIED: Condition.INCAPACITATED,
        SourceCondition.POISONED: Condition.VULNERABLE,
        SourceCondition.PRONE: Condition.VULNERABLE,
        SourceCondition.RESTRAINED: Condition.RESTRAINED,
        SourceCondition.STUNNED: Condition.INCAPACITATED,
        SourceCondition.UNCONSCIOUS: Condition.INCAPACITATED,
    }
)

FEAR_PATTERNS: tuple[re.Pattern[str], ...] = (
    _rx(r"frightful\s*presence"),
    _rx(r"terrifying"),
    _rx(r"horrifying"),
    _rx(r"dreadful"),
    _rx(r"become\s+frightened"),
    _rx(r"frightened\s+(?:of|for)"),
)

BECOME_FRIGHTENED = _rx(r"become\s+frightened")
FEAR_MARKER = "**mark 1 Fear** and become Frightened"

# =============================================================================
# Description Cleanup
# =============================================================================

SAVE_DC_PHRASE = _rx(r"DC\s*\d+\s*")
SAVING_THROW_PHRASE = _rx(r"\s+saving throw")
SAVE_RESULT_PHRASE = _rx(r"on a (?:failed|successful) save")
WHITESPACE = re.compile(r"\s+")
SENTENCE = re.compile(r"[^.!?]+[.!?]+")

# =============================================================================
# Classifier Vocabulary
# =============================================================================

LEADER_KEYWORDS: tuple[str, ...] = (
    "command",
    "rally",
    "inspire",
    "direct",
    "order",
    "leadership",
    "aura",
    "allies within",
    "friendly creatures",
)

SUPPORT_KEYWORDS: tuple[str, ...] = (
    "heal",
    "healing",
    "cure",
    "restore",
    "protect",
    "shield",
    "bless",
    "aid",
    "sanctuary",
    "regenerate",
    "regeneration",
)

CONTROLLER_KEYWORDS: tuple[str, ...] = (
    "restrain",
    "grapple",
    "paralyze",
    "stun",
    "frighten",
    "charm",
    "dominate",
    "hold",
    "web",
    "entangle",
    "slow",
    "confusion",
    "hypnotic",
    "sleep",
)

CONTROLLER_SPELLS: tuple[str, ...] = (
    "hold person",
    "hold monster",
    "web",
    "entangle",
    "slow",
    "confusion",
    "hypnotic pattern",
    "fear",
    "dominate",
    "banishment",
    "wall of",
    "grease",
    "sleep",
)

SUPPORT_SPELLS: tuple[str, ...] = (
    "cure wounds",
    "healing word",
    "mass cure wounds",
    "heal",
    "regenerate",
    "bless",
    "aid",
    "sanctuary",
    "shield of faith",
    "beacon of hope",
    "greater restoration",
    "lesser restoration",
)

ATTACK_SPELL_KEYWORDS: tuple[str, ...] = ("bolt", "fireball", "lightning", "ray", "blast")

MOBILITY_KEYWORDS: tuple[str, ...] = ("nimble", "evasion", "disengage", "dash", "cunning action")

SKIRMISH_KEYWORDS: tuple[str, ...] = ("flyby", "hit-and-run", "swoop", "dive", "dash", "disengage")

SWARM_TRAIT_PHRASES: tuple[str, ...] = (
    "can occupy another creature's space",
    "swarm has hit point",
)

HORDE_TRAIT_NAMES: tuple[str, ...] = ("pack tactics", "mob")


_INFLECTIONS = r"(?:s|es|d|ed|ing|ned|ning)?"


@lru_cache(maxsize=None)
def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    return _rx(rf"\b{re.escape(keyword)}{_INFLECTIONS}\b")


def contains_keyword(text: str, keywords: tuple[str, ...]) -> str | None:
    """Find the first keyword used as a word in a text.

    Keywords match whole words, allowing plain inflections ("commands",
    "healing", "stunned"), so "direct" does not match "direction" and "aid"
    does not match "said".

    Args:
        text: Text to search (case-insensitive).
        keywords: Keywords in priority order.

    Returns:
        The first keyword found, or None.
    """
    for keyword in keywords:
        if _keyword_pattern(keyword).search(text):
            return keyword
    return None


# =============================================================================
# Multiattack
# =============================================================================

NUMBER_WORDS: MappingProxyType[str, int] = MappingProxyType(
    {
        "one": 1,
        "two": 2,
        "three": 3,
        "four": 4,
        "five": 5,
        "six": 6,
        "seven": 7,
        "eight": 8,
        "nine": 9,
        "ten": 10,
    }
)

_COUNT = r"(\d+|one|two|three|four|five|six|seven|eight|nine|ten)"

GENERIC_MULTIATTACK_PATTERN = _rx(rf"makes?\s+{_COUNT}\s+(?:melee\s+|ranged\s+)?attacks?")
"""'makes three attacks' style text, giving a total count only."""

NAMED_MULTIATTACK_PATTERN = _rx(rf"{_COUNT}\s+with\s+its\s+(\w+)")
"""'two with its claws' style fragments, one per attack type."""


def parse_count(token: str) -> int:
    """Turn a count token ('3' or 'three') into an integer.

    Args:
        token: Digits or a number word between one and ten.

    Returns:
        The count, or 0 for an unknown word.
    """
    if token.isdigit():
        return int(token)
    return NUMBER_WORDS.get(token.lower(), 0)


__all__ = [
    # Records
    "PassiveTraitPattern",
    "ActionCostPattern",
    "ReactionPattern",
    "DamagePattern",
    # Tables
    "PASSIVE_TRAIT_PATTERNS",
    "ACTION_COST_PATTERNS",
    "REACTION_PATTERNS",
    "REACTION_TRIGGER_PATTERNS",
    "DAMAGE_PATTERNS",
    "AVERAGED_DAMAGE_PHRASE",
    "BARE_DAMAGE_PHRASE",
    "DAMAGE_TYPE_MAP",
    "ABILITY_TO_ATTRIBUTE",
    "ATTRIBUTE_KEYWORD_PATTERNS",
    "CONDITION_MAP",
    "FEAR_PATTERNS",
    "BECOME_FRIGHTENED",
    "FEAR_MARKER",
    "SAVE_DC_PHRASE",
    "SAVING_THROW_PHRASE",
    "SAVE_RESULT_PHRASE",
    "WHITESPACE",
    "SENTENCE",
    # Classifier vocabulary
    "LEADER_KEYWORDS",
    "SUPPORT_KEYWORDS",
    "CONTROLLER_KEYWORDS",
    "CONTROLLER_SPELLS",
    "SUPPORT_SPELLS",
    "ATTACK_SPELL_KEYWORDS",
    "MOBILITY_KEYWORDS",
    "SKIRMISH_KEYWORDS",
    "SWARM_TRAIT_PHRASES",
    "HORDE_TRAIT_NAMES",
    # Multiattack
    "NUMBER_WORDS",
    "GENERIC_MULTIATTACK_PATTERN",
    "NAMED_MULTIATTACK_PATTERN",
    # Helpers
    "damage_type_for",
    "contains_keyword",
    "parse_count",
]

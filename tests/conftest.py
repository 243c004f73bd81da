"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Adversary Forge test suite. Creature fixtures are abridged SRD
stat blocks, already normalized to the source record shape.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from adversary_forge.models.source import SourceCreature


if TYPE_CHECKING:
    from collections.abc import Callable, Generator


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from adversary_forge.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Record Builders
# =============================================================================


def _attack(
    name: str,
    *,
    attack_type: str = "melee_weapon",
    to_hit: int = 4,
    count: int = 1,
    die_size: int = 6,
    modifier: int = 0,
    damage_type: str = "slashing",
    reach: int | None = 5,
    normal: int | None = None,
    long: int | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Build raw attack data in the source record shape."""
    data: dict[str, Any] = {
        "name": name,
        "attack_type": attack_type,
        "to_hit": to_hit,
        "range": {"reach": reach, "normal": normal, "long": long},
        "damage": {
            "dice": {"count": count, "die_size": die_size, "modifier": modifier},
            "damage_type": damage_type,
        },
    }
    data.update(extra)
    return data


@pytest.fixture
def make_creature() -> Callable[..., SourceCreature]:
    """Provide a factory for minimal creatures with field overrides.

    The base creature is a CR 1 humanoid with AC 12, 20 hit points and no
    abilities at all.

    Returns:
        Factory accepting SourceCreature fields as keyword overrides.
    """

    def factory(**overrides: Any) -> SourceCreature:
        data: dict[str, Any] = {
            "name": "Test Creature",
            "creature_type": "Humanoid",
            "challenge_rating": {"cr": 1},
            "armor_class": {"value": 12},
            "hit_points": {"average": 20},
        }
        data.update(overrides)
        return SourceCreature.model_validate(data)

    return factory


# =============================================================================
# Creature Fixtures
# =============================================================================


@pytest.fixture
def goblin() -> SourceCreature:
    """Provide a goblin: CR 1/4 melee and ranged skirmisher."""
    return SourceCreature.model_validate(
        {
            "name": "Goblin",
            "size": "Small",
            "creature_type": "Humanoid",
            "subtypes": ["goblinoid"],
            "challenge_rating": {"cr": "1/4", "xp": 50},
            "armor_class": {"value": 15, "armor_type": "leather armor, shield"},
            "hit_points": {"average": 7, "formula": {"count": 2, "die_size": 6}},
            "ability_scores": {"STR": 8, "DEX": 14, "CON": 10, "INT": 10, "WIS": 8, "CHA": 8},
            "traits": [
                {
                    "name": "Nimble Escape",
                    "description": (
                        "The goblin can take the Disengage or Hide action as a bonus "
                        "action on each of its turns."
                    ),
                }
            ],
            "attacks": [
                _attack("Scimitar", to_hit=4, die_size=6, modifier=2),
                _attack(
                    "Shortbow",
                    attack_type="ranged_weapon",
                    to_hit=4,
                    die_size=6,
                    modifier=2,
                    damage_type="piercing",
                    reach=None,
                    normal=80,
                    long=320,
                ),
            ],
        }
    )


@pytest.fixture
def wolf() -> SourceCreature:
    """Provide a wolf: CR 1/4 pack hunter."""
    return SourceCreature.model_validate(
        {
            "name": "Wolf",
            "creature_type": "Beast",
            "challenge_rating": {"cr": 0.25, "xp": 50},
            "armor_class": {"value": 13, "armor_type": "natural armor"},
            "hit_points": {"average": 11},
            "ability_scores": {"STR": 12, "DEX": 15, "CON": 12, "INT": 3, "WIS": 12, "CHA": 6},
            "speed": {"walk": 40},
            "traits": [
                {
                    "name": "Keen Hearing and Smell",
                    "description": (
                        "The wolf has advantage on Wisdom (Perception) checks that rely "
                        "on hearing or smell."
                    ),
                },
                {
                    "name": "Pack Tactics",
                    "description": (
                        "The wolf has advantage on an attack roll against a creature if "
                        "at least one of the wolf's allies is within 5 feet of the "
                        "creature and the ally isn't incapacitated."
                    ),
                },
            ],
            "attacks": [
                _attack(
                    "Bite",
                    to_hit=4,
                    count=2,
                    die_size=4,
                    modifier=2,
                    damage_type="piercing",
                    additional_effects=(
                        "If the target is a creature, it must succeed on a DC 11 "
                        "Strength saving throw or be knocked prone."
                    ),
                )
            ],
        }
    )


@pytest.fixture
def troll() -> SourceCreature:
    """Provide a troll: CR 5 brute with a three-attack multiattack."""
    return SourceCreature.model_validate(
        {
            "name": "Troll",
            "size": "Large",
            "creature_type": "Giant",
            "challenge_rating": {"cr": 5, "xp": 1800},
            "armor_class": {"value": 15, "armor_type": "natural armor"},
            "hit_points": {"average": 84},
            "ability_scores": {"STR": 18, "DEX": 13, "CON": 20, "INT": 7, "WIS": 9, "CHA": 7},
            "traits": [
                {
                    "name": "Keen Smell",
                    "description": (
                        "The troll has advantage on Wisdom (Perception) checks that rely "
                        "on smell."
                    ),
                },
                {
                    "name": "Regeneration",
                    "description": (
                        "The troll regains 10 hit points at the start of its turn. If the "
                        "troll takes acid or fire damage, this trait doesn't function at "
                        "the start of the troll's next turn. The troll dies only if it "
                        "starts its turn with 0 hit points and doesn't regenerate."
                    ),
                },
            ],
            "multiattack": {
                "description": (
                    "The troll makes three attacks: one with its bite and two with its claws."
                )
            },
            "attacks": [
                _attack("Bite", to_hit=7, die_size=6, modifier=4, damage_type="piercing"),
                _attack("Claw", to_hit=7, count=2, die_size=6, modifier=4),
            ],
        }
    )


@pytest.fixture
def young_red_dragon() -> SourceCreature:
    """Provide a young red dragon: CR 10 flier with a fire breath."""
    return SourceCreature.model_validate(
        {
            "name": "Young Red Dragon",
            "size": "Large",
            "creature_type": "Dragon",
            "challenge_rating": {"cr": 10, "xp": 5900},
            "armor_class": {"value": 18, "armor_type": "natural armor"},
            "hit_points": {"average": 178},
            "ability_scores": {
                "STR": 23,
                "DEX": 10,
                "CON": 21,
                "INT": 14,
                "WIS": 11,
                "CHA": 19,
            },
            "speed": {"walk": 40, "climb": 40, "fly": 80},
            "damage_modifiers": {"immunities": ["fire"]},
            "multiattack": {
                "description": (
                    "The dragon makes three attacks: one with its bite and two with its claws."
                )
            },
            "attacks": [
                _attack(
                    "Bite",
                    to_hit=10,
                    count=2,
                    die_size=10,
                    modifier=6,
                    damage_type="piercing",
                    reach=10,
                    damage={
                        "dice": {"count": 2, "die_size": 10, "modifier": 6},
                        "damage_type": "piercing",
                        "additional_damage": [
                            {"dice": {"count": 1, "die_size": 6}, "damage_type": "fire"}
                        ],
                    },
                ),
                _attack("Claw", to_hit=10, count=2, die_size=6, modifier=6),
            ],
            "actions": [
                {
                    "name": "Fire Breath",
                    "description": (
                        "The dragon exhales fire in a 30-foot cone. Each creature in that "
                        "area must make a DC 17 Dexterity saving throw, taking 56 (16d6) "
                        "fire damage on a failed save, or half as much damage on a "
                        "successful one."
                    ),
                    "recharge": {"min_roll": 5, "max_roll": 6},
                    "saving_throw": {"ability": "DEX", "dc": 17},
                    "damage": {"dice": {"count": 16, "die_size": 6}, "damage_type": "fire"},
                    "area_of_effect": {"shape": "cone", "size": 30},
                }
            ],
        }
    )


@pytest.fixture
def adult_red_dragon() -> SourceCreature:
    """Provide an adult red dragon: CR 17 legendary solo."""
    return SourceCreature.model_validate(
        {
            "name": "Adult Red Dragon",
            "size": "Huge",
            "creature_type": "Dragon",
            "challenge_rating": {"cr": 17, "xp": 18000},
            "armor_class": {"value": 19, "armor_type": "natural armor"},
            "hit_points": {"average": 256},
            "ability_scores": {
                "STR": 27,
                "DEX": 10,
                "CON": 25,
                "INT": 16,
                "WIS": 13,
                "CHA": 21,
            },
            "speed": {"walk": 40, "climb": 40, "fly": 80},
            "damage_modifiers": {"immunities": ["fire"]},
            "multiattack": {
                "description": (
                    "The dragon can use its Frightful Presence. It then makes three "
                    "attacks: one with its bite and two with its claws."
                )
            },
            "attacks": [
                _attack(
                    "Bite",
                    to_hit=14,
                    count=2,
                    die_size=10,
                    modifier=8,
                    damage_type="piercing",
                    reach=10,
                ),
                _attack("Claw", to_hit=14, count=2, die_size=6, modifier=8),
            ],
            "actions": [
                {
                    "name": "Frightful Presence",
                    "description": (
                        "Each creature of the dragon's choice that is within 120 feet of "
                        "the dragon and aware of it must succeed on a DC 19 Wisdom saving "
                        "throw or become frightened for 1 minute."
                    ),
                    "saving_throw": {"ability": "WIS", "dc": 19},
                }
            ],
            "legendary_actions": {
                "count": 3,
                "actions": [
                    {
                        "name": "Detect",
                        "description": "The dragon makes a Wisdom (Perception) check.",
                        "cost": 1,
                    },
                    {
                        "name": "Tail Attack",
                        "description": "The dragon makes a tail attack.",
                        "cost": 1,
                    },
                    {
                        "name": "Wing Attack",
                        "description": (
                            "The dragon beats its wings. Each creature within 10 feet of "
                            "the dragon must succeed on a DC 22 Dexterity saving throw or "
                            "take 15 (2d6 + 8) bludgeoning damage and be knocked prone."
                        ),
                        "cost": 2,
                    },
                ],
            },
            "legendary_resistance": {"count": 3},
            "lair_actions": {
                "actions": [
                    {"description": "Magma erupts from a point on the ground the dragon can see."}
                ]
            },
        }
    )


@pytest.fixture
def swarm_of_rats() -> SourceCreature:
    """Provide a swarm of rats."""
    return SourceCreature.model_validate(
        {
            "name": "Swarm of Rats",
            "creature_type": "Beast",
            "subtypes": ["swarm"],
            "challenge_rating": {"cr": "1/4"},
            "armor_class": {"value": 10},
            "hit_points": {"average": 24},
            "ability_scores": {"STR": 9, "DEX": 11, "CON": 9, "INT": 2, "WIS": 10, "CHA": 3},
            "condition_immunities": [
                "charmed",
                "frightened",
                "grappled",
                "paralyzed",
                "petrified",
                "prone",
                "restrained",
                "stunned",
            ],
            "traits": [
                {
                    "name": "Swarm",
                    "description": (
                        "The swarm can occupy another creature's space and vice versa, "
                        "and the swarm can move through any opening large enough for a "
                        "Tiny rat."
                    ),
                }
            ],
            "attacks": [
                _attack(
                    "Bites",
                    to_hit=2,
                    count=2,
                    die_size=6,
                    damage_type="piercing",
                    reach=0,
                )
            ],
        }
    )


@pytest.fixture
def priest() -> SourceCreature:
    """Provide a priest: CR 2 healer with a prepared spell list."""
    return SourceCreature.model_validate(
        {
            "name": "Priest",
            "creature_type": "Humanoid",
            "challenge_rating": {"cr": 2, "xp": 450},
            "armor_class": {"value": 13, "armor_type": "chain shirt"},
            "hit_points": {"average": 27},
            "ability_scores": {"STR": 10, "DEX": 10, "CON": 12, "INT": 13, "WIS": 16, "CHA": 13},
            "traits": [
                {
                    "name": "Divine Eminence",
                    "description": (
                        "As a bonus action, the priest can expend a spell slot to cause "
                        "its melee weapon attacks to magically deal an extra 10 (3d6) "
                        "radiant damage to a target on a hit."
                    ),
                }
            ],
            "attacks": [
                _attack("Mace", to_hit=2, die_size=6, damage_type="bludgeoning"),
            ],
            "actions": [
                {
                    "name": "Healing Hands",
                    "description": (
                        "The priest touches a creature and restores 7 (2d6) hit points to it."
                    ),
                }
            ],
            "spellcasting": {
                "kind": "traditional",
                "ability": "WIS",
                "spell_save_dc": 13,
                "spell_attack_bonus": 5,
                "caster_level": 5,
                "spells": [
                    {"name": "Light", "level": 0},
                    {"name": "Sacred Flame", "level": 0},
                    {"name": "Thaumaturgy", "level": 0},
                    {"name": "Cure Wounds", "level": 1},
                    {"name": "Guiding Bolt", "level": 1},
                    {"name": "Sanctuary", "level": 1},
                    {"name": "Lesser Restoration", "level": 2},
                    {"name": "Spiritual Weapon", "level": 2},
                    {"name": "Dispel Magic", "level": 3},
                    {"name": "Spirit Guardians", "level": 3},
                ],
            },
        }
    )


@pytest.fixture
def assassin() -> SourceCreature:
    """Provide an assassin: CR 8 agile striker."""
    return SourceCreature.model_validate(
        {
            "name": "Assassin",
            "creature_type": "Humanoid",
            "challenge_rating": {"cr": 8, "xp": 3900},
            "armor_class": {"value": 15, "armor_type": "studded leather"},
            "hit_points": {"average": 78},
            "ability_scores": {"STR": 11, "DEX": 16, "CON": 14, "INT": 13, "WIS": 11, "CHA": 10},
            "traits": [
                {
                    "name": "Evasion",
                    "description": (
                        "If the assassin is subjected to an effect that allows it to make a "
                        "Dexterity saving throw to take only half damage, the assassin "
                        "instead takes no damage if it succeeds on the saving throw, and "
                        "only half damage if it fails."
                    ),
                }
            ],
            "multiattack": {"description": "The assassin makes two attacks with its shortsword."},
            "attacks": [
                _attack(
                    "Shortsword",
                    to_hit=6,
                    die_size=6,
                    modifier=3,
                    damage_type="piercing",
                    damage={
                        "dice": {"count": 1, "die_size": 6, "modifier": 3},
                        "damage_type": "piercing",
                        "additional_damage": [
                            {"dice": {"count": 7, "die_size": 6}, "damage_type": "poison"}
                        ],
                    },
                ),
                _attack(
                    "Light Crossbow",
                    attack_type="ranged_weapon",
                    to_hit=6,
                    die_size=8,
                    modifier=3,
                    damage_type="piercing",
                    reach=None,
                    normal=80,
                    long=320,
                ),
            ],
        }
    )

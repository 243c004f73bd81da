"""Rule constants shared across the conversion engine.

This module collects the fixed numbers of the conversion: challenge
breakpoints, HP divisors, Stress costs and the fixed trigger texts that
several components need to agree on.
"""

from __future__ import annotations

# =============================================================================
# Challenge Rating & Tiers
# =============================================================================

MIN_TIER = 1
"""Lowest Daggerheart tier."""

MAX_TIER = 4
"""Highest Daggerheart tier."""

TIER_CR_BREAKPOINTS: tuple[tuple[int, int], ...] = (
    (2, 1),
    (6, 2),
    (13, 3),
)
"""(max challenge rating, tier) pairs checked in order; anything above is tier 4."""

MINION_MAX_CR = 0.25
"""Highest challenge rating still eligible for the Minion archetype."""

MAJOR_DIFFICULTY_CR_FACTOR = 3
"""A creature is Major difficulty when its CR is at least tier times this factor."""

# =============================================================================
# Core Stat Formulas
# =============================================================================

SOLO_HP_DIVISOR = 8
"""Source HP divisor for Solo adversaries."""

STANDARD_HP_DIVISOR = 10
"""Source HP divisor for every non-Solo, non-Minion adversary."""

SOLO_HP_PER_TIER = 4
"""Minimum Solo HP per tier."""

STANDARD_HP_PER_TIER = 2
"""Minimum HP per tier for other adversaries."""

EVASION_NUMERATOR = 4
EVASION_DENOMINATOR = 5
"""Armor class is scaled by 4/5 (0.8) before adding the tier."""

MIN_SANE_EVASION = 5
MAX_SANE_EVASION = 30
"""Evasion band outside of which the stat validator raises a flag."""

# =============================================================================
# Feature Costs
# =============================================================================

DEFAULT_REACTION_STRESS = 1
"""Stress cost of a reaction that matches no known reaction pattern."""

LEGENDARY_RESISTANCE_STRESS = 2
"""Stress cost of the Legendary Resistance reaction."""

SAVE_DIFFICULTY_BASE = 8
"""Reaction Roll difficulty is half the save DC plus this base."""

# =============================================================================
# Fixed Texts
# =============================================================================

LEGENDARY_TRIGGER = "At the end of another creature's turn"
"""Trigger attached to every converted legendary action."""

LEGENDARY_RESISTANCE_TRIGGER = "When failing a Reaction Roll"
"""Trigger of the Legendary Resistance reaction."""

DEFAULT_REACTION_TRIGGER = "When triggered"
"""Trigger used when no trigger text can be found."""

SOURCE_SYSTEM = "D&D 5e"
"""Source rules dialect recorded on every adversary."""

MAX_DESCRIPTION_SENTENCES = 3
"""Sentences kept when simplifying an ability description."""


__all__ = [
    # Tiers
    "MIN_TIER",
    "MAX_TIER",
    "TIER_CR_BREAKPOINTS",
    "MINION_MAX_CR",
    "MAJOR_DIFFICULTY_CR_FACTOR",
    # Core stats
    "SOLO_HP_DIVISOR",
    "STANDARD_HP_DIVISOR",
    "SOLO_HP_PER_TIER",
    "STANDARD_HP_PER_TIER",
    "EVASION_NUMERATOR",
    "EVASION_DENOMINATOR",
    "MIN_SANE_EVASION",
    "MAX_SANE_EVASION",
    # Costs
    "DEFAULT_REACTION_STRESS",
    "LEGENDARY_RESISTANCE_STRESS",
    "SAVE_DIFFICULTY_BASE",
    # Texts
    "LEGENDARY_TRIGGER",
    "LEGENDARY_RESISTANCE_TRIGGER",
    "DEFAULT_REACTION_TRIGGER",
    "SOURCE_SYSTEM",
    "MAX_DESCRIPTION_SENTENCES",
]

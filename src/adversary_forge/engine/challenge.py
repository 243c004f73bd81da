"""Challenge rating parsing and tier reference tables.

Challenge ratings arrive as ints, floats, decimal strings or explicit
fractions ("1/4"). They are parsed into exact :class:`fractions.Fraction`
values without any dynamic evaluation, so "1/8" compares exactly against
the Minion boundary of 1/4.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from fractions import Fraction
from types import MappingProxyType

from adversary_forge.core.constants import MAX_TIER, MIN_TIER, TIER_CR_BREAKPOINTS
from adversary_forge.core.exceptions import ChallengeRatingError
from adversary_forge.core.logging import get_logger


logger = get_logger(__name__)

_FRACTION = re.compile(r"^\s*(\d+)\s*/\s*(\d+)\s*$")
_DECIMAL = re.compile(r"^\s*(\d+(?:\.\d+)?|\.\d+)\s*$")


# =============================================================================
# Parsing
# =============================================================================


def parse_challenge_rating(value: str | int | float | Fraction) -> Fraction:
    """Parse a raw challenge rating into an exact fraction.

    Args:
        value: Challenge rating such as 5, 0.5, "2", "0.25" or "1/8".

    Returns:
        The challenge rating as a Fraction.

    Raises:
        ChallengeRatingError: If the value is malformed, negative, or a
            fraction with a zero denominator.

    Example:
        >>> parse_challenge_rating("1/4")
        Fraction(1, 4)
    """
    if isinstance(value, bool):
        raise ChallengeRatingError("Challenge rating must be a number", value=value)

    if isinstance(value, Fraction):
        cr = value
    elif isinstance(value, int):
        cr = Fraction(value)
    elif isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            raise ChallengeRatingError("Challenge rating must be finite", value=value)
        # limit_denominator keeps 0.125 exact and absorbs binary float noise
        cr = Fraction(value).limit_denominator(1000)
    elif isinstance(value, str):
        cr = _parse_cr_string(value)
    else:
        raise ChallengeRatingError(
            f"Unsupported challenge rating type: {type(value).__name__}",
            value=value,
        )

    if cr < 0:
        raise ChallengeRatingError("Challenge rating cannot be negative", value=value)
    return cr


def _parse_cr_string(text: str) -> Fraction:
    fraction_match = _FRACTION.match(text)
    if fraction_match:
        numerator, denominator = (int(group) for group in fraction_match.groups())
        if denominator == 0:
            raise ChallengeRatingError(
                "Challenge rating fraction has a zero denominator",
                value=text,
            )
        return Fraction(numerator, denominator)

    decimal_match = _DECIMAL.match(text)
    if decimal_match:
        return Fraction(decimal_match.group(1))

    stripped = text.strip()
    if stripped.startswith("-"):
        raise ChallengeRatingError("Challenge rating cannot be negative", value=text)
    raise ChallengeRatingError(f"Malformed challenge rating: {text!r}", value=text)


def format_challenge_rating(cr: Fraction) -> str:
    """Render a challenge rating the way stat blocks print it.

    Args:
        cr: Parsed challenge rating.

    Returns:
        "1/4" for fractions below one, "5" for whole numbers, otherwise
        the fraction as written.
    """
    if cr.denominator == 1:
        return str(cr.numerator)
    return f"{cr.numerator}/{cr.denominator}"


# =============================================================================
# Tiers
# =============================================================================


def cr_to_tier(cr: Fraction | int | float) -> int:
    """Map a challenge rating onto a Daggerheart tier.

    Args:
        cr: Parsed challenge rating.

    Returns:
        Tier 1 for CR <= 2, 2 for <= 6, 3 for <= 13, otherwise 4.
    """
    for max_cr, tier in TIER_CR_BREAKPOINTS:
        if cr <= max_cr:
            return tier
    return MAX_TIER


@dataclass(frozen=True)
class TierDefaults:
    """Reference ranges for adversaries of one tier.

    Attributes:
        cr_range: (min, max) challenge ratings mapping to the tier.
        evasion: Default Evasion.
        evasion_range: (min, max) typical Evasion.
        hp_standard: (min, max) HP of a standard adversary.
        hp_bruiser: (min, max) HP of a bruiser.
        hp_solo: (min, max) HP of a solo.
        stress_range: (min, max) Stress.
        attack_modifier: Default attack modifier.
        attack_modifier_range: (min, max) attack modifier.
        dice_pool: Typical number of damage dice.
    """

    cr_range: tuple[int, int]
    evasion: int
    evasion_range: tuple[int, int]
    hp_standard: tuple[int, int]
    hp_bruiser: tuple[int, int]
    hp_solo: tuple[int, int]
    stress_range: tuple[int, int]
    attack_modifier: int
    attack_modifier_range: tuple[int, int]
    dice_pool: int


TIER_DEFAULTS: MappingProxyType[int, TierDefaults] = MappingProxyType(
    {
        1: TierDefaults(
            cr_range=(0, 2),
            evasion=11,
            evasion_range=(8, 13),
            hp_standard=(2, 4),
            hp_bruiser=(4, 6),
            hp_solo=(6, 8),
            stress_range=(2, 3),
            attack_modifier=1,
            attack_modifier_range=(-1, 2),
            dice_pool=1,
        ),
        2: TierDefaults(
            cr_range=(3, 6),
            evasion=14,
            evasion_range=(12, 16),
            hp_standard=(3, 5),
            hp_bruiser=(5, 7),
            hp_solo=(7, 9),
            stress_range=(3, 5),
            attack_modifier=2,
            attack_modifier_range=(1, 3),
            dice_pool=2,
        ),
        3: TierDefaults(
            cr_range=(7, 13),
            evasion=17,
            evasion_range=(15, 19),
            hp_standard=(4, 6),
            hp_bruiser=(6, 9),
            hp_solo=(9, 11),
            stress_range=(4, 6),
            attack_modifier=3,
            attack_modifier_range=(2, 4),
            dice_pool=3,
        ),
        4: TierDefaults(
            cr_range=(14, 30),
            evasion=20,
            evasion_range=(18, 22),
            hp_standard=(5, 8),
            hp_bruiser=(8, 10),
            hp_solo=(10, 12),
            stress_range=(5, 10),
            attack_modifier=4,
            attack_modifier_range=(3, 5),
            dice_pool=4,
        ),
    }
)


@dataclass(frozen=True)
class TierInfo:
    """Complete reference information for one tier.

    Attributes:
        tier: The tier (1-4).
        cr_range: (min, max) challenge ratings.
        hp_range: (min, max) HP across standard to solo adversaries.
        stress: Suggested Stress (midpoint of the range, rounded down).
        stress_range: (min, max) Stress.
        evasion: Default Evasion.
        evasion_range: (min, max) Evasion.
        attack_modifier: Default attack modifier.
        dice_pool: Typical number of damage dice.
    """

    tier: int
    cr_range: tuple[int, int]
    hp_range: tuple[int, int]
    stress: int
    stress_range: tuple[int, int]
    evasion: int
    evasion_range: tuple[int, int]
    attack_modifier: int
    dice_pool: int


def get_tier_info(tier: int) -> TierInfo:
    """Get the reference information for a tier.

    Args:
        tier: Daggerheart tier (1-4).

    Returns:
        TierInfo for the tier.

    Raises:
        ValueError: If the tier is outside 1-4.
    """
    if not MIN_TIER <= tier <= MAX_TIER:
        raise ValueError(f"Tier must be between {MIN_TIER} and {MAX_TIER}, got {tier}")

    defaults = TIER_DEFAULTS[tier]
    low_stress, high_stress = defaults.stress_range
    return TierInfo(
        tier=tier,
        cr_range=defaults.cr_range,
        hp_range=(defaults.hp_standard[0], defaults.hp_solo[1]),
        stress=(low_stress + high_stress) // 2,
        stress_range=defaults.stress_range,
        evasion=defaults.evasion,
        evasion_range=defaults.evasion_range,
        attack_modifier=defaults.attack_modifier,
        dice_pool=defaults.dice_pool,
    )


def get_tier_info_for_cr(cr: str | int | float | Fraction) -> TierInfo:
    """Get tier reference information straight from a challenge rating.

    Args:
        cr: Raw or parsed challenge rating.

    Returns:
        TierInfo for the matching tier.

    Raises:
        ChallengeRatingError: If the challenge rating is malformed.
    """
    tier = cr_to_tier(parse_challenge_rating(cr))
    logger.debug("Tier info resolved", cr=str(cr), tier=tier)
    return get_tier_info(tier)


__all__ = [
    "parse_challenge_rating",
    "format_challenge_rating",
    "cr_to_tier",
    "TierDefaults",
    "TIER_DEFAULTS",
    "TierInfo",
    "get_tier_info",
    "get_tier_info_for_cr",
]

"""Core stat conversion.

Maps a creature's numeric power onto Daggerheart tier, difficulty, damage
thresholds, HP, Stress and Evasion with fixed formulas. Every formula is
integer arithmetic so results are exact and repeatable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction

from adversary_forge.core.constants import (
    EVASION_DENOMINATOR,
    EVASION_NUMERATOR,
    MAJOR_DIFFICULTY_CR_FACTOR,
    MAX_SANE_EVASION,
    MAX_TIER,
    MIN_SANE_EVASION,
    MIN_TIER,
    SOLO_HP_DIVISOR,
    SOLO_HP_PER_TIER,
    STANDARD_HP_DIVISOR,
    STANDARD_HP_PER_TIER,
)
from adversary_forge.core.logging import get_logger
from adversary_forge.engine.challenge import cr_to_tier, parse_challenge_rating
from adversary_forge.engine.classifier import ClassificationResult
from adversary_forge.models.adversary import CoreStats, DamageThresholds
from adversary_forge.models.enums import AdversaryType, Difficulty
from adversary_forge.models.source import SourceCreature


logger = get_logger(__name__)

# (minor, major, severe) as (tier multiplier, offset) pairs
_THRESHOLD_FORMULAS: dict[Difficulty, tuple[tuple[int, int], ...]] = {
    Difficulty.MINOR: ((1, 2), (2, 4), (3, 6)),
    Difficulty.MAJOR: ((1, 3), (2, 6), (3, 9)),
    Difficulty.SEVERE: ((1, 4), (2, 8), (3, 12)),
}


def determine_difficulty(
    archetype: AdversaryType,
    cr: Fraction | int | float,
    tier: int,
) -> Difficulty:
    """Pick the difficulty band for an adversary.

    Args:
        archetype: Classified archetype.
        cr: Parsed challenge rating.
        tier: Tier derived from the challenge rating.

    Returns:
        Minor for Minions, Severe for Solos and Leaders, otherwise Major
        when the CR is at least three times the tier, else Minor.
    """
    if archetype is AdversaryType.MINION:
        return Difficulty.MINOR
    if archetype in (AdversaryType.SOLO, AdversaryType.LEADER):
        return Difficulty.SEVERE
    if cr >= tier * MAJOR_DIFFICULTY_CR_FACTOR:
        return Difficulty.MAJOR
    return Difficulty.MINOR


def calculate_thresholds(tier: int, difficulty: Difficulty) -> DamageThresholds:
    """Compute damage thresholds for a tier and difficulty.

    Args:
        tier: Tier (1-4).
        difficulty: Difficulty band.

    Returns:
        Strictly increasing thresholds.
    """
    minor, major, severe = (
        factor * tier + offset for factor, offset in _THRESHOLD_FORMULAS[difficulty]
    )
    return DamageThresholds(minor=minor, major=major, severe=severe)


def convert_hp(source_hp: int, archetype: AdversaryType, tier: int) -> int:
    """Convert source hit points to Daggerheart HP.

    Args:
        source_hp: Average source hit points.
        archetype: Classified archetype.
        tier: Tier (1-4).

    Returns:
        1 for Minions; max(hp // 8, 4 * tier) for Solos;
        max(hp // 10, 2 * tier) for everything else.
    """
    if archetype is AdversaryType.MINION:
        return 1
    if archetype is AdversaryType.SOLO:
        return max(source_hp // SOLO_HP_DIVISOR, tier * SOLO_HP_PER_TIER)
    return max(source_hp // STANDARD_HP_DIVISOR, tier * STANDARD_HP_PER_TIER)


def calculate_stress(archetype: AdversaryType, tier: int) -> int:
    """Base Stress for an archetype at a tier (0 / 2*tier / tier)."""
    if archetype is AdversaryType.MINION:
        return 0
    if archetype is AdversaryType.SOLO:
        return tier * 2
    return tier


def convert_evasion(armor: int, tier: int) -> int:
    """Convert armor class to Evasion: floor(armor * 0.8) + tier.

    Args:
        armor: Source armor class.
        tier: Tier (1-4).

    Returns:
        Evasion, e.g. armor 15 at tier 1 gives 13.
    """
    return armor * EVASION_NUMERATOR // EVASION_DENOMINATOR + tier


def convert_core_stats(record: SourceCreature, classification: ClassificationResult) -> CoreStats:
    """Convert a creature's numbers into a core stat bundle.

    Args:
        record: The source creature.
        classification: Its classification.

    Returns:
        The core stats.

    Raises:
        ChallengeRatingError: If the challenge rating is malformed.
    """
    cr = parse_challenge_rating(record.challenge_rating.cr)
    tier = cr_to_tier(cr)
    archetype = classification.archetype
    difficulty = determine_difficulty(archetype, cr, tier)

    stats = CoreStats(
        tier=tier,
        difficulty=difficulty,
        thresholds=calculate_thresholds(tier, difficulty),
        hp=convert_hp(record.hit_points.average, archetype, tier),
        stress=calculate_stress(archetype, tier),
        evasion=convert_evasion(record.armor_class.value, tier),
    )
    logger.debug(
        "Core stats converted",
        creature=record.name,
        tier=stats.tier,
        difficulty=stats.difficulty.value,
        hp=stats.hp,
        stress=stats.stress,
        evasion=stats.evasion,
    )
    return stats


@dataclass(frozen=True)
class StatValidation:
    """Non-blocking sanity check result for a stat bundle."""

    is_valid: bool
    issues: tuple[str, ...] = field(default_factory=tuple)


def validate_core_stats(stats: CoreStats) -> StatValidation:
    """Flag stats outside their expected ranges.

    Nothing is raised; callers decide what to do with the issues.

    Args:
        stats: Stats to check.

    Returns:
        A StatValidation listing every problem found.
    """
    issues: list[str] = []
    if not MIN_TIER <= stats.tier <= MAX_TIER:
        issues.append(f"Tier {stats.tier} out of range ({MIN_TIER}-{MAX_TIER})")
    if stats.hp < 1:
        issues.append(f"HP {stats.hp} must be at least 1")
    if stats.stress < 0:
        issues.append(f"Stress {stats.stress} cannot be negative")
    if not MIN_SANE_EVASION <= stats.evasion <= MAX_SANE_EVASION:
        issues.append(
            f"Evasion {stats.evasion} outside expected range "
            f"({MIN_SANE_EVASION}-{MAX_SANE_EVASION})"
        )
    if stats.thresholds.minor >= stats.thresholds.major:
        issues.append("Minor threshold must be less than Major threshold")
    if stats.thresholds.major >= stats.thresholds.severe:
        issues.append("Major threshold must be less than Severe threshold")
    return StatValidation(is_valid=not issues, issues=tuple(issues))


def summarize_core_stats(stats: CoreStats) -> str:
    """Render a three-line human-readable summary of the stats."""
    thresholds = stats.thresholds
    return "\n".join(
        (
            f"Tier {stats.tier} {stats.difficulty.value} Adversary",
            f"HP: {stats.hp} | Stress: {stats.stress} | Evasion: {stats.evasion}",
            f"Thresholds: Minor {thresholds.minor} / Major {thresholds.major} "
            f"/ Severe {thresholds.severe}",
        )
    )


__all__ = [
    "determine_difficulty",
    "calculate_thresholds",
    "convert_hp",
    "calculate_stress",
    "convert_evasion",
    "convert_core_stats",
    "StatValidation",
    "validate_core_stats",
    "summarize_core_stats",
]

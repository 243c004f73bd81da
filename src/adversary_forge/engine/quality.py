"""Quality checks for converted adversaries.

Runs structure, balance and consistency checks over an assembled adversary
and scores the result out of 100. Nothing here raises; the report is for
whoever reviews the conversion.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType

from adversary_forge.core.constants import MAX_TIER, MIN_TIER
from adversary_forge.core.logging import get_logger
from adversary_forge.engine.challenge import TIER_DEFAULTS
from adversary_forge.models.adversary import Adversary
from adversary_forge.models.enums import AdversaryType, FeatureCostType, FeatureType, RangeBand


logger = get_logger(__name__)


class IssueSeverity(StrEnum):
    """How much a quality issue matters."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


_PENALTY: MappingProxyType[IssueSeverity, int] = MappingProxyType(
    {
        IssueSeverity.ERROR: 15,
        IssueSeverity.WARNING: 5,
        IssueSeverity.INFO: 1,
    }
)

# (min, max) Stress before the tier allowance is added to max
STRESS_BY_TYPE: MappingProxyType[AdversaryType, tuple[int, int]] = MappingProxyType(
    {
        AdversaryType.MINION: (0, 1),
        AdversaryType.STANDARD: (1, 6),
        AdversaryType.SKULK: (1, 5),
        AdversaryType.BRUISER: (1, 5),
        AdversaryType.RANGED: (1, 5),
        AdversaryType.SUPPORT: (1, 8),
        AdversaryType.LEADER: (1, 8),
        AdversaryType.HORDE: (1, 3),
        AdversaryType.SOLO: (2, 15),
        AdversaryType.SOCIAL: (1, 6),
        AdversaryType.SWARM: (1, 3),
    }
)

# Multipliers applied to the tier's standard HP range
HP_MULTIPLIER_BY_TYPE: MappingProxyType[AdversaryType, tuple[float, float]] = MappingProxyType(
    {
        AdversaryType.MINION: (1.0, 1.0),
        AdversaryType.STANDARD: (0.8, 1.2),
        AdversaryType.SKULK: (0.6, 1.0),
        AdversaryType.BRUISER: (1.2, 1.6),
        AdversaryType.RANGED: (0.6, 1.0),
        AdversaryType.SUPPORT: (0.7, 1.1),
        AdversaryType.LEADER: (1.0, 1.4),
        AdversaryType.HORDE: (1.5, 2.5),
        AdversaryType.SOLO: (1.5, 2.5),
        AdversaryType.SOCIAL: (0.5, 1.0),
        AdversaryType.SWARM: (1.0, 1.5),
    }
)

VALID_ATTACK_DICE: tuple[int, ...] = (4, 6, 8, 10, 12)
MAX_STRESS_COST = 5
_EVASION_SLACK = 2
_DICE_POOL_SLACK = 2


@dataclass(frozen=True)
class QualityIssue:
    """One problem found in an adversary.

    Attributes:
        field: Dotted path of the offending field.
        severity: Error, warning or info.
        message: What is wrong.
        suggestion: How to fix it, when obvious.
    """

    field: str
    severity: IssueSeverity
    message: str
    suggestion: str | None = None


@dataclass(frozen=True)
class QualityReport:
    """Result of checking an adversary.

    Attributes:
        is_valid: True when there are no errors.
        score: 100 minus 15 per error, 5 per warning and 1 per info, clamped to 0-100.
        issues: Every issue found.
        summary: One-line verdict.
    """

    is_valid: bool
    score: int
    issues: tuple[QualityIssue, ...] = field(default_factory=tuple)
    summary: str = ""

    def count(self, severity: IssueSeverity) -> int:
        """Number of issues with the given severity."""
        return sum(1 for issue in self.issues if issue.severity is severity)


# =============================================================================
# Checks
# =============================================================================


def check_structure(adversary: Adversary) -> list[QualityIssue]:
    """Errors that make the stat block unusable."""
    issues: list[QualityIssue] = []
    if not MIN_TIER <= adversary.tier <= MAX_TIER:
        issues.append(
            QualityIssue("tier", IssueSeverity.ERROR, f"Tier must be 1-4, got {adversary.tier}")
        )
    if adversary.hp < 1:
        issues.append(
            QualityIssue("hp", IssueSeverity.ERROR, f"HP must be at least 1, got {adversary.hp}")
        )
    if adversary.stress < 0:
        issues.append(
            QualityIssue(
                "stress", IssueSeverity.ERROR, f"Stress cannot be negative, got {adversary.stress}"
            )
        )
    if not adversary.attacks:
        issues.append(
            QualityIssue("attacks", IssueSeverity.ERROR, "At least one attack is required")
        )

    thresholds = adversary.thresholds
    if not thresholds.minor < thresholds.major < thresholds.severe:
        issues.append(
            QualityIssue(
                "thresholds",
                IssueSeverity.ERROR,
                f"Thresholds must be in ascending order ({thresholds.minor} < "
                f"{thresholds.major} < {thresholds.severe})",
            )
        )

    for attack in adversary.attacks:
        if attack.damage.dice_size not in VALID_ATTACK_DICE:
            issues.append(
                QualityIssue(
                    f"attacks.{attack.name}.damage",
                    IssueSeverity.ERROR,
                    f"Invalid dice size: d{attack.damage.dice_size}",
                    "Use d4, d6, d8, d10 or d12",
                )
            )
    return issues


def check_balance(adversary: Adversary) -> list[QualityIssue]:
    """Warnings for numbers outside the usual range for tier and archetype."""
    defaults = TIER_DEFAULTS.get(adversary.tier)
    if defaults is None:
        return []

    issues: list[QualityIssue] = []
    archetype = adversary.archetype
    tier = adversary.tier

    if archetype is AdversaryType.MINION:
        if adversary.hp != 1:
            issues.append(
                QualityIssue(
                    "hp",
                    IssueSeverity.WARNING,
                    f"Minions should have 1 HP, got {adversary.hp}",
                    "Set HP to 1",
                )
            )
    else:
        low, high = HP_MULTIPLIER_BY_TYPE[archetype]
        expected_min = math.floor(defaults.hp_standard[0] * low)
        expected_max = math.ceil(defaults.hp_standard[1] * high)
        if not expected_min <= adversary.hp <= expected_max:
            issues.append(
                QualityIssue(
                    "hp",
                    IssueSeverity.WARNING,
                    f"HP {adversary.hp} may be unbalanced for Tier {tier} {archetype.value} "
                    f"(expected {expected_min}-{expected_max})",
                )
            )

    mod_low, mod_high = defaults.attack_modifier_range
    for attack in adversary.attacks:
        if not mod_low <= attack.modifier <= mod_high:
            issues.append(
                QualityIssue(
                    f"attacks.{attack.name}.modifier",
                    IssueSeverity.WARNING,
                    f"Attack modifier {attack.modifier} may be unbalanced for Tier {tier} "
                    f"(expected {mod_low}-{mod_high})",
                )
            )
        if attack.damage.dice_count > defaults.dice_pool + _DICE_POOL_SLACK:
            issues.append(
                QualityIssue(
                    f"attacks.{attack.name}.damage",
                    IssueSeverity.WARNING,
                    f"{attack.damage.dice_count} dice may be too many for Tier {tier} "
                    f"(expected ~{defaults.dice_pool})",
                )
            )

    stress_min, stress_max = STRESS_BY_TYPE[archetype]
    if not stress_min <= adversary.stress <= stress_max + tier:
        issues.append(
            QualityIssue(
                "stress",
                IssueSeverity.WARNING,
                f"Stress {adversary.stress} may be unbalanced for {archetype.value} "
                f"(expected {stress_min}-{stress_max + tier})",
            )
        )

    evasion_low, evasion_high = defaults.evasion_range
    if not evasion_low - _EVASION_SLACK <= adversary.evasion <= evasion_high + _EVASION_SLACK:
        issues.append(
            QualityIssue(
                "evasion",
                IssueSeverity.WARNING,
                f"Evasion {adversary.evasion} may be unbalanced for Tier {tier} "
                f"(expected {evasion_low}-{evasion_high})",
            )
        )

    for feature in adversary.features:
        if feature.cost is not None and feature.cost.cost_type is FeatureCostType.STRESS:
            if feature.cost.amount > MAX_STRESS_COST:
                issues.append(
                    QualityIssue(
                        f"features.{feature.name}.cost",
                        IssueSeverity.WARNING,
                        f'Feature "{feature.name}" cost of {feature.cost.amount} Stress is high '
                        f"(max typical: {MAX_STRESS_COST})",
                    )
                )
    return issues


def check_consistency(adversary: Adversary) -> list[QualityIssue]:
    """Warnings and notes for parts of the stat block that disagree."""
    issues: list[QualityIssue] = []

    seen: set[str] = set()
    for feature in adversary.features:
        key = feature.name.lower()
        if key in seen:
            issues.append(
                QualityIssue(
                    f"features.{feature.name}",
                    IssueSeverity.WARNING,
                    f'Duplicate feature name: "{feature.name}"',
                )
            )
        seen.add(key)

        if feature.kind is FeatureType.REACTION and not feature.trigger:
            issues.append(
                QualityIssue(
                    f"features.{feature.name}.trigger",
                    IssueSeverity.WARNING,
                    f'Reaction "{feature.name}" should have a trigger defined',
                )
            )
        if feature.kind is FeatureType.PASSIVE and feature.cost is not None:
            issues.append(
                QualityIssue(
                    f"features.{feature.name}.cost",
                    IssueSeverity.INFO,
                    f'Passive "{feature.name}" has a cost, which is unusual',
                )
            )

    for attack in adversary.attacks:
        if attack.melee and attack.range in (RangeBand.FAR, RangeBand.VERY_FAR):
            issues.append(
                QualityIssue(
                    f"attacks.{attack.name}.range",
                    IssueSeverity.WARNING,
                    f'Melee attack "{attack.name}" has long range ({attack.range.value})',
                )
            )
        if not attack.melee and attack.range is RangeBand.MELEE:
            issues.append(
                QualityIssue(
                    f"attacks.{attack.name}.range",
                    IssueSeverity.WARNING,
                    f'Ranged attack "{attack.name}" has Melee range',
                )
            )

    if adversary.archetype is AdversaryType.HORDE and adversary.horde is None:
        issues.append(
            QualityIssue(
                "horde",
                IssueSeverity.WARNING,
                "Horde adversaries should have the Horde trait defined",
            )
        )
    return issues


# =============================================================================
# Report
# =============================================================================


def _summary(is_valid: bool, score: int, errors: int, warnings: int, infos: int) -> str:
    if is_valid and score >= 90:
        return f"Excellent quality ({score}/100). {warnings + infos} minor suggestions."
    if is_valid and score >= 70:
        return (
            f"Good quality ({score}/100). {warnings} warnings and {infos} "
            "suggestions to address."
        )
    if is_valid:
        return f"Acceptable quality ({score}/100). Consider addressing {warnings} warnings."
    return (
        f"Invalid adversary ({score}/100). {errors} errors must be fixed. "
        f"{warnings} additional warnings."
    )


def validate_adversary(adversary: Adversary) -> QualityReport:
    """Check an adversary and score it.

    Args:
        adversary: The adversary to check.

    Returns:
        A QualityReport; valid when no check reported an error.
    """
    issues = [
        *check_structure(adversary),
        *check_balance(adversary),
        *check_consistency(adversary),
    ]
    penalty = sum(_PENALTY[issue.severity] for issue in issues)
    score = max(0, min(100, 100 - penalty))

    errors = sum(1 for issue in issues if issue.severity is IssueSeverity.ERROR)
    warnings = sum(1 for issue in issues if issue.severity is IssueSeverity.WARNING)
    infos = len(issues) - errors - warnings
    is_valid = errors == 0

    logger.debug(
        "Adversary quality checked",
        adversary=adversary.name,
        score=score,
        errors=errors,
        warnings=warnings,
    )
    return QualityReport(
        is_valid=is_valid,
        score=score,
        issues=tuple(issues),
        summary=_summary(is_valid, score, errors, warnings, infos),
    )


__all__ = [
    "IssueSeverity",
    "STRESS_BY_TYPE",
    "HP_MULTIPLIER_BY_TYPE",
    "VALID_ATTACK_DICE",
    "MAX_STRESS_COST",
    "QualityIssue",
    "QualityReport",
    "check_structure",
    "check_balance",
    "check_consistency",
    "validate_adversary",
]

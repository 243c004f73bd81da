"""Conversion facade.

Runs the full pipeline for one creature:

1. classify the creature into an archetype and role
2. convert core stats
3. convert attacks
4. compile features
5. fold multiattack and legendary abilities
6. assemble the adversary

Each step appends a line to the conversion log, which travels with the
adversary so that automatic decisions stay auditable.

Example:
    >>> from adversary_forge.engine.converter import convert
    >>> result = convert(creature)
    >>> result.adversary.archetype
    <AdversaryType.MINION: 'Minion'>
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from adversary_forge.core.config import get_settings
from adversary_forge.core.constants import SOURCE_SYSTEM
from adversary_forge.core.exceptions import ConversionError
from adversary_forge.core.logging import bind_context, get_logger, unbind_context
from adversary_forge.engine.abilities import compile_features
from adversary_forge.engine.attacks import convert_attacks, default_attack
from adversary_forge.engine.challenge import format_challenge_rating, parse_challenge_rating
from adversary_forge.engine.classifier import ClassificationResult, classify
from adversary_forge.engine.multiattack import fold
from adversary_forge.engine.stats import convert_core_stats
from adversary_forge.models.adversary import (
    Adversary,
    Attack,
    ConvertedFeature,
    CoreStats,
    HordeTrait,
    Movement,
)
from adversary_forge.models.enums import AdversaryType, RangeBand
from adversary_forge.models.source import SourceCreature


logger = get_logger(__name__)

_DAMAGE_RICHNESS_BONUS = 50


# =============================================================================
# Options & Results
# =============================================================================


@dataclass(frozen=True)
class ConversionOptions:
    """Switches for a single conversion.

    Attributes:
        include_legendary: Fold legendary actions and resistance.
        include_spellcasting: Compile spellcasting features.
        deduplicate: Drop features sharing a name, keeping the richer one.
        default_attack_name: Name of the attack added to attackless creatures.
    """

    include_legendary: bool = True
    include_spellcasting: bool = True
    deduplicate: bool = True
    default_attack_name: str = "Strike"

    @classmethod
    def from_settings(cls) -> ConversionOptions:
        """Build options from the application settings."""
        settings = get_settings().conversion
        return cls(
            include_legendary=settings.include_legendary_features,
            include_spellcasting=settings.include_spellcasting,
            deduplicate=settings.deduplicate_features,
            default_attack_name=settings.default_attack_name,
        )


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of converting one creature.

    Attributes:
        adversary: The converted adversary.
        classification: Archetype and role decision.
        core_stats: Stats before folding bonuses.
        log: Step-by-step conversion notes.
    """

    adversary: Adversary
    classification: ClassificationResult
    core_stats: CoreStats
    log: tuple[str, ...] = field(default_factory=tuple)


# =============================================================================
# Assembly Helpers
# =============================================================================


def _richness(feature: ConvertedFeature) -> int:
    bonus = _DAMAGE_RICHNESS_BONUS if feature.damage is not None else 0
    return len(feature.description) + bonus


def deduplicate_features(
    features: Iterable[ConvertedFeature],
) -> tuple[list[ConvertedFeature], int]:
    """Drop features that share a name, keeping the richer description.

    A feature with damage counts as richer than one without. The survivor
    takes the position of the first feature with that name.

    Args:
        features: Features in composition order.

    Returns:
        Tuple of (unique features, number removed).
    """
    kept: list[ConvertedFeature] = []
    positions: dict[str, int] = {}
    removed = 0
    for feature in features:
        key = feature.name.lower()
        if key not in positions:
            positions[key] = len(kept)
            kept.append(feature)
            continue
        removed += 1
        index = positions[key]
        if _richness(feature) > _richness(kept[index]):
            kept[index] = feature
    return kept, removed


def build_movement(record: SourceCreature) -> Movement:
    """Movement flags from the creature's speeds."""
    speed = record.speed
    return Movement(
        standard=RangeBand.CLOSE,
        can_fly=bool(speed.fly),
        can_swim=bool(speed.swim),
        can_climb=bool(speed.climb),
        can_burrow=bool(speed.burrow),
    )


def build_horde_trait(primary: Attack, hp: int) -> HordeTrait:
    """Horde damage drops by one die once half its HP is marked.

    Args:
        primary: The horde's primary attack.
        hp: The horde's HP.

    Returns:
        The horde trait.
    """
    return HordeTrait(
        starting_damage=primary.damage,
        reduced_damage=primary.damage.with_extra_dice(-1),
        threshold=max(1, hp // 2),
    )


def build_tags(record: SourceCreature, classification: ClassificationResult) -> tuple[str, ...]:
    """Search tags: creature type, size, casting, legendary status and role."""
    tags = [record.creature_type.value.lower(), record.size.value.lower()]
    if record.is_spellcaster:
        tags.append("spellcaster")
    if record.is_legendary:
        tags.append("legendary")
    if classification.role is not None:
        tags.append(classification.role.value.lower())
    return tuple(tags)


# =============================================================================
# Converter
# =============================================================================


class AdversaryConverter:
    """Converts D&D 5E creatures into Daggerheart adversaries.

    The converter holds no per-creature state; one instance can convert any
    number of creatures.

    Attributes:
        options: Switches applied to every conversion.
    """

    def __init__(self, options: ConversionOptions | None = None) -> None:
        """Initialize the converter.

        Args:
            options: Conversion switches; defaults to the application settings.
        """
        self.options = options or ConversionOptions.from_settings()

    def convert(self, record: SourceCreature) -> ConversionResult:
        """Convert one creature.

        Args:
            record: The source creature.

        Returns:
            The conversion result.

        Raises:
            ConversionError: If the input is not a SourceCreature.
            ChallengeRatingError: If the challenge rating is malformed.
            FeatureConversionError: If an ability yields an invalid feature.
        """
        if not isinstance(record, SourceCreature):
            raise ConversionError(
                "Expected a SourceCreature record",
                details={"type": type(record).__name__},
            )

        bind_context(creature=record.name)
        try:
            return self._convert(record)
        finally:
            unbind_context("creature")

    def _convert(self, record: SourceCreature) -> ConversionResult:
        options = self.options
        log: list[str] = []

        classification = classify(record)
        log.append(
            f"Classified as {classification.archetype.value} "
            f"(confidence {classification.confidence:.2f})"
        )
        if classification.role is not None:
            log.append(f"Role: {classification.role.value}")

        stats = convert_core_stats(record, classification)
        log.append(
            f"Tier {stats.tier} {stats.difficulty.value}: HP {stats.hp}, "
            f"Stress {stats.stress}, Evasion {stats.evasion}, Thresholds {stats.thresholds}"
        )

        attacks = convert_attacks(record, stats.tier, classification.archetype)
        log.append(f"Converted {len(attacks)} attacks")

        features = compile_features(
            record,
            include_legendary=False,
            include_spellcasting=options.include_spellcasting,
        )
        log.append(f"Compiled {len(features)} features")

        folded = fold(record, attacks, include_legendary=options.include_legendary)
        log.extend(folded.notes)

        folded_attacks = list(folded.attacks)
        if not folded_attacks:
            folded_attacks = [default_attack(stats.tier, options.default_attack_name)]
            log.append(f"No attacks found; added default {options.default_attack_name} attack")

        all_features = [*features, *folded.features]
        if options.deduplicate:
            all_features, removed = deduplicate_features(all_features)
            if removed:
                log.append(f"Removed {removed} duplicate features")

        horde = None
        if classification.archetype is AdversaryType.HORDE:
            horde = build_horde_trait(folded_attacks[0], stats.hp)
            log.append(
                f"Horde trait: {horde.starting_damage.notation} until {horde.threshold} HP "
                f"marked, then {horde.reduced_damage.notation}"
            )

        stress = stats.stress + folded.bonus_stress
        adversary = Adversary(
            name=record.name,
            tier=stats.tier,
            archetype=classification.archetype,
            role=classification.role,
            difficulty=stats.difficulty,
            evasion=stats.evasion,
            thresholds=stats.thresholds,
            hp=stats.hp,
            stress=stress,
            attacks=tuple(folded_attacks),
            features=tuple(all_features),
            movement=build_movement(record),
            horde=horde,
            tags=build_tags(record, classification),
            source_system=SOURCE_SYSTEM,
            source_cr=format_challenge_rating(
                parse_challenge_rating(record.challenge_rating.cr)
            ),
            classification_confidence=classification.confidence,
            classification_reasoning=classification.reasoning,
            conversion_log=tuple(log),
        )
        logger.info(
            "Creature converted",
            archetype=adversary.archetype.value,
            tier=adversary.tier,
            stress=adversary.stress,
            attacks=len(adversary.attacks),
            features=len(adversary.features),
        )
        return ConversionResult(
            adversary=adversary,
            classification=classification,
            core_stats=stats,
            log=tuple(log),
        )


def convert(
    record: SourceCreature,
    *,
    options: ConversionOptions | None = None,
) -> ConversionResult:
    """Convert one creature with a throwaway converter.

    Args:
        record: The source creature.
        options: Conversion switches; defaults to the application settings.

    Returns:
        The conversion result.
    """
    return AdversaryConverter(options).convert(record)


__all__ = [
    "ConversionOptions",
    "ConversionResult",
    "deduplicate_features",
    "build_movement",
    "build_horde_trait",
    "build_tags",
    "AdversaryConverter",
    "convert",
]

"""Multiattack and legendary action folding.

Daggerheart adversaries attack once per spotlight, so a D&D multiattack is
folded into extra damage dice on one primary attack. Legendary action pools
become bonus Stress and each legendary action a Stress-costed Reaction.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from adversary_forge.core.logging import get_logger
from adversary_forge.engine.abilities import (
    convert_legendary_action,
    convert_legendary_resistance,
)
from adversary_forge.engine.patterns import (
    GENERIC_MULTIATTACK_PATTERN,
    NAMED_MULTIATTACK_PATTERN,
    parse_count,
)
from adversary_forge.models.adversary import Attack, ConvertedFeature
from adversary_forge.models.enums import FeatureType
from adversary_forge.models.source import Multiattack, SourceCreature


logger = get_logger(__name__)

TWO_ATTACK_BONUS_DICE = 1
MANY_ATTACK_BONUS_DICE = 2


# =============================================================================
# Parsing
# =============================================================================


@dataclass(frozen=True)
class AttackCounts:
    """Attack counts parsed from a multiattack.

    Attributes:
        named: (lowercased attack name, count) pairs in order of appearance.
        generic: Total from "makes N attacks" text; 0 when absent. Takes
            precedence over the sum of named counts.
    """

    named: tuple[tuple[str, int], ...] = ()
    generic: int = 0

    @property
    def total(self) -> int:
        """Attacks in the whole sequence, 0 when nothing was parsed."""
        if self.generic:
            return self.generic
        return sum(count for _, count in self.named)

    @property
    def distinct_types(self) -> int:
        """Number of differently named attacks in the sequence."""
        return len(self.named)


def _merge(pairs: Sequence[tuple[str, int]]) -> tuple[tuple[str, int], ...]:
    merged: dict[str, int] = {}
    for name, count in pairs:
        merged[name] = merged.get(name, 0) + count
    return tuple(merged.items())


def parse_multiattack_counts(multiattack: Multiattack) -> AttackCounts:
    """Parse the attack sequence of a multiattack.

    The structured attack list is used on its own when present. Otherwise
    the description is read: "makes N attacks" gives the total and any
    "N with its X" fragments name the attacks, so a sequence like "makes
    three attacks: one with its bite and two with its claws" keeps both.

    Args:
        multiattack: Source multiattack.

    Returns:
        The parsed counts; empty when nothing could be read.

    Example:
        >>> parse_multiattack_counts(Multiattack(
        ...     description="The wolf makes one with its bite and two with its claws."
        ... )).named
        (('bite', 1), ('claws', 2))
    """
    if multiattack.attacks:
        return AttackCounts(
            named=_merge(
                [(entry.attack_name.lower(), entry.count) for entry in multiattack.attacks]
            )
        )

    generic = GENERIC_MULTIATTACK_PATTERN.search(multiattack.description)
    total = parse_count(generic.group(1)) if generic else 0

    fragments = [
        (match.group(2).lower(), parse_count(match.group(1)))
        for match in NAMED_MULTIATTACK_PATTERN.finditer(multiattack.description)
    ]
    return AttackCounts(
        named=_merge([pair for pair in fragments if pair[1] > 0]),
        generic=total,
    )


def bonus_dice_for(total: int) -> int:
    """Extra damage dice for a sequence: +1 for two attacks, +2 for three or more."""
    if total >= 3:
        return MANY_ATTACK_BONUS_DICE
    if total == 2:
        return TWO_ATTACK_BONUS_DICE
    return 0


def _name_matches(attack_name: str, parsed_name: str, *, exact: bool) -> bool:
    if exact:
        return attack_name == parsed_name
    return parsed_name in attack_name or attack_name in parsed_name


def select_primary_attack(attacks: Sequence[Attack], counts: AttackCounts) -> int | None:
    """Pick the index of the attack that absorbs the multiattack.

    The most frequently named attack wins, matched by exact name first and
    then by partial name ("claws" matches "Claw"). Without a name match the
    melee attack with the highest average damage wins, and failing that the
    first attack.

    Args:
        attacks: Converted attacks in source order.
        counts: Parsed multiattack counts.

    Returns:
        Index into attacks, or None when there are no attacks.
    """
    if not attacks:
        return None

    names = [attack.name.lower() for attack in attacks]
    ranked = sorted(counts.named, key=lambda pair: pair[1], reverse=True)
    for parsed_name, _ in ranked:
        for exact in (True, False):
            for index, attack_name in enumerate(names):
                if _name_matches(attack_name, parsed_name, exact=exact):
                    return index

    best_index: int | None = None
    best_average = float("-inf")
    for index, attack in enumerate(attacks):
        if attack.melee and attack.damage.average > best_average:
            best_index = index
            best_average = attack.damage.average
    return 0 if best_index is None else best_index


# =============================================================================
# Folding
# =============================================================================


@dataclass(frozen=True)
class MultiattackResult:
    """Attacks after folding a multiattack.

    Attributes:
        attacks: Attacks with the primary attack enhanced.
        feature: Combined "Multiattack" Action for mixed sequences.
        notes: What the fold did.
    """

    attacks: tuple[Attack, ...]
    feature: ConvertedFeature | None
    notes: str


def _sequence_text(multiattack: Multiattack, counts: AttackCounts) -> str:
    if multiattack.description:
        return multiattack.description
    return ", ".join(f"{count} {name}" for name, count in counts.named)


def fold_multiattack(record: SourceCreature, attacks: Sequence[Attack]) -> MultiattackResult:
    """Fold a creature's multiattack into its converted attacks.

    Only the primary attack's damage changes; it gains +1 die for a
    two-attack sequence and +2 dice for three or more. Sequences naming more
    than one attack type also produce a combined "Multiattack" Action.

    Args:
        record: The source creature.
        attacks: Its converted attacks in source order.

    Returns:
        The folded attacks and optional feature.
    """
    attacks = tuple(attacks)
    multiattack = record.multiattack
    if multiattack is None:
        return MultiattackResult(attacks, None, "No multiattack to convert")

    if not attacks:
        feature = ConvertedFeature(
            name="Multiattack",
            kind=FeatureType.ACTION,
            description=multiattack.description,
            source_ability="Multiattack",
            conversion_notes="Multiattack converted to Action feature (no base attacks)",
        )
        return MultiattackResult(attacks, feature, feature.conversion_notes)

    counts = parse_multiattack_counts(multiattack)
    bonus = bonus_dice_for(counts.total)
    if bonus == 0:
        return MultiattackResult(
            attacks, None, f"Multiattack ({counts.total} attacks) left attacks unchanged"
        )

    primary = select_primary_attack(attacks, counts)
    folded = tuple(
        attack.model_copy(update={"damage": attack.damage.with_extra_dice(bonus)})
        if index == primary
        else attack
        for index, attack in enumerate(attacks)
    )
    primary_name = attacks[primary].name if primary is not None else ""

    if counts.distinct_types > 1:
        notes = (
            f"Mixed multiattack ({counts.total} attacks, {counts.distinct_types} types) - "
            f"{primary_name} enhanced +{bonus}d, combined feature created"
        )
        feature = ConvertedFeature(
            name="Multiattack",
            kind=FeatureType.ACTION,
            description=(
                "Can make multiple attacks in a single action: "
                f"{_sequence_text(multiattack, counts)}"
            ),
            source_ability="Multiattack",
            conversion_notes=notes,
        )
        return MultiattackResult(folded, feature, notes)

    notes = (
        f"Multiattack ({counts.total} attacks) converted to +{bonus} damage dice "
        f"on {primary_name}"
    )
    return MultiattackResult(folded, None, notes)


@dataclass(frozen=True)
class LegendaryResult:
    """Legendary abilities folded into Stress and Reactions.

    Attributes:
        bonus_stress: Stress added from the legendary action pool.
        features: One Reaction per legendary action.
        resistance: Legendary Resistance Reaction, if the creature has it.
        notes: What the fold did.
    """

    bonus_stress: int
    features: tuple[ConvertedFeature, ...]
    resistance: ConvertedFeature | None
    notes: str


def fold_legendary(record: SourceCreature) -> LegendaryResult:
    """Fold legendary actions and resistance.

    Args:
        record: The source creature.

    Returns:
        Bonus Stress equal to the action pool plus the converted Reactions.
    """
    bonus_stress = 0
    features: tuple[ConvertedFeature, ...] = ()
    notes: list[str] = []

    legendary = record.legendary_actions
    if legendary is not None:
        bonus_stress = legendary.count
        features = tuple(convert_legendary_action(action) for action in legendary.actions)
        notes.append(
            f"Legendary action pool ({legendary.count}) -> +{bonus_stress} bonus Stress"
        )
        notes.append(f"{len(features)} legendary actions -> Reaction features")

    resistance = None
    if record.legendary_resistance is not None:
        resistance = convert_legendary_resistance(record.legendary_resistance)
        notes.append(
            f"Legendary Resistance ({record.legendary_resistance.count}/Day) -> "
            "Legendary Resistance (2 Stress reaction)"
        )

    return LegendaryResult(
        bonus_stress=bonus_stress,
        features=features,
        resistance=resistance,
        notes="; ".join(notes) if notes else "No legendary abilities to convert",
    )


@dataclass(frozen=True)
class FoldResult:
    """Combined multiattack and legendary fold.

    Attributes:
        attacks: Folded attacks.
        features: Multiattack feature, legendary Reactions, then resistance.
        bonus_stress: Stress to add to the base pool.
        notes: One note per fold step.
    """

    attacks: tuple[Attack, ...]
    features: tuple[ConvertedFeature, ...] = ()
    bonus_stress: int = 0
    notes: tuple[str, ...] = field(default_factory=tuple)


def fold(
    record: SourceCreature,
    attacks: Sequence[Attack],
    *,
    include_legendary: bool = True,
) -> FoldResult:
    """Run both folds.

    Args:
        record: The source creature.
        attacks: Its converted attacks.
        include_legendary: Fold legendary abilities as well.

    Returns:
        The combined result.
    """
    multiattack = fold_multiattack(record, attacks)
    features: list[ConvertedFeature] = []
    if multiattack.feature is not None:
        features.append(multiattack.feature)
    notes = [multiattack.notes]

    bonus_stress = 0
    if include_legendary:
        legendary = fold_legendary(record)
        bonus_stress = legendary.bonus_stress
        features.extend(legendary.features)
        if legendary.resistance is not None:
            features.append(legendary.resistance)
        notes.append(legendary.notes)

    logger.debug(
        "Multiattack and legendary folded",
        creature=record.name,
        bonus_stress=bonus_stress,
        features=len(features),
    )
    return FoldResult(
        attacks=multiattack.attacks,
        features=tuple(features),
        bonus_stress=bonus_stress,
        notes=tuple(notes),
    )


# =============================================================================
# Inspection
# =============================================================================


def has_multiattack(record: SourceCreature) -> bool:
    """Whether the creature has a multiattack."""
    return record.multiattack is not None


def has_legendary_actions(record: SourceCreature) -> bool:
    """Whether the creature has at least one legendary action."""
    return record.legendary_actions is not None and bool(record.legendary_actions.actions)


def has_legendary_resistance(record: SourceCreature) -> bool:
    """Whether the creature has Legendary Resistance."""
    return record.legendary_resistance is not None


def multiattack_count(record: SourceCreature) -> int:
    """Attacks per turn: the parsed multiattack total, or 1."""
    if record.multiattack is None:
        return 1
    return parse_multiattack_counts(record.multiattack).total or 1


@dataclass(frozen=True)
class SpecializationReport:
    """Which folding paths a creature will go through."""

    has_multiattack: bool
    multiattack_count: int
    has_legendary_actions: bool
    legendary_pool: int
    has_legendary_resistance: bool
    is_spellcaster: bool


def analyze_specializations(record: SourceCreature) -> SpecializationReport:
    """Preview the folding paths for a creature without converting it.

    Args:
        record: The source creature.

    Returns:
        A SpecializationReport.
    """
    return SpecializationReport(
        has_multiattack=has_multiattack(record),
        multiattack_count=multiattack_count(record),
        has_legendary_actions=has_legendary_actions(record),
        legendary_pool=record.legendary_actions.count if record.legendary_actions else 0,
        has_legendary_resistance=has_legendary_resistance(record),
        is_spellcaster=record.is_spellcaster,
    )


__all__ = [
    # Parsing
    "AttackCounts",
    "parse_multiattack_counts",
    "bonus_dice_for",
    "select_primary_attack",
    # Folding
    "MultiattackResult",
    "fold_multiattack",
    "LegendaryResult",
    "fold_legendary",
    "FoldResult",
    "fold",
    # Inspection
    "has_multiattack",
    "has_legendary_actions",
    "has_legendary_resistance",
    "multiattack_count",
    "SpecializationReport",
    "analyze_specializations",
]

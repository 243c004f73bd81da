"""Archetype classification for source creatures.

The classifier reads a creature record and decides which Daggerheart
archetype it plays as, with a confidence and the ordered list of signals
it relied on. Rules are evaluated in priority order and the first one that
fires wins:

1. Absolute overrides: Swarm, Solo, Minion.
2. Text signals: Leader, Support, Horde, Skulk.
3. Statistical fallback: Ranged, Bruiser, otherwise Standard.

A secondary combat role is scored independently of the archetype.

Example:
    >>> from adversary_forge.engine.classifier import classify
    >>> result = classify(goblin)
    >>> result.archetype, result.confidence
    (<AdversaryType.MINION: 'Minion'>, 0.65)
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from fractions import Fraction

from adversary_forge.core.config import get_settings
from adversary_forge.core.constants import MINION_MAX_CR
from adversary_forge.core.exceptions import ClassificationError
from adversary_forge.core.logging import get_logger
from adversary_forge.engine.challenge import parse_challenge_rating
from adversary_forge.engine.patterns import (
    ATTACK_SPELL_KEYWORDS,
    CONTROLLER_KEYWORDS,
    CONTROLLER_SPELLS,
    HORDE_TRAIT_NAMES,
    LEADER_KEYWORDS,
    MOBILITY_KEYWORDS,
    SKIRMISH_KEYWORDS,
    SUPPORT_KEYWORDS,
    SUPPORT_SPELLS,
    SWARM_TRAIT_PHRASES,
    contains_keyword,
)
from adversary_forge.models.enums import AbilityScore, AdversaryType, CombatRole
from adversary_forge.models.source import SourceAttack, SourceCreature


logger = get_logger(__name__)


# =============================================================================
# Result
# =============================================================================


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying one creature.

    Attributes:
        archetype: The chosen adversary archetype.
        role: Secondary combat role, if one scored high enough.
        confidence: Confidence in the archetype, between 0 and 1.
        reasoning: Signals that contributed, in firing order.
    """

    archetype: AdversaryType
    role: CombatRole | None
    confidence: float
    reasoning: tuple[str, ...] = field(default_factory=tuple)

    @property
    def reasoning_text(self) -> str:
        """All reasoning signals joined into one line."""
        return "; ".join(self.reasoning)


@dataclass(frozen=True)
class _Signals:
    """Facts about a creature that several rules look at."""

    ability_text: str
    spell_names: tuple[str, ...]
    ranged_count: float
    melee_count: float
    str_mod: int
    dex_mod: int


def _gather_ability_text(record: SourceCreature) -> str:
    texts: list[str] = []
    for trait in record.traits:
        texts.extend((trait.name, trait.description))
    for action in record.actions:
        texts.extend((action.name, action.description))
    for attack in record.attacks:
        texts.append(attack.name)
        if attack.additional_effects:
            texts.append(attack.additional_effects)
    for reaction in record.reactions:
        texts.extend((reaction.name, reaction.description))
    for bonus in record.bonus_actions:
        texts.extend((bonus.name, bonus.description))
    if record.legendary_actions is not None:
        for legendary in record.legendary_actions.actions:
            texts.extend((legendary.name, legendary.description))
    return " ".join(texts)


def _spell_names(record: SourceCreature) -> tuple[str, ...]:
    if record.spellcasting is None:
        return ()
    return tuple(spell.name.lower() for spell in record.spellcasting.all_spells)


def _count_attack_types(attacks: Iterable[SourceAttack]) -> tuple[float, float]:
    ranged = 0.0
    melee = 0.0
    for attack in attacks:
        if attack.attack_type.is_ranged:
            ranged += 1
        elif attack.attack_type.is_melee:
            melee += 1
        else:
            ranged += 0.5
            melee += 0.5
    return ranged, melee


def _collect_signals(record: SourceCreature) -> _Signals:
    ranged, melee = _count_attack_types(record.attacks)
    return _Signals(
        ability_text=_gather_ability_text(record),
        spell_names=_spell_names(record),
        ranged_count=ranged,
        melee_count=melee,
        str_mod=record.ability_modifier(AbilityScore.STR),
        dex_mod=record.ability_modifier(AbilityScore.DEX),
    )


def _has_spell(spell_names: tuple[str, ...], wanted: tuple[str, ...]) -> bool:
    return any(contains_keyword(spell, wanted) for spell in spell_names)


def _is_high_damage(attack: SourceAttack) -> bool:
    return attack.damage.dice.die_size >= 10 or attack.damage.dice.count >= 2


# =============================================================================
# Absolute Overrides
# =============================================================================


def _swarm_signals(record: SourceCreature) -> list[str]:
    signals: list[str] = []
    if any(subtype.lower() == "swarm" for subtype in record.subtypes):
        signals.append('Creature type includes "swarm" subtype')
    if "swarm of" in record.name.lower():
        signals.append("Name indicates swarm creature")
    for trait in record.traits:
        text = f"{trait.name} {trait.description}".lower()
        if "swarm" in text and any(phrase in text for phrase in SWARM_TRAIT_PHRASES):
            signals.append(f'Has swarm trait "{trait.name}"')
            break
    return signals


def _solo_signals(record: SourceCreature) -> list[str]:
    signals: list[str] = []
    if record.legendary_actions is not None and record.legendary_actions.count > 0:
        signals.append(f"Has {record.legendary_actions.count} legendary actions per round")
    if record.legendary_resistance is not None:
        signals.append(f"Has Legendary Resistance ({record.legendary_resistance.count}/day)")
    if record.lair_actions is not None and record.lair_actions.actions:
        signals.append("Has lair actions indicating boss encounter")
    if record.mythic_actions is not None and record.mythic_actions.actions:
        signals.append("Has mythic actions")
    return signals


# =============================================================================
# Text Signals
# =============================================================================


def _leader_signals(signals: _Signals) -> list[str]:
    keyword = contains_keyword(signals.ability_text, LEADER_KEYWORDS)
    if keyword is None:
        return []
    return [f'Leadership ability ("{keyword}")']


def _support_signals(record: SourceCreature, signals: _Signals) -> list[str]:
    if record.spellcasting is None:
        return []
    keyword = contains_keyword(signals.ability_text, SUPPORT_KEYWORDS)
    if keyword is None:
        return []
    found = [f'Healing/protective ability ("{keyword}") with spellcasting']
    if _has_spell(signals.spell_names, SUPPORT_SPELLS):
        found.append("Has support spells")
    return found


def _horde_signals(record: SourceCreature) -> list[str]:
    for trait in record.traits:
        name = trait.name.lower()
        if any(marker in name for marker in HORDE_TRAIT_NAMES):
            return [f'Has "{trait.name}" suggesting group combat role']
    return []


def _skulk_signals(record: SourceCreature, signals: _Signals) -> list[str]:
    found: list[str] = []
    if signals.dex_mod >= 3:
        keyword = contains_keyword(signals.ability_text, MOBILITY_KEYWORDS)
        if keyword is not None:
            found.append(f'High DEX (+{signals.dex_mod}) with mobility ("{keyword}")')
    fly = record.speed.fly or 0
    if fly >= 40:
        keyword = contains_keyword(signals.ability_text, SKIRMISH_KEYWORDS)
        if keyword is not None:
            found.append(f'Flight ({fly} ft.) with skirmish tactics ("{keyword}")')
    return found


# =============================================================================
# Statistical Fallback
# =============================================================================


def _ranged_signals(record: SourceCreature, signals: _Signals) -> list[str]:
    found: list[str] = []
    if signals.ranged_count > signals.melee_count:
        found.append(
            f"Primarily ranged attacks ({signals.ranged_count:g} ranged vs "
            f"{signals.melee_count:g} melee)"
        )
    if record.attacks and record.attacks[0].attack_type.is_ranged:
        found.append(f'Primary attack "{record.attacks[0].name}" is ranged')
    return found


def _bruiser_signals(record: SourceCreature, signals: _Signals) -> list[str]:
    if signals.str_mod < 4 or signals.str_mod < signals.dex_mod + 2:
        return []
    heavy = next(
        (
            attack
            for attack in record.attacks
            if not attack.attack_type.is_ranged and _is_high_damage(attack)
        ),
        None,
    )
    if heavy is None:
        return []
    found = [
        f"High STR (+{signals.str_mod}) over DEX (+{signals.dex_mod})",
        f'High-damage melee attack "{heavy.name}"',
    ]
    if record.multiattack is not None and signals.melee_count > signals.ranged_count:
        found.append("Multiattack focused on melee")
    return found


# =============================================================================
# Combat Role
# =============================================================================


def determine_role(record: SourceCreature) -> tuple[CombatRole | None, list[str]]:
    """Score every combat role and pick the strongest one.

    Args:
        record: The source creature.

    Returns:
        Tuple of (role or None, reasons for the role). A role is only
        assigned when its score reaches 2; ties keep declaration order.
    """
    return _score_roles(record, _collect_signals(record))


def _score_roles(
    record: SourceCreature,
    signals: _Signals,
) -> tuple[CombatRole | None, list[str]]:
    scores: dict[CombatRole, int] = {
        CombatRole.ARTILLERY: 0,
        CombatRole.BRUISER: 0,
        CombatRole.SKIRMISHER: 0,
        CombatRole.CONTROLLER: 0,
        CombatRole.SUPPORT: 0,
        CombatRole.LEADER: 0,
    }
    reasons: dict[CombatRole, list[str]] = {role: [] for role in scores}

    def score(role: CombatRole, points: int, reason: str) -> None:
        scores[role] += points
        reasons[role].append(reason)

    text = signals.ability_text
    if contains_keyword(text, SUPPORT_KEYWORDS):
        score(CombatRole.SUPPORT, 2, "Has healing/protective abilities")
    if _has_spell(signals.spell_names, SUPPORT_SPELLS):
        score(CombatRole.SUPPORT, 3, "Has support spells")

    if contains_keyword(text, LEADER_KEYWORDS):
        score(CombatRole.LEADER, 3, "Has command/rally abilities")

    if contains_keyword(text, CONTROLLER_KEYWORDS):
        score(CombatRole.CONTROLLER, 2, "Has crowd control abilities")
    if _has_spell(signals.spell_names, CONTROLLER_SPELLS):
        score(CombatRole.CONTROLLER, 3, "Has control spells")

    if signals.ranged_count > signals.melee_count:
        score(CombatRole.ARTILLERY, 2, "Primarily ranged attacks")
    if _has_spell(signals.spell_names, ATTACK_SPELL_KEYWORDS):
        score(CombatRole.ARTILLERY, 2, "Has offensive spells")

    if signals.str_mod >= 4 and signals.melee_count > 0:
        score(CombatRole.BRUISER, 2, "High STR with melee attacks")
    if any(_is_high_damage(attack) for attack in record.attacks):
        score(CombatRole.BRUISER, 1, "Has high-damage attacks")
    if record.multiattack is not None and signals.melee_count > signals.ranged_count:
        score(CombatRole.BRUISER, 1, "Multiattack focused on melee")

    if signals.dex_mod >= 3:
        score(CombatRole.SKIRMISHER, 1, "High DEX suggests mobility")
    for trait in record.traits:
        if contains_keyword(f"{trait.name} {trait.description}", MOBILITY_KEYWORDS):
            score(CombatRole.SKIRMISHER, 2, "Has mobility/evasion traits")
            break
    if (record.speed.walk or 0) >= 40:
        score(CombatRole.SKIRMISHER, 1, "Fast movement speed")
    if (record.speed.fly or 0) >= 40:
        score(CombatRole.SKIRMISHER, 1, "Flight capability for hit-and-run")

    best_role: CombatRole | None = None
    best_score = 0
    for role, value in scores.items():
        if value > best_score:
            best_role, best_score = role, value

    if best_role is None or best_score < 2:
        return None, []
    return best_role, reasons[best_role]


# =============================================================================
# Classification
# =============================================================================


def _confidence(signal_count: int) -> float:
    settings = get_settings().classifier
    confidence = settings.base_confidence + settings.signal_increment * signal_count
    return round(min(confidence, 1.0), 4)


def classify(record: SourceCreature) -> ClassificationResult:
    """Classify a creature into a Daggerheart archetype.

    Confidence is the configured base plus the configured increment for
    every signal that agreed with the chosen archetype, capped at 1.0.
    The Standard fallback uses the confidence floor instead.

    Args:
        record: The source creature.

    Returns:
        The classification result.

    Raises:
        ClassificationError: If record is not a SourceCreature.
        ChallengeRatingError: If the challenge rating is malformed.
    """
    if not isinstance(record, SourceCreature):
        raise ClassificationError(
            f"Expected a SourceCreature, got {type(record).__name__}",
        )

    cr = parse_challenge_rating(record.challenge_rating.cr)
    signals = _collect_signals(record)
    role, role_reasons = _score_roles(record, signals)

    archetype, reasoning = _choose_archetype(record, cr, signals)
    if archetype is AdversaryType.STANDARD:
        confidence = get_settings().classifier.confidence_floor
    else:
        confidence = _confidence(len(reasoning))

    if role is not None:
        reasoning = [*reasoning, f"Role {role.value}: {'; '.join(role_reasons[:2])}"]

    result = ClassificationResult(
        archetype=archetype,
        role=role,
        confidence=confidence,
        reasoning=tuple(reasoning),
    )
    logger.debug(
        "Creature classified",
        creature=record.name,
        archetype=archetype.value,
        role=role.value if role else None,
        confidence=confidence,
    )
    return result


def _choose_archetype(
    record: SourceCreature,
    cr: Fraction,
    signals: _Signals,
) -> tuple[AdversaryType, list[str]]:
    found = _swarm_signals(record)
    if found:
        return AdversaryType.SWARM, found

    found = _solo_signals(record)
    if found:
        return AdversaryType.SOLO, found

    leader = _leader_signals(signals)
    support = _support_signals(record, signals)
    horde = _horde_signals(record)
    skulk = _skulk_signals(record, signals)

    if cr <= Fraction(MINION_MAX_CR) and not (
        leader or support or horde or skulk
    ):
        found = [f"Very low CR ({cr}) indicates minion status"]
        if cr == 0:
            found.append("CR 0 creature - typically minion-level threat")
        return AdversaryType.MINION, found

    for archetype, found in (
        (AdversaryType.LEADER, leader),
        (AdversaryType.SUPPORT, support),
        (AdversaryType.HORDE, horde),
        (AdversaryType.SKULK, skulk),
    ):
        if found:
            return archetype, found

    found = _ranged_signals(record, signals)
    if found:
        return AdversaryType.RANGED, found

    found = _bruiser_signals(record, signals)
    if found:
        return AdversaryType.BRUISER, found

    return AdversaryType.STANDARD, ["No distinguishing signals; default classification"]


# =============================================================================
# Batch Helpers
# =============================================================================


def classify_many(records: Iterable[SourceCreature]) -> list[tuple[str, ClassificationResult]]:
    """Classify several creatures.

    Args:
        records: Source creatures.

    Returns:
        (creature name, result) pairs in input order.
    """
    return [(record.name, classify(record)) for record in records]


@dataclass(frozen=True)
class ClassificationStats:
    """Distribution of archetypes and roles over a batch.

    Attributes:
        total: Number of creatures classified.
        archetypes: Count per archetype.
        roles: Count per role (creatures without a role are not counted).
        average_confidence: Mean confidence, 0.0 for an empty batch.
    """

    total: int
    archetypes: dict[AdversaryType, int]
    roles: dict[CombatRole, int]
    average_confidence: float


def classification_stats(records: Iterable[SourceCreature]) -> ClassificationStats:
    """Summarize how a batch of creatures classifies.

    Args:
        records: Source creatures.

    Returns:
        Archetype and role distributions with the average confidence.
    """
    results = [result for _, result in classify_many(records)]
    archetypes = Counter(result.archetype for result in results)
    roles = Counter(result.role for result in results if result.role is not None)
    average = sum(result.confidence for result in results) / len(results) if results else 0.0
    return ClassificationStats(
        total=len(results),
        archetypes=dict(archetypes),
        roles=dict(roles),
        average_confidence=round(average, 4),
    )


__all__ = [
    "ClassificationResult",
    "ClassificationStats",
    "classify",
    "classify_many",
    "classification_stats",
    "determine_role",
]

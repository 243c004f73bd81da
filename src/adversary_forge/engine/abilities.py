"""Ability compiler.

Turns a creature's free-text traits, actions, reactions, legendary actions,
spellcasting and defensive profile into costed Daggerheart features. Every
converter is a total function: unknown text falls back to a plain Passive or
Action rather than failing.

Example:
    >>> from adversary_forge.models import Trait
    >>> convert_trait(Trait(name="Amphibious", description="It is amphibious.")).kind
    <FeatureType.PASSIVE: 'Passive'>
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from functools import partial
from typing import TypeVar

from pydantic import ValidationError as PydanticValidationError

from adversary_forge.core.config import get_settings
from adversary_forge.core.constants import (
    DEFAULT_REACTION_STRESS,
    DEFAULT_REACTION_TRIGGER,
    LEGENDARY_RESISTANCE_STRESS,
    LEGENDARY_RESISTANCE_TRIGGER,
    LEGENDARY_TRIGGER,
    SAVE_DIFFICULTY_BASE,
)
from adversary_forge.core.exceptions import FeatureConversionError
from adversary_forge.core.logging import get_logger
from adversary_forge.engine.patterns import (
    ABILITY_TO_ATTRIBUTE,
    ACTION_COST_PATTERNS,
    ATTRIBUTE_KEYWORD_PATTERNS,
    AVERAGED_DAMAGE_PHRASE,
    BARE_DAMAGE_PHRASE,
    BECOME_FRIGHTENED,
    CONDITION_MAP,
    DAMAGE_PATTERNS,
    FEAR_MARKER,
    FEAR_PATTERNS,
    PASSIVE_TRAIT_PATTERNS,
    REACTION_PATTERNS,
    REACTION_TRIGGER_PATTERNS,
    SAVE_DC_PHRASE,
    SAVE_RESULT_PHRASE,
    SAVING_THROW_PHRASE,
    SENTENCE,
    WHITESPACE,
    damage_type_for,
)
from adversary_forge.models.adversary import (
    ConvertedFeature,
    DamageExpression,
    Feature,
    stress_cost,
)
from adversary_forge.models.enums import (
    Attribute,
    Condition,
    FeatureType,
    RechargeOn,
)
from adversary_forge.models.source import (
    AttackDamage,
    BonusAction,
    DamageModifiers,
    InnateSpellcasting,
    LegendaryAction,
    LegendaryResistance,
    Reaction,
    Recharge,
    SourceAction,
    SourceCreature,
    Speed,
    Spell,
    TraditionalSpellcasting,
    Trait,
    Uses,
)


logger = get_logger(__name__)

FeatureT = TypeVar("FeatureT", bound=Feature)

_MAX_DICE_COUNT = 20
_DICE_SIZE_RANGE = (2, 20)


# =============================================================================
# Damage & Description Text
# =============================================================================


def _build_damage(
    count: int, size: int, modifier: int, type_word: str | None
) -> DamageExpression | None:
    if not 1 <= count <= _MAX_DICE_COUNT:
        return None
    if not _DICE_SIZE_RANGE[0] <= size <= _DICE_SIZE_RANGE[1]:
        return None
    return DamageExpression(
        dice_count=count,
        dice_size=size,
        modifier=modifier,
        damage_type=damage_type_for(type_word),
    )


def extract_damage(text: str) -> list[DamageExpression]:
    """Pull damage rolls out of ability text.

    The layers in ``DAMAGE_PATTERNS`` are tried in order and the first layer
    with any match wins; later layers are not consulted. Dice outside what a
    Daggerheart roll can express (e.g. d100) are skipped.

    Args:
        text: Ability description.

    Returns:
        Damage expressions in text order, possibly empty.

    Example:
        >>> [str(d) for d in extract_damage("Hit: 7 (1d8 + 3) piercing damage.")]
        ['1d8+3 phy']
    """
    for layer in DAMAGE_PATTERNS:
        matches = list(layer.pattern.finditer(text))
        if not matches:
            continue
        damages: list[DamageExpression] = []
        for match in matches:
            modifier = int(match.group("mod") or 0)
            if match.group("sign") == "-":
                modifier = -modifier
            type_word = match.group("type") if layer.typed else None
            damage = _build_damage(
                int(match.group("count")), int(match.group("size")), modifier, type_word
            )
            if damage is not None:
                damages.append(damage)
        return damages
    return []


def damage_from_source(damage: AttackDamage) -> DamageExpression | None:
    """Convert a structured source damage entry, ignoring riders.

    Args:
        damage: Structured damage from the source record.

    Returns:
        The matching DamageExpression, or None for dice that cannot be expressed.
    """
    dice = damage.dice
    return _build_damage(dice.count, dice.die_size, dice.modifier, damage.damage_type.value)


def _emphasize_damage(match: re.Match[str]) -> str:
    dice, sign, modifier, type_word = match.groups()
    bonus = f"{sign}{modifier}" if sign and modifier and int(modifier) else ""
    return f"**{dice}{bonus} {damage_type_for(type_word).label} damage**"


def simplify_description(text: str, max_sentences: int | None = None) -> str:
    """Rewrite source rules text in Daggerheart terms.

    Damage is bolded in canonical dice notation, save DCs are dropped,
    "saving throw" becomes "Reaction Roll" and the text is cut to its first
    few sentences. Already simplified text passes through unchanged.

    Args:
        text: Source description.
        max_sentences: Sentences to keep; defaults to the configured value.

    Returns:
        The simplified description.
    """
    if max_sentences is None:
        max_sentences = get_settings().conversion.max_description_sentences

    result = AVERAGED_DAMAGE_PHRASE.sub(_emphasize_damage, text)
    result = BARE_DAMAGE_PHRASE.sub(_emphasize_damage, result)
    result = SAVE_DC_PHRASE.sub("", result)
    result = SAVING_THROW_PHRASE.sub(" Reaction Roll", result)
    result = SAVE_RESULT_PHRASE.sub("", result)
    result = WHITESPACE.sub(" ", result).strip()
    result = re.sub(r"\s+([,.;])", r"\1", result)

    sentences = SENTENCE.findall(result)
    if len(sentences) > max_sentences:
        result = " ".join(sentence.strip() for sentence in sentences[:max_sentences])
    return result


# =============================================================================
# Costs, Attributes, Conditions & Fear
# =============================================================================


def recharge_stress(recharge: Recharge) -> int:
    """Stress for a recharge ability: 2 for Recharge 6, otherwise 1."""
    return 2 if recharge.min_roll >= 6 else 1


def uses_stress(uses: Uses) -> int:
    """Stress for a limited-use ability: 2 for once per long rest, otherwise 1."""
    if uses.recharge_on is RechargeOn.LONG_REST and uses.count <= 1:
        return 2
    return 1


def _limited_use_cost(
    recharge: Recharge | None,
    uses: Uses | None,
    *,
    verb: str = "converted to",
) -> tuple[int, str | None]:
    """Derive (stress, note) from recharge or uses metadata; recharge wins."""
    if recharge is not None:
        amount = recharge_stress(recharge)
        return amount, f"{recharge.label} {verb} {amount} Stress"
    if uses is not None:
        amount = uses_stress(uses)
        return amount, f"{uses.count}/{uses.recharge_on.value} {verb} {amount} Stress"
    return 0, None


def _action_cost_floor(name: str, description: str) -> tuple[int, str | None]:
    for rule in ACTION_COST_PATTERNS:
        if rule.pattern.search(name) or rule.pattern.search(description):
            return rule.stress, f"Matched action pattern: {rule.pattern.pattern}"
    return 0, None


def attribute_from_keywords(text: str) -> Attribute | None:
    """Guess a Reaction Roll attribute from keywords in the text.

    Args:
        text: Ability description.

    Returns:
        The first attribute whose keywords appear, or None.
    """
    for pattern, attribute in ATTRIBUTE_KEYWORD_PATTERNS:
        if pattern.search(text):
            return attribute
    return None


def detect_conditions(text: str) -> tuple[Condition, ...]:
    """Map source condition words in the text onto Daggerheart conditions.

    Args:
        text: Ability description.

    Returns:
        Unique conditions in table order.
    """
    found: list[Condition] = []
    for source_condition, condition in CONDITION_MAP.items():
        if condition in found:
            continue
        if re.search(rf"\b{source_condition.value}\b", text, re.IGNORECASE):
            found.append(condition)
    return tuple(found)


def generates_fear(name: str, description: str) -> bool:
    """Whether an ability frightens its targets, judged from name and text."""
    text = f"{name} {description}"
    return any(pattern.search(text) for pattern in FEAR_PATTERNS)


def apply_fear_effect(feature: FeatureT) -> FeatureT:
    """Tag a feature as a Fear source.

    Adds the Frightened condition and rewrites "become frightened" to the
    Fear marker. Applying it twice changes nothing further.

    Args:
        feature: Feature to tag.

    Returns:
        A tagged copy of the feature.
    """
    description = feature.description
    if "mark 1 fear" not in description.lower():
        description = BECOME_FRIGHTENED.sub(FEAR_MARKER, description)

    conditions = feature.applied_conditions
    if Condition.FRIGHTENED not in conditions:
        conditions = (*conditions, Condition.FRIGHTENED)

    return feature.model_copy(
        update={"description": description, "applied_conditions": conditions}
    )


def _with_damage_note(notes: str, damage: DamageExpression | None) -> str:
    if damage is None:
        return notes
    return f"{notes} ({damage.dice_count}d{damage.dice_size} damage extracted)"


# =============================================================================
# Traits, Actions & Reactions
# =============================================================================


def convert_trait(trait: Trait) -> ConvertedFeature:
    """Convert a trait into a feature.

    Traits matching a known passive pattern become that named Passive.
    Otherwise a trait with recharge or limited uses becomes an Action with
    a derived Stress cost, and anything else a Passive.

    Args:
        trait: Source trait.

    Returns:
        The converted feature.
    """
    for rule in PASSIVE_TRAIT_PATTERNS:
        match = rule.pattern.search(trait.description)
        if match:
            name, description = rule.render(match)
            return ConvertedFeature(
                name=name,
                kind=FeatureType.PASSIVE,
                description=description,
                source_ability=trait.name,
                conversion_notes=f"Matched passive pattern: {rule.pattern.pattern}",
            )

    amount, note = _limited_use_cost(trait.recharge, trait.uses)
    if note is None:
        return ConvertedFeature(
            name=trait.name,
            kind=FeatureType.PASSIVE,
            description=simplify_description(trait.description),
            source_ability=trait.name,
            conversion_notes="Direct trait conversion",
        )

    return ConvertedFeature(
        name=trait.name,
        kind=FeatureType.ACTION,
        cost=stress_cost(amount),
        description=simplify_description(trait.description),
        reaction_roll_attribute=attribute_from_keywords(trait.description),
        source_ability=trait.name,
        conversion_notes=note,
    )


def convert_action(action: SourceAction) -> ConvertedFeature:
    """Convert a non-attack action into an Action feature.

    The cost is the larger of the action-name floor (breath weapons, gazes
    and the like) and the cost derived from recharge or uses. The floor is a
    minimum, so recharge never lowers it: a Recharge 5-6 breath weapon costs
    2 Stress even though Recharge 5-6 on its own costs 1.

    Args:
        action: Source action.

    Returns:
        The converted feature.
    """
    floor, floor_note = _action_cost_floor(action.name, action.description)
    derived, derived_note = _limited_use_cost(action.recharge, action.uses, verb="=")
    notes = derived_note or floor_note or "Direct action conversion"

    if action.damage is not None:
        damage = damage_from_source(action.damage)
    else:
        damages = extract_damage(action.description)
        damage = damages[0] if damages else None

    target = None
    if action.area_of_effect is not None:
        area = action.area_of_effect
        target = f"{area.size}-foot {area.shape.value}"

    attribute = None
    difficulty = None
    if action.saving_throw is not None:
        attribute = ABILITY_TO_ATTRIBUTE[action.saving_throw.ability]
        difficulty = action.saving_throw.dc // 2 + SAVE_DIFFICULTY_BASE

    feature = ConvertedFeature(
        name=action.name,
        kind=FeatureType.ACTION,
        cost=stress_cost(max(floor, derived)),
        description=simplify_description(action.description),
        damage=damage,
        target=target,
        reaction_roll_attribute=attribute,
        reaction_roll_difficulty=difficulty,
        applied_conditions=detect_conditions(action.description),
        source_ability=action.name,
        conversion_notes=_with_damage_note(notes, damage),
    )
    if generates_fear(action.name, action.description):
        feature = apply_fear_effect(feature)
    return feature


def convert_bonus_action(bonus: BonusAction) -> ConvertedFeature:
    """Convert a bonus action into an Action feature.

    Args:
        bonus: Source bonus action.

    Returns:
        The converted feature; free unless it recharges or has limited uses.
    """
    amount, note = _limited_use_cost(bonus.recharge, bonus.uses, verb="=")
    notes = "Bonus action converted to Action feature"
    if note is not None:
        notes = f"Bonus action with {note}"

    damages = extract_damage(bonus.description)
    damage = damages[0] if damages else None
    feature = ConvertedFeature(
        name=bonus.name,
        kind=FeatureType.ACTION,
        cost=stress_cost(amount),
        description=simplify_description(bonus.description),
        damage=damage,
        applied_conditions=detect_conditions(bonus.description),
        source_ability=f"{bonus.name} (Bonus Action)",
        conversion_notes=_with_damage_note(notes, damage),
    )
    if generates_fear(bonus.name, bonus.description):
        feature = apply_fear_effect(feature)
    return feature


def extract_trigger(description: str) -> str | None:
    """Find trigger wording such as "when a creature hits it" in reaction text.

    Args:
        description: Reaction description.

    Returns:
        The trigger, starting with "When", or None.
    """
    for pattern in REACTION_TRIGGER_PATTERNS:
        match = pattern.search(description)
        if match:
            clause = match.group(1).strip().rstrip(",")
            return f"When {clause}"
    return None


def convert_reaction(reaction: Reaction) -> ConvertedFeature:
    """Convert a reaction into a Reaction feature.

    Reactions cost 1 Stress by default. Well-known reactions (Parry, Shield,
    Counterspell, ...) replace both cost and trigger.

    Args:
        reaction: Source reaction.

    Returns:
        The converted feature.
    """
    amount = DEFAULT_REACTION_STRESS
    trigger = reaction.trigger or extract_trigger(reaction.description) or DEFAULT_REACTION_TRIGGER
    notes = "Direct reaction conversion"

    for rule in REACTION_PATTERNS:
        if rule.pattern.search(reaction.name):
            amount = rule.stress
            trigger = rule.trigger
            notes = f"Matched reaction pattern: {reaction.name}"
            break

    damages = extract_damage(reaction.description)
    damage = damages[0] if damages else None
    return ConvertedFeature(
        name=reaction.name,
        kind=FeatureType.REACTION,
        cost=stress_cost(amount),
        trigger=trigger,
        description=simplify_description(reaction.description),
        damage=damage,
        applied_conditions=detect_conditions(reaction.description),
        source_ability=reaction.name,
        conversion_notes=_with_damage_note(notes, damage),
    )


def convert_legendary_action(action: LegendaryAction) -> ConvertedFeature:
    """Convert a legendary action into a Reaction feature.

    The legendary point cost passes through unchanged as the Stress cost
    and the trigger is always the end of another creature's turn.

    Args:
        action: Source legendary action.

    Returns:
        The converted feature.
    """
    damages = extract_damage(action.description)
    damage = damages[0] if damages else None
    notes = f"Legendary action ({action.cost} action cost) = {action.cost} Stress"

    feature = ConvertedFeature(
        name=action.name,
        kind=FeatureType.REACTION,
        cost=stress_cost(action.cost),
        trigger=LEGENDARY_TRIGGER,
        description=simplify_description(action.description),
        damage=damage,
        applied_conditions=detect_conditions(action.description),
        source_ability=f"{action.name} (Legendary)",
        conversion_notes=_with_damage_note(notes, damage),
    )
    if generates_fear(action.name, action.description):
        feature = apply_fear_effect(feature)
    return feature


def convert_legendary_resistance(resistance: LegendaryResistance) -> ConvertedFeature:
    """Convert Legendary Resistance into a single Stress-costed Reaction.

    Args:
        resistance: Source legendary resistance.

    Returns:
        The converted feature, reusable as long as Stress allows.
    """
    return ConvertedFeature(
        name="Legendary Resistance",
        kind=FeatureType.REACTION,
        cost=stress_cost(LEGENDARY_RESISTANCE_STRESS),
        trigger=LEGENDARY_RESISTANCE_TRIGGER,
        description=f"{LEGENDARY_RESISTANCE_TRIGGER}, can choose to succeed instead.",
        source_ability=f"Legendary Resistance ({resistance.count}/Day)",
        conversion_notes=(
            f"Legendary Resistance {resistance.count}/day = Reaction with "
            f"{LEGENDARY_RESISTANCE_STRESS} Stress cost"
        ),
    )


# =============================================================================
# Spellcasting
# =============================================================================


def _spell_list(spells: Iterable[Spell]) -> str:
    return ", ".join(spell.name for spell in spells)


def _spell_feature(
    name: str,
    spells: list[Spell],
    *,
    amount: int,
    source: str,
    prefix: str = "Can cast",
) -> ConvertedFeature:
    kind = FeatureType.ACTION if amount > 0 else FeatureType.PASSIVE
    notes = f"{len(spells)} spell(s) grouped"
    if amount > 0:
        notes = f"{notes} at {amount} Stress"
    return ConvertedFeature(
        name=name,
        kind=kind,
        cost=stress_cost(amount),
        description=f"{prefix}: {_spell_list(spells)}.",
        source_ability=source,
        conversion_notes=notes,
    )


def _convert_innate(spellcasting: InnateSpellcasting) -> list[ConvertedFeature]:
    features: list[ConvertedFeature] = []
    if spellcasting.at_will:
        features.append(
            _spell_feature(
                "Innate Magic",
                spellcasting.at_will,
                amount=0,
                source="Innate Spellcasting (At Will)",
                prefix="Can cast at will",
            )
        )

    frequent = [*spellcasting.per_day_3, *spellcasting.per_day_2]
    if frequent:
        frequencies = [
            label
            for label, spells in (
                ("3/day", spellcasting.per_day_3),
                ("2/day", spellcasting.per_day_2),
            )
            if spells
        ]
        features.append(
            _spell_feature(
                "Frequent Spells",
                frequent,
                amount=1,
                source=f"Innate Spellcasting ({', '.join(frequencies)})",
            )
        )

    if spellcasting.per_day_1:
        features.append(
            _spell_feature(
                "Rare Spells",
                spellcasting.per_day_1,
                amount=2,
                source="Innate Spellcasting (1/day)",
            )
        )
    return features


# (feature name, spell levels, Stress, source label)
_SPELL_BANDS: tuple[tuple[str, tuple[int, ...], int, str], ...] = (
    ("Cantrips", (0,), 0, "Spellcasting (Cantrips)"),
    ("Minor Spells", (1, 2, 3), 1, "Spellcasting (1st-3rd)"),
    ("Major Spells", (4, 5, 6), 2, "Spellcasting (4th-6th)"),
    ("Legendary Spells", (7, 8, 9), 3, "Spellcasting (7th-9th)"),
)


def _convert_traditional(spellcasting: TraditionalSpellcasting) -> list[ConvertedFeature]:
    features: list[ConvertedFeature] = []
    for name, levels, amount, source in _SPELL_BANDS:
        spells = spellcasting.spells_of_level(*levels)
        if spells:
            features.append(_spell_feature(name, spells, amount=amount, source=source))
    return features


def convert_spellcasting(
    spellcasting: TraditionalSpellcasting | InnateSpellcasting,
) -> list[ConvertedFeature]:
    """Group a spellcasting block into a few features by power band.

    Innate casting yields at-will, frequent (3/day and 2/day) and rare (1/day)
    groups. Traditional casting yields cantrips and three bands of spell
    levels costing 1, 2 and 3 Stress.

    Args:
        spellcasting: Source spellcasting block.

    Returns:
        Zero to four features, one per non-empty group.
    """
    if isinstance(spellcasting, InnateSpellcasting):
        return _convert_innate(spellcasting)
    return _convert_traditional(spellcasting)


# =============================================================================
# Movement & Defenses
# =============================================================================


def convert_movement(speed: Speed) -> list[ConvertedFeature]:
    """Emit a Passive for each special movement mode."""
    features: list[ConvertedFeature] = []
    if speed.fly:
        hover = " (hover)" if speed.hover else ""
        features.append(
            ConvertedFeature(
                name="Flight",
                kind=FeatureType.PASSIVE,
                description=f"Can fly{hover}.",
                source_ability=f"Fly {speed.fly} ft.{hover}",
                conversion_notes="Flying speed converted to Passive",
            )
        )
    for name, value, mode, description in (
        ("Swimmer", speed.swim, "Swim", "Can swim without difficulty."),
        ("Burrower", speed.burrow, "Burrow", "Can burrow through earth and rock."),
        ("Climber", speed.climb, "Climb", "Can climb without difficulty."),
    ):
        if value:
            features.append(
                ConvertedFeature(
                    name=name,
                    kind=FeatureType.PASSIVE,
                    description=description,
                    source_ability=f"{mode} {value} ft.",
                    conversion_notes=f"{mode} speed converted to Passive",
                )
            )
    return features


def convert_damage_modifiers(modifiers: DamageModifiers | None) -> list[ConvertedFeature]:
    """Emit immunity, resistance and vulnerability Passives.

    Args:
        modifiers: Source damage modifiers, if any.

    Returns:
        One feature per non-empty category.
    """
    if modifiers is None:
        return []

    features: list[ConvertedFeature] = []
    for name, types, label, template in (
        ("Damage Immunity", modifiers.immunities, "Damage Immunities", "Immune to {} damage."),
        (
            "Damage Resistance",
            modifiers.resistances,
            "Damage Resistances",
            "Resistant to {} damage.",
        ),
        (
            "Vulnerability",
            modifiers.vulnerabilities,
            "Damage Vulnerabilities",
            "Takes extra damage from {} sources.",
        ),
    ):
        if not types:
            continue
        listed = ", ".join(damage_type.value for damage_type in types)
        features.append(
            ConvertedFeature(
                name=name,
                kind=FeatureType.PASSIVE,
                description=template.format(listed),
                source_ability=f"{label}: {listed}",
                conversion_notes=f"{label} converted to Passive",
            )
        )
    return features


def convert_condition_immunities(record: SourceCreature) -> list[ConvertedFeature]:
    """Emit one Passive listing every condition the creature ignores."""
    if not record.condition_immunities:
        return []
    listed = ", ".join(condition.value for condition in record.condition_immunities)
    noun = "condition" if len(record.condition_immunities) == 1 else "conditions"
    return [
        ConvertedFeature(
            name="Condition Immunity",
            kind=FeatureType.PASSIVE,
            description=f"Immune to the {listed} {noun}.",
            source_ability=f"Condition Immunities: {listed}",
            conversion_notes="Condition immunities converted to Passive",
        )
    ]


# =============================================================================
# Compilation
# =============================================================================


def _guarded(
    creature_name: str,
    ability_name: str,
    converter: Callable[[], ConvertedFeature | list[ConvertedFeature]],
) -> list[ConvertedFeature]:
    try:
        result = converter()
    except PydanticValidationError as exc:
        raise FeatureConversionError(
            f"Could not build feature from '{ability_name}'",
            ability_name=ability_name,
            creature_name=creature_name,
            details={"errors": exc.error_count()},
        ) from exc
    if isinstance(result, list):
        return result
    return [result]


def compile_features(
    record: SourceCreature,
    *,
    include_legendary: bool | None = None,
    include_spellcasting: bool | None = None,
) -> list[ConvertedFeature]:
    """Compile every non-attack ability of a creature into features.

    Order: traits, actions, bonus actions, reactions, legendary actions,
    spellcasting, movement, damage modifiers, condition immunities.
    Legendary resistance is left to the folding step.

    Args:
        record: The source creature.
        include_legendary: Include legendary actions; defaults to settings.
        include_spellcasting: Include spellcasting; defaults to settings.

    Returns:
        Features in composition order.

    Raises:
        FeatureConversionError: If an ability yields an invalid feature.
    """
    settings = get_settings().conversion
    if include_legendary is None:
        include_legendary = settings.include_legendary_features
    if include_spellcasting is None:
        include_spellcasting = settings.include_spellcasting

    name = record.name
    features: list[ConvertedFeature] = []
    for trait in record.traits:
        features += _guarded(name, trait.name, partial(convert_trait, trait))
    for action in record.actions:
        features += _guarded(name, action.name, partial(convert_action, action))
    for bonus in record.bonus_actions:
        features += _guarded(name, bonus.name, partial(convert_bonus_action, bonus))
    for reaction in record.reactions:
        features += _guarded(name, reaction.name, partial(convert_reaction, reaction))

    if include_legendary and record.legendary_actions is not None:
        for legendary in record.legendary_actions.actions:
            features += _guarded(
                name,
                legendary.name,
                partial(convert_legendary_action, legendary),
            )

    if include_spellcasting and record.spellcasting is not None:
        features += _guarded(
            name, "Spellcasting", partial(convert_spellcasting, record.spellcasting)
        )

    features += convert_movement(record.speed)
    features += convert_damage_modifiers(record.damage_modifiers)
    features += convert_condition_immunities(record)

    logger.debug(
        "Features compiled",
        creature=name,
        count=len(features),
        stress_cost=total_stress_cost(features),
    )
    return features


# =============================================================================
# Utilities
# =============================================================================


def filter_by_kind(features: Iterable[FeatureT], kind: FeatureType) -> list[FeatureT]:
    """Keep only the features of one kind."""
    return [feature for feature in features if feature.kind == kind]


def total_stress_cost(features: Iterable[Feature]) -> int:
    """Sum the Stress costs of a set of features."""
    return sum(feature.stress_amount for feature in features)


@dataclass(frozen=True)
class FeatureSummary:
    """Counts and notes for a compiled feature set.

    Attributes:
        total: Number of features.
        passive: Passive features.
        action: Action features.
        reaction: Reaction features.
        total_stress_cost: Combined Stress cost.
        conversion_notes: "name: notes" lines for features with notes.
    """

    total: int
    passive: int
    action: int
    reaction: int
    total_stress_cost: int
    conversion_notes: tuple[str, ...] = field(default_factory=tuple)


def summarize_features(features: Iterable[ConvertedFeature]) -> FeatureSummary:
    """Summarize a compiled feature set.

    Args:
        features: Compiled features.

    Returns:
        A FeatureSummary.
    """
    features = list(features)
    return FeatureSummary(
        total=len(features),
        passive=len(filter_by_kind(features, FeatureType.PASSIVE)),
        action=len(filter_by_kind(features, FeatureType.ACTION)),
        reaction=len(filter_by_kind(features, FeatureType.REACTION)),
        total_stress_cost=total_stress_cost(features),
        conversion_notes=tuple(
            f"{feature.name}: {feature.conversion_notes}"
            for feature in features
            if feature.conversion_notes
        ),
    )


__all__ = [
    # Text
    "extract_damage",
    "damage_from_source",
    "simplify_description",
    "extract_trigger",
    # Costs and effects
    "recharge_stress",
    "uses_stress",
    "attribute_from_keywords",
    "detect_conditions",
    "generates_fear",
    "apply_fear_effect",
    # Converters
    "convert_trait",
    "convert_action",
    "convert_bonus_action",
    "convert_reaction",
    "convert_legendary_action",
    "convert_legendary_resistance",
    "convert_spellcasting",
    "convert_movement",
    "convert_damage_modifiers",
    "convert_condition_immunities",
    "compile_features",
    # Utilities
    "filter_by_kind",
    "total_stress_cost",
    "FeatureSummary",
    "summarize_features",
]

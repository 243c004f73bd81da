"""Attack conversion.

Maps D&D 5E weapon and spell attacks onto Daggerheart standard attacks.
Damage dice are re-derived from the source average rather than copied, so
a 2d6+3 greataxe lands in the same band as a 1d12+4 maul.
"""

from __future__ import annotations

from adversary_forge.core.config import get_settings
from adversary_forge.core.logging import get_logger
from adversary_forge.engine.patterns import damage_type_for
from adversary_forge.models.adversary import Attack, DamageExpression
from adversary_forge.models.enums import AdversaryType, DamageType, RangeBand
from adversary_forge.models.source import DiceFormula, SourceAttack, SourceCreature


logger = get_logger(__name__)

# (max source average, dice count, dice size); anything larger is 2d8
DAMAGE_DICE_BANDS: tuple[tuple[float, int, int], ...] = (
    (3.5, 1, 6),
    (5.5, 1, 8),
    (7.5, 1, 10),
    (11, 1, 12),
)
_LARGEST_DICE = (2, 8)

_REACH_FOR_CLOSE = 10
_RANGE_FOR_FAR = 80
_MIXED_RANGE_FOR_RANGED = 30
_DEFAULT_RANGED_NORMAL = 30


# =============================================================================
# Components
# =============================================================================


def convert_attack_modifier(to_hit: int, tier: int) -> int:
    """Attack modifier: half the source to-hit bonus, rounded down, plus tier.

    Args:
        to_hit: Source attack bonus.
        tier: Tier (1-4).

    Returns:
        The Daggerheart attack modifier.
    """
    return to_hit // 2 + tier


def convert_damage_dice(
    dice: DiceFormula, *, tier: int, solo: bool = False
) -> tuple[int, int, int]:
    """Pick Daggerheart dice for a source damage roll.

    Args:
        dice: Source damage dice.
        tier: Tier (1-4).
        solo: Solos add the tier as a flat modifier.

    Returns:
        Tuple of (dice count, dice size, modifier).
    """
    average = dice.average
    count, size = _LARGEST_DICE
    for max_average, band_count, band_size in DAMAGE_DICE_BANDS:
        if average <= max_average:
            count, size = band_count, band_size
            break
    return count, size, tier if solo else 0


def convert_range(attack: SourceAttack) -> RangeBand:
    """Map reach and range in feet onto a range band.

    Melee attacks with 10 ft. reach or more are Close, otherwise Very Close.
    Ranged attacks reaching 80 ft. are Far, otherwise Close. Attacks usable
    either way count as ranged once their normal range is 30 ft.

    Args:
        attack: Source attack.

    Returns:
        The range band.
    """
    reach = attack.range.reach or 0
    normal = attack.range.normal

    if attack.attack_type.is_mixed:
        if normal and normal >= _MIXED_RANGE_FOR_RANGED:
            return RangeBand.FAR if normal >= _RANGE_FOR_FAR else RangeBand.CLOSE
        return RangeBand.CLOSE if reach >= _REACH_FOR_CLOSE else RangeBand.VERY_CLOSE

    if attack.attack_type.is_melee:
        return RangeBand.CLOSE if reach >= _REACH_FOR_CLOSE else RangeBand.VERY_CLOSE

    if (normal or _DEFAULT_RANGED_NORMAL) >= _RANGE_FOR_FAR:
        return RangeBand.FAR
    return RangeBand.CLOSE


def _is_melee(attack: SourceAttack) -> bool:
    if attack.attack_type.is_mixed:
        normal = attack.range.normal
        return not (normal and normal >= _MIXED_RANGE_FOR_RANGED)
    return attack.attack_type.is_melee


def _additional_effects(attack: SourceAttack, tier: int) -> str | None:
    effects: list[str] = []
    if attack.additional_effects:
        effects.append(attack.additional_effects)
    for extra in attack.damage.additional_damage:
        count, size, _ = convert_damage_dice(extra.dice, tier=tier)
        label = damage_type_for(extra.damage_type.value).label
        effects.append(f"plus {count}d{size} {label} damage")
    return "; ".join(effects) or None


# =============================================================================
# Attacks
# =============================================================================


def convert_attack(attack: SourceAttack, tier: int, *, solo: bool = False) -> Attack:
    """Convert one source attack.

    Args:
        attack: Source attack.
        tier: Tier (1-4).
        solo: Whether the adversary is a Solo.

    Returns:
        The Daggerheart attack.

    Example:
        >>> attack = SourceAttack.model_validate({
        ...     "name": "Scimitar", "attack_type": "melee_weapon", "to_hit": 4,
        ...     "damage": {"dice": {"count": 1, "die_size": 6, "modifier": 2},
        ...                "damage_type": "slashing"}})
        >>> str(convert_attack(attack, 1))
        'Scimitar: +3 | Very Close | 1d8 phy'
    """
    count, size, modifier = convert_damage_dice(attack.damage.dice, tier=tier, solo=solo)
    return Attack(
        name=attack.name,
        modifier=convert_attack_modifier(attack.to_hit, tier),
        range=convert_range(attack),
        damage=DamageExpression(
            dice_count=count,
            dice_size=size,
            modifier=modifier,
            damage_type=damage_type_for(attack.damage.damage_type.value),
        ),
        additional_effects=_additional_effects(attack, tier),
        melee=_is_melee(attack),
    )


def convert_attacks(
    record: SourceCreature,
    tier: int,
    archetype: AdversaryType | None = None,
) -> list[Attack]:
    """Convert every attack of a creature, keeping source order.

    Args:
        record: The source creature.
        tier: Tier (1-4).
        archetype: Classified archetype; Solos get a flat damage bonus.

    Returns:
        Converted attacks, empty when the creature has none.
    """
    solo = archetype is AdversaryType.SOLO
    attacks = [convert_attack(attack, tier, solo=solo) for attack in record.attacks]
    logger.debug("Attacks converted", creature=record.name, count=len(attacks), solo=solo)
    return attacks


def default_attack(tier: int, name: str | None = None) -> Attack:
    """Basic melee attack for creatures without any listed attack.

    Args:
        tier: Tier (1-4).
        name: Attack name; defaults to the configured name.

    Returns:
        A Very Close 1d6+tier physical attack at +tier.
    """
    return Attack(
        name=name or get_settings().conversion.default_attack_name,
        modifier=tier,
        range=RangeBand.VERY_CLOSE,
        damage=DamageExpression(
            dice_count=1,
            dice_size=6,
            modifier=tier,
            damage_type=DamageType.PHYSICAL,
        ),
        melee=True,
    )


__all__ = [
    "DAMAGE_DICE_BANDS",
    "convert_attack_modifier",
    "convert_damage_dice",
    "convert_range",
    "convert_attack",
    "convert_attacks",
    "default_attack",
]

"""Tests for the ability compiler."""

from __future__ import annotations

import pytest

from adversary_forge.core.exceptions import FeatureConversionError
from adversary_forge.engine import abilities
from adversary_forge.engine.abilities import (
    apply_fear_effect,
    compile_features,
    convert_action,
    convert_bonus_action,
    convert_condition_immunities,
    convert_damage_modifiers,
    convert_legendary_action,
    convert_legendary_resistance,
    convert_movement,
    convert_reaction,
    convert_spellcasting,
    convert_trait,
    detect_conditions,
    extract_damage,
    extract_trigger,
    filter_by_kind,
    generates_fear,
    simplify_description,
    summarize_features,
    total_stress_cost,
)
from adversary_forge.models.adversary import ConvertedFeature
from adversary_forge.models.enums import Attribute, Condition, DamageType, FeatureType
from adversary_forge.models.source import (
    BonusAction,
    DamageModifiers,
    InnateSpellcasting,
    LegendaryAction,
    LegendaryResistance,
    Reaction,
    SourceAction,
    SourceCreature,
    Speed,
    TraditionalSpellcasting,
    Trait,
)


class TestExtractDamage:
    """Tests for extract_damage."""

    def test_averaged_phrase(self) -> None:
        """Test damage written with its average."""
        damages = extract_damage("Hit: 19 (2d10 + 8) piercing damage.")

        assert [str(damage) for damage in damages] == ["2d10+8 phy"]

    def test_multiple_matches_in_order(self) -> None:
        """Test every match of the winning layer is returned in order."""
        damages = extract_damage(
            "Hit: 7 (1d8 + 3) piercing damage plus 7 (2d6) fire damage."
        )

        assert [str(damage) for damage in damages] == ["1d8+3 phy", "2d6 mag"]

    def test_bare_dice_phrase(self) -> None:
        """Test bare dice with a type word."""
        damages = extract_damage("Each creature takes 3d6 - 1 cold damage.")

        assert [str(damage) for damage in damages] == ["3d6-1 mag"]

    def test_untyped_phrase(self) -> None:
        """Test untyped damage counts as physical."""
        damages = extract_damage("The target takes 2d6 damage.")

        assert [str(damage) for damage in damages] == ["2d6 phy"]

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Each creature takes 7 (2d6) damage.", "2d6 phy"),
            ("The target takes 13 (3d6 + 3) damage.", "3d6+3 phy"),
        ],
    )
    def test_untyped_averaged_phrase(self, text: str, expected: str) -> None:
        """Test untyped damage written with its average."""
        assert [str(damage) for damage in extract_damage(text)] == [expected]

    def test_first_layer_wins(self) -> None:
        """Test later layers are ignored once an earlier one matches."""
        damages = extract_damage("Deals 4 (1d8) slashing damage, then takes 2d6 damage.")

        assert [str(damage) for damage in damages] == ["1d8 phy"]

    def test_inexpressible_dice_skipped(self) -> None:
        """Test d100 rolls are skipped rather than failing."""
        assert extract_damage("It deals 50 (1d100) psychic damage.") == []

    def test_no_damage(self) -> None:
        """Test text without damage."""
        assert extract_damage("The dragon makes a Wisdom (Perception) check.") == []


class TestSimplifyDescription:
    """Tests for simplify_description."""

    def test_rewrites_save_text(self) -> None:
        """Test save DCs vanish and saves become Reaction Rolls."""
        text = (
            "Each creature must make a DC 15 Dexterity saving throw, taking 21 (6d6) "
            "fire damage on a failed save."
        )

        assert simplify_description(text) == (
            "Each creature must make a Dexterity Reaction Roll, taking "
            "**6d6 magic damage**."
        )

    def test_bare_dice_emphasized(self) -> None:
        """Test bare dice are emphasized with their modifier."""
        assert simplify_description("It takes 2d8 + 4 slashing damage.") == (
            "It takes **2d8+4 physical damage**."
        )

    def test_already_simplified_unchanged(self) -> None:
        """Test simplification is idempotent."""
        text = (
            "Each creature must make a DC 15 Dexterity saving throw, taking 21 (6d6) "
            "fire damage on a failed save. Half as much on a success."
        )
        once = simplify_description(text)

        assert simplify_description(once) == once

    def test_sentence_limit(self) -> None:
        """Test long text is cut to the sentence limit."""
        text = "One. Two. Three. Four."

        assert simplify_description(text, max_sentences=2) == "One. Two."
        assert simplify_description(text) == "One. Two. Three."

    def test_sentence_limit_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the default sentence limit is configurable."""
        monkeypatch.setenv("ADVERSARY_FORGE_CONVERSION_MAX_DESCRIPTION_SENTENCES", "1")

        assert simplify_description("One. Two.") == "One."

    def test_short_text_untouched(self) -> None:
        """Test text within the limit keeps its wording."""
        assert simplify_description("It is amphibious") == "It is amphibious"


class TestConditionsAndFear:
    """Tests for condition detection and Fear tagging."""

    def test_detect_conditions(self) -> None:
        """Test condition words map to unique target conditions."""
        text = "The target is grappled and restrained, then knocked prone and poisoned."

        assert detect_conditions(text) == (Condition.RESTRAINED, Condition.VULNERABLE)

    def test_detect_requires_whole_words(self) -> None:
        """Test partial words do not count."""
        assert detect_conditions("It is unstunnedable.") == ()

    @pytest.mark.parametrize(
        ("name", "description", "expected"),
        [
            ("Frightful Presence", "", True),
            ("Horrifying Visage", "", True),
            ("Gaze", "The target must become frightened.", True),
            ("Bite", "The target is frightened of the wolf.", True),
            ("Bite", "Piercing damage.", False),
        ],
    )
    def test_generates_fear(self, name: str, description: str, expected: bool) -> None:
        """Test Fear sources from name and description."""
        assert generates_fear(name, description) is expected

    def test_apply_fear_effect(self) -> None:
        """Test Fear tagging rewrites the text and adds Frightened."""
        feature = ConvertedFeature(
            name="Roar",
            kind=FeatureType.ACTION,
            description="Targets become frightened for 1 minute.",
        )
        tagged = apply_fear_effect(feature)

        assert tagged.description == (
            "Targets **mark 1 Fear** and become Frightened for 1 minute."
        )
        assert tagged.applied_conditions == (Condition.FRIGHTENED,)
        assert feature.applied_conditions == ()

    def test_apply_fear_effect_idempotent(self) -> None:
        """Test tagging twice equals tagging once."""
        feature = ConvertedFeature(
            name="Roar",
            kind=FeatureType.ACTION,
            description="Targets become frightened.",
            applied_conditions=(Condition.FRIGHTENED,),
        )
        once = apply_fear_effect(feature)

        assert apply_fear_effect(once) == once
        assert once.applied_conditions == (Condition.FRIGHTENED,)


class TestConvertTrait:
    """Tests for convert_trait."""

    def test_passive_pattern(self) -> None:
        """Test trait text matching a passive pattern."""
        trait = Trait(
            name="Fey Ancestry",
            description="The elf has advantage on saves and has darkvision out to 60 feet.",
        )
        feature = convert_trait(trait)

        assert feature.name == "Enhanced Senses"
        assert feature.kind is FeatureType.PASSIVE
        assert feature.description == (
            "Has darkvision, allowing perception in special conditions."
        )
        assert feature.source_ability == "Fey Ancestry"
        assert feature.conversion_notes.startswith("Matched passive pattern: ")

    def test_pattern_groups_in_name(self) -> None:
        """Test captured words flow into the feature name."""
        trait = Trait(name="Keen Sight", description="The hawk has keen sight.")

        assert convert_trait(trait).name == "Keen sight"

    def test_direct_passive(self) -> None:
        """Test unmatched traits become plain Passives."""
        trait = Trait(name="Nimble Escape", description="The goblin can Disengage or Hide.")
        feature = convert_trait(trait)

        assert feature.name == "Nimble Escape"
        assert feature.kind is FeatureType.PASSIVE
        assert feature.cost is None
        assert feature.conversion_notes == "Direct trait conversion"

    @pytest.mark.parametrize(("min_roll", "stress"), [(6, 2), (5, 1), (4, 1)])
    def test_recharge_trait(self, min_roll: int, stress: int) -> None:
        """Test recharge traits become Actions costing 2 for Recharge 6, otherwise 1."""
        trait = Trait(
            name="Stench Burst",
            description="Nearby creatures must resist the smell.",
            recharge={"min_roll": min_roll},
        )
        feature = convert_trait(trait)

        assert feature.kind is FeatureType.ACTION
        assert feature.stress_amount == stress
        assert feature.reaction_roll_attribute is Attribute.STRENGTH

    def test_recharge_note(self) -> None:
        """Test recharge provenance is recorded."""
        trait = Trait(name="Surge", recharge={"min_roll": 5})

        assert convert_trait(trait).conversion_notes == "Recharge 5-6 converted to 1 Stress"

    @pytest.mark.parametrize(
        ("uses", "stress", "note"),
        [
            ({"count": 1, "recharge_on": "long rest"}, 2, "1/long rest converted to 2 Stress"),
            ({"count": 3, "recharge_on": "dawn"}, 1, "3/dawn converted to 1 Stress"),
            ({"count": 1, "recharge_on": "short rest"}, 1, "1/short rest converted to 1 Stress"),
        ],
    )
    def test_limited_use_trait(self, uses: dict[str, object], stress: int, note: str) -> None:
        """Test limited-use traits become costed Actions."""
        feature = convert_trait(Trait(name="Surge", uses=uses))

        assert feature.kind is FeatureType.ACTION
        assert feature.stress_amount == stress
        assert feature.conversion_notes == note


class TestConvertAction:
    """Tests for convert_action."""

    def test_breath_weapon(self, young_red_dragon: SourceCreature) -> None:
        """Test a breath weapon with structured save, area and damage."""
        feature = convert_action(young_red_dragon.actions[0])

        assert feature.kind is FeatureType.ACTION
        assert feature.stress_amount == 2
        assert str(feature.damage) == "16d6 mag"
        assert feature.target == "30-foot cone"
        assert feature.reaction_roll_attribute is Attribute.AGILITY
        assert feature.reaction_roll_difficulty == 16
        assert "**16d6 magic damage**" in feature.description
        assert "DC" not in feature.description
        assert feature.conversion_notes == "Recharge 5-6 = 1 Stress (16d6 damage extracted)"

    def test_recharge_without_pattern(self) -> None:
        """Test a recharge action with no pattern floor uses the recharge cost."""
        action = SourceAction(name="Lightning Lash", recharge={"min_roll": 6})

        assert convert_action(action).stress_amount == 2

    def test_pattern_floor(self) -> None:
        """Test pattern actions have a minimum cost."""
        feature = convert_action(SourceAction(name="Petrifying Gaze", description="..."))

        assert feature.stress_amount == 1
        assert feature.conversion_notes == r"Matched action pattern: \bgaze\b"

    def test_plain_action_is_free(self) -> None:
        """Test actions without recharge or pattern cost nothing."""
        feature = convert_action(SourceAction(name="Leap", description="It jumps 30 feet."))

        assert feature.cost is None
        assert feature.conversion_notes == "Direct action conversion"

    def test_damage_extracted_from_text(self) -> None:
        """Test damage is read from the description when not structured."""
        action = SourceAction(
            name="Slam Down",
            description="Each creature takes 14 (4d6) bludgeoning damage and is knocked prone.",
        )
        feature = convert_action(action)

        assert str(feature.damage) == "4d6 phy"
        assert feature.applied_conditions == (Condition.VULNERABLE,)
        assert feature.conversion_notes.endswith("(4d6 damage extracted)")

    def test_fear_action(self, adult_red_dragon: SourceCreature) -> None:
        """Test Frightful Presence is tagged as a Fear source."""
        feature = convert_action(adult_red_dragon.actions[0])

        assert feature.stress_amount == 1
        assert feature.applied_conditions == (Condition.FRIGHTENED,)
        assert "**mark 1 Fear** and become Frightened" in feature.description
        assert feature.reaction_roll_attribute is Attribute.INSTINCT
        assert feature.reaction_roll_difficulty == 17


class TestConvertBonusAction:
    """Tests for convert_bonus_action."""

    def test_free_bonus_action(self) -> None:
        """Test bonus actions cost nothing by default."""
        feature = convert_bonus_action(
            BonusAction(name="Cunning Action", description="It can Dash or Hide.")
        )

        assert feature.kind is FeatureType.ACTION
        assert feature.cost is None
        assert feature.source_ability == "Cunning Action (Bonus Action)"
        assert feature.conversion_notes == "Bonus action converted to Action feature"

    def test_limited_bonus_action(self) -> None:
        """Test limited bonus actions carry the derived cost."""
        feature = convert_bonus_action(
            BonusAction(name="Surge", uses={"count": 1, "recharge_on": "long rest"})
        )

        assert feature.stress_amount == 2
        assert feature.conversion_notes == "Bonus action with 1/long rest = 2 Stress"


class TestConvertReaction:
    """Tests for convert_reaction and extract_trigger."""

    def test_known_reaction(self) -> None:
        """Test well-known reactions replace cost and trigger."""
        feature = convert_reaction(
            Reaction(name="Parry", description="The knight adds 2 to its AC against one attack.")
        )

        assert feature.kind is FeatureType.REACTION
        assert feature.trigger == "When hit by a melee attack"
        assert feature.stress_amount == 1
        assert feature.conversion_notes == "Matched reaction pattern: Parry"

    def test_counterspell_costs_two(self) -> None:
        """Test Counterspell's fixed cost."""
        assert convert_reaction(Reaction(name="Counterspell")).stress_amount == 2

    def test_free_known_reaction(self) -> None:
        """Test a zero-cost pattern yields no cost."""
        feature = convert_reaction(Reaction(name="Tail Attack"))

        assert feature.cost is None
        assert feature.trigger == "When a creature enters or attacks from behind"

    def test_extracted_trigger(self) -> None:
        """Test the trigger is read from the description."""
        feature = convert_reaction(
            Reaction(
                name="Unnerving Mask",
                description="When a creature the devil can see hits it, the attacker is shaken.",
            )
        )

        assert feature.trigger == (
            "When a creature the devil can see hits it, the attacker is shaken"
        )
        assert feature.stress_amount == 1
        assert feature.conversion_notes == "Direct reaction conversion"

    def test_record_trigger_preferred(self) -> None:
        """Test a parsed trigger beats extracted wording."""
        feature = convert_reaction(
            Reaction(name="Retort", description="When hit, it snaps.", trigger="When hit")
        )
        assert feature.trigger == "When hit"

    def test_default_trigger(self) -> None:
        """Test the fallback trigger."""
        assert convert_reaction(Reaction(name="Flinch")).trigger == "When triggered"

    @pytest.mark.parametrize(
        ("description", "expected"),
        [
            ("If a creature hits it, it bites.", "When a creature hits it, it bites"),
            ("As a reaction, it swaps places.", "When it swaps places"),
            ("In response to a spell, it hisses.", "When a spell, it hisses"),
            ("It hisses.", None),
            ("A motif of coiled serpents glows.", None),
            ("Whenever it is hit, it hisses.", None),
        ],
    )
    def test_extract_trigger(self, description: str, expected: str | None) -> None:
        """Test trigger phrasing."""
        assert extract_trigger(description) == expected


class TestLegendary:
    """Tests for legendary action and resistance conversion."""

    def test_legendary_action_cost_passes_through(self) -> None:
        """Test a 2-point legendary action costs 2 Stress."""
        feature = convert_legendary_action(
            LegendaryAction(name="Wing Attack", description="The dragon beats its wings.", cost=2)
        )

        assert feature.kind is FeatureType.REACTION
        assert feature.stress_amount == 2
        assert feature.trigger == "At the end of another creature's turn"
        assert feature.source_ability == "Wing Attack (Legendary)"
        assert feature.conversion_notes == "Legendary action (2 action cost) = 2 Stress"

    def test_legendary_resistance(self) -> None:
        """Test Legendary Resistance becomes one reusable Reaction."""
        feature = convert_legendary_resistance(LegendaryResistance(count=3))

        assert feature.name == "Legendary Resistance"
        assert feature.kind is FeatureType.REACTION
        assert feature.stress_amount == 2
        assert feature.trigger == "When failing a Reaction Roll"
        assert feature.source_ability == "Legendary Resistance (3/Day)"


class TestSpellcasting:
    """Tests for convert_spellcasting."""

    def test_traditional_bands(self, priest: SourceCreature) -> None:
        """Test prepared spells group into cantrips and level bands."""
        assert isinstance(priest.spellcasting, TraditionalSpellcasting)
        features = convert_spellcasting(priest.spellcasting)

        assert [feature.name for feature in features] == ["Cantrips", "Minor Spells"]
        cantrips, minor = features
        assert cantrips.kind is FeatureType.PASSIVE
        assert cantrips.cost is None
        assert cantrips.description == "Can cast: Light, Sacred Flame, Thaumaturgy."
        assert minor.kind is FeatureType.ACTION
        assert minor.stress_amount == 1
        assert minor.source_ability == "Spellcasting (1st-3rd)"
        assert minor.conversion_notes == "7 spell(s) grouped at 1 Stress"

    def test_high_level_bands(self) -> None:
        """Test major and legendary spell bands."""
        spellcasting = TraditionalSpellcasting(
            ability="INT",
            spell_save_dc=20,
            spells=[
                {"name": "Cone of Cold", "level": 5},
                {"name": "Power Word Stun", "level": 8},
            ],
        )
        features = convert_spellcasting(spellcasting)

        assert [(feature.name, feature.stress_amount) for feature in features] == [
            ("Major Spells", 2),
            ("Legendary Spells", 3),
        ]

    def test_innate(self) -> None:
        """Test innate spells group by daily frequency."""
        spellcasting = InnateSpellcasting(
            ability="CHA",
            spell_save_dc=15,
            at_will=[{"name": "Detect Magic"}],
            per_day_3=[{"name": "Darkness", "level": 2}],
            per_day_2=[{"name": "Fly", "level": 3}],
            per_day_1=[{"name": "Plane Shift", "level": 7}],
        )
        features = convert_spellcasting(spellcasting)

        assert [feature.name for feature in features] == [
            "Innate Magic",
            "Frequent Spells",
            "Rare Spells",
        ]
        at_will, frequent, rare = features
        assert at_will.description == "Can cast at will: Detect Magic."
        assert at_will.cost is None
        assert frequent.description == "Can cast: Darkness, Fly."
        assert frequent.source_ability == "Innate Spellcasting (3/day, 2/day)"
        assert frequent.stress_amount == 1
        assert rare.stress_amount == 2

    def test_empty_block(self) -> None:
        """Test a block without spells yields nothing."""
        spellcasting = InnateSpellcasting(ability="CHA", spell_save_dc=10)
        assert convert_spellcasting(spellcasting) == []


class TestMovementAndDefenses:
    """Tests for movement and defensive Passives."""

    def test_movement(self) -> None:
        """Test one Passive per special movement mode."""
        features = convert_movement(Speed(walk=40, fly=80, hover=True, swim=40, climb=30))

        assert [feature.name for feature in features] == ["Flight", "Swimmer", "Climber"]
        assert features[0].description == "Can fly (hover)."
        assert features[0].source_ability == "Fly 80 ft. (hover)"
        assert features[1].source_ability == "Swim 40 ft."

    def test_walk_only(self) -> None:
        """Test walking creatures get no movement features."""
        assert convert_movement(Speed(walk=30)) == []

    def test_damage_modifiers(self) -> None:
        """Test immunity, resistance and vulnerability Passives."""
        features = convert_damage_modifiers(
            DamageModifiers(
                immunities=["fire", "poison"],
                resistances=["cold"],
                vulnerabilities=["radiant"],
            )
        )

        assert [feature.description for feature in features] == [
            "Immune to fire, poison damage.",
            "Resistant to cold damage.",
            "Takes extra damage from radiant sources.",
        ]
        assert features[0].source_ability == "Damage Immunities: fire, poison"

    def test_no_damage_modifiers(self) -> None:
        """Test absent modifiers produce nothing."""
        assert convert_damage_modifiers(None) == []

    def test_condition_immunities(self, make_creature) -> None:
        """Test condition immunities collapse into one Passive."""
        single = convert_condition_immunities(make_creature(condition_immunities=["poisoned"]))
        several = convert_condition_immunities(
            make_creature(condition_immunities=["charmed", "frightened"])
        )

        assert single[0].description == "Immune to the poisoned condition."
        assert several[0].description == "Immune to the charmed, frightened conditions."
        assert convert_condition_immunities(make_creature()) == []


class TestCompileFeatures:
    """Tests for compile_features and helpers."""

    def test_composition_order(self, adult_red_dragon: SourceCreature) -> None:
        """Test features come out in composition order."""
        features = compile_features(adult_red_dragon)

        assert [feature.name for feature in features] == [
            "Frightful Presence",
            "Detect",
            "Tail Attack",
            "Wing Attack",
            "Flight",
            "Climber",
            "Damage Immunity",
        ]

    def test_exclude_legendary(self, adult_red_dragon: SourceCreature) -> None:
        """Test legendary actions can be left out."""
        features = compile_features(adult_red_dragon, include_legendary=False)

        assert "Wing Attack" not in [feature.name for feature in features]

    def test_spellcasting_toggle_from_settings(
        self, monkeypatch: pytest.MonkeyPatch, priest: SourceCreature
    ) -> None:
        """Test spellcasting follows the configured default."""
        monkeypatch.setenv("ADVERSARY_FORGE_CONVERSION_INCLUDE_SPELLCASTING", "false")

        names = [feature.name for feature in compile_features(priest)]
        assert "Cantrips" not in names
        assert "Cantrips" in [
            feature.name for feature in compile_features(priest, include_spellcasting=True)
        ]

    def test_invalid_feature_wrapped(
        self, monkeypatch: pytest.MonkeyPatch, make_creature
    ) -> None:
        """Test a feature that fails validation surfaces as FeatureConversionError."""

        def broken(reaction: Reaction) -> ConvertedFeature:
            return ConvertedFeature(name=reaction.name, kind=FeatureType.REACTION)

        monkeypatch.setattr(abilities, "convert_reaction", broken)
        creature = make_creature(name="Knight", reactions=[{"name": "Parry"}])

        with pytest.raises(FeatureConversionError) as exc_info:
            compile_features(creature)
        assert exc_info.value.details["ability_name"] == "Parry"
        assert exc_info.value.details["creature_name"] == "Knight"

    def test_summary(self, adult_red_dragon: SourceCreature) -> None:
        """Test feature counts and total Stress."""
        features = compile_features(adult_red_dragon)
        summary = summarize_features(features)

        assert summary.total == 7
        assert summary.passive == 3
        assert summary.action == 1
        assert summary.reaction == 3
        assert summary.total_stress_cost == 1 + 1 + 1 + 2
        assert total_stress_cost(features) == summary.total_stress_cost
        assert len(filter_by_kind(features, FeatureType.REACTION)) == 3
        assert summary.conversion_notes[0].startswith("Frightful Presence: ")

    def test_legendary_feature_damage(self, adult_red_dragon: SourceCreature) -> None:
        """Test text damage on a legendary action is physical for bludgeoning."""
        wing = compile_features(adult_red_dragon)[3]

        assert wing.damage is not None
        assert wing.damage.damage_type is DamageType.PHYSICAL
        assert wing.applied_conditions == (Condition.VULNERABLE,)

"""Tests for custom exception hierarchy."""

from __future__ import annotations

import pytest

from adversary_forge.core.exceptions import (
    AdversaryForgeError,
    ChallengeRatingError,
    ClassificationError,
    ConfigurationError,
    ConversionError,
    FeatureConversionError,
)


class TestAdversaryForgeError:
    """Tests for base AdversaryForgeError."""

    def test_basic_message(self) -> None:
        """Test exception with just a message."""
        exc = AdversaryForgeError("Something went wrong")
        assert exc.message == "Something went wrong"
        assert exc.details == {}
        assert str(exc) == "Something went wrong"

    def test_message_with_details(self) -> None:
        """Test exception with message and details."""
        exc = AdversaryForgeError("Error occurred", details={"key": "value", "count": 42})
        assert exc.message == "Error occurred"
        assert exc.details == {"key": "value", "count": 42}
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        """Test exception repr."""
        exc = AdversaryForgeError("Test", details={"foo": "bar"})
        repr_str = repr(exc)
        assert "AdversaryForgeError" in repr_str
        assert "Test" in repr_str
        assert "foo" in repr_str


class TestConversionErrors:
    """Tests for conversion domain exceptions."""

    def test_conversion_error_with_creature(self) -> None:
        """Test ConversionError carries the creature name."""
        exc = ConversionError("Cannot convert", creature_name="Goblin")
        assert exc.details["creature_name"] == "Goblin"
        assert isinstance(exc, AdversaryForgeError)

    def test_challenge_rating_error_with_value(self) -> None:
        """Test ChallengeRatingError carries the offending value."""
        exc = ChallengeRatingError("Malformed", value="1/0", creature_name="Imp")
        assert exc.details["value"] == "1/0"
        assert exc.details["creature_name"] == "Imp"
        assert "value='1/0'" in str(exc)

    def test_challenge_rating_error_without_value(self) -> None:
        """Test ChallengeRatingError without a value keeps details empty."""
        exc = ChallengeRatingError("Malformed")
        assert exc.details == {}

    def test_feature_conversion_error_with_ability(self) -> None:
        """Test FeatureConversionError carries the ability name."""
        exc = FeatureConversionError(
            "Bad feature",
            ability_name="Fire Breath",
            creature_name="Young Red Dragon",
        )
        assert exc.details == {
            "ability_name": "Fire Breath",
            "creature_name": "Young Red Dragon",
        }

    def test_classification_error(self) -> None:
        """Test ClassificationError is a ConversionError."""
        exc = ClassificationError("Not a creature")
        assert isinstance(exc, ConversionError)
        assert exc.message == "Not a creature"


class TestConfigurationErrors:
    """Tests for configuration exceptions."""

    def test_configuration_error_with_key(self) -> None:
        """Test ConfigurationError carries the config key."""
        exc = ConfigurationError("Invalid floor", config_key="confidence_floor")
        assert exc.details["config_key"] == "confidence_floor"


class TestExceptionHierarchy:
    """Tests for the exception inheritance chain."""

    @pytest.mark.parametrize(
        "exc_class",
        [
            ConversionError,
            ChallengeRatingError,
            ClassificationError,
            FeatureConversionError,
            ConfigurationError,
        ],
    )
    def test_all_inherit_from_base(self, exc_class: type[AdversaryForgeError]) -> None:
        """Test every exception can be caught as AdversaryForgeError."""
        with pytest.raises(AdversaryForgeError):
            raise exc_class("boom")

    def test_challenge_rating_error_caught_as_conversion_error(self) -> None:
        """Test ChallengeRatingError can be caught as ConversionError."""
        with pytest.raises(ConversionError):
            raise ChallengeRatingError("bad rating", value="x")

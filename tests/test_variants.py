"""Tests for unknown-variant handling."""

import pytest

from scrybe.core.classifications import Frame, Layout, Rarity
from scrybe.core.data_models import Card
from scrybe.core.errors import DeserializationError
from scrybe.core.variants import (
    UnknownVariant,
    VariantMode,
    dump_variant,
    get_variant_mode,
    is_known,
    parse_optional_variant,
    parse_variant,
    parse_variants,
    resolve_variant_mode,
    set_variant_mode,
)


class TestResolveMode:
    """Tests for picking the mode from flags."""

    def test_flags(self):
        """Test each flag combination."""
        assert resolve_variant_mode(True, False) is VariantMode.FULL
        assert resolve_variant_mode(False, True) is VariantMode.MARKER
        assert resolve_variant_mode(False, False) is VariantMode.STRICT

    def test_full_wins_when_both_set(self):
        """Test the full fallback takes precedence."""
        assert resolve_variant_mode(True, True) is VariantMode.FULL

    def test_default_is_full(self):
        """Test the configured default."""
        set_variant_mode(None)
        assert get_variant_mode() is VariantMode.FULL

    def test_environment_override(self, monkeypatch):
        """Test flags are read from the environment."""
        monkeypatch.setenv("SCRYBE_VARIANTS_UNKNOWN_VARIANTS", "false")
        monkeypatch.setenv("SCRYBE_VARIANTS_UNKNOWN_VARIANTS_SLIM", "true")
        set_variant_mode(None)
        assert get_variant_mode() is VariantMode.MARKER


class TestParseVariant:
    """Tests for parse_variant and friends."""

    def test_known_tag(self):
        """Test known tags become enum members."""
        assert parse_variant(Layout, "transform") is Layout.TRANSFORM
        assert is_known(Layout.TRANSFORM)

    def test_full_fallback_round_trips(self):
        """Test an unknown tag is kept verbatim."""
        value = parse_variant(Frame, "future-format-x", VariantMode.FULL)
        assert value == UnknownVariant("Frame", "future-format-x")
        assert not value.is_marker
        assert not is_known(value)
        assert dump_variant(value) == "future-format-x"

    def test_marker_fallback(self):
        """Test marker mode drops the original text."""
        value = parse_variant(Frame, "future-format-x", VariantMode.MARKER)
        assert value.is_marker
        assert value.kind == "Frame"
        assert dump_variant(value) == "unknown"

    def test_strict(self):
        """Test strict mode rejects unknown tags."""
        with pytest.raises(DeserializationError, match="future-format-x"):
            parse_variant(Frame, "future-format-x", VariantMode.STRICT)

    def test_global_mode_is_used(self):
        """Test the process-wide mode applies when none is passed."""
        set_variant_mode(VariantMode.STRICT)
        with pytest.raises(DeserializationError):
            parse_variant(Rarity, "legendary")
        set_variant_mode(VariantMode.MARKER)
        assert parse_variant(Rarity, "legendary").is_marker

    def test_non_string(self):
        """Test a non-string tag is a deserialization error in every mode."""
        with pytest.raises(DeserializationError):
            parse_variant(Rarity, 3, VariantMode.FULL)

    def test_lists_and_optional(self):
        """Test list and optional helpers."""
        values = parse_variants(Rarity, ["rare", "shiny"], VariantMode.FULL)
        assert values == [Rarity.RARE, UnknownVariant("Rarity", "shiny")]
        assert parse_variants(Rarity, None) == []
        assert parse_optional_variant(Rarity, None) is None
        with pytest.raises(DeserializationError):
            parse_variants(Rarity, "rare")


class TestCardWithUnknownTags:
    """Tests for unknown tags inside whole records."""

    def test_card_round_trip(self, make_card):
        """Test a card with a new frame tag survives parse and dump."""
        set_variant_mode(VariantMode.FULL)
        payload = make_card(frame="future-format-x", promo_types=["holoprism"])
        card = Card.from_dict(payload)
        assert card.frame == UnknownVariant("Frame", "future-format-x")
        dumped = card.to_dict()
        assert dumped["frame"] == "future-format-x"
        assert dumped["promo_types"] == ["holoprism"]

    def test_card_strict(self, make_card):
        """Test strict mode fails the whole card."""
        set_variant_mode(VariantMode.STRICT)
        with pytest.raises(DeserializationError):
            Card.from_dict(make_card(layout="hologram"))

"""Tests for output formatters."""

import json
from datetime import date

import pytest

from scrybe.core.data_models import Card
from scrybe.core.variants import UnknownVariant
from scrybe.utils.formatters import (
    CARD_COLUMNS,
    CSVFormatter,
    DataFormatter,
    JSONFormatter,
    OutputFormat,
    TableFormatter,
    render,
)


class TestDataFormatter:
    """Tests for DataFormatter."""

    def test_to_dict_primitives(self):
        assert DataFormatter.to_dict(None) is None
        assert DataFormatter.to_dict("text") == "text"
        assert DataFormatter.to_dict(42) == 42
        assert DataFormatter.to_dict(date(2018, 3, 16)) == "2018-03-16"
        assert DataFormatter.to_dict(OutputFormat.CSV) == "csv"

    def test_unknown_variant(self):
        assert DataFormatter.to_dict(UnknownVariant("Frame", "future-format-x")) == "future-format-x"
        assert DataFormatter.to_dict(UnknownVariant("Frame")) == "unknown"

    def test_model_uses_wire_form(self, make_card):
        """Test models are converted through to_dict."""
        data = DataFormatter.to_dict(Card.from_dict(make_card()))
        assert data["set"] == "a25"
        assert data["rarity"] == "uncommon"

    def test_nested(self):
        assert DataFormatter.to_dict({"a": [1, (2, 3)]}) == {"a": [1, [2, 3]]}


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_format(self):
        text = JSONFormatter(indent=None).format({"name": "Opt"})
        assert json.loads(text) == {"name": "Opt"}

    def test_format_lines(self):
        text = JSONFormatter().format_lines([{"a": 1}, {"a": 2}])
        assert [json.loads(line) for line in text.splitlines()] == [{"a": 1}, {"a": 2}]


class TestTableFormatter:
    """Tests for TableFormatter."""

    def test_format(self):
        rows = [{"name": "Lightning Bolt", "cmc": 1}, {"name": "Opt", "cmc": None}]
        lines = TableFormatter().format(rows, ["name", "cmc"]).splitlines()
        assert lines[0].startswith("Name")
        assert set(lines[1]) <= {"-", " ", "|"}
        assert lines[2].startswith("Lightning Bolt | 1")
        assert lines[3].startswith("Opt ") and lines[3].endswith("|")

    def test_truncates_wide_columns(self):
        text = TableFormatter(max_width=5).format([{"name": "Lightning Bolt"}])
        assert text.splitlines()[-1] == "Light"

    def test_empty(self):
        assert TableFormatter().format([]) == "(no data)"


class TestCSVFormatter:
    """Tests for CSVFormatter."""

    def test_format(self):
        rows = [{"name": "Fire // Ice", "colors": ["R", "U"], "extra": "dropped"}]
        text = CSVFormatter().format(rows, ["name", "colors"])
        assert text == "name,colors\nFire // Ice,\"R,U\"\n"

    def test_empty(self):
        assert CSVFormatter().format([]) == ""


class TestRender:
    """Tests for render."""

    @pytest.mark.parametrize("output_format", ["json", "table", "csv"])
    def test_cards(self, make_card, output_format):
        card = Card.from_dict(make_card())
        text = render([card], output_format, CARD_COLUMNS)
        assert "Lightning Bolt" in text

    def test_invalid_format(self):
        with pytest.raises(ValueError):
            render([], "xml")

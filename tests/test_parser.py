"""Tests for the query text parser."""

import pytest

from scrybe.core.errors import InvalidComparatorError, QuerySyntaxError
from scrybe.search import params as p
from scrybe.search.parser import parse_query
from scrybe.search.query import And, Leaf, Not, Or, Regex, to_query_string


class TestParseTerms:
    """Tests for single terms."""

    def test_field_term(self):
        """Test field:value."""
        assert parse_query("type:goblin") == p.type_line("goblin")

    def test_alias_and_comparator(self):
        """Test aliases resolve and numbers are typed."""
        node = parse_query("t:goblin pow>=2")
        assert node == And((p.type_line("goblin"), p.power(p.gte(2))))
        assert str(node) == "type:goblin power>=2"

    def test_longest_operator_wins(self):
        """Test <= is not read as < followed by =."""
        assert parse_query("cmc<=3") == Leaf("cmc", "<=", 3)
        assert parse_query("c!=r") == Leaf("color", "!=", "r")

    def test_float(self):
        """Test decimal values."""
        assert parse_query("usd<0.25") == Leaf("usd", "<", 0.25)

    def test_numeric_looking_text_stays_text(self):
        """Test only numeric keywords turn digits into numbers."""
        assert parse_query("cn:123") == p.collector_number("123")
        assert parse_query("year>=2020") == Leaf("year", ">=", 2020)
        assert parse_query("pow>toughness") == p.power(p.gt("toughness"))
        assert parse_query("2020") == Leaf("", "", "2020")

    def test_quoted_value(self):
        """Test quoted phrases and escapes."""
        assert parse_query('name:"Lightning Bolt"') == p.name("Lightning Bolt")
        assert parse_query('o:"say \\"hi\\""') == p.oracle('say "hi"')

    def test_regex_value(self):
        """Test slash-delimited regexes."""
        assert parse_query("o:/^{T}:/") == p.oracle(Regex("^{T}:"))
        assert parse_query("o:/a\\/b/") == p.oracle(Regex("a/b"))

    def test_exact_and_bare(self):
        """Test ! names and bare words."""
        assert parse_query('!"Black Lotus"') == p.exact("Black Lotus")
        assert parse_query("bolt") == p.words("bolt")


class TestParseStructure:
    """Tests for boolean structure."""

    def test_or_is_case_insensitive(self):
        """Test lowercase or."""
        assert parse_query("c:r or c:g") == Or((p.color("r"), p.color("g")))

    def test_and_keyword_is_skipped(self):
        """Test explicit AND means adjacency."""
        assert parse_query("t:goblin AND c:r") == parse_query("t:goblin c:r")

    def test_or_binds_looser_than_and(self):
        """Test precedence."""
        node = parse_query("t:goblin c:r OR t:elf")
        assert isinstance(node, Or)
        assert node.children[0] == And((p.type_line("goblin"), p.color("r")))

    def test_parentheses(self):
        """Test grouping overrides precedence."""
        node = parse_query("t:goblin (c:r OR c:g)")
        assert str(node) == "type:goblin (color:r OR color:g)"

    def test_negation(self):
        """Test - prefixes."""
        assert parse_query("-c:r") == Not(p.color("r"))
        assert str(parse_query("-(c:r OR c:g)")) == "-(color:r OR color:g)"
        assert parse_query("--c:r") == p.color("r")

    def test_round_trip(self):
        """Test serialized trees parse back to themselves."""
        trees = [
            p.name("Lightning Bolt") & (p.color("r") | p.color("g")),
            ~(p.type_line("goblin") | p.is_("funny")) & p.cmc(p.lte(2)),
            p.oracle(Regex("draw a/b")) | p.exact("Black Lotus"),
            p.format_legal("modern") & ~p.banned("modern") & p.usd(p.lt(0.5)),
            p.set_code("a25") & p.collector_number("141"),
        ]
        for tree in trees:
            assert parse_query(to_query_string(tree)) == tree


class TestParseErrors:
    """Tests for malformed input."""

    @pytest.mark.parametrize(
        "text",
        ["", "   ", "(t:goblin", "t:goblin)", 'name:"bolt', "o:/draw", "c:r OR", "- x", "()", "c:"],
    )
    def test_syntax_errors(self, text):
        """Test each malformed query is rejected."""
        with pytest.raises(QuerySyntaxError):
            parse_query(text)

    def test_error_position(self):
        """Test the error points at the offending character."""
        with pytest.raises(QuerySyntaxError) as exc_info:
            parse_query("t:goblin)")
        assert exc_info.value.position == 8

    def test_invalid_comparator(self):
        """Test comparator checks apply to parsed terms."""
        with pytest.raises(InvalidComparatorError):
            parse_query("o<draw")

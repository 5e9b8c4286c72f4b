"""Tests for query trees and their serialization."""

import pytest

from scrybe.core.errors import EmptyCompoundError, InvalidComparatorError, QueryError
from scrybe.search import params as p
from scrybe.search.query import (
    And,
    Leaf,
    Not,
    Or,
    Raw,
    Regex,
    and_,
    not_,
    or_,
    quote_value,
    to_query_string,
)


class TestLeafSerialization:
    """Tests for single terms."""

    def test_shorthand_comparator(self):
        """Test the field:value form."""
        assert str(Leaf("type", ":", "goblin")) == "type:goblin"

    def test_explicit_comparators(self):
        """Test every explicit comparator is written verbatim."""
        for op in ("=", "!=", "<", "<=", ">", ">="):
            assert str(Leaf("cmc", op, 3)) == f"cmc{op}3"

    def test_value_with_whitespace_is_quoted(self):
        """Test phrases are quoted."""
        assert str(p.name("Lightning Bolt")) == 'name:"Lightning Bolt"'

    def test_embedded_quotes_are_escaped(self):
        """Test quotes and backslashes inside a quoted value."""
        assert str(p.oracle('say "hi"')) == 'oracle:"say \\"hi\\""'
        assert quote_value("a\\b") == '"a\\\\b"'

    def test_special_values_are_quoted(self):
        """Test empty, reserved, leading-dash and operator characters."""
        assert quote_value("") == '""'
        assert quote_value("OR") == '"OR"'
        assert quote_value("and") == '"and"'
        assert quote_value("-x") == '"-x"'
        assert quote_value("a:b") == '"a:b"'
        assert quote_value("(x)") == '"(x)"'
        assert quote_value("plain") == "plain"

    def test_numbers(self):
        """Test numeric values."""
        assert quote_value(3) == "3"
        assert quote_value(0.5) == "0.5"

    def test_regex_value(self):
        """Test regex values use slashes with embedded slashes escaped."""
        assert str(p.oracle(Regex("^{T}: add"))) == "oracle:/^{T}: add/"
        assert str(p.oracle(Regex("a/b"))) == "oracle:/a\\/b/"

    def test_exact_name(self):
        """Test the bang exact-name form."""
        assert str(p.exact("Black Lotus")) == '!"Black Lotus"'

    def test_invalid_comparator(self):
        """Test unknown comparators fail at construction."""
        with pytest.raises(InvalidComparatorError):
            Leaf("cmc", "~", 3)
        with pytest.raises(QueryError):
            Leaf("", ">=", "x")


class TestCompoundSerialization:
    """Tests for AND, OR and NOT."""

    def test_and_is_adjacency(self):
        """Test AND joins children with a space."""
        query = p.type_line("goblin") & p.cmc(p.lte(2))
        assert str(query) == "type:goblin cmc<=2"

    def test_or_keyword(self):
        """Test OR joins children with the OR keyword."""
        query = p.color("r") | p.color("g")
        assert str(query) == "color:r OR color:g"

    def test_or_inside_and_is_parenthesized(self):
        """Test precedence grouping."""
        query = p.name("Lightning Bolt") & (p.color("r") | p.color("g"))
        assert str(query) == 'name:"Lightning Bolt" (color:r OR color:g)'

    def test_and_inside_or_is_parenthesized(self):
        """Test grouping the other way round."""
        query = (p.type_line("goblin") & p.color("r")) | p.name("Elf")
        assert str(query) == "(type:goblin color:r) OR name:Elf"

    def test_not_leaf(self):
        """Test negating a single term."""
        assert str(~p.color("r")) == "-color:r"

    def test_not_compound(self):
        """Test negating a compound wraps it."""
        assert str(~(p.color("r") | p.color("g"))) == "-(color:r OR color:g)"

    def test_not_not(self):
        """Test double negation cancels out."""
        leaf = p.color("r")
        assert not_(not_(leaf)) == leaf
        assert ~~leaf == leaf

    def test_nested_not_without_combinator(self):
        """Test a directly built Not(Not(x)) still serializes."""
        assert str(Not(Not(p.color("r")))) == "-(-color:r)"

    def test_single_child_compound(self):
        """Test a one-child compound prints as its child."""
        leaf = p.color("r")
        assert str(And((leaf,))) == str(leaf)
        assert str(Or((leaf,))) == str(leaf)
        assert str(Not(Or((leaf,)))) == "-color:r"

    def test_single_child_wrapping_other_kind(self):
        """Test grouping is decided on the unwrapped child."""
        inner = Or((p.color("r"), p.color("g")))
        query = And((p.type_line("goblin"), Or((inner,))))
        assert str(query) == "type:goblin (color:r OR color:g)"

    def test_raw_fragment(self):
        """Test raw fragments are parenthesized."""
        query = Raw("o:draw OR o:discard") & p.name("x")
        assert str(query) == "(o:draw OR o:discard) name:x"

    def test_deterministic(self):
        """Test equal trees give identical strings."""
        a = p.type_line("goblin") & (p.color("r") | ~p.is_("funny"))
        b = p.type_line("goblin") & (p.color("r") | ~p.is_("funny"))
        assert a == b
        assert to_query_string(a) == to_query_string(b) == str(a)


class TestCombinators:
    """Tests for and_, or_ and not_."""

    def test_same_kind_is_flattened(self):
        """Test nested ANDs merge into one level."""
        a, b, c = p.color("r"), p.color("g"), p.color("b")
        assert and_(and_(a, b), c).children == (a, b, c)
        assert (a | b | c).children == (a, b, c)

    def test_other_kind_is_kept(self):
        """Test an OR inside an AND stays a child."""
        a, b, c = p.color("r"), p.color("g"), p.color("b")
        query = and_(a, or_(b, c))
        assert isinstance(query, And)
        assert query.children[1] == Or((b, c))

    def test_empty_compound(self):
        """Test compounds need at least one child."""
        with pytest.raises(EmptyCompoundError):
            and_()
        with pytest.raises(EmptyCompoundError):
            Or(())

    def test_combining_non_nodes(self):
        """Test plain values are rejected."""
        with pytest.raises(TypeError):
            and_(p.color("r"), "color:g")
        with pytest.raises(TypeError):
            not_("color:r")

    def test_nodes_are_immutable(self):
        """Test frozen nodes."""
        leaf = p.color("r")
        with pytest.raises(AttributeError):
            leaf.value = "g"

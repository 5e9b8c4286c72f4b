"""Parser for Scryfall query syntax.

Reads the subset of syntax that ``to_query_string`` writes (terms with
comparators, quoted and regex values, ``!`` exact names, bare words, ``-``
negation, ``OR``, implicit AND and parentheses) back into a query tree.
Field aliases such as ``t:`` or ``pow>`` are resolved to their keyword, so
the result can be serialized again in canonical form.

Values of numeric keywords (``cmc``, ``pow``, ``usd``, ...) that look like
numbers become ``int`` or ``float``; every other value stays a string, so
``cn:123`` keeps the collector number ``"123"``.

Grammar::

    query   := or_expr EOF
    or_expr := and_expr ("OR" and_expr)*
    and_expr:= unary+
    unary   := "-" unary | "(" or_expr ")" | term
    term    := "!" value | FIELD OP value | value
"""

from __future__ import annotations

import re
from typing import List, Union

from scrybe.core.errors import QuerySyntaxError
from scrybe.search.params import NUMERIC_FIELDS, Compare, canonical_field, term
from scrybe.search.query import Leaf, QueryNode, Regex, and_, not_, or_

# Longest comparators first so "<=" wins over "<".
_OPERATORS = ("<=", ">=", "!=", ":", "=", "<", ">")
_FIELD = re.compile(r"[A-Za-z_]+")
_INT = re.compile(r"-?\d+\Z")
_FLOAT = re.compile(r"-?\d+\.\d+\Z")


def parse_query(text: str) -> QueryNode:
    """Parse a query string into a tree.

    Args:
        text: Query in Scryfall syntax

    Returns:
        The root node

    Raises:
        QuerySyntaxError: On unbalanced parentheses, unterminated quotes or
            regexes, a dangling operator, or an empty query
    """
    return _Parser(text).parse()


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def parse(self) -> QueryNode:
        self._skip_ws()
        if self._at_end():
            raise QuerySyntaxError("Empty query", self.pos)
        node = self._or_expr()
        self._skip_ws()
        if not self._at_end():
            raise QuerySyntaxError(f"Unexpected {self.text[self.pos]!r}", self.pos)
        return node

    # -- helpers -----------------------------------------------------------

    def _at_end(self) -> bool:
        return self.pos >= len(self.text)

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _skip_ws(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _at_keyword(self, word: str) -> bool:
        end = self.pos + len(word)
        if self.text[self.pos:end].upper() != word:
            return False
        return end >= len(self.text) or self.text[end].isspace() or self.text[end] in "()"

    # -- grammar -----------------------------------------------------------

    def _or_expr(self) -> QueryNode:
        branches = [self._and_expr()]
        while True:
            self._skip_ws()
            if not self._at_keyword("OR"):
                break
            self.pos += 2
            self._skip_ws()
            if self._at_end() or self._peek() == ")":
                raise QuerySyntaxError("Expected a term after OR", self.pos)
            branches.append(self._and_expr())
        return branches[0] if len(branches) == 1 else or_(*branches)

    def _and_expr(self) -> QueryNode:
        terms: List[QueryNode] = []
        while True:
            self._skip_ws()
            if self._at_end() or self._peek() == ")" or self._at_keyword("OR"):
                break
            if self._at_keyword("AND"):
                self.pos += 3
                continue
            terms.append(self._unary())
        if not terms:
            raise QuerySyntaxError("Expected a term", self.pos)
        return terms[0] if len(terms) == 1 else and_(*terms)

    def _unary(self) -> QueryNode:
        char = self._peek()
        if char == "-":
            self.pos += 1
            if self._at_end() or self._peek().isspace():
                raise QuerySyntaxError("Dangling '-'", self.pos)
            return not_(self._unary())
        if char == "(":
            start = self.pos
            self.pos += 1
            self._skip_ws()
            if self._peek() == ")":
                raise QuerySyntaxError("Empty parentheses", start)
            node = self._or_expr()
            self._skip_ws()
            if self._peek() != ")":
                raise QuerySyntaxError("Unbalanced '('", start)
            self.pos += 1
            return node
        return self._term()

    def _term(self) -> Leaf:
        if self._peek() == "!":
            self.pos += 1
            return Leaf("", "!", self._value())

        match = _FIELD.match(self.text, self.pos)
        if match:
            after = match.end()
            for op in _OPERATORS:
                if self.text.startswith(op, after):
                    self.pos = after + len(op)
                    value = self._value()
                    if canonical_field(match.group(0)) in NUMERIC_FIELDS:
                        value = _number(value)
                    return term(match.group(0), _compare(op, value))
        return Leaf("", "", self._value())

    def _value(self) -> Union[str, Regex]:
        char = self._peek()
        if char == '"':
            return self._quoted()
        if char == "/":
            return self._regex()
        start = self.pos
        while not self._at_end():
            char = self.text[self.pos]
            if char.isspace() or char in "()":
                break
            self.pos += 1
        if self.pos == start:
            raise QuerySyntaxError("Expected a value", start)
        return self.text[start:self.pos]

    def _quoted(self) -> str:
        start = self.pos
        self.pos += 1
        out = []
        while not self._at_end():
            char = self.text[self.pos]
            if char == "\\" and self.pos + 1 < len(self.text):
                out.append(self.text[self.pos + 1])
                self.pos += 2
                continue
            if char == '"':
                self.pos += 1
                return "".join(out)
            out.append(char)
            self.pos += 1
        raise QuerySyntaxError("Unterminated quote", start)

    def _regex(self) -> Regex:
        start = self.pos
        self.pos += 1
        out = []
        while not self._at_end():
            char = self.text[self.pos]
            if char == "\\" and self.text.startswith("/", self.pos + 1):
                out.append("/")
                self.pos += 2
                continue
            if char == "/":
                self.pos += 1
                return Regex("".join(out))
            out.append(char)
            self.pos += 1
        raise QuerySyntaxError("Unterminated regex", start)


def _number(value: Union[str, Regex]) -> Union[str, int, float, Regex]:
    if isinstance(value, str):
        if _INT.match(value):
            return int(value)
        if _FLOAT.match(value):
            return float(value)
    return value


def _compare(op: str, value: Union[str, int, float, Regex]) -> Union[Compare, str, int, float, Regex]:
    if op == ":":
        return value
    return Compare(op, value)

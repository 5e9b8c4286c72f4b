"""Boolean search expressions and their Scryfall query-string form.

A query is an immutable tree of ``Leaf`` terms combined with ``And``, ``Or``
and ``Not``. Trees are built with the helpers in ``scrybe.search.params`` and
the combinators below (or the ``&``, ``|`` and ``~`` operators) and turned
into text with ``to_query_string``:

>>> from scrybe.search import params as p
>>> str(p.name("Lightning Bolt") & (p.color("r") | p.color("g")))
'name:"Lightning Bolt" (color:r OR color:g)'

Serialization is pure and deterministic. The only rewriting it does is
quoting values and parenthesising sub-trees where precedence requires it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Tuple, Union

from scrybe.core.errors import EmptyCompoundError, InvalidComparatorError

COMPARATORS: Tuple[str, ...] = (":", "=", "!=", "<", "<=", ">", ">=")

# Characters that change how Scryfall tokenizes a bare value.
_NEEDS_QUOTES = re.compile(r"""[\s"'():<>=!\\]""")
_RESERVED_WORDS = {"or", "and"}


@dataclass(frozen=True)
class Regex:
    """A regular-expression value, written as ``/pattern/``."""

    pattern: str

    def __str__(self) -> str:
        return "/" + self.pattern.replace("/", "\\/") + "/"


Value = Union[str, int, float, Regex]


def quote_value(value: Value) -> str:
    """Render a leaf value, quoting it when it would not survive as one token."""
    if isinstance(value, Regex):
        return str(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value) if isinstance(value, float) else str(value)
    text = str(value)
    if (
        not text
        or _NEEDS_QUOTES.search(text)
        or text.startswith(("-", "/"))
        or text.lower() in _RESERVED_WORDS
    ):
        return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return text


class QueryNode:
    """Base class of all query tree nodes."""

    __slots__ = ()

    def __and__(self, other: "QueryNode") -> "QueryNode":
        return and_(self, other)

    def __or__(self, other: "QueryNode") -> "QueryNode":
        return or_(self, other)

    def __invert__(self) -> "QueryNode":
        return not_(self)

    def __str__(self) -> str:
        return to_query_string(self)


@dataclass(frozen=True, eq=True)
class Leaf(QueryNode):
    """A single ``field<comparator>value`` term.

    ``field`` may be empty for a bare term (plain name search or an exact
    ``!"name"`` match, in which case ``comparator`` is ``"!"``).
    """

    field: str
    comparator: str
    value: Value

    def __post_init__(self) -> None:
        if self.field and self.comparator not in COMPARATORS:
            raise InvalidComparatorError(self.field, self.comparator, " ".join(COMPARATORS))
        if not self.field and self.comparator not in ("", "!"):
            raise InvalidComparatorError("<bare>", self.comparator, "'' !")


@dataclass(frozen=True, eq=True)
class Raw(QueryNode):
    """A pre-formatted query fragment, emitted in parentheses."""

    text: str


@dataclass(frozen=True, eq=True)
class And(QueryNode):
    """All children must match (implicit AND by adjacency)."""

    children: Tuple[QueryNode, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))
        if not self.children:
            raise EmptyCompoundError("And")


@dataclass(frozen=True, eq=True)
class Or(QueryNode):
    """At least one child must match."""

    children: Tuple[QueryNode, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))
        if not self.children:
            raise EmptyCompoundError("Or")


@dataclass(frozen=True, eq=True)
class Not(QueryNode):
    """The child must not match."""

    child: QueryNode


def _combine(kind: type, nodes: Tuple[QueryNode, ...]) -> QueryNode:
    children = []
    for node in nodes:
        if not isinstance(node, QueryNode):
            raise TypeError(f"Cannot combine {type(node).__name__} into a query")
        if isinstance(node, kind):
            children.extend(node.children)
        else:
            children.append(node)
    return kind(tuple(children))


def and_(*nodes: QueryNode) -> QueryNode:
    """Combine nodes with AND; nested ANDs are merged into one level."""
    return _combine(And, nodes)


def or_(*nodes: QueryNode) -> QueryNode:
    """Combine nodes with OR; nested ORs are merged into one level."""
    return _combine(Or, nodes)


def not_(node: QueryNode) -> QueryNode:
    """Negate a node; negating a negation returns the original node."""
    if not isinstance(node, QueryNode):
        raise TypeError(f"Cannot negate {type(node).__name__}")
    if isinstance(node, Not):
        return node.child
    return Not(node)


def _leaf_to_string(leaf: Leaf) -> str:
    return f"{leaf.field}{leaf.comparator}{quote_value(leaf.value)}"


def _unwrap(node: QueryNode) -> QueryNode:
    # A single-child compound prints exactly like its child.
    while isinstance(node, (And, Or)) and len(node.children) == 1:
        node = node.children[0]
    return node


def _child_to_string(child: QueryNode, parent: type) -> str:
    child = _unwrap(child)
    text = to_query_string(child)
    if isinstance(child, (And, Or)) and not isinstance(child, parent):
        return f"({text})"
    return text


def to_query_string(node: QueryNode) -> str:
    """Serialize a query tree to Scryfall syntax."""
    if isinstance(node, Leaf):
        return _leaf_to_string(node)
    if isinstance(node, Raw):
        return f"({node.text})"
    if isinstance(node, And):
        return " ".join(_child_to_string(child, And) for child in node.children)
    if isinstance(node, Or):
        return " OR ".join(_child_to_string(child, Or) for child in node.children)
    if isinstance(node, Not):
        child = _unwrap(node.child)
        if isinstance(child, (Leaf, Raw)):
            return "-" + to_query_string(child)
        return "-(" + to_query_string(child) + ")"
    raise TypeError(f"Unknown query node: {type(node).__name__}")

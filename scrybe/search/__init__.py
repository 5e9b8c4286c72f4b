"""Search query construction for scrybe.

- query: immutable boolean query trees and their serialization
- params: typed field helpers and comparator wrappers
- options: request options for card searches
- parser: reads query text back into a tree
"""

from . import params  # noqa: F401
from .options import SearchOptions, SortDirection, SortOrder, UniqueStrategy  # noqa: F401
from .parser import parse_query  # noqa: F401
from .query import (  # noqa: F401
    And,
    Leaf,
    Not,
    Or,
    QueryNode,
    Raw,
    Regex,
    and_,
    not_,
    or_,
    to_query_string,
)

__all__ = [
    "params",
    "SearchOptions",
    "SortDirection",
    "SortOrder",
    "UniqueStrategy",
    "parse_query",
    "And",
    "Leaf",
    "Not",
    "Or",
    "QueryNode",
    "Raw",
    "Regex",
    "and_",
    "not_",
    "or_",
    "to_query_string",
]

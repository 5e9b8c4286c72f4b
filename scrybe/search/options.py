"""Request options for card searches."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union

from scrybe.search.query import QueryNode, to_query_string


class UniqueStrategy(str, Enum):
    """How duplicate printings are rolled up."""

    CARDS = "cards"
    ART = "art"
    PRINTS = "prints"


class SortOrder(str, Enum):
    """Result ordering."""

    NAME = "name"
    SET = "set"
    RELEASED = "released"
    RARITY = "rarity"
    COLOR = "color"
    USD = "usd"
    TIX = "tix"
    EUR = "eur"
    CMC = "cmc"
    POWER = "power"
    TOUGHNESS = "toughness"
    EDHREC = "edhrec"
    PENNY = "penny"
    ARTIST = "artist"
    REVIEW = "review"


class SortDirection(str, Enum):
    AUTO = "auto"
    ASC = "asc"
    DESC = "desc"


@dataclass
class SearchOptions:
    """Everything sent to ``/cards/search`` besides the page cursor.

    Only values that differ from the provider's defaults end up in the
    request, so ``SearchOptions(query=q).to_params()`` is just ``{"q": ...}``.
    """

    query: Union[QueryNode, str, None] = None
    unique: UniqueStrategy = UniqueStrategy.CARDS
    order: SortOrder = SortOrder.NAME
    direction: SortDirection = SortDirection.AUTO
    page: int = 1
    include_extras: bool = False
    include_multilingual: bool = False
    include_variations: bool = False

    def __post_init__(self) -> None:
        self.unique = UniqueStrategy(self.unique)
        self.order = SortOrder(self.order)
        self.direction = SortDirection(self.direction)
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")

    def query_string(self) -> str:
        """The ``q`` parameter as text."""
        if self.query is None:
            return ""
        if isinstance(self.query, QueryNode):
            return to_query_string(self.query)
        return str(self.query)

    def to_params(self) -> Dict[str, Any]:
        """Render as query parameters, omitting defaults."""
        params: Dict[str, Any] = {}
        q = self.query_string()
        if q:
            params["q"] = q
        if self.unique is not UniqueStrategy.CARDS:
            params["unique"] = self.unique.value
        if self.order is not SortOrder.NAME:
            params["order"] = self.order.value
        if self.direction is not SortDirection.AUTO:
            params["dir"] = self.direction.value
        if self.page != 1:
            params["page"] = self.page
        for flag in ("include_extras", "include_multilingual", "include_variations"):
            if getattr(self, flag):
                params[flag] = "true"
        return params

    @classmethod
    def coerce(cls, value: Union["SearchOptions", QueryNode, str, None]) -> "SearchOptions":
        """Accept options, a query tree or a raw query string."""
        if isinstance(value, SearchOptions):
            return value
        return cls(query=value)

"""Scryfall REST API facade.

One method per endpoint, returning parsed models. List endpoints that page
(card search) return a ``PaginatedStream``; small lists are collected.

    async with ScryfallAPI() as api:
        bolt = await api.named("Lightning Bolt")
        async for card in api.search(p.type_line("goblin") & p.cmc(p.lte(2))):
            print(card.name)
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, TypeVar, Union
from urllib.parse import quote

from scrybe.core.classifications import BulkKind
from scrybe.core.config import Config, get_config
from scrybe.core.data_models import BulkManifestEntry, Card, CardSet, Catalog, Ruling
from scrybe.core.errors import DeserializationError, QueryError
from scrybe.core.http_client import ScryfallHTTPClient
from scrybe.core.pagination import Page, PaginatedStream
from scrybe.search.options import SearchOptions
from scrybe.search.query import QueryNode

logger = logging.getLogger(__name__)

T = TypeVar("T")

QueryLike = Union[QueryNode, SearchOptions, str]

# Names accepted by /catalog/{name}.
CATALOGS = (
    "card-names",
    "artist-names",
    "word-bank",
    "supertypes",
    "card-types",
    "artifact-types",
    "battle-types",
    "creature-types",
    "enchantment-types",
    "land-types",
    "planeswalker-types",
    "spell-types",
    "powers",
    "toughnesses",
    "loyalties",
    "watermarks",
    "keyword-abilities",
    "keyword-actions",
    "ability-words",
    "flavor-words",
)


def _segment(value: Any) -> str:
    return quote(str(value), safe="")


class ScryfallAPI:
    """Typed access to the Scryfall endpoints."""

    def __init__(
        self,
        client: Optional[ScryfallHTTPClient] = None,
        config: Optional[Config] = None,
    ) -> None:
        """
        Args:
            client: HTTP client to use; one is created from ``config`` if omitted
            config: Configuration for the created client
        """
        self._owns_client = client is None
        self.client = client or ScryfallHTTPClient(config=config or get_config())
        self.logger = logging.getLogger(self.__class__.__name__)

    async def __aenter__(self) -> "ScryfallAPI":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this facade created it."""
        if self._owns_client:
            await self.client.aclose()

    async def _get(self, path: str, parse: Callable[[Any], T], params: Optional[dict] = None) -> T:
        payload = await self.client.get_json(path, params)
        return parse(payload)

    async def _list(self, path: str, parse_item: Callable[[Any], T]) -> List[T]:
        """Collect every page of a list endpoint."""
        return await PaginatedStream(self.client, path, parse_item=parse_item).collect()

    # -- cards ---------------------------------------------------------------

    def search(self, query: QueryLike) -> PaginatedStream[Card]:
        """Lazily stream every card matching ``query``.

        Args:
            query: A query tree, raw query text, or ``SearchOptions``

        Returns:
            A stream of ``Card``; nothing is requested until it is iterated.
            A query matching no cards raises ``NotFoundError`` on the first pull.

        Raises:
            QueryError: If the query is empty
        """
        options = SearchOptions.coerce(query)
        params = options.to_params()
        if not params.get("q"):
            raise QueryError("A search needs a non-empty query")
        self.logger.debug("Searching: %s", params["q"])
        return PaginatedStream(self.client, "/cards/search", params, Card.from_dict)

    async def all_cards_matching(self, query: QueryLike, limit: Optional[int] = None) -> List[Card]:
        """Collect search results into a list (at most ``limit``)."""
        return await self.search(query).collect(limit)

    async def search_page(self, query: QueryLike) -> Page[Card]:
        """Fetch a single page of results (``SearchOptions.page`` picks which)."""
        options = SearchOptions.coerce(query)
        payload = await self.client.get_json("/cards/search", options.to_params())
        return Page.from_dict(payload, Card.from_dict)

    async def named(self, name: str, fuzzy: bool = False, set_code: Optional[str] = None) -> Card:
        """Card by name; ``fuzzy`` tolerates misspellings and partial names."""
        params = {"fuzzy" if fuzzy else "exact": name}
        if set_code:
            params["set"] = set_code
        return await self._get("/cards/named", Card.from_dict, params)

    async def card(self, card_id: str) -> Card:
        """Card by Scryfall id."""
        return await self._get(f"/cards/{_segment(card_id)}", Card.from_dict)

    async def card_by_multiverse_id(self, multiverse_id: int) -> Card:
        return await self._get(f"/cards/multiverse/{int(multiverse_id)}", Card.from_dict)

    async def card_by_mtgo_id(self, mtgo_id: int) -> Card:
        return await self._get(f"/cards/mtgo/{int(mtgo_id)}", Card.from_dict)

    async def card_by_arena_id(self, arena_id: int) -> Card:
        return await self._get(f"/cards/arena/{int(arena_id)}", Card.from_dict)

    async def card_by_tcgplayer_id(self, tcgplayer_id: int) -> Card:
        return await self._get(f"/cards/tcgplayer/{int(tcgplayer_id)}", Card.from_dict)

    async def card_by_set_number(
        self, set_code: str, collector_number: str, lang: Optional[str] = None
    ) -> Card:
        """Card by set code and collector number, optionally in another language."""
        path = f"/cards/{_segment(set_code.lower())}/{_segment(collector_number)}"
        if lang:
            path += f"/{_segment(lang)}"
        return await self._get(path, Card.from_dict)

    async def random_card(self, query: Optional[QueryLike] = None) -> Card:
        """A random card, optionally restricted to cards matching ``query``."""
        params = SearchOptions.coerce(query).to_params() if query is not None else None
        return await self._get("/cards/random", Card.from_dict, params)

    async def autocomplete(self, q: str, include_extras: bool = False) -> Catalog:
        """Up to 20 card names starting with ``q``."""
        params = {"q": q}
        if include_extras:
            params["include_extras"] = "true"
        return await self._get("/cards/autocomplete", Catalog.from_dict, params)

    # -- rulings -------------------------------------------------------------

    async def rulings(self, card_id: str) -> List[Ruling]:
        """Rulings for a card by Scryfall id."""
        return await self._list(f"/cards/{_segment(card_id)}/rulings", Ruling.from_dict)

    async def rulings_by_multiverse_id(self, multiverse_id: int) -> List[Ruling]:
        return await self._list(f"/cards/multiverse/{int(multiverse_id)}/rulings", Ruling.from_dict)

    async def rulings_by_mtgo_id(self, mtgo_id: int) -> List[Ruling]:
        return await self._list(f"/cards/mtgo/{int(mtgo_id)}/rulings", Ruling.from_dict)

    async def rulings_by_arena_id(self, arena_id: int) -> List[Ruling]:
        return await self._list(f"/cards/arena/{int(arena_id)}/rulings", Ruling.from_dict)

    async def rulings_by_set_number(self, set_code: str, collector_number: str) -> List[Ruling]:
        path = f"/cards/{_segment(set_code.lower())}/{_segment(collector_number)}/rulings"
        return await self._list(path, Ruling.from_dict)

    # -- sets ----------------------------------------------------------------

    async def sets(self) -> List[CardSet]:
        """Every set Scryfall knows about."""
        return await self._list("/sets", CardSet.from_dict)

    async def set_by_code(self, code: str) -> CardSet:
        return await self._get(f"/sets/{_segment(code.lower())}", CardSet.from_dict)

    async def set_by_tcgplayer_id(self, tcgplayer_id: int) -> CardSet:
        return await self._get(f"/sets/tcgplayer/{int(tcgplayer_id)}", CardSet.from_dict)

    async def set_by_id(self, set_id: str) -> CardSet:
        return await self._get(f"/sets/{_segment(set_id)}", CardSet.from_dict)

    # -- catalogs ------------------------------------------------------------

    async def catalog(self, name: str) -> Catalog:
        """A catalog such as ``"creature-types"`` (see ``CATALOGS``)."""
        if name not in CATALOGS:
            self.logger.debug("Catalog %r is not in the known list, requesting anyway", name)
        return await self._get(f"/catalog/{_segment(name)}", Catalog.from_dict)

    # -- bulk data -----------------------------------------------------------

    async def bulk_data(self) -> List[BulkManifestEntry]:
        """The bulk-data manifest, in provider order."""
        return await self._list("/bulk-data", BulkManifestEntry.from_dict)

    async def bulk_data_by_type(self, kind: Union[BulkKind, str]) -> BulkManifestEntry:
        """Manifest entry for one dataset type, e.g. ``BulkKind.ORACLE_CARDS``."""
        entry = await self._get(f"/bulk-data/{_segment(str(kind))}", BulkManifestEntry.from_dict)
        if entry.kind_tag != str(kind):
            raise DeserializationError(
                f"Asked for bulk data '{kind}', provider returned '{entry.kind_tag}'"
            )
        return entry

"""Shared fixtures: provider payloads and an API wired to a mock transport."""

from __future__ import annotations

import copy
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from scrybe.core.config import Config
from scrybe.core.http_client import ScryfallHTTPClient
from scrybe.core.rate_limiter import RateGovernor, set_rate_governor
from scrybe.core.variants import set_variant_mode
from scrybe.integrations.scryfall import ScryfallAPI

BASE_URL = "https://api.scryfall.com"

CARD = {
    "object": "card",
    "id": "e3285e6b-3e79-4d7c-bf96-d920f973b122",
    "oracle_id": "4457ed35-7c10-48c8-9776-456485fdf070",
    "multiverse_ids": [442130],
    "mtgo_id": 67198,
    "arena_id": 67522,
    "tcgplayer_id": 162301,
    "name": "Lightning Bolt",
    "lang": "en",
    "released_at": "2018-07-13",
    "uri": "https://api.scryfall.com/cards/e3285e6b-3e79-4d7c-bf96-d920f973b122",
    "scryfall_uri": "https://scryfall.com/card/a25/141/lightning-bolt",
    "layout": "normal",
    "image_status": "highres_scan",
    "image_uris": {
        "small": "https://cards.scryfall.io/small/front/e/3/e3285e6b.jpg",
        "normal": "https://cards.scryfall.io/normal/front/e/3/e3285e6b.jpg",
    },
    "mana_cost": "{R}",
    "cmc": 1.0,
    "type_line": "Instant",
    "oracle_text": "Lightning Bolt deals 3 damage to any target.",
    "colors": ["R"],
    "color_identity": ["R"],
    "keywords": [],
    "legalities": {"standard": "not_legal", "modern": "legal", "vintage": "legal"},
    "games": ["paper", "mtgo"],
    "reserved": False,
    "finishes": ["nonfoil", "foil"],
    "set": "a25",
    "set_name": "Masters 25",
    "collector_number": "141",
    "digital": False,
    "rarity": "uncommon",
    "artist": "Christopher Moeller",
    "border_color": "black",
    "frame": "2015",
    "frame_effects": [],
    "promo_types": [],
    "promo": False,
    "reprint": True,
    "edhrec_rank": 3,
    "prices": {"usd": "1.98", "usd_foil": "4.50", "eur": None},
}

CARD_SET = {
    "object": "set",
    "id": "41ee6e2f-4bfa-4a0c-8d6a-0d0e6e1b7cdb",
    "code": "a25",
    "name": "Masters 25",
    "set_type": "masters",
    "released_at": "2018-03-16",
    "card_count": 249,
    "digital": False,
    "foil_only": False,
    "nonfoil_only": False,
    "uri": "https://api.scryfall.com/sets/a25",
    "scryfall_uri": "https://scryfall.com/sets/a25",
    "search_uri": "https://api.scryfall.com/cards/search?q=e%3Aa25",
    "icon_svg_uri": "https://svgs.scryfall.io/sets/a25.svg",
}

RULING = {
    "object": "ruling",
    "oracle_id": "4457ed35-7c10-48c8-9776-456485fdf070",
    "source": "wotc",
    "published_at": "2004-10-04",
    "comment": "It can target a player or a planeswalker.",
}


@pytest.fixture(autouse=True)
def reset_globals():
    """Keep process-wide governor and variant mode from leaking between tests."""
    yield
    set_rate_governor(None)
    set_variant_mode(None)


@pytest.fixture
def make_card() -> Callable[..., Dict[str, Any]]:
    """Factory for card payloads; keyword arguments override fields."""

    def factory(**overrides: Any) -> Dict[str, Any]:
        card = copy.deepcopy(CARD)
        card.update(overrides)
        return card

    return factory


@pytest.fixture
def card_set() -> Dict[str, Any]:
    return copy.deepcopy(CARD_SET)


@pytest.fixture
def ruling() -> Dict[str, Any]:
    return copy.deepcopy(RULING)


@pytest.fixture
def list_payload() -> Callable[..., Dict[str, Any]]:
    """Factory for Scryfall ``list`` objects."""

    def factory(
        items: List[Any],
        next_page: Optional[str] = None,
        total_cards: Optional[int] = None,
        warnings: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "object": "list",
            "has_more": next_page is not None,
            "data": items,
        }
        if next_page is not None:
            payload["next_page"] = next_page
        if total_cards is not None:
            payload["total_cards"] = total_cards
        if warnings:
            payload["warnings"] = warnings
        return payload

    return factory


@pytest.fixture
def make_client() -> Callable[..., ScryfallHTTPClient]:
    """Factory for an HTTP client whose requests go to ``handler``."""

    def factory(handler: Callable[[httpx.Request], Any], **kwargs: Any) -> ScryfallHTTPClient:
        kwargs.setdefault("governor", RateGovernor(min_interval=0))
        kwargs.setdefault("max_retries", 0)
        kwargs.setdefault("backoff", 0)
        return ScryfallHTTPClient(
            base_url=BASE_URL,
            transport=httpx.MockTransport(handler),
            config=Config(),
            **kwargs,
        )

    return factory


@pytest.fixture
def make_api(make_client) -> Callable[..., ScryfallAPI]:
    """Factory for a ``ScryfallAPI`` backed by a mock transport."""

    def factory(handler: Callable[[httpx.Request], Any], **kwargs: Any) -> ScryfallAPI:
        return ScryfallAPI(client=make_client(handler, **kwargs))

    return factory

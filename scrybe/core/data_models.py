"""Data models mirroring the Scryfall API objects.

Each model is a dataclass with a ``from_dict`` constructor that validates the
shape of the JSON object it is given and a ``to_dict`` method producing the
provider's wire representation. Classification fields are parsed through the
unknown-variant convention (see ``scrybe.core.variants``), so a tag the
provider introduces later does not make the whole record unreadable.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Union

from scrybe.core.classifications import (
    BorderColor,
    BulkKind,
    Color,
    Finish,
    Format,
    Frame,
    FrameEffect,
    Game,
    ImageStatus,
    Layout,
    Legality,
    PromoType,
    Rarity,
    RulingSource,
    SecurityStamp,
    SetType,
)
from scrybe.core.errors import DeserializationError
from scrybe.core.variants import (
    UnknownVariant,
    Variant,
    dump_variant,
    parse_optional_variant,
    parse_variant,
    parse_variants,
)

JSONDict = Dict[str, Any]


def _expect_object(data: Any, kind: str, expected_object: Optional[str] = None) -> JSONDict:
    if not isinstance(data, dict):
        raise DeserializationError(f"{kind} must be a JSON object, got {type(data).__name__}")
    if expected_object is not None and data.get("object", expected_object) != expected_object:
        raise DeserializationError(
            f"Expected object '{expected_object}' for {kind}, got {data.get('object')!r}"
        )
    return data


def _require(data: JSONDict, key: str, kind: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise DeserializationError(f"{kind} is missing required field '{key}'") from None


def _shape_checked(from_dict: Callable[..., Any]) -> Callable[..., Any]:
    """Report wrong-typed fields (a number where a list belongs, etc.) as
    ``DeserializationError`` rather than the bare ``TypeError``/``ValueError``
    the conversion raised."""

    @functools.wraps(from_dict)
    def wrapper(cls, data: Any, *args: Any, **kwargs: Any) -> Any:
        try:
            return from_dict(cls, data, *args, **kwargs)
        except (TypeError, ValueError, AttributeError) as exc:
            raise DeserializationError(f"Malformed {cls.__name__}: {exc}") from exc

    return wrapper


def parse_datetime(value: Any, name: str = "timestamp") -> datetime:
    """Parse an ISO 8601 timestamp."""
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise DeserializationError(f"Invalid {name}: {value!r}") from None


def parse_date(value: Any, name: str = "date") -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` date, None passes through."""
    if value is None:
        return None
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise DeserializationError(f"Invalid {name}: {value!r}") from None


def _dump_list(values: List[Union[Any, UnknownVariant]]) -> List[str]:
    return [dump_variant(v) for v in values]


@dataclass
class ProviderErrorBody:
    """The ``error`` object Scryfall returns alongside 4xx/5xx statuses."""

    status: int
    code: str = ""
    details: str = ""
    warnings: List[str] = field(default_factory=list)
    type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, status: int) -> "ProviderErrorBody":
        if not isinstance(data, dict):
            return cls(status=status)
        return cls(
            status=int(data.get("status", status)),
            code=str(data.get("code", "")),
            details=str(data.get("details", "")),
            warnings=list(data.get("warnings") or []),
            type=data.get("type"),
        )


@dataclass
class CardFace:
    """One face of a multi-faced card."""

    name: str
    mana_cost: str = ""
    type_line: Optional[str] = None
    oracle_text: Optional[str] = None
    colors: List[Variant[Color]] = field(default_factory=list)
    power: Optional[str] = None
    toughness: Optional[str] = None
    loyalty: Optional[str] = None
    flavor_text: Optional[str] = None
    artist: Optional[str] = None
    image_uris: Dict[str, str] = field(default_factory=dict)

    @classmethod
    @_shape_checked
    def from_dict(cls, data: Any) -> "CardFace":
        data = _expect_object(data, "card face", "card_face")
        return cls(
            name=_require(data, "name", "card face"),
            mana_cost=data.get("mana_cost", ""),
            type_line=data.get("type_line"),
            oracle_text=data.get("oracle_text"),
            colors=parse_variants(Color, data.get("colors")),
            power=data.get("power"),
            toughness=data.get("toughness"),
            loyalty=data.get("loyalty"),
            flavor_text=data.get("flavor_text"),
            artist=data.get("artist"),
            image_uris=dict(data.get("image_uris") or {}),
        )

    def to_dict(self) -> JSONDict:
        return {
            "object": "card_face",
            "name": self.name,
            "mana_cost": self.mana_cost,
            "type_line": self.type_line,
            "oracle_text": self.oracle_text,
            "colors": _dump_list(self.colors),
            "power": self.power,
            "toughness": self.toughness,
            "loyalty": self.loyalty,
            "flavor_text": self.flavor_text,
            "artist": self.artist,
            "image_uris": dict(self.image_uris),
        }


@dataclass
class RelatedCard:
    """Entry of a card's ``all_parts`` list."""

    id: str
    component: str
    name: str
    type_line: str
    uri: str

    @classmethod
    @_shape_checked
    def from_dict(cls, data: Any) -> "RelatedCard":
        data = _expect_object(data, "related card", "related_card")
        return cls(
            id=_require(data, "id", "related card"),
            component=_require(data, "component", "related card"),
            name=_require(data, "name", "related card"),
            type_line=data.get("type_line", ""),
            uri=data.get("uri", ""),
        )

    def to_dict(self) -> JSONDict:
        return {
            "object": "related_card",
            "id": self.id,
            "component": self.component,
            "name": self.name,
            "type_line": self.type_line,
            "uri": self.uri,
        }


@dataclass
class Card:
    """A single card printing.

    Attributes
    ----------
    id: str
        Scryfall id of this printing.
    oracle_id: Optional[str]
        Id shared by every printing of the same oracle card. Reversible
        cards carry it on their faces instead.
    legalities: Dict[str, Variant[Legality]]
        Keyed by format name (see ``Format`` for the known ones).
    """

    id: str
    name: str
    lang: str
    layout: Variant[Layout]
    set_code: str
    set_name: str
    collector_number: str
    rarity: Variant[Rarity]
    oracle_id: Optional[str] = None
    uri: str = ""
    scryfall_uri: str = ""
    released_at: Optional[date] = None
    mana_cost: Optional[str] = None
    cmc: Optional[float] = None
    type_line: Optional[str] = None
    oracle_text: Optional[str] = None
    power: Optional[str] = None
    toughness: Optional[str] = None
    loyalty: Optional[str] = None
    colors: List[Variant[Color]] = field(default_factory=list)
    color_identity: List[Variant[Color]] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)
    legalities: Dict[str, Variant[Legality]] = field(default_factory=dict)
    games: List[Variant[Game]] = field(default_factory=list)
    finishes: List[Variant[Finish]] = field(default_factory=list)
    promo_types: List[Variant[PromoType]] = field(default_factory=list)
    frame_effects: List[Variant[FrameEffect]] = field(default_factory=list)
    border_color: Optional[Variant[BorderColor]] = None
    frame: Optional[Variant[Frame]] = None
    security_stamp: Optional[Variant[SecurityStamp]] = None
    image_status: Optional[Variant[ImageStatus]] = None
    image_uris: Dict[str, str] = field(default_factory=dict)
    prices: Dict[str, Optional[str]] = field(default_factory=dict)
    card_faces: List[CardFace] = field(default_factory=list)
    all_parts: List[RelatedCard] = field(default_factory=list)
    artist: Optional[str] = None
    multiverse_ids: List[int] = field(default_factory=list)
    mtgo_id: Optional[int] = None
    arena_id: Optional[int] = None
    tcgplayer_id: Optional[int] = None
    edhrec_rank: Optional[int] = None
    reserved: bool = False
    digital: bool = False
    promo: bool = False
    reprint: bool = False

    @classmethod
    @_shape_checked
    def from_dict(cls, data: Any) -> "Card":
        data = _expect_object(data, "card", "card")
        kind = "card"
        legalities = data.get("legalities") or {}
        if not isinstance(legalities, dict):
            raise DeserializationError("card legalities must be a JSON object")
        try:
            cmc = float(data["cmc"]) if data.get("cmc") is not None else None
        except (TypeError, ValueError):
            raise DeserializationError(f"Invalid cmc: {data.get('cmc')!r}") from None
        return cls(
            id=_require(data, "id", kind),
            name=_require(data, "name", kind),
            lang=data.get("lang", "en"),
            layout=parse_variant(Layout, _require(data, "layout", kind)),
            set_code=_require(data, "set", kind),
            set_name=data.get("set_name", ""),
            collector_number=str(_require(data, "collector_number", kind)),
            rarity=parse_variant(Rarity, _require(data, "rarity", kind)),
            oracle_id=data.get("oracle_id"),
            uri=data.get("uri", ""),
            scryfall_uri=data.get("scryfall_uri", ""),
            released_at=parse_date(data.get("released_at"), "released_at"),
            mana_cost=data.get("mana_cost"),
            cmc=cmc,
            type_line=data.get("type_line"),
            oracle_text=data.get("oracle_text"),
            power=data.get("power"),
            toughness=data.get("toughness"),
            loyalty=data.get("loyalty"),
            colors=parse_variants(Color, data.get("colors")),
            color_identity=parse_variants(Color, data.get("color_identity")),
            keywords=list(data.get("keywords") or []),
            legalities={
                fmt: parse_variant(Legality, status) for fmt, status in legalities.items()
            },
            games=parse_variants(Game, data.get("games")),
            finishes=parse_variants(Finish, data.get("finishes")),
            promo_types=parse_variants(PromoType, data.get("promo_types")),
            frame_effects=parse_variants(FrameEffect, data.get("frame_effects")),
            border_color=parse_optional_variant(BorderColor, data.get("border_color")),
            frame=parse_optional_variant(Frame, data.get("frame")),
            security_stamp=parse_optional_variant(SecurityStamp, data.get("security_stamp")),
            image_status=parse_optional_variant(ImageStatus, data.get("image_status")),
            image_uris=dict(data.get("image_uris") or {}),
            prices=dict(data.get("prices") or {}),
            card_faces=[CardFace.from_dict(face) for face in data.get("card_faces") or []],
            all_parts=[RelatedCard.from_dict(part) for part in data.get("all_parts") or []],
            artist=data.get("artist"),
            multiverse_ids=list(data.get("multiverse_ids") or []),
            mtgo_id=data.get("mtgo_id"),
            arena_id=data.get("arena_id"),
            tcgplayer_id=data.get("tcgplayer_id"),
            edhrec_rank=data.get("edhrec_rank"),
            reserved=bool(data.get("reserved", False)),
            digital=bool(data.get("digital", False)),
            promo=bool(data.get("promo", False)),
            reprint=bool(data.get("reprint", False)),
        )

    def legality(self, fmt: Union[Format, str]) -> Optional[Variant[Legality]]:
        """Legality of this card in a format, None if the format is not listed."""
        key = fmt.value if isinstance(fmt, Format) else fmt
        return self.legalities.get(key)

    def image_url(self, size: str = "normal") -> Optional[str]:
        """Image URL, falling back to the front face for multi-faced cards."""
        if self.image_uris:
            return self.image_uris.get(size)
        if self.card_faces and self.card_faces[0].image_uris:
            return self.card_faces[0].image_uris.get(size)
        return None

    def to_dict(self) -> JSONDict:
        """Serialise the card to its wire representation."""
        return {
            "object": "card",
            "id": self.id,
            "oracle_id": self.oracle_id,
            "name": self.name,
            "lang": self.lang,
            "layout": dump_variant(self.layout),
            "set": self.set_code,
            "set_name": self.set_name,
            "collector_number": self.collector_number,
            "rarity": dump_variant(self.rarity),
            "uri": self.uri,
            "scryfall_uri": self.scryfall_uri,
            "released_at": self.released_at.isoformat() if self.released_at else None,
            "mana_cost": self.mana_cost,
            "cmc": self.cmc,
            "type_line": self.type_line,
            "oracle_text": self.oracle_text,
            "power": self.power,
            "toughness": self.toughness,
            "loyalty": self.loyalty,
            "colors": _dump_list(self.colors),
            "color_identity": _dump_list(self.color_identity),
            "keywords": list(self.keywords),
            "legalities": {fmt: dump_variant(v) for fmt, v in self.legalities.items()},
            "games": _dump_list(self.games),
            "finishes": _dump_list(self.finishes),
            "promo_types": _dump_list(self.promo_types),
            "frame_effects": _dump_list(self.frame_effects),
            "border_color": dump_variant(self.border_color) if self.border_color else None,
            "frame": dump_variant(self.frame) if self.frame else None,
            "security_stamp": (
                dump_variant(self.security_stamp) if self.security_stamp else None
            ),
            "image_status": dump_variant(self.image_status) if self.image_status else None,
            "image_uris": dict(self.image_uris),
            "prices": dict(self.prices),
            "card_faces": [face.to_dict() for face in self.card_faces],
            "all_parts": [part.to_dict() for part in self.all_parts],
            "artist": self.artist,
            "multiverse_ids": list(self.multiverse_ids),
            "mtgo_id": self.mtgo_id,
            "arena_id": self.arena_id,
            "tcgplayer_id": self.tcgplayer_id,
            "edhrec_rank": self.edhrec_rank,
            "reserved": self.reserved,
            "digital": self.digital,
            "promo": self.promo,
            "reprint": self.reprint,
        }


@dataclass
class CardSet:
    """A set (expansion, promo set, token set, ...)."""

    id: str
    code: str
    name: str
    set_type: Variant[SetType]
    card_count: int = 0
    released_at: Optional[date] = None
    block_code: Optional[str] = None
    block: Optional[str] = None
    parent_set_code: Optional[str] = None
    mtgo_code: Optional[str] = None
    tcgplayer_id: Optional[int] = None
    digital: bool = False
    foil_only: bool = False
    nonfoil_only: bool = False
    uri: str = ""
    scryfall_uri: str = ""
    search_uri: str = ""
    icon_svg_uri: str = ""

    @classmethod
    @_shape_checked
    def from_dict(cls, data: Any) -> "CardSet":
        data = _expect_object(data, "set", "set")
        return cls(
            id=_require(data, "id", "set"),
            code=_require(data, "code", "set"),
            name=_require(data, "name", "set"),
            set_type=parse_variant(SetType, _require(data, "set_type", "set")),
            card_count=int(data.get("card_count", 0)),
            released_at=parse_date(data.get("released_at"), "released_at"),
            block_code=data.get("block_code"),
            block=data.get("block"),
            parent_set_code=data.get("parent_set_code"),
            mtgo_code=data.get("mtgo_code"),
            tcgplayer_id=data.get("tcgplayer_id"),
            digital=bool(data.get("digital", False)),
            foil_only=bool(data.get("foil_only", False)),
            nonfoil_only=bool(data.get("nonfoil_only", False)),
            uri=data.get("uri", ""),
            scryfall_uri=data.get("scryfall_uri", ""),
            search_uri=data.get("search_uri", ""),
            icon_svg_uri=data.get("icon_svg_uri", ""),
        )

    def to_dict(self) -> JSONDict:
        return {
            "object": "set",
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "set_type": dump_variant(self.set_type),
            "card_count": self.card_count,
            "released_at": self.released_at.isoformat() if self.released_at else None,
            "block_code": self.block_code,
            "block": self.block,
            "parent_set_code": self.parent_set_code,
            "mtgo_code": self.mtgo_code,
            "tcgplayer_id": self.tcgplayer_id,
            "digital": self.digital,
            "foil_only": self.foil_only,
            "nonfoil_only": self.nonfoil_only,
            "uri": self.uri,
            "scryfall_uri": self.scryfall_uri,
            "search_uri": self.search_uri,
            "icon_svg_uri": self.icon_svg_uri,
        }


@dataclass
class Ruling:
    """An Oracle ruling attached to a card."""

    oracle_id: str
    source: Variant[RulingSource]
    published_at: Optional[date]
    comment: str

    @classmethod
    @_shape_checked
    def from_dict(cls, data: Any) -> "Ruling":
        data = _expect_object(data, "ruling", "ruling")
        return cls(
            oracle_id=_require(data, "oracle_id", "ruling"),
            source=parse_variant(RulingSource, _require(data, "source", "ruling")),
            published_at=parse_date(data.get("published_at"), "published_at"),
            comment=_require(data, "comment", "ruling"),
        )

    def to_dict(self) -> JSONDict:
        return {
            "object": "ruling",
            "oracle_id": self.oracle_id,
            "source": dump_variant(self.source),
            "published_at": self.published_at.isoformat() if self.published_at else None,
            "comment": self.comment,
        }


@dataclass
class Catalog:
    """A list of strings such as all card names or all creature types."""

    uri: str
    data: List[str]
    total_values: int = 0

    @classmethod
    @_shape_checked
    def from_dict(cls, data: Any) -> "Catalog":
        data = _expect_object(data, "catalog", "catalog")
        values = _require(data, "data", "catalog")
        if not isinstance(values, list):
            raise DeserializationError("catalog data must be a list")
        return cls(
            uri=data.get("uri", ""),
            data=[str(v) for v in values],
            total_values=int(data.get("total_values", len(values))),
        )

    def to_dict(self) -> JSONDict:
        return {
            "object": "catalog",
            "uri": self.uri,
            "total_values": self.total_values,
            "data": list(self.data),
        }


@dataclass(frozen=True)
class BulkManifestEntry:
    """One downloadable dataset listed by the bulk-data endpoint."""

    id: str
    kind: Variant[BulkKind]
    download_uri: str
    updated_at: datetime
    size_bytes: int
    content_type: str
    content_encoding: str = ""
    compressed_size: Optional[int] = None
    name: str = ""
    description: str = ""
    uri: str = ""

    @property
    def kind_tag(self) -> str:
        """The wire ``type`` of this entry."""
        return dump_variant(self.kind)

    @classmethod
    @_shape_checked
    def from_dict(cls, data: Any) -> "BulkManifestEntry":
        data = _expect_object(data, "bulk data entry", "bulk_data")
        kind = "bulk data entry"
        return cls(
            id=_require(data, "id", kind),
            kind=parse_variant(BulkKind, _require(data, "type", kind)),
            download_uri=_require(data, "download_uri", kind),
            updated_at=parse_datetime(_require(data, "updated_at", kind), "updated_at"),
            size_bytes=int(data.get("size", 0)),
            content_type=data.get("content_type", "application/json"),
            content_encoding=data.get("content_encoding", ""),
            compressed_size=data.get("compressed_size"),
            name=data.get("name", ""),
            description=data.get("description", ""),
            uri=data.get("uri", ""),
        )

    def to_dict(self) -> JSONDict:
        return {
            "object": "bulk_data",
            "id": self.id,
            "type": self.kind_tag,
            "name": self.name,
            "description": self.description,
            "download_uri": self.download_uri,
            "updated_at": self.updated_at.isoformat(),
            "size": self.size_bytes,
            "compressed_size": self.compressed_size,
            "content_type": self.content_type,
            "content_encoding": self.content_encoding,
            "uri": self.uri,
        }

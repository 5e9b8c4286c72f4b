"""Typed helpers for building search terms.

Each helper creates a ``Leaf`` for one Scryfall keyword. A plain value uses
the ``:`` shorthand; wrap the value in one of the comparator functions to use
an explicit comparison:

>>> str(cmc(gte(5)) & type_line("planeswalker"))
'cmc>=5 type:planeswalker'

Fields declare which comparators they accept. Asking a text field for an
ordering (``oracle(lt("draw"))``) raises ``InvalidComparatorError`` when the
term is built, before anything is sent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple, Union

from scrybe.core.errors import InvalidComparatorError
from scrybe.search.query import COMPARATORS, Leaf, Regex, Value

TEXT_OPS: Tuple[str, ...] = (":",)
EXACT_OPS: Tuple[str, ...] = (":", "=")
ORDERED_OPS: Tuple[str, ...] = COMPARATORS


@dataclass(frozen=True)
class Compare:
    """A comparator together with its right-hand side."""

    comparator: str
    value: Value


def eq(value: Value) -> Compare:
    return Compare("=", value)


def neq(value: Value) -> Compare:
    return Compare("!=", value)


def lt(value: Value) -> Compare:
    return Compare("<", value)


def lte(value: Value) -> Compare:
    return Compare("<=", value)


def gt(value: Value) -> Compare:
    return Compare(">", value)


def gte(value: Value) -> Compare:
    return Compare(">=", value)


# Keyword -> comparators it supports.
FIELDS: Dict[str, Tuple[str, ...]] = {
    "name": TEXT_OPS,
    "oracle": TEXT_OPS,
    "fulloracle": TEXT_OPS,
    "type": TEXT_OPS,
    "keyword": TEXT_OPS,
    "color": ORDERED_OPS,
    "identity": ORDERED_OPS,
    "mana": ORDERED_OPS,
    "devotion": ORDERED_OPS,
    "produces": EXACT_OPS,
    "rarity": ORDERED_OPS,
    "set": TEXT_OPS,
    "number": ORDERED_OPS,
    "block": TEXT_OPS,
    "settype": TEXT_OPS,
    "cube": TEXT_OPS,
    "format": TEXT_OPS,
    "banned": TEXT_OPS,
    "restricted": TEXT_OPS,
    "cheapest": TEXT_OPS,
    "artist": TEXT_OPS,
    "flavor": TEXT_OPS,
    "watermark": TEXT_OPS,
    "border": TEXT_OPS,
    "frame": TEXT_OPS,
    "date": ORDERED_OPS,
    "game": TEXT_OPS,
    "language": TEXT_OPS,
    "in": TEXT_OPS,
    "is": TEXT_OPS,
    "not": TEXT_OPS,
    "has": TEXT_OPS,
    "new": TEXT_OPS,
    "unique": TEXT_OPS,
    "order": TEXT_OPS,
    "direction": TEXT_OPS,
    "prefer": TEXT_OPS,
}

# Numeric properties; the value may also be another numeric property name
# (``power(gt("toughness"))``).
NUMERIC_FIELDS: Tuple[str, ...] = (
    "power",
    "toughness",
    "powtou",
    "loyalty",
    "cmc",
    "artists",
    "usd",
    "usdfoil",
    "eur",
    "tix",
    "illustrations",
    "prints",
    "sets",
    "paperprints",
    "papersets",
    "year",
)
for _numeric in NUMERIC_FIELDS:
    FIELDS[_numeric] = ORDERED_OPS

# Short forms Scryfall accepts, mapped to the canonical keyword. Used by the
# parser so ``t:goblin`` and ``type:goblin`` build the same tree.
ALIASES: Dict[str, str] = {
    "n": "name",
    "o": "oracle",
    "fo": "fulloracle",
    "t": "type",
    "kw": "keyword",
    "c": "color",
    "id": "identity",
    "ci": "identity",
    "m": "mana",
    "r": "rarity",
    "s": "set",
    "e": "set",
    "edition": "set",
    "cn": "number",
    "b": "block",
    "st": "settype",
    "f": "format",
    "legal": "format",
    "a": "artist",
    "ft": "flavor",
    "wm": "watermark",
    "lang": "language",
    "pow": "power",
    "tou": "toughness",
    "pt": "powtou",
    "loy": "loyalty",
    "mv": "cmc",
    "manavalue": "cmc",
    "dir": "direction",
}


def canonical_field(field: str) -> str:
    """Resolve an alias to its keyword; unknown names are returned lowercased."""
    field = field.lower()
    return ALIASES.get(field, field)


def term(field: str, value: Union[Value, Compare]) -> Leaf:
    """Build a term for any keyword, checking its comparator.

    Args:
        field: Keyword or alias (``"t"``, ``"type"``)
        value: Plain value for ``:``, or a ``Compare`` for explicit operators

    Returns:
        The ``Leaf`` for the term

    Raises:
        InvalidComparatorError: If the keyword does not accept the comparator
    """
    field = canonical_field(field)
    if isinstance(value, Compare):
        comparator, value = value.comparator, value.value
    else:
        comparator = ":"
    allowed = FIELDS.get(field)
    if allowed is not None and comparator not in allowed:
        raise InvalidComparatorError(field, comparator, " ".join(allowed))
    return Leaf(field, comparator, value)


def _field(keyword: str, doc: str):
    def helper(value: Union[Value, Compare]) -> Leaf:
        return term(keyword, value)

    helper.__name__ = keyword
    helper.__doc__ = doc
    return helper


name = _field("name", "Card name contains the value.")
oracle = _field("oracle", "Oracle text contains the value (or matches a Regex).")
full_oracle = _field("fulloracle", "Oracle text including reminder text.")
type_line = _field("type", "Type line contains the value.")
keyword = _field("keyword", "Card has the keyword ability.")
color = _field("color", "Card colors, e.g. ``color(gte('rg'))``.")
identity = _field("identity", "Commander color identity.")
mana = _field("mana", "Mana cost contains the symbols.")
devotion = _field("devotion", "Devotion to a color, e.g. ``devotion(gte('{r}{r}'))``.")
produces = _field("produces", "Mana the card can produce.")
rarity = _field("rarity", "Printing rarity; ordered common < uncommon < rare < mythic.")
set_code = _field("set", "Printed in the set with this code.")
collector_number = _field("number", "Collector number.")
block = _field("block", "Printed in the block with this code.")
set_type = _field("settype", "Printed in a set of this type.")
cube = _field("cube", "Included in the named cube.")
format_legal = _field("format", "Legal in the format.")
banned = _field("banned", "Banned in the format.")
restricted = _field("restricted", "Restricted in the format.")
cheapest = _field("cheapest", "Cheapest printing in the currency (usd, eur, tix).")
artist = _field("artist", "Illustrated by the artist.")
flavor = _field("flavor", "Flavor text contains the value.")
watermark = _field("watermark", "Has the watermark.")
border = _field("border", "Border color.")
frame = _field("frame", "Frame edition or effect.")
date = _field("date", "Release date, or a set code meaning that set's release date.")
game = _field("game", "Available in the game (paper, arena, mtgo).")
language = _field("language", "Printed in the language.")
in_ = _field("in", "Has ever been printed in the set, game, language or rarity.")
unique = _field("unique", "Inline de-duplication strategy (cards, art, prints).")
order = _field("order", "Inline sort order.")

power = _field("power", "Creature power.")
toughness = _field("toughness", "Creature toughness.")
powtou = _field("powtou", "Power plus toughness.")
loyalty = _field("loyalty", "Starting loyalty.")
cmc = _field("cmc", "Mana value.")
artists = _field("artists", "Number of artists on the printing.")
usd = _field("usd", "Non-foil price in US dollars.")
usd_foil = _field("usdfoil", "Foil price in US dollars.")
eur = _field("eur", "Price in euros.")
tix = _field("tix", "Price in MTGO tickets.")
illustrations = _field("illustrations", "Number of distinct illustrations.")
prints = _field("prints", "Number of printings.")
sets = _field("sets", "Number of sets printed in.")
paper_prints = _field("paperprints", "Number of paper printings.")
paper_sets = _field("papersets", "Number of paper sets printed in.")
year = _field("year", "Release year.")


def is_(criterion: str) -> Leaf:
    """An ``is:`` criterion such as ``is:foil`` or ``is:fetchland``."""
    return term("is", criterion)


def has(criterion: str) -> Leaf:
    """A ``has:`` criterion such as ``has:watermark``."""
    return term("has", criterion)


def new(criterion: str) -> Leaf:
    """A ``new:`` criterion such as ``new:art``."""
    return term("new", criterion)


def exact(card_name: str) -> Leaf:
    """Exact name match, written ``!"Card Name"``."""
    return Leaf("", "!", card_name)


def words(text: str) -> Leaf:
    """A bare word, searched against card names."""
    return Leaf("", "", text)


def regex(pattern: str) -> Regex:
    """Shorthand for a ``/pattern/`` value."""
    return Regex(pattern)

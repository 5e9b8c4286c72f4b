"""Forward-compatible enumerations for provider classifications.

Scryfall adds new layouts, promo types, frame effects and so on without
notice. Every closed classification the provider returns is modelled as a
``ProviderEnum`` and parsed through ``parse_variant``, which decides at
deserialization time what an unrecognised tag turns into:

- ``VariantMode.FULL``: an ``UnknownVariant`` holding the original text, so
  it can be matched on and written back out unchanged;
- ``VariantMode.MARKER``: an ``UnknownVariant`` with no text, only the fact
  that the tag was not recognised;
- ``VariantMode.STRICT``: a ``DeserializationError``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Type, TypeVar, Union

from scrybe.core.errors import DeserializationError

logger = logging.getLogger(__name__)

MARKER_TEXT = "unknown"


class VariantMode(str, Enum):
    """How unrecognised classification tags are handled."""

    STRICT = "strict"
    FULL = "full"
    MARKER = "marker"


def resolve_variant_mode(unknown_variants: bool, unknown_variants_slim: bool) -> VariantMode:
    """Pick the mode from the two feature flags; full fallback wins."""
    if unknown_variants:
        return VariantMode.FULL
    if unknown_variants_slim:
        return VariantMode.MARKER
    return VariantMode.STRICT


_default_mode: Optional[VariantMode] = None


def get_variant_mode() -> VariantMode:
    """Process-wide mode, read from configuration on first use."""
    global _default_mode
    if _default_mode is None:
        from scrybe.core.config import get_config

        config = get_config()
        _default_mode = resolve_variant_mode(
            config.get_bool("variants.unknown_variants", True),
            config.get_bool("variants.unknown_variants_slim", False),
        )
    return _default_mode


def set_variant_mode(mode: Optional[VariantMode]) -> None:
    """Override the process-wide mode (None re-reads configuration)."""
    global _default_mode
    _default_mode = mode


class ProviderEnum(str, Enum):
    """Base class for provider classifications; values are the wire tags."""

    def __str__(self) -> str:
        return self.value

    @classmethod
    def tags(cls) -> List[str]:
        """All known wire tags."""
        return [member.value for member in cls]


@dataclass(frozen=True)
class UnknownVariant:
    """A classification tag that was not in the known set.

    Attributes
    ----------
    kind: str
        Name of the classification (e.g. ``"Layout"``).
    raw: Optional[str]
        The original tag in full-fallback mode, None in marker mode.
    """

    kind: str
    raw: Optional[str] = None

    @property
    def is_marker(self) -> bool:
        """True when the original text was not kept."""
        return self.raw is None

    def __str__(self) -> str:
        return self.raw if self.raw is not None else MARKER_TEXT


E = TypeVar("E", bound=ProviderEnum)
Variant = Union[E, UnknownVariant]


def parse_variant(
    enum_cls: Type[E],
    raw: str,
    mode: Optional[VariantMode] = None,
) -> Union[E, UnknownVariant]:
    """Parse a wire tag into a known member or a fallback.

    Args:
        enum_cls: The classification to parse into
        raw: The tag as sent by the provider
        mode: Fallback behaviour; defaults to the process-wide mode

    Returns:
        The matching member, or an ``UnknownVariant``

    Raises:
        DeserializationError: In strict mode, or if ``raw`` is not a string
    """
    if not isinstance(raw, str):
        raise DeserializationError(
            f"{enum_cls.__name__} expects a string tag, got {type(raw).__name__}"
        )
    try:
        return enum_cls(raw)
    except ValueError:
        pass

    mode = mode or get_variant_mode()
    if mode is VariantMode.STRICT:
        raise DeserializationError(f"Unknown {enum_cls.__name__} variant: {raw!r}")

    logger.debug("Unrecognised %s variant %r", enum_cls.__name__, raw)
    if mode is VariantMode.FULL:
        return UnknownVariant(enum_cls.__name__, raw)
    return UnknownVariant(enum_cls.__name__)


def parse_variants(
    enum_cls: Type[E],
    raws: Optional[Iterable[str]],
    mode: Optional[VariantMode] = None,
) -> List[Union[E, UnknownVariant]]:
    """Parse a list of tags; None becomes an empty list."""
    if raws is None:
        return []
    if isinstance(raws, str):
        raise DeserializationError(f"{enum_cls.__name__} list expected, got a string")
    return [parse_variant(enum_cls, raw, mode) for raw in raws]


def parse_optional_variant(
    enum_cls: Type[E],
    raw: Optional[str],
    mode: Optional[VariantMode] = None,
) -> Optional[Union[E, UnknownVariant]]:
    """Like ``parse_variant`` but passes None through."""
    if raw is None:
        return None
    return parse_variant(enum_cls, raw, mode)


def dump_variant(value: Union[ProviderEnum, UnknownVariant]) -> str:
    """Serialize a parsed classification back to its wire tag.

    Full fallbacks reproduce the original text exactly; marker fallbacks
    can only produce ``"unknown"``.
    """
    if isinstance(value, UnknownVariant):
        return str(value)
    return value.value


def is_known(value: Union[ProviderEnum, UnknownVariant, None]) -> bool:
    """True for members of the known tag set."""
    return isinstance(value, ProviderEnum)

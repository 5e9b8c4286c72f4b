"""Core functionality for scrybe.

This package contains essential components: data models, errors, HTTP
client, pagination, rate governing, configuration and logging.

- classifications / variants: provider enums and unknown-tag handling
- pagination: lazily paged result streams
- rate_limiter: shared request spacing for every outbound call
"""

from .config import Config, ValidationResult, get_config  # noqa: F401
from .data_models import (  # noqa: F401
    BulkManifestEntry,
    Card,
    CardFace,
    CardSet,
    Catalog,
    RelatedCard,
    Ruling,
)
from .errors import (  # noqa: F401
    CacheIoError,
    DeserializationError,
    HttpStatusError,
    InvalidQueryError,
    ManifestStaleError,
    NotFoundError,
    QueryError,
    RateLimitedError,
    ScrybeError,
    ServerError,
    TransportError,
)
from .http_client import ScryfallHTTPClient  # noqa: F401
from .logging_setup import configure_logging  # noqa: F401
from .pagination import Page, PaginatedStream, StreamState  # noqa: F401
from .rate_limiter import RateGovernor, get_rate_governor, set_rate_governor  # noqa: F401
from .variants import UnknownVariant, VariantMode  # noqa: F401

__all__ = [
    # Config
    "Config",
    "ValidationResult",
    "get_config",
    # Models
    "BulkManifestEntry",
    "Card",
    "CardFace",
    "CardSet",
    "Catalog",
    "RelatedCard",
    "Ruling",
    # Errors
    "CacheIoError",
    "DeserializationError",
    "HttpStatusError",
    "InvalidQueryError",
    "ManifestStaleError",
    "NotFoundError",
    "QueryError",
    "RateLimitedError",
    "ScrybeError",
    "ServerError",
    "TransportError",
    # Transport
    "ScryfallHTTPClient",
    "Page",
    "PaginatedStream",
    "StreamState",
    # Rate governing
    "RateGovernor",
    "get_rate_governor",
    "set_rate_governor",
    # Logging
    "configure_logging",
    # Variants
    "UnknownVariant",
    "VariantMode",
]

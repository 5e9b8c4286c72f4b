"""Error types raised by scrybe.

Every error carries a ``recoverable`` flag telling the caller whether
retrying the whole operation can succeed (network hiccups, rate limiting,
provider outages) or whether something in the request, the schema or the
local environment has to change first.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from scrybe.storage.bulk_cache import CacheRecord


class ScrybeError(Exception):
    """Base class for all scrybe errors."""

    recoverable: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "error_type": self.__class__.__name__,
            "message": str(self),
            "recoverable": self.recoverable,
        }


class TransportError(ScrybeError):
    """Connection failure or timeout before a response was received."""

    recoverable = True

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class HttpStatusError(ScrybeError):
    """The provider answered with a non-success status code.

    Attributes
    ----------
    status: int
        HTTP status code.
    code: str
        Provider error code (e.g. ``not_found``), empty if none was sent.
    details: str
        Human readable explanation from the provider error object.
    warnings: List[str]
        Non-fatal warnings the provider attached to the error.
    """

    def __init__(
        self,
        status: int,
        details: str = "",
        code: str = "",
        warnings: Optional[List[str]] = None,
        url: Optional[str] = None,
    ) -> None:
        self.status = status
        self.details = details
        self.code = code
        self.warnings = list(warnings or [])
        self.url = url
        super().__init__(self._format())

    def _format(self) -> str:
        message = f"HTTP {self.status}"
        if self.details:
            message += f": {self.details}"
        if self.warnings:
            message += " (warnings: " + "; ".join(self.warnings) + ")"
        return message

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "status": self.status,
                "code": self.code,
                "details": self.details,
                "warnings": self.warnings,
            }
        )
        return data


class NotFoundError(HttpStatusError):
    """404: the requested object does not exist (or a search matched nothing)."""


class InvalidQueryError(HttpStatusError):
    """422: the provider could not process the request."""


class RateLimitedError(HttpStatusError):
    """429: too many requests."""

    recoverable = True

    def __init__(self, *args: Any, retry_after: Optional[float] = None, **kwargs: Any) -> None:
        self.retry_after = retry_after
        super().__init__(*args, **kwargs)


class ServerError(HttpStatusError):
    """5xx: provider side failure."""

    recoverable = True


class DeserializationError(ScrybeError):
    """A response body did not have the expected shape."""


class QueryError(ScrybeError):
    """A search query was constructed incorrectly."""


class EmptyCompoundError(QueryError):
    """An AND/OR node was built without any children."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"{kind} requires at least one child")
        self.kind = kind


class InvalidComparatorError(QueryError):
    """A field was combined with a comparator it does not support."""

    def __init__(self, field: str, comparator: str, allowed: str) -> None:
        super().__init__(
            f"Field '{field}' does not support comparator '{comparator}' "
            f"(allowed: {allowed})"
        )
        self.field = field
        self.comparator = comparator


class QuerySyntaxError(QueryError):
    """A textual query could not be parsed."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} at position {position}")
        self.position = position


class CacheIoError(ScrybeError):
    """Reading or writing the local bulk cache failed."""

    recoverable = True

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class ManifestStaleError(ScrybeError):
    """The bulk manifest could not be fetched during a freshness check.

    ``record`` holds the locally cached snapshot (if any) so the caller can
    decide whether to carry on with possibly stale data.
    """

    recoverable = True

    def __init__(
        self,
        message: str,
        record: Optional["CacheRecord"] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.record = record
        self.cause = cause


STATUS_ERRORS: Dict[int, type] = {
    404: NotFoundError,
    422: InvalidQueryError,
    429: RateLimitedError,
}


def error_for_status(
    status: int,
    details: str = "",
    code: str = "",
    warnings: Optional[List[str]] = None,
    url: Optional[str] = None,
    retry_after: Optional[float] = None,
) -> HttpStatusError:
    """Build the error matching an HTTP status code."""
    if status == 429:
        return RateLimitedError(
            status, details, code, warnings, url, retry_after=retry_after
        )
    if status >= 500:
        return ServerError(status, details, code, warnings, url)
    error_cls = STATUS_ERRORS.get(status, HttpStatusError)
    return error_cls(status, details, code, warnings, url)

"""Lazily paginated result streams.

Scryfall returns list results in pages of up to 175 objects, each carrying a
``next_page`` URL while more results exist. ``PaginatedStream`` hides the
paging behind a single async iterator:

    async for card in api.search(p.type_line("goblin")):
        ...

Pages are fetched one at a time, strictly in order, and only when the
buffered items of the previous page are used up. The stream's progress is an
explicit ``StreamState`` so callers (and tests) can inspect it.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    AsyncIterator,
    Callable,
    Deque,
    Dict,
    Generic,
    List,
    Optional,
    TypeVar,
)

from scrybe.core.errors import DeserializationError, ScrybeError

T = TypeVar("T")


def _identity(item: Any) -> Any:
    return item


class StreamState(str, Enum):
    """Where a ``PaginatedStream`` is in its lifecycle."""

    IDLE = "idle"
    FETCHING_PAGE = "fetching_page"
    BUFFERED = "buffered"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


@dataclass
class Page(Generic[T]):
    """One HTTP response worth of list results.

    Attributes
    ----------
    items: List[T]
        Parsed items in provider order.
    next: Optional[str]
        URL of the following page, None on the last page.
    total_estimate: Optional[int]
        ``total_cards`` as reported by the provider, if present.
    has_more: bool
        Whether the provider says more pages exist.
    warnings: List[str]
        Non-fatal warnings attached to the response.
    """

    items: List[T]
    next: Optional[str] = None
    total_estimate: Optional[int] = None
    has_more: bool = False
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any, parse_item: Callable[[Any], T] = _identity) -> "Page[T]":
        """Parse a Scryfall ``list`` object.

        Raises:
            DeserializationError: If the body is not a list object, or claims
                more pages without saying where they are
        """
        if not isinstance(data, dict) or not isinstance(data.get("data"), list):
            raise DeserializationError("Expected a list object with a 'data' array")
        if data.get("object", "list") != "list":
            raise DeserializationError(f"Expected object 'list', got {data.get('object')!r}")

        has_more = bool(data.get("has_more", False))
        next_page = data.get("next_page")
        if has_more and not next_page:
            raise DeserializationError("List has_more is true but next_page is missing")

        total = data.get("total_cards")
        try:
            total_estimate = int(total) if total is not None else None
            items = [parse_item(item) for item in data["data"]]
            warnings = [str(w) for w in data.get("warnings") or []]
        except (TypeError, ValueError, KeyError) as exc:
            raise DeserializationError(f"Malformed list page: {exc}") from exc
        return cls(
            items=items,
            next=next_page if has_more else None,
            total_estimate=total_estimate,
            has_more=has_more,
            warnings=warnings,
        )


class PaginatedStream(Generic[T]):
    """Forward-only, non-restartable async sequence over a paged listing.

    Each pull either pops a buffered item without any I/O, or fetches the
    next page through the client (and therefore through its rate governor).
    A transport, status or deserialization error is raised on the pull that
    hit it; the stream is then ``FAILED`` and every later pull ends the
    iteration. Build a new stream to try again.
    """

    def __init__(
        self,
        client: Any,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        parse_item: Callable[[Any], T] = _identity,
    ) -> None:
        """
        Args:
            client: Object with an async ``get_json(url, params)``
                (normally a ``ScryfallHTTPClient``)
            url: First page URL, relative to the client's base URL or absolute
            params: Query parameters for the first request only; later pages
                use the provider's ``next_page`` URL verbatim
            parse_item: Converts each raw item (e.g. ``Card.from_dict``)
        """
        self._client = client
        self._params = dict(params) if params else None
        self._parse_item = parse_item
        self._buffer: Deque[T] = deque()
        self._next_url: Optional[str] = url
        self._page_number = 0
        self._yielded = 0
        self.state = StreamState.IDLE
        self.fetching_url: Optional[str] = None
        self.error: Optional[BaseException] = None
        self.total_estimate: Optional[int] = None
        self.warnings: List[str] = []
        self.logger = logging.getLogger(self.__class__.__name__)

    def __aiter__(self) -> "PaginatedStream[T]":
        return self

    async def __anext__(self) -> T:
        while True:
            if self._buffer:
                self._yielded += 1
                return self._buffer.popleft()
            if self.state in (StreamState.EXHAUSTED, StreamState.FAILED):
                raise StopAsyncIteration
            if self._next_url is None:
                self.state = StreamState.EXHAUSTED
                raise StopAsyncIteration
            await self._fetch_page()

    async def _fetch_page(self) -> Page[T]:
        url = self._next_url
        params = self._params if self._page_number == 0 else None
        self.state = StreamState.FETCHING_PAGE
        self.fetching_url = url
        try:
            payload = await self._client.get_json(url, params)
            page = Page.from_dict(payload, self._parse_item)
        except asyncio.CancelledError:
            # Abandoned mid-fetch; nothing was buffered.
            self._finish(StreamState.EXHAUSTED)
            raise
        except ScrybeError as exc:
            self.logger.debug("Page %d of %s failed: %s", self._page_number + 1, url, exc)
            self.error = exc
            self._finish(StreamState.FAILED)
            raise
        except Exception as exc:
            self.logger.debug("Page %d of %s failed: %r", self._page_number + 1, url, exc)
            error = DeserializationError(f"Page {self._page_number + 1} could not be read: {exc}")
            self.error = error
            self._finish(StreamState.FAILED)
            raise error from exc

        self._page_number += 1
        self.fetching_url = None
        self._next_url = page.next
        if page.total_estimate is not None:
            self.total_estimate = page.total_estimate
        if page.warnings:
            self.warnings.extend(page.warnings)
            for warning in page.warnings:
                self.logger.warning("Provider warning: %s", warning)
        self._buffer.extend(page.items)
        # The last page stays BUFFERED until its items have been pulled.
        if self._buffer or self._next_url is not None:
            self.state = StreamState.BUFFERED
        else:
            self.state = StreamState.EXHAUSTED
        self.logger.debug(
            "Fetched page %d (%d items, more=%s)",
            self._page_number,
            len(page.items),
            page.next is not None,
        )
        return page

    def _finish(self, state: StreamState) -> None:
        self.state = state
        self.fetching_url = None
        self._next_url = None
        self._buffer.clear()

    async def aclose(self) -> None:
        """Abandon the stream; later pulls end the iteration."""
        if self.state not in (StreamState.EXHAUSTED, StreamState.FAILED):
            self._finish(StreamState.EXHAUSTED)

    async def pages(self) -> AsyncIterator[Page[T]]:
        """Iterate page by page instead of item by item.

        Only valid on a stream that has not been pulled from yet.
        """
        if self.state is not StreamState.IDLE:
            raise RuntimeError("pages() requires a stream that has not started")
        while self._next_url is not None:
            page = await self._fetch_page()
            self._buffer.clear()
            self._yielded += len(page.items)
            yield page
        self.state = StreamState.EXHAUSTED

    async def collect(self, limit: Optional[int] = None) -> List[T]:
        """Pull items into a list, at most ``limit`` of them.

        Stopping at ``limit`` never fetches a page beyond the one holding
        the last returned item.
        """
        items: List[T] = []
        if limit is not None and limit <= 0:
            return items
        async for item in self:
            items.append(item)
            if limit is not None and len(items) >= limit:
                break
        return items

    @property
    def page_number(self) -> int:
        """Number of pages fetched so far."""
        return self._page_number

    @property
    def buffered(self) -> int:
        """Items fetched but not yet pulled."""
        return len(self._buffer)

    @property
    def remaining(self) -> Optional[int]:
        """Estimated items left, from ``total_cards``; None if unknown."""
        if self.total_estimate is None:
            return None
        return max(0, self.total_estimate - self._yielded)

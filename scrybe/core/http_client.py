"""Asynchronous HTTP client for the Scryfall API.

This module wraps the ``httpx`` asynchronous client. It centralises settings
such as the base URL, timeouts, headers and retry behaviour, passes every
attempt through the shared ``RateGovernor``, and turns provider error
responses into scrybe exceptions. Having a single client instance allows
for connection pooling and reduces overhead.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from scrybe.core.config import Config, get_config
from scrybe.core.data_models import ProviderErrorBody
from scrybe.core.errors import (
    DeserializationError,
    HttpStatusError,
    RateLimitedError,
    ScrybeError,
    TransportError,
    error_for_status,
)
from scrybe.core.rate_limiter import RateGovernor, get_rate_governor

DEFAULT_BASE_URL = "https://api.scryfall.com"
DEFAULT_USER_AGENT = "scrybe/0.1 (+https://github.com/scrybe/scrybe)"


def _parse_retry_after(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        return None


class ScryfallHTTPClient:
    """Async HTTP client with rate governing, error mapping and optional retries."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        backoff: Optional[float] = None,
        governor: Optional[RateGovernor] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        config: Optional[Config] = None,
    ) -> None:
        """Initialize the HTTP client.

        Parameters
        ----------
        base_url : str, optional
            API root. Defaults to ``api.base_url``.
        user_agent : str, optional
            User-Agent header. Defaults to ``api.user_agent``.
        timeout : float, optional
            Request timeout in seconds. Defaults to ``api.timeout_seconds``.
        max_retries : int, optional
            Extra attempts for transient failures (429, 5xx, connection
            errors). Defaults to ``api.max_retries``, which is 0.
        backoff : float, optional
            Base delay for exponential backoff. Defaults to ``api.backoff_seconds``.
        governor : RateGovernor, optional
            Rate governor to acquire before each attempt. Defaults to the
            process-wide instance.
        transport : httpx.AsyncBaseTransport, optional
            Custom transport, e.g. ``httpx.MockTransport`` in tests.
        config : Config, optional
            Configuration to read defaults from.
        """
        config = config or get_config()
        self.base_url = (base_url or config.get("api.base_url", DEFAULT_BASE_URL)).rstrip("/")
        self.user_agent = user_agent or config.get("api.user_agent", DEFAULT_USER_AGENT)
        self._timeout = timeout if timeout is not None else config.get_float("api.timeout_seconds", 30.0)
        self._max_retries = (
            max_retries if max_retries is not None else config.get_int("api.max_retries", 0)
        )
        self._backoff = backoff if backoff is not None else config.get_float("api.backoff_seconds", 1.0)
        self.governor = governor or get_rate_governor()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self.logger = logging.getLogger(self.__class__.__name__)
        self._request_count = 0
        self._total_request_time = 0.0

    async def __aenter__(self) -> "ScryfallHTTPClient":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self._timeout,
                headers={"User-Agent": self.user_agent, "Accept": "application/json"},
                follow_redirects=True,
                transport=self._transport,
            )
            self.logger.debug(
                "HTTP client initialized (base_url=%s, timeout=%.1fs, max_retries=%d)",
                self.base_url,
                self._timeout,
                self._max_retries,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            if self._request_count > 0:
                avg_time = self._total_request_time / self._request_count
                self.logger.debug(
                    "HTTP client closed (requests=%d, avg_time=%.2fms)",
                    self._request_count,
                    avg_time * 1000,
                )

    async def _raise_for_status(self, response: httpx.Response) -> None:
        """Map a non-2xx response to the matching ``HttpStatusError``."""
        if response.is_success:
            return
        try:
            await response.aread()
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError, httpx.HTTPError):
            payload = None
        body = ProviderErrorBody.from_dict(payload, response.status_code)
        raise error_for_status(
            response.status_code,
            details=body.details or response.reason_phrase,
            code=body.code,
            warnings=body.warnings,
            url=str(response.request.url),
            retry_after=_parse_retry_after(response.headers.get("Retry-After")),
        )

    def _retry_delay(self, error: ScrybeError, attempt: int) -> Optional[float]:
        """Seconds to wait before retrying, or None if the error is final."""
        if not error.recoverable or attempt >= self._max_retries:
            return None
        if isinstance(error, RateLimitedError) and error.retry_after is not None:
            return error.retry_after
        return self._backoff * (2**attempt)

    async def _send(
        self,
        url: str,
        params: Optional[Dict[str, Any]],
        stream: bool,
    ) -> httpx.Response:
        """Send one GET with governor acquisition, retries and status mapping.

        For ``stream=True`` the caller owns the returned response and must
        close it.
        """
        client = self._ensure_client()
        attempt = 0
        while True:
            await self.governor.acquire()
            start_time = time.perf_counter()
            self.logger.debug(
                "GET %s (attempt %d/%d)", url[:100], attempt + 1, self._max_retries + 1
            )
            try:
                request = client.build_request("GET", url, params=params)
                response = await client.send(request, stream=stream)
            except httpx.TimeoutException as exc:
                error: ScrybeError = TransportError(f"Timeout requesting {url}: {exc}", url)
            except httpx.RequestError as exc:
                error = TransportError(f"Request to {url} failed: {exc}", url)
            else:
                elapsed = time.perf_counter() - start_time
                self._request_count += 1
                self._total_request_time += elapsed
                self.logger.debug(
                    "GET %s -> %d (%.2fms)", url[:100], response.status_code, elapsed * 1000
                )
                try:
                    await self._raise_for_status(response)
                except HttpStatusError as exc:
                    await response.aclose()
                    error = exc
                else:
                    return response

            delay = self._retry_delay(error, attempt)
            if delay is None:
                raise error
            self.logger.warning(
                "%s on %s, retrying in %.2fs (attempt %d/%d)",
                error.__class__.__name__,
                url[:100],
                delay,
                attempt + 1,
                self._max_retries + 1,
            )
            attempt += 1
            await asyncio.sleep(delay)

    async def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET a URL and decode the JSON body.

        Parameters
        ----------
        url : str
            Path relative to the base URL, or an absolute URL (``next_page``).
        params : dict, optional
            Query parameters.

        Returns
        -------
        Any
            The decoded JSON document.

        Raises
        ------
        TransportError
            On connection failures and timeouts.
        HttpStatusError
            On non-2xx responses (see ``scrybe.core.errors``).
        DeserializationError
            If the body is not JSON.
        """
        response = await self._send(url, params, stream=False)
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DeserializationError(f"Response from {url} is not valid JSON: {exc}") from exc

    @asynccontextmanager
    async def stream(
        self, url: str, params: Optional[Dict[str, Any]] = None
    ) -> AsyncIterator[httpx.Response]:
        """Open a streaming GET; the body is read with ``aiter_bytes``.

        Status errors are raised before the context is entered. Errors
        while reading the body surface as ``TransportError``.
        """
        response = await self._send(url, params, stream=True)
        try:
            yield response
        except httpx.RequestError as exc:
            raise TransportError(f"Reading {url} failed: {exc}", url) from exc
        finally:
            await response.aclose()

    @property
    def stats(self) -> Dict[str, Any]:
        """Request count and timing."""
        return {
            "request_count": self._request_count,
            "total_time_ms": self._total_request_time * 1000,
            "avg_time_ms": (
                (self._total_request_time / self._request_count * 1000)
                if self._request_count > 0
                else 0
            ),
        }

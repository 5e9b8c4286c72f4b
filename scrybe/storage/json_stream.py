"""Incremental parsing of large top-level JSON arrays.

Bulk data files are a single JSON array that can run to gigabytes. The
decoder here is fed text in chunks and hands back each array element as soon
as it is complete, so only one element (plus one chunk) is held in memory.
"""

from __future__ import annotations

import asyncio
import json
from typing import IO, Any, AsyncIterator, Iterator, List

from scrybe.core.errors import DeserializationError

DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_MAX_ITEM_SIZE = 32 * 1024 * 1024

_WHITESPACE = " \t\n\r"
_NUMBER_CHARS = "0123456789.eE+-"

_START, _FIRST, _VALUE, _SEPARATOR, _DONE = range(5)


class JsonArrayDecoder:
    """Push decoder for one top-level JSON array.

    ``feed`` returns the elements completed by the new text; ``close``
    checks the array was terminated.
    """

    def __init__(self, max_item_size: int = DEFAULT_MAX_ITEM_SIZE) -> None:
        self._decoder = json.JSONDecoder()
        self._buffer = ""
        self._pos = 0
        self._state = _START
        self._max_item_size = max_item_size
        self.count = 0

    def _skip_whitespace(self) -> None:
        buf = self._buffer
        pos = self._pos
        while pos < len(buf) and buf[pos] in _WHITESPACE:
            pos += 1
        self._pos = pos

    def _may_continue(self, end: int) -> bool:
        # "-0." decodes as -0 with "." left over; wait for the rest.
        buf = self._buffer
        while end < len(buf) and buf[end] in _NUMBER_CHARS:
            end += 1
        return end >= len(buf)

    def _error(self, message: str) -> DeserializationError:
        return DeserializationError(f"{message} (after {self.count} items)")

    def feed(self, text: str, final: bool = False) -> List[Any]:
        """Add text and return every element it completes."""
        if self._pos:
            self._buffer = self._buffer[self._pos:]
            self._pos = 0
        self._buffer += text
        items: List[Any] = []

        while True:
            self._skip_whitespace()
            if self._pos >= len(self._buffer):
                break
            char = self._buffer[self._pos]

            if self._state == _START:
                if char != "[":
                    raise self._error(f"Expected '[' but found {char!r}")
                self._pos += 1
                self._state = _FIRST
            elif self._state == _FIRST and char == "]":
                self._pos += 1
                self._state = _DONE
            elif self._state in (_FIRST, _VALUE):
                try:
                    value, end = self._decoder.raw_decode(self._buffer, self._pos)
                except json.JSONDecodeError as exc:
                    if final:
                        raise self._error(f"Malformed array element: {exc.msg}") from exc
                    if len(self._buffer) - self._pos > self._max_item_size:
                        raise self._error("Array element exceeds the maximum item size") from exc
                    break
                if not final and self._may_continue(end):
                    # A number or literal may continue in the next chunk.
                    break
                items.append(value)
                self.count += 1
                self._pos = end
                self._state = _SEPARATOR
            elif self._state == _SEPARATOR:
                if char == ",":
                    self._state = _VALUE
                elif char == "]":
                    self._state = _DONE
                else:
                    raise self._error(f"Expected ',' or ']' but found {char!r}")
                self._pos += 1
            else:
                raise self._error(f"Unexpected data after the array: {char!r}")

        return items

    def close(self) -> List[Any]:
        """Flush pending text and verify the array was closed."""
        items = self.feed("", final=True)
        if self._state != _DONE:
            raise self._error("Unexpected end of data inside the array")
        return items


def iter_json_array(
    fp: IO[str],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    max_item_size: int = DEFAULT_MAX_ITEM_SIZE,
) -> Iterator[Any]:
    """Yield the elements of the JSON array read from a text file.

    Args:
        fp: File opened in text mode
        chunk_size: Characters read per call
        max_item_size: Largest single element tolerated before giving up

    Raises:
        DeserializationError: If the content is not a well formed JSON array
    """
    decoder = JsonArrayDecoder(max_item_size)
    while True:
        chunk = fp.read(chunk_size)
        if not chunk:
            break
        yield from decoder.feed(chunk)
    yield from decoder.close()


async def aiter_json_array(
    fp: IO[str],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    max_item_size: int = DEFAULT_MAX_ITEM_SIZE,
) -> AsyncIterator[Any]:
    """Async variant of ``iter_json_array``; file reads run in a worker thread."""
    decoder = JsonArrayDecoder(max_item_size)
    while True:
        chunk = await asyncio.to_thread(fp.read, chunk_size)
        if not chunk:
            break
        for item in decoder.feed(chunk):
            yield item
    for item in decoder.close():
        yield item

"""Local cache of Scryfall bulk-data snapshots.

Scryfall publishes full dumps of its database (every card, every ruling,
...) as large JSON files, refreshed roughly daily. ``BulkSnapshotCache``
keeps one copy of each dataset on disk and re-downloads it only when the
manifest reports a newer version.

Layout inside ``cache_dir``::

    <id>.json        the published snapshot
    <id>.meta.json   CacheRecord sidecar (cached_at, source_updated_at, ...)

Downloads are written to a temporary file in the same directory, fsynced and
then moved over the published file with ``os.replace``, so readers see
either the previous snapshot or the new one and never a partial file. The
sidecar is only written after the publish succeeded.

Disk writes run in a worker thread so a multi-gigabyte download does not
stall other tasks on the event loop.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any, AsyncIterator, Callable, Dict, Iterator, List, Optional, Union

from scrybe.core.classifications import BulkKind
from scrybe.core.config import get_config
from scrybe.core.data_models import BulkManifestEntry, Card, Ruling, parse_datetime
from scrybe.core.errors import (
    CacheIoError,
    DeserializationError,
    ManifestStaleError,
    NotFoundError,
    ScrybeError,
)
from scrybe.core.logging_setup import log_performance
from scrybe.storage.json_stream import DEFAULT_CHUNK_SIZE, aiter_json_array, iter_json_array

logger = logging.getLogger(__name__)

DATA_SUFFIX = ".json"
META_SUFFIX = ".meta.json"

CARD_KINDS = {
    BulkKind.ORACLE_CARDS.value,
    BulkKind.UNIQUE_ARTWORK.value,
    BulkKind.DEFAULT_CARDS.value,
    BulkKind.ALL_CARDS.value,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parser_for_kind(kind: str) -> Callable[[Any], Any]:
    """Item parser for a dataset type; unknown types yield raw dicts."""
    if kind in CARD_KINDS:
        return Card.from_dict
    if kind == BulkKind.RULINGS.value:
        return Ruling.from_dict
    return lambda item: item


@dataclass
class CacheRecord:
    """What is known about one published snapshot."""

    id: str
    kind: str
    local_path: str
    cached_at: datetime
    source_updated_at: datetime
    size_bytes: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind,
            "local_path": self.local_path,
            "cached_at": self.cached_at.isoformat(),
            "source_updated_at": self.source_updated_at.isoformat(),
            "size_bytes": self.size_bytes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheRecord":
        try:
            return cls(
                id=data["id"],
                kind=data["kind"],
                local_path=data["local_path"],
                cached_at=parse_datetime(data["cached_at"], "cached_at"),
                source_updated_at=parse_datetime(data["source_updated_at"], "source_updated_at"),
                size_bytes=int(data.get("size_bytes", 0)),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise DeserializationError(f"Invalid cache record: {exc}") from exc


class BulkReader:
    """Restartable, streaming view of a published snapshot.

    Each ``for`` or ``async for`` opens the file again and parses it
    element by element.
    """

    def __init__(
        self,
        path: Path,
        parse_item: Callable[[Any], Any],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.path = Path(path)
        self.parse_item = parse_item
        self.chunk_size = chunk_size

    def _open(self):
        try:
            return open(self.path, "r", encoding="utf-8")
        except OSError as exc:
            raise CacheIoError(f"Cannot open snapshot {self.path}: {exc}", str(self.path)) from exc

    def __iter__(self) -> Iterator[Any]:
        with self._open() as fp:
            for raw in iter_json_array(fp, self.chunk_size):
                yield self.parse_item(raw)

    async def __aiter__(self) -> AsyncIterator[Any]:
        with self._open() as fp:
            async for raw in aiter_json_array(fp, self.chunk_size):
                yield self.parse_item(raw)

    def count(self) -> int:
        """Number of elements, without keeping them."""
        return sum(1 for _ in self)


class BulkSnapshotCache:
    """Keeps bulk-data snapshots fresh on local disk."""

    def __init__(
        self,
        api: Any,
        cache_dir: Union[str, Path, None] = None,
        chunk_size: Optional[int] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the cache.

        Args:
            api: A ``ScryfallAPI`` (used for the manifest and its HTTP client)
            cache_dir: Directory for snapshots; defaults to ``bulk.cache_dir``
            chunk_size: Read/write chunk size; defaults to ``bulk.chunk_size``
            clock: Returns the current UTC time, used for ``cached_at``
        """
        config = get_config()
        self.api = api
        self.cache_dir = Path(cache_dir or config.get("bulk.cache_dir")).expanduser()
        self.chunk_size = chunk_size or config.get_int("bulk.chunk_size", DEFAULT_CHUNK_SIZE)
        self._clock = clock
        self._locks: Dict[str, asyncio.Lock] = {}
        self.logger = logging.getLogger(self.__class__.__name__)

    # -- paths and records ---------------------------------------------------

    def data_path(self, entry_id: str) -> Path:
        return self.cache_dir / f"{entry_id}{DATA_SUFFIX}"

    def meta_path(self, entry_id: str) -> Path:
        return self.cache_dir / f"{entry_id}{META_SUFFIX}"

    def record(self, entry_id: str) -> Optional[CacheRecord]:
        """The sidecar record for a dataset id, None if absent or unreadable."""
        path = self.meta_path(entry_id)
        try:
            with open(path, "r", encoding="utf-8") as fp:
                return CacheRecord.from_dict(json.load(fp))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError, DeserializationError) as exc:
            self.logger.warning("Ignoring unreadable cache record %s: %s", path, exc)
            return None

    def records(self) -> List[CacheRecord]:
        """All readable records, sorted by id."""
        if not self.cache_dir.is_dir():
            return []
        records = []
        for path in sorted(self.cache_dir.glob(f"*{META_SUFFIX}")):
            record = self.record(path.name[: -len(META_SUFFIX)])
            if record is not None:
                records.append(record)
        return records

    def latest_record(self, kind: Union[str, BulkKind]) -> Optional[CacheRecord]:
        """Most recently cached record of a dataset type."""
        matching = [r for r in self.records() if r.kind == str(kind)]
        return max(matching, key=lambda r: r.cached_at, default=None)

    def purge(self, entry_id: str) -> bool:
        """Delete a snapshot and its record. Returns True if anything was removed."""
        removed = False
        for path in (self.meta_path(entry_id), self.data_path(entry_id)):
            try:
                path.unlink()
                removed = True
            except FileNotFoundError:
                continue
            except OSError as exc:
                raise CacheIoError(f"Cannot remove {path}: {exc}", str(path)) from exc
        if removed:
            self.logger.info("Purged cached snapshot %s", entry_id)
        return removed

    def _write_record(self, record: CacheRecord) -> None:
        target = self.meta_path(record.id)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{record.id}.", suffix=".meta.part", dir=self.cache_dir
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fp:
                json.dump(record.to_dict(), fp, indent=2)
                fp.flush()
                os.fsync(fp.fileno())
            os.replace(tmp_name, target)
        except BaseException:
            _discard(tmp_name)
            raise

    # -- network -------------------------------------------------------------

    async def fetch_manifest(self) -> List[BulkManifestEntry]:
        """Current list of downloadable datasets, in provider order."""
        return await self.api.bulk_data()

    def is_fresh(self, entry: BulkManifestEntry) -> bool:
        """True if the published copy of ``entry`` is at least as new as the manifest."""
        record = self.record(entry.id)
        if record is None or not self.data_path(entry.id).is_file():
            return False
        return entry.updated_at <= record.source_updated_at

    def _lock_for(self, entry_id: str) -> asyncio.Lock:
        lock = self._locks.get(entry_id)
        if lock is None:
            lock = self._locks[entry_id] = asyncio.Lock()
        return lock

    async def ensure_fresh(self, entry: BulkManifestEntry) -> CacheRecord:
        """Download ``entry`` unless an up-to-date copy is already published.

        Returns:
            The record of the published snapshot
        """
        async with self._lock_for(entry.id):
            if self.is_fresh(entry):
                self.logger.debug("Snapshot %s (%s) is fresh", entry.id, entry.kind_tag)
                return self.record(entry.id)
            return await self._download(entry)

    async def refresh(self, kind: Union[str, BulkKind]) -> CacheRecord:
        """Fetch the manifest and make sure the dataset of ``kind`` is current.

        Raises:
            ManifestStaleError: If the manifest could not be fetched; carries
                the existing record (if any) so the caller may fall back to it
            NotFoundError: If the manifest has no dataset of that type
        """
        kind = str(kind)
        try:
            manifest = await self.fetch_manifest()
        except ScrybeError as exc:
            stale = self.latest_record(kind)
            self.logger.warning(
                "Bulk manifest unavailable (%s); cached %s snapshot %s",
                exc,
                kind,
                "available" if stale else "missing",
            )
            raise ManifestStaleError(
                f"Could not check freshness of {kind}: {exc}", record=stale, cause=exc
            ) from exc

        for entry in manifest:
            if entry.kind_tag == kind:
                return await self.ensure_fresh(entry)
        raise NotFoundError(404, details=f"No bulk dataset of type '{kind}' in the manifest")

    async def download(self, entry: BulkManifestEntry) -> CacheRecord:
        """Download and publish ``entry`` unconditionally."""
        async with self._lock_for(entry.id):
            return await self._download(entry)

    async def _download(self, entry: BulkManifestEntry) -> CacheRecord:
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{entry.id}.", suffix=".part", dir=self.cache_dir
            )
        except OSError as exc:
            raise CacheIoError(
                f"Cannot create cache directory {self.cache_dir}: {exc}", str(self.cache_dir)
            ) from exc

        final_path = self.data_path(entry.id)
        size = 0
        try:
            with log_performance(f"bulk download {entry.kind_tag}", self.logger):
                with os.fdopen(fd, "wb") as fp:
                    async with self.api.client.stream(entry.download_uri) as response:
                        async for chunk in response.aiter_bytes(self.chunk_size):
                            await asyncio.to_thread(fp.write, chunk)
                            size += len(chunk)
                    await asyncio.to_thread(_flush_to_disk, fp)
                await asyncio.to_thread(os.replace, tmp_name, final_path)
        except OSError as exc:
            _discard(tmp_name)
            raise CacheIoError(f"Writing snapshot {final_path} failed: {exc}", str(final_path)) from exc
        except BaseException:
            _discard(tmp_name)
            raise

        record = CacheRecord(
            id=entry.id,
            kind=entry.kind_tag,
            local_path=str(final_path),
            cached_at=self._clock(),
            source_updated_at=entry.updated_at,
            size_bytes=size,
        )
        try:
            await asyncio.to_thread(self._write_record, record)
        except OSError as exc:
            raise CacheIoError(
                f"Writing cache record for {entry.id} failed: {exc}", str(self.meta_path(entry.id))
            ) from exc

        self.logger.info(
            "Published %s snapshot %s (%d bytes, updated %s)",
            entry.kind_tag,
            entry.id,
            size,
            entry.updated_at.isoformat(),
        )
        return record

    # -- reading -------------------------------------------------------------

    def read(
        self, target: Union[BulkManifestEntry, CacheRecord, BulkKind, str]
    ) -> BulkReader:
        """Streaming reader over a published snapshot.

        Args:
            target: A manifest entry, a cache record, or a dataset type (the
                most recently cached snapshot of that type is used)

        Raises:
            CacheIoError: If no snapshot has been published for ``target``
        """
        if isinstance(target, BulkManifestEntry):
            record = self.record(target.id)
        elif isinstance(target, CacheRecord):
            record = target
        else:
            record = self.latest_record(target)

        if record is None:
            raise CacheIoError(f"No cached snapshot for {_describe(target)}")
        path = self.data_path(record.id)
        if not path.is_file():
            raise CacheIoError(f"Snapshot file missing: {path}", str(path))
        return BulkReader(path, parser_for_kind(record.kind), self.chunk_size)


def _describe(target: Any) -> str:
    if isinstance(target, BulkManifestEntry):
        return f"{target.kind_tag} ({target.id})"
    return str(target)


def _flush_to_disk(fp: IO[bytes]) -> None:
    fp.flush()
    os.fsync(fp.fileno())


def _discard(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not remove temporary file %s: %s", path, exc)

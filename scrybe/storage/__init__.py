"""Storage layer for scrybe.

This package contains:
- The bulk-data snapshot cache and its on-disk records
- Incremental JSON array parsing for reading large snapshots
"""

from scrybe.storage.bulk_cache import BulkReader, BulkSnapshotCache, CacheRecord
from scrybe.storage.json_stream import JsonArrayDecoder, iter_json_array

__all__ = ["BulkReader", "BulkSnapshotCache", "CacheRecord", "JsonArrayDecoder", "iter_json_array"]

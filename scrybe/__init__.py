"""scrybe - asyncio client for the Scryfall card database.

Build typed search queries, stream paginated results, and keep local copies
of the bulk-data snapshots up to date.
"""

__version__ = "0.1.0"
__author__ = "scrybe contributors"

from scrybe.core.errors import ScrybeError
from scrybe.integrations.scryfall import ScryfallAPI
from scrybe.search.options import SearchOptions
from scrybe.storage.bulk_cache import BulkSnapshotCache

__all__ = ["BulkSnapshotCache", "ScryfallAPI", "ScrybeError", "SearchOptions", "__version__"]

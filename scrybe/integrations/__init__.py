"""Integration modules for scrybe.

This package contains connectors to external services:
- Scryfall REST API (cards, sets, rulings, catalogs, bulk-data manifest)
"""

from scrybe.integrations.scryfall import CATALOGS, ScryfallAPI

__all__ = ["CATALOGS", "ScryfallAPI"]

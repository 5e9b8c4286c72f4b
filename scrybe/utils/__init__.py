"""Utility modules for scrybe.

This package provides common utilities for:
- Output formatting (JSON, table, CSV)
"""

from scrybe.utils.formatters import (
    CSVFormatter,
    DataFormatter,
    JSONFormatter,
    OutputFormat,
    TableFormatter,
    render,
)

__all__ = [
    "DataFormatter",
    "JSONFormatter",
    "TableFormatter",
    "CSVFormatter",
    "OutputFormat",
    "render",
]

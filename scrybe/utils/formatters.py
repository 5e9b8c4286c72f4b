"""Output formatting utilities for scrybe.

Provides formatters for:
- JSON output
- Table output
- CSV export

Models are converted through their ``to_dict`` so output matches the
provider's wire representation (classification tags included).
"""

import csv
import io
import json
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from scrybe.core.variants import UnknownVariant


class OutputFormat(str, Enum):
    """Supported output formats."""

    JSON = "json"
    TABLE = "table"
    CSV = "csv"


class DataFormatter:
    """Formats data for various output types."""

    @staticmethod
    def to_dict(obj: Any) -> Any:
        """Convert object to dictionary representation.

        Args:
            obj: Object to convert

        Returns:
            Dictionary or primitive value
        """
        if obj is None:
            return None
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, (str, int, float, bool)):
            return obj
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, UnknownVariant):
            return str(obj)
        if hasattr(obj, "to_dict"):
            return DataFormatter.to_dict(obj.to_dict())
        if is_dataclass(obj):
            return DataFormatter.to_dict(asdict(obj))
        if isinstance(obj, dict):
            return {k: DataFormatter.to_dict(v) for k, v in obj.items()}
        if isinstance(obj, (list, tuple, set)):
            return [DataFormatter.to_dict(item) for item in obj]
        return str(obj)


class JSONFormatter:
    """Formats data as JSON."""

    def __init__(self, indent: int = 2, sort_keys: bool = False):
        """Initialize JSON formatter.

        Args:
            indent: Indentation level
            sort_keys: Whether to sort dictionary keys
        """
        self.indent = indent
        self.sort_keys = sort_keys

    def format(self, data: Any) -> str:
        """Format data as JSON string."""
        converted = DataFormatter.to_dict(data)
        return json.dumps(
            converted,
            indent=self.indent,
            sort_keys=self.sort_keys,
            default=str,
            ensure_ascii=False,
        )

    def format_lines(self, data: Sequence[Any]) -> str:
        """One compact JSON document per line."""
        return "\n".join(json.dumps(DataFormatter.to_dict(item), default=str) for item in data)


class TableFormatter:
    """Formats data as ASCII tables."""

    def __init__(
        self,
        max_width: int = 40,
        column_separator: str = " | ",
        header_separator: str = "-",
    ):
        """Initialize table formatter.

        Args:
            max_width: Maximum column width
            column_separator: Separator between columns
            header_separator: Character for header separator line
        """
        self.max_width = max_width
        self.column_separator = column_separator
        self.header_separator = header_separator

    def format(
        self,
        data: Sequence[dict],
        columns: Optional[List[str]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> str:
        """Format data as ASCII table.

        Args:
            data: List of dictionaries
            columns: Columns to include (defaults to all keys)
            headers: Custom column headers

        Returns:
            Formatted table string
        """
        if not data:
            return "(no data)"

        if columns is None:
            columns = list(data[0].keys())

        if headers is None:
            headers = {col: col.replace("_", " ").title() for col in columns}

        widths = {}
        for col in columns:
            header_width = len(headers.get(col, col))
            max_data_width = max((len(_cell(row.get(col))) for row in data), default=0)
            widths[col] = min(max(header_width, max_data_width), self.max_width)

        lines = []
        header_parts = [headers.get(col, col).ljust(widths[col])[: widths[col]] for col in columns]
        lines.append(self.column_separator.join(header_parts).rstrip())

        sep_parts = [self.header_separator * widths[col] for col in columns]
        lines.append(self.column_separator.join(sep_parts))

        for row in data:
            row_parts = [_cell(row.get(col)).ljust(widths[col])[: widths[col]] for col in columns]
            lines.append(self.column_separator.join(row_parts).rstrip())

        return "\n".join(lines)


class CSVFormatter:
    """Formats data as CSV."""

    def __init__(self, delimiter: str = ",", quoting: int = csv.QUOTE_MINIMAL):
        self.delimiter = delimiter
        self.quoting = quoting

    def format(self, data: Sequence[dict], columns: Optional[List[str]] = None) -> str:
        """Format data as CSV string.

        Args:
            data: List of dictionaries
            columns: Columns to include

        Returns:
            CSV string
        """
        if not data:
            return ""

        if columns is None:
            columns = list(data[0].keys())

        output = io.StringIO()
        writer = csv.DictWriter(
            output,
            fieldnames=columns,
            delimiter=self.delimiter,
            quoting=self.quoting,
            extrasaction="ignore",
            lineterminator="\n",
        )
        writer.writeheader()
        for row in data:
            writer.writerow({k: _cell(v) for k, v in row.items()})
        return output.getvalue()


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(_cell(v) for v in value)
    return str(value)


# Columns shown for each record type in table and CSV output.
CARD_COLUMNS = ["name", "set", "collector_number", "rarity", "mana_cost", "type_line"]
SET_COLUMNS = ["code", "name", "set_type", "released_at", "card_count"]
RULING_COLUMNS = ["published_at", "source", "comment"]
BULK_COLUMNS = ["type", "id", "updated_at", "size"]


def render(
    items: Sequence[Any],
    output_format: str = OutputFormat.JSON,
    columns: Optional[List[str]] = None,
) -> str:
    """Render records in the requested format.

    Args:
        items: Models or dictionaries
        output_format: ``json``, ``table`` or ``csv``
        columns: Columns for table/CSV output (defaults to every key)

    Returns:
        The rendered text
    """
    output_format = OutputFormat(output_format)
    rows = [DataFormatter.to_dict(item) for item in items]
    renderers: Dict[OutputFormat, Callable[[], str]] = {
        OutputFormat.JSON: lambda: JSONFormatter().format(rows),
        OutputFormat.TABLE: lambda: TableFormatter().format(rows, columns),
        OutputFormat.CSV: lambda: CSVFormatter().format(rows, columns),
    }
    return renderers[output_format]()

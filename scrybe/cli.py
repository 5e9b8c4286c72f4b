#!/usr/bin/env python3
"""Command-line interface for scrybe.

Commands:
- search: Run a card search (query text is parsed and re-serialized first)
- card: Look up one card by name, id, or at random
- rulings: Show the rulings for a card
- sets: List every set
- bulk: List, fetch and inspect bulk-data snapshots
- validate: Validate configuration
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from scrybe.core.classifications import BulkKind
from scrybe.core.config import get_config, reload_config
from scrybe.core.errors import ManifestStaleError, QueryError, ScrybeError
from scrybe.core.logging_setup import configure_from_config
from scrybe.integrations.scryfall import ScryfallAPI
from scrybe.search.options import SearchOptions, SortDirection, SortOrder, UniqueStrategy
from scrybe.search.parser import parse_query
from scrybe.storage.bulk_cache import BulkSnapshotCache
from scrybe.utils.formatters import (
    BULK_COLUMNS,
    CARD_COLUMNS,
    RULING_COLUMNS,
    SET_COLUMNS,
    OutputFormat,
    render,
)

logger = logging.getLogger(__name__)


def _add_format(parser: argparse.ArgumentParser, default: str = "table") -> None:
    parser.add_argument(
        "--format",
        "-f",
        choices=[f.value for f in OutputFormat],
        default=default,
        help=f"Output format (default: {default})",
    )


def parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="scrybe",
        description="Scryfall card data from the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  scrybe search 't:goblin cmc<=2' --order cmc --limit 20
  scrybe card --name "Lightning Bolt"
  scrybe card --random 'is:commander'
  scrybe bulk fetch oracle_cards
  scrybe bulk count oracle_cards
  scrybe validate
        """,
    )
    parser.add_argument("--config", help="Path to a YAML or TOML config file")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Logging level (default: logging.level from config)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Use JSON structured logging format",
    )
    parser.add_argument("--cache-dir", type=Path, help="Directory for bulk snapshots")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Search
    search_parser = subparsers.add_parser("search", help="Search for cards")
    search_parser.add_argument("query", help="Query in Scryfall syntax")
    search_parser.add_argument("--unique", choices=[u.value for u in UniqueStrategy])
    search_parser.add_argument("--order", choices=[o.value for o in SortOrder])
    search_parser.add_argument("--dir", choices=[d.value for d in SortDirection])
    search_parser.add_argument("--extras", action="store_true", help="Include tokens and extras")
    search_parser.add_argument(
        "--limit", "-n", type=int, default=None, help="Stop after this many cards"
    )
    _add_format(search_parser)

    # Card
    card_parser = subparsers.add_parser("card", help="Look up a single card")
    lookup = card_parser.add_mutually_exclusive_group(required=True)
    lookup.add_argument("--name", help="Card name")
    lookup.add_argument("--id", help="Scryfall card id")
    lookup.add_argument(
        "--random", nargs="?", const="", metavar="QUERY", help="Random card, optionally matching QUERY"
    )
    card_parser.add_argument("--fuzzy", action="store_true", help="Fuzzy name matching")
    card_parser.add_argument("--set", dest="set_code", help="Restrict a name lookup to a set")
    _add_format(card_parser, default="json")

    # Rulings
    rulings_parser = subparsers.add_parser("rulings", help="Show rulings for a card")
    rulings_parser.add_argument("card_id", help="Scryfall card id")
    _add_format(rulings_parser)

    # Sets
    sets_parser = subparsers.add_parser("sets", help="List all sets")
    _add_format(sets_parser)

    # Bulk
    bulk_parser = subparsers.add_parser("bulk", help="Bulk-data snapshots")
    bulk_subparsers = bulk_parser.add_subparsers(dest="bulk_action", required=True)
    bulk_list = bulk_subparsers.add_parser("list", help="Show the bulk-data manifest")
    _add_format(bulk_list)
    bulk_fetch = bulk_subparsers.add_parser("fetch", help="Download a dataset if stale")
    bulk_fetch.add_argument("kind", help=f"Dataset type ({', '.join(BulkKind.tags())})")
    bulk_count = bulk_subparsers.add_parser("count", help="Count records in a cached dataset")
    bulk_count.add_argument("kind", help="Dataset type")
    bulk_subparsers.add_parser("cached", help="List cached snapshots")

    # Validate
    validate_parser = subparsers.add_parser("validate", help="Validate configuration")
    validate_parser.add_argument(
        "--strict", action="store_true", help="Exit with error if validation fails"
    )

    return parser.parse_args(argv)


async def main_async(args: argparse.Namespace, api: Optional[ScryfallAPI] = None) -> int:
    """Main async entry point.

    Args:
        args: Parsed command line
        api: API facade to use (one is created from configuration if omitted)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    if args.command == "validate":
        return handle_validate(args)

    owns_api = api is None
    api = api or ScryfallAPI()
    try:
        handlers = {
            "search": handle_search,
            "card": handle_card,
            "rulings": handle_rulings,
            "sets": handle_sets,
            "bulk": handle_bulk,
        }
        return await handlers[args.command](args, api)
    except QueryError as e:
        print(f"Invalid query: {e}", file=sys.stderr)
        return 2
    except ScrybeError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        if owns_api:
            await api.aclose()


async def handle_search(args: argparse.Namespace, api: ScryfallAPI) -> int:
    """Handle the search command."""
    options = SearchOptions(
        query=parse_query(args.query),
        unique=args.unique or UniqueStrategy.CARDS,
        order=args.order or SortOrder.NAME,
        direction=args.dir or SortDirection.AUTO,
        include_extras=args.extras,
    )
    stream = api.search(options)
    cards = await stream.collect(args.limit)
    print(render(cards, args.format, CARD_COLUMNS))
    if stream.total_estimate is not None and args.format == OutputFormat.TABLE.value:
        print(f"\n{len(cards)} of {stream.total_estimate} cards")
    return 0


async def handle_card(args: argparse.Namespace, api: ScryfallAPI) -> int:
    """Handle the card command."""
    if args.name:
        card = await api.named(args.name, fuzzy=args.fuzzy, set_code=args.set_code)
    elif args.id:
        card = await api.card(args.id)
    else:
        card = await api.random_card(parse_query(args.random) if args.random else None)
    print(render([card], args.format, CARD_COLUMNS))
    return 0


async def handle_rulings(args: argparse.Namespace, api: ScryfallAPI) -> int:
    """Handle the rulings command."""
    rulings = await api.rulings(args.card_id)
    print(render(rulings, args.format, RULING_COLUMNS))
    return 0


async def handle_sets(args: argparse.Namespace, api: ScryfallAPI) -> int:
    """Handle the sets command."""
    sets = await api.sets()
    print(render(sets, args.format, SET_COLUMNS))
    return 0


async def handle_bulk(args: argparse.Namespace, api: ScryfallAPI) -> int:
    """Handle the bulk command."""
    cache = BulkSnapshotCache(api, cache_dir=args.cache_dir)

    if args.bulk_action == "list":
        manifest = await cache.fetch_manifest()
        print(render(manifest, args.format, BULK_COLUMNS))
    elif args.bulk_action == "fetch":
        try:
            record = await cache.refresh(args.kind)
        except ManifestStaleError as e:
            print(f"Error: {e}", file=sys.stderr)
            if e.record is not None:
                print(
                    f"Cached snapshot from {e.record.cached_at.isoformat()} is still available "
                    f"at {e.record.local_path}",
                    file=sys.stderr,
                )
            return 1
        print(
            f"{record.kind}: {record.local_path} "
            f"({record.size_bytes:,} bytes, source updated {record.source_updated_at.isoformat()})"
        )
    elif args.bulk_action == "count":
        reader = cache.read(args.kind)
        count = await asyncio.to_thread(reader.count)
        print(f"{args.kind}: {count:,} records")
    elif args.bulk_action == "cached":
        records = cache.records()
        if not records:
            print("No cached snapshots.")
        for record in records:
            print(
                f"{record.kind:<16} {record.id}  cached {record.cached_at.isoformat()}  "
                f"source {record.source_updated_at.isoformat()}  {record.size_bytes:,} bytes"
            )
    return 0


def handle_validate(args: argparse.Namespace) -> int:
    """Handle the validate command."""
    config = get_config()
    result = config.validate()

    print(result)

    if args.strict and not result.is_valid:
        return 1

    return 0


def setup(args: argparse.Namespace) -> None:
    """Load configuration and configure logging from the global options."""
    if args.config:
        reload_config(args.config)
    config = get_config()
    if args.cache_dir:
        config.set("bulk.cache_dir", str(args.cache_dir))
    configure_from_config(config, level=args.log_level, use_json=args.json_logs)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    setup(args)
    try:
        exit_code = asyncio.run(main_async(args))
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\nAborted by user")
        sys.exit(130)


if __name__ == "__main__":
    main()

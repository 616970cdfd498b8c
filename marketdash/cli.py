#!/usr/bin/env python3
"""
Market data sync CLI.

Usage:
    # Sync every page of the configured Notion database
    python -m marketdash.cli sync

    # One segment, or a slice of pages for progressive runs
    python -m marketdash.cli sync --segment "EV Batteries"
    python -m marketdash.cli sync --offset 20 --limit 10

    # Inspect the store
    python -m marketdash.cli list --year 2030
    python -m marketdash.cli show 12
    python -m marketdash.cli delete 12

Environment (.env):
    NOTION_API_KEY=ntn_xxx
    NOTION_DATABASE_ID=xxx
    MARKETDASH_DATABASE_URL=sqlite:///marketdash.db
"""

import argparse
import json
import sys

from .db import (
    create_engine_from_url,
    delete_market_data,
    get_market_data_by_id,
    init_db,
    list_market_data,
    session_factory,
)
from .models import MarketDataFilter
from .notion.sync import SyncContext, SyncOptions, sync_notion_market_data
from .utils.config import Config
from .utils.exceptions import ConfigurationError, MarketDashError
from .utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_PARTIAL = 1
EXIT_CONFIG = 2


def _print_json(data) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def cmd_sync(args, config: Config, session) -> int:
    """Run one Notion sync and print the summary."""
    ctx = SyncContext.from_config(config, session)
    options = SyncOptions(segment=args.segment, limit=args.limit, offset=args.offset)
    result = sync_notion_market_data(ctx, options)
    _print_json(result.to_dict())
    return EXIT_PARTIAL if result.errors else EXIT_OK


def cmd_list(args, config: Config, session) -> int:
    """List stored records."""
    records = list_market_data(session, MarketDataFilter(
        segment=args.segment,
        issue_contains=args.issue,
        year=args.year,
        notion_page_id=args.page_id,
    ))
    _print_json([r.to_dict() for r in records])
    return EXIT_OK


def cmd_show(args, config: Config, session) -> int:
    """Show one record by id."""
    record = get_market_data_by_id(session, args.id)
    if record is None:
        logger.error(f"Market data {args.id} not found")
        return EXIT_PARTIAL
    _print_json(record.to_dict())
    return EXIT_OK


def cmd_delete(args, config: Config, session) -> int:
    """Delete one record by id."""
    deleted = delete_market_data(session, args.id)
    _print_json({"id": args.id, "deleted": deleted})
    return EXIT_OK if deleted else EXIT_PARTIAL


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Notion market data sync",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m marketdash.cli sync --segment "EV Batteries"
    python -m marketdash.cli sync --offset 20 --limit 10
    python -m marketdash.cli list --year 2030
        """
    )
    parser.add_argument("--config", help="YAML config file")
    parser.add_argument("--env-file", default=".env", help="dotenv file (default: .env)")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("--json-logs", action="store_true", help="JSON format for --log-file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser("sync", help="Sync Notion pages into the store")
    sync_parser.add_argument("--segment", help="Only pages whose segment title equals this")
    sync_parser.add_argument("--limit", type=int, help="Max pages to process")
    sync_parser.add_argument("--offset", type=int, default=0, help="Pages to skip first")
    sync_parser.set_defaults(func=cmd_sync)

    list_parser = subparsers.add_parser("list", help="List stored market data")
    list_parser.add_argument("--segment")
    list_parser.add_argument("--issue", help="Substring of the issue")
    list_parser.add_argument("--year", type=int)
    list_parser.add_argument("--page-id", help="Source Notion page id")
    list_parser.set_defaults(func=cmd_list)

    show_parser = subparsers.add_parser("show", help="Show one record")
    show_parser.add_argument("id", type=int)
    show_parser.set_defaults(func=cmd_show)

    delete_parser = subparsers.add_parser("delete", help="Delete one record")
    delete_parser.add_argument("id", type=int)
    delete_parser.set_defaults(func=cmd_delete)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level, log_file=args.log_file, json_format=args.json_logs)

    try:
        config = Config.load(args.config, env_file=args.env_file)
        engine = create_engine_from_url(config.database.url)
        init_db(engine)
        with session_factory(engine)() as session:
            return args.func(args, config, session)
    except ConfigurationError as e:
        logger.error(str(e))
        return EXIT_CONFIG
    except MarketDashError as e:
        logger.error(str(e))
        return EXIT_PARTIAL


if __name__ == "__main__":
    sys.exit(main())

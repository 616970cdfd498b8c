"""
Notion-driven market intelligence store.

Structure:
    marketdash/
    ├── notion/     - Notion reader, property parsers, Markdown rendering, sync
    ├── db/         - SQLAlchemy market_data table and repository
    ├── utils/      - Configuration, logging, exceptions
    ├── models.py   - MarketDataInput / MarketDataRecord / Subpage
    └── cli.py      - Sync and inspection CLI

Quick Usage:
    from marketdash.notion import SyncContext, SyncOptions, sync_notion_market_data

    ctx = SyncContext.from_config(Config.load(), session)
    result = sync_notion_market_data(ctx, SyncOptions(limit=10))

CLI:
    python -m marketdash.cli sync --segment "EV Batteries"
    python -m marketdash.cli list --year 2030
"""

__version__ = "1.0.0"

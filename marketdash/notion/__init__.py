"""
Notion sync modules.

Usage:
    from marketdash.notion import SyncContext, sync_notion_market_data
"""

from .client import NotionReader, get_client
from .parsers import (
    parse_number_property,
    parse_rich_text_property,
    parse_multi_select_property,
    parse_links_property,
)
from .render import render_blocks_to_markdown, richtext_to_markdown
from .subpages import collect_subpages
from .mapper import map_page_to_market_data_inputs
from .sync import (
    SyncContext,
    SyncOptions,
    SyncResult,
    PageOutcome,
    sync_page,
    sync_notion_market_data,
)

__all__ = [
    'NotionReader',
    'get_client',
    'parse_number_property',
    'parse_rich_text_property',
    'parse_multi_select_property',
    'parse_links_property',
    'render_blocks_to_markdown',
    'richtext_to_markdown',
    'collect_subpages',
    'map_page_to_market_data_inputs',
    'SyncContext',
    'SyncOptions',
    'SyncResult',
    'PageOutcome',
    'sync_page',
    'sync_notion_market_data',
]

"""
Notion market-research page to MarketDataInput mapping.

One page yields one record per fiscal-year market size found on it, or a
single fallback record for the first configured year.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from ..models import MarketDataInput, Subpage
from ..utils.config import PropertyMap, SyncConfig
from ..utils.exceptions import ValidationError
from .parsers import (
    parse_links_property,
    parse_multi_select_property,
    parse_number_property,
    parse_rich_text_property,
)
from .render import render_blocks_to_markdown
from .subpages import collect_subpages

if TYPE_CHECKING:
    from .client import NotionReader


def subpages_to_markdown(subpages: list[Subpage]) -> Optional[str]:
    if not subpages:
        return None
    return "\n\n".join(f"### {s.title}\n{s.markdown}" for s in subpages)


def build_summary(*pieces: Optional[str]) -> Optional[str]:
    """Join non-empty pieces with a blank line; None if nothing is left."""
    return "\n\n".join(p for p in pieces if p) or None


def page_parent_id(page: dict) -> Optional[str]:
    parent = page.get("parent") or {}
    return parent.get("database_id") or parent.get("data_source_id")


def map_page_to_market_data_inputs(
    reader: "NotionReader",
    page: dict,
    *,
    config: Optional[SyncConfig] = None,
    now: Optional[datetime] = None,
) -> list[MarketDataInput]:
    """
    Extract MarketDataInput records from one Notion page.

    Args:
        reader: Notion reader for the page's block tree
        page: Page object from a database query
        config: Property names, year table, unit and subpage depth
        now: Sync timestamp (defaults to current UTC time)

    Returns:
        At least one record

    Raises:
        ValidationError: The page has no segment title
    """
    config = config or SyncConfig()
    names: PropertyMap = config.properties
    props = page.get("properties") or {}
    page_id = page.get("id")

    segment = parse_rich_text_property(props.get(names.segment))
    if not segment:
        raise ValidationError("segment missing", page_id=page_id, field=names.segment)

    issue = (
        parse_rich_text_property(props.get(names.issue))
        or parse_rich_text_property(props.get(names.issue_fallback))
    )
    growth_rate = parse_number_property(props.get(names.growth_rate))
    top10_ratio = parse_number_property(props.get(names.top10_ratio))
    players = parse_multi_select_property(props.get(names.players))
    links = parse_links_property(props.get(names.links))
    remarks = parse_rich_text_property(props.get(names.remarks))

    # One fetch serves both subpage discovery and the page's own body
    blocks = reader.list_block_children(page_id)
    subpages = collect_subpages(
        reader, page_id, segment, max_depth=config.max_depth, root_blocks=blocks
    )
    content = subpages_to_markdown(subpages) or render_blocks_to_markdown(blocks)
    summary = build_summary(remarks, content)

    synced_at = (now or datetime.now(timezone.utc)).isoformat()

    def make_input(year: int, market_size: Optional[float]) -> MarketDataInput:
        return MarketDataInput(
            segment=segment,
            issue=issue,
            year=year,
            market_size=market_size,
            growth_rate=growth_rate,
            top10_ratio=top10_ratio,
            players=list(players),
            links=list(links),
            summary=summary,
            notion_page_id=page_id,
            notion_parent_id=page_parent_id(page),
            subpage_path=segment,
            subpages=list(subpages),
            last_synced_at=synced_at,
        )

    inputs = []
    for year, prop_name in config.years.items():
        value = parse_number_property(props.get(prop_name))
        if value is None:
            continue
        inputs.append(make_input(year, value * config.market_size_unit))

    if not inputs:
        inputs.append(make_input(next(iter(config.years)), None))

    return inputs

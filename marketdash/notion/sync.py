"""
Notion to relational market data sync.

Reusable API:
- SyncContext: reader, upsert collaborator, database id and sync settings
- SyncOptions / SyncResult: request and summary of one run
- sync_notion_market_data: batch driver that never aborts on a single page

Usage:
    ctx = SyncContext.from_config(Config.load("marketdash.yaml"), session)
    result = sync_notion_market_data(ctx, SyncOptions(segment="EV Batteries"))
    print(result.to_dict())
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import partial
from typing import TYPE_CHECKING, Callable, Optional

from ..db.market_data import upsert_market_data
from ..models import MarketDataInput, MarketDataRecord
from ..utils.config import Config, SyncConfig
from ..utils.exceptions import ConfigurationError
from ..utils.logger import get_logger
from .client import NotionReader
from .mapper import map_page_to_market_data_inputs

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

logger = get_logger(__name__)

Upsert = Callable[[MarketDataInput], MarketDataRecord]


@dataclass
class SyncOptions:
    """Optional segment filter and local slice of the page list."""
    segment: Optional[str] = None
    limit: Optional[int] = None
    offset: int = 0


@dataclass
class PageOutcome:
    """Result of mapping and upserting one page."""
    page_id: str
    upserted: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SyncResult:
    processed: int = 0
    upserted: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)

    def add(self, outcome: PageOutcome) -> None:
        self.upserted += outcome.upserted
        if not outcome.ok:
            self.skipped += 1
            self.errors.append(f"[{outcome.page_id}] {outcome.error}")

    def to_dict(self) -> dict:
        return {
            "processed": self.processed,
            "upserted": self.upserted,
            "skipped": self.skipped,
            "errors": list(self.errors),
        }


class SyncContext:
    """
    Everything one sync run needs, passed explicitly.

    Usage:
        ctx = SyncContext(reader, partial(upsert_market_data, session), database_id="...")
    """

    def __init__(
        self,
        reader: NotionReader,
        upsert: Upsert,
        *,
        database_id: str,
        config: Optional[SyncConfig] = None,
    ):
        self.reader = reader
        self.upsert = upsert
        self.database_id = database_id
        self.config = config or SyncConfig()

    @classmethod
    def from_config(cls, config: Config, session: "Session") -> "SyncContext":
        """Build a context writing through `session`. Raises ConfigurationError without an API key."""
        return cls(
            NotionReader.from_config(config.notion),
            partial(upsert_market_data, session),
            database_id=config.notion.database_id,
            config=config.sync,
        )


def _slice_pages(pages: list[dict], options: SyncOptions) -> list[dict]:
    start = max(options.offset or 0, 0)
    if options.limit is None:
        return pages[start:]
    return pages[start:start + max(options.limit, 0)]


def sync_page(ctx: SyncContext, page: dict, *, now: Optional[datetime] = None) -> PageOutcome:
    """Map one page and upsert every record it yields."""
    outcome = PageOutcome(page_id=page.get("id") or "unknown")
    try:
        inputs = map_page_to_market_data_inputs(ctx.reader, page, config=ctx.config, now=now)
        for data in inputs:
            ctx.upsert(data)
            outcome.upserted += 1
    except Exception as e:
        outcome.error = str(e) or type(e).__name__
        logger.warning(f"Skipped page {outcome.page_id}: {outcome.error}")
    return outcome


def sync_notion_market_data(
    ctx: SyncContext,
    options: Optional[SyncOptions] = None,
) -> SyncResult:
    """
    Sync Notion pages into the market data store.

    Pages are processed one at a time in batches of `config.batch_size`.
    A failing page is counted in `skipped` and described in `errors`;
    the rest of the batch still runs.

    Raises:
        ConfigurationError: No database id configured
        ExternalServiceError: The page listing itself failed
    """
    options = options or SyncOptions()
    if not ctx.database_id:
        raise ConfigurationError("Notion database id is not configured", config_key="NOTION_DATABASE_ID")

    pages = ctx.reader.list_pages(
        ctx.database_id,
        options.segment,
        title_property=ctx.config.properties.segment,
    )
    selected = _slice_pages(pages, options)
    logger.info(f"Syncing {len(selected)} of {len(pages)} Notion pages")

    result = SyncResult(processed=len(selected))
    now = datetime.now(timezone.utc)
    batch_size = max(ctx.config.batch_size, 1)

    for start in range(0, len(selected), batch_size):
        batch = selected[start:start + batch_size]
        for page in batch:
            result.add(sync_page(ctx, page, now=now))
        logger.info(
            f"Batch {start // batch_size + 1}: pages {start + 1}-{start + len(batch)}, "
            f"upserted {result.upserted}, skipped {result.skipped}"
        )

    return result

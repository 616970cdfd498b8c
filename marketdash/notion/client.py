"""
Read-only Notion access for the market data sync.

NotionReader wraps `notion_client.Client` and follows cursor pagination
(`has_more` / `next_cursor`) until exhausted, concatenating results in the
order they were received. No retries are performed.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from notion_client import Client
from notion_client.client import ClientOptions
from notion_client.errors import HTTPResponseError, RequestTimeoutError

from ..utils.config import DEFAULT_NOTION_VERSION, NotionConfig
from ..utils.exceptions import ConfigurationError, ExternalServiceError
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 50


def get_client(api_key: str, notion_version: str = DEFAULT_NOTION_VERSION) -> Client:
    """Create Notion client pinned to an API version."""
    if not api_key:
        raise ConfigurationError("Notion API key is not configured", config_key="NOTION_API_KEY")
    return Client(ClientOptions(auth=api_key, notion_version=notion_version))


class NotionReader:
    """
    Paginated reads against a Notion database and its block trees.

    Usage:
        reader = NotionReader(api_key)
        pages = reader.list_pages(database_id, "EV Batteries")
        blocks = reader.list_block_children(pages[0]["id"])
    """

    def __init__(
        self,
        api_key: str = "",
        *,
        notion_version: str = DEFAULT_NOTION_VERSION,
        page_size: int = DEFAULT_PAGE_SIZE,
        client: Optional[Client] = None,
    ):
        self.client = client if client is not None else get_client(api_key, notion_version)
        self.page_size = page_size

    @classmethod
    def from_config(cls, config: NotionConfig) -> "NotionReader":
        return cls(config.api_key, notion_version=config.version, page_size=config.page_size)

    def _call(self, fn: Callable[..., dict], **kwargs: Any) -> dict:
        try:
            return fn(**kwargs)
        except HTTPResponseError as e:
            raise ExternalServiceError(
                f"Notion API error {e.status}: {e.body}",
                status_code=e.status,
                body=e.body,
                cause=e,
            ) from e
        except RequestTimeoutError as e:
            raise ExternalServiceError("Notion API request timed out", cause=e) from e

    def _paginate(self, fn: Callable[..., dict], **kwargs: Any) -> list[dict]:
        results: list[dict] = []
        cursor: Optional[str] = None
        while True:
            params = dict(kwargs, page_size=self.page_size)
            if cursor:
                params["start_cursor"] = cursor
            res = self._call(fn, **params)
            batch = res.get("results") or []
            results.extend(batch)
            logger.debug(f"Fetched {len(batch)} results (total {len(results)})")
            if not res.get("has_more") or not res.get("next_cursor"):
                return results
            cursor = res["next_cursor"]

    def resolve_data_source_id(self, database_id: str) -> str:
        """Map a database id to its first data source id (falls back to the id itself)."""
        db = self._call(self.client.databases.retrieve, database_id=database_id)
        sources = db.get("data_sources") or []
        if sources and sources[0].get("id"):
            return sources[0]["id"]
        return database_id

    def list_pages(
        self,
        database_id: str,
        title_filter: Optional[str] = None,
        *,
        title_property: str = "市場セグメント",
    ) -> list[dict]:
        """
        Query every page of a database, optionally filtered by exact title.

        Args:
            database_id: Notion database id
            title_filter: Only return pages whose title equals this value
            title_property: Name of the title property used by the filter

        Returns:
            Pages in the order Notion returned them
        """
        data_source_id = self.resolve_data_source_id(database_id)
        kwargs: dict[str, Any] = {"data_source_id": data_source_id}
        if title_filter:
            kwargs["filter"] = {
                "property": title_property,
                "title": {"equals": title_filter},
            }
        return self._paginate(self.client.data_sources.query, **kwargs)

    def list_block_children(self, block_id: str) -> list[dict]:
        """Fetch all direct child blocks of a page or block."""
        return self._paginate(self.client.blocks.children.list, block_id=block_id)

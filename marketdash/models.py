"""
Market data records shared by the Notion pipeline and the repository.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any, Optional


@dataclass(frozen=True)
class Subpage:
    """A nested Notion page flattened to Markdown."""
    id: str
    title: str
    path: str
    markdown: str

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Subpage":
        return cls(
            id=str(data.get("id") or ""),
            title=str(data.get("title") or ""),
            path=str(data.get("path") or ""),
            markdown=str(data.get("markdown") or ""),
        )


@dataclass
class MarketDataInput:
    """
    Normalized unit ready for persistence.

    When `id` is set, upsert targets that row. Otherwise the row is resolved
    by (segment, issue, year).
    """
    segment: str
    year: int
    issue: Optional[str] = None
    market_size: Optional[float] = None
    growth_rate: Optional[float] = None
    top10_ratio: Optional[float] = None
    players: list[str] = field(default_factory=list)
    links: list[str] = field(default_factory=list)
    summary: Optional[str] = None
    notion_page_id: Optional[str] = None
    notion_parent_id: Optional[str] = None
    subpage_path: Optional[str] = None
    subpages: list[Subpage] = field(default_factory=list)
    last_synced_at: Optional[str] = None
    id: Optional[int] = None


@dataclass
class MarketDataRecord:
    """Persisted market data row."""
    id: int
    segment: str
    year: int
    issue: Optional[str] = None
    market_size: Optional[float] = None
    growth_rate: Optional[float] = None
    top10_ratio: Optional[float] = None
    players: list[str] = field(default_factory=list)
    links: list[str] = field(default_factory=list)
    summary: Optional[str] = None
    notion_page_id: Optional[str] = None
    notion_parent_id: Optional[str] = None
    subpage_path: Optional[str] = None
    subpages: list[Subpage] = field(default_factory=list)
    last_synced_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class MarketDataFilter:
    """Optional filters for listing market data. Unset fields are ignored."""
    id: Optional[int] = None
    segment: Optional[str] = None
    issue_contains: Optional[str] = None
    year: Optional[int] = None
    notion_page_id: Optional[str] = None

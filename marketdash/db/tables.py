"""SQLAlchemy models for market data storage."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base declarative model."""


class MarketDataRow(Base):
    """One market segment/issue figure for one fiscal year."""

    __tablename__ = "market_data"
    __table_args__ = (UniqueConstraint("segment", "issue", "year", name="uq_market_data_key"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    segment: Mapped[str] = mapped_column(String, nullable=False)
    # Empty string rather than NULL so the unique constraint covers "no issue"
    issue: Mapped[str] = mapped_column(String, nullable=False, default="")
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    market_size: Mapped[float | None] = mapped_column(Float, nullable=True)
    growth_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    top10_ratio: Mapped[float | None] = mapped_column(Float, nullable=True)
    players: Mapped[str | None] = mapped_column(Text, nullable=True)
    links: Mapped[str | None] = mapped_column(Text, nullable=True)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    notion_page_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    notion_parent_id: Mapped[str | None] = mapped_column(String, nullable=True)
    subpage_path: Mapped[str | None] = mapped_column(String, nullable=True)
    subpages: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_synced_at: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

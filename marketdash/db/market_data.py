"""
Market data repository.

Usage:
    engine = create_engine_from_url("sqlite:///marketdash.db")
    init_db(engine)
    with session_factory(engine)() as session:
        record = upsert_market_data(session, MarketDataInput(segment="EV", year=2025))
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Engine, create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..models import MarketDataFilter, MarketDataInput, MarketDataRecord, Subpage
from ..utils.exceptions import PersistenceError
from ..utils.logger import get_logger
from .tables import Base, MarketDataRow

logger = get_logger(__name__)


# =============================================================================
# ENGINE / SESSION
# =============================================================================

def create_engine_from_url(url: str) -> Engine:
    return create_engine(url)


def init_db(engine: Engine) -> None:
    """Create tables if they do not exist."""
    Base.metadata.create_all(engine)


def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


# =============================================================================
# SERIALISATION
# =============================================================================

def normalise_issue(issue: Optional[str]) -> str:
    return issue.strip() if issue else ""


def serialise_array(items: Optional[list[str]]) -> Optional[str]:
    if not items:
        return None
    return json.dumps(list(items), ensure_ascii=False)


def serialise_subpages(items: Optional[list[Subpage]]) -> Optional[str]:
    if not items:
        return None
    return json.dumps([s.to_dict() for s in items], ensure_ascii=False)


def _load_json_list(value: Optional[str], column: str) -> list:
    if not value:
        return []
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse JSON in {column}: {e}")
        return []
    return parsed if isinstance(parsed, list) else []


def _iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    # SQLite drops the offset on read; stored values are always UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def to_record(row: MarketDataRow) -> MarketDataRecord:
    subpages = [
        Subpage.from_dict(item)
        for item in _load_json_list(row.subpages, "subpages")
        if isinstance(item, dict)
    ]
    return MarketDataRecord(
        id=row.id,
        segment=row.segment,
        issue=row.issue or None,
        year=row.year,
        market_size=row.market_size,
        growth_rate=row.growth_rate,
        top10_ratio=row.top10_ratio,
        players=[str(p) for p in _load_json_list(row.players, "players")],
        links=[str(u) for u in _load_json_list(row.links, "links")],
        summary=row.summary,
        notion_page_id=row.notion_page_id,
        notion_parent_id=row.notion_parent_id,
        subpage_path=row.subpage_path,
        subpages=[s for s in subpages if s.id],
        last_synced_at=row.last_synced_at,
        created_at=_iso(row.created_at),
        updated_at=_iso(row.updated_at),
    )


# =============================================================================
# QUERIES
# =============================================================================

def list_market_data(
    session: Session,
    filter: Optional[MarketDataFilter] = None,
) -> list[MarketDataRecord]:
    """List records matching `filter`, newest year first then by segment."""
    stmt = select(MarketDataRow)
    if filter is not None:
        if filter.id is not None:
            stmt = stmt.where(MarketDataRow.id == filter.id)
        if filter.segment:
            stmt = stmt.where(MarketDataRow.segment == filter.segment)
        if filter.issue_contains:
            stmt = stmt.where(MarketDataRow.issue.like(f"%{filter.issue_contains}%"))
        if filter.year is not None:
            stmt = stmt.where(MarketDataRow.year == filter.year)
        if filter.notion_page_id:
            stmt = stmt.where(MarketDataRow.notion_page_id == filter.notion_page_id)
    stmt = stmt.order_by(MarketDataRow.year.desc(), MarketDataRow.segment.asc())
    return [to_record(row) for row in session.scalars(stmt)]


def get_market_data_by_id(session: Session, record_id: int) -> Optional[MarketDataRecord]:
    row = session.get(MarketDataRow, record_id)
    return to_record(row) if row else None


def upsert_market_data(session: Session, data: MarketDataInput) -> MarketDataRecord:
    """
    Insert or update one market data row and commit.

    An explicit `data.id` always targets that row. Otherwise the row is found
    by (segment, issue, year) and created when absent.

    Raises:
        PersistenceError: Explicit id not found, or the database round-trip failed
    """
    segment = data.segment.strip()
    issue = normalise_issue(data.issue)

    try:
        if data.id is not None:
            row = session.get(MarketDataRow, int(data.id))
            if row is None:
                raise PersistenceError(f"Market data {data.id} not found", operation="upsert")
        else:
            row = session.scalars(
                select(MarketDataRow)
                .where(
                    MarketDataRow.segment == segment,
                    MarketDataRow.issue == issue,
                    MarketDataRow.year == data.year,
                )
                .limit(1)
            ).first()
            if row is None:
                row = MarketDataRow()
                session.add(row)

        row.segment = segment
        row.issue = issue
        row.year = data.year
        row.market_size = data.market_size
        row.growth_rate = data.growth_rate
        row.top10_ratio = data.top10_ratio
        row.players = serialise_array(data.players)
        row.links = serialise_array(data.links)
        row.summary = data.summary
        row.notion_page_id = data.notion_page_id
        row.notion_parent_id = data.notion_parent_id
        row.subpage_path = data.subpage_path
        row.subpages = serialise_subpages(data.subpages)
        row.last_synced_at = data.last_synced_at or datetime.now(timezone.utc).isoformat()

        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise PersistenceError(
            f"Failed to upsert market data for {segment!r} {data.year}",
            operation="upsert",
            cause=e,
        ) from e

    return to_record(row)


def delete_market_data(session: Session, record_id: int) -> bool:
    """Delete a row by id. Returns True if a row was removed."""
    try:
        row = session.get(MarketDataRow, record_id)
        if row is None:
            return False
        session.delete(row)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise PersistenceError(f"Failed to delete market data {record_id}", operation="delete", cause=e) from e
    return True

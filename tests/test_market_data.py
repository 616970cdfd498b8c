"""
Tests for the market data repository (in-memory SQLite).

Run with: pytest tests/test_market_data.py -v
"""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from marketdash.db import (
    MarketDataRow,
    create_engine_from_url,
    delete_market_data,
    get_market_data_by_id,
    init_db,
    list_market_data,
    session_factory,
    upsert_market_data,
)
from marketdash.models import MarketDataFilter, MarketDataInput, Subpage
from marketdash.utils.exceptions import PersistenceError


@pytest.fixture
def session():
    engine = create_engine_from_url("sqlite://")
    init_db(engine)
    with session_factory(engine)() as s:
        yield s


def make_input(**overrides):
    data = dict(
        segment="EV Batteries",
        issue="Charging",
        year=2025,
        market_size=350_000_000,
        players=["CATL", "LG"],
        links=["https://example.com"],
        subpages=[Subpage("sp-1", "Trends", "EV Batteries/Trends", "- solid state")],
        notion_page_id="page-1",
        last_synced_at="2026-01-15T09:30:00+00:00",
    )
    data.update(overrides)
    return MarketDataInput(**data)


class TestUpsert:
    """Tests for upsert_market_data."""

    def test_insert_returns_record(self, session):
        record = upsert_market_data(session, make_input())

        assert record.id is not None
        assert record.segment == "EV Batteries"
        assert record.players == ["CATL", "LG"]
        assert record.subpages[0].path == "EV Batteries/Trends"
        assert record.created_at is not None
        assert record.updated_at is not None

    def test_idempotent_on_composite_key(self, session):
        first = upsert_market_data(session, make_input())
        second = upsert_market_data(session, make_input())

        assert first.id == second.id
        assert session.query(MarketDataRow).count() == 1

    def test_updates_existing_row(self, session):
        first = upsert_market_data(session, make_input())
        second = upsert_market_data(session, make_input(market_size=400_000_000, players=[]))

        assert second.id == first.id
        assert second.market_size == 400_000_000
        assert second.players == []

    def test_segment_and_issue_normalised(self, session):
        first = upsert_market_data(session, make_input(segment=" EV Batteries ", issue=" Charging "))
        second = upsert_market_data(session, make_input())
        assert first.id == second.id

    def test_null_issue_matches_empty(self, session):
        first = upsert_market_data(session, make_input(issue=None))
        second = upsert_market_data(session, make_input(issue=""))
        assert first.id == second.id
        assert second.issue is None

    def test_different_year_is_new_row(self, session):
        a = upsert_market_data(session, make_input(year=2025))
        b = upsert_market_data(session, make_input(year=2030))
        assert a.id != b.id

    def test_explicit_id_targets_row(self, session):
        a = upsert_market_data(session, make_input())
        b = upsert_market_data(session, make_input(id=a.id, segment="Renamed"))
        assert b.id == a.id
        assert b.segment == "Renamed"

    def test_explicit_id_missing(self, session):
        with pytest.raises(PersistenceError) as exc_info:
            upsert_market_data(session, make_input(id=999))
        assert exc_info.value.operation == "upsert"

    def test_empty_arrays_stored_as_null(self, session):
        record = upsert_market_data(session, make_input(players=[], links=[], subpages=[]))
        row = session.get(MarketDataRow, record.id)
        assert row.players is None
        assert row.links is None
        assert row.subpages is None

    def test_timestamps_keep_utc_offset_after_reload(self, session):
        record = upsert_market_data(session, make_input())
        session.expire_all()
        reloaded = get_market_data_by_id(session, record.id)

        assert reloaded.created_at == record.created_at
        assert reloaded.updated_at == record.updated_at
        assert reloaded.created_at.endswith("+00:00")

    def test_default_last_synced_at_is_utc(self, session):
        record = upsert_market_data(session, make_input(last_synced_at=None))
        assert record.last_synced_at.endswith("+00:00")

    def test_bad_json_column_decodes_empty(self, session):
        record = upsert_market_data(session, make_input())
        row = session.get(MarketDataRow, record.id)
        row.players = "not json"
        session.commit()
        assert get_market_data_by_id(session, record.id).players == []


class TestQueries:
    """Tests for list/get/delete."""

    def test_list_order_and_filters(self, session):
        upsert_market_data(session, make_input(segment="B", year=2025, issue="cost"))
        upsert_market_data(session, make_input(segment="A", year=2025, issue="supply"))
        upsert_market_data(session, make_input(segment="A", year=2030, issue="supply", notion_page_id="page-2"))

        assert [(r.segment, r.year) for r in list_market_data(session)] == [("A", 2030), ("A", 2025), ("B", 2025)]
        assert len(list_market_data(session, MarketDataFilter(segment="A"))) == 2
        assert len(list_market_data(session, MarketDataFilter(issue_contains="upp"))) == 2
        assert len(list_market_data(session, MarketDataFilter(year=2030))) == 1
        assert len(list_market_data(session, MarketDataFilter(notion_page_id="page-2"))) == 1

    def test_get_by_id(self, session):
        record = upsert_market_data(session, make_input())
        assert get_market_data_by_id(session, record.id).segment == "EV Batteries"
        assert get_market_data_by_id(session, record.id + 1) is None

    def test_delete(self, session):
        record = upsert_market_data(session, make_input())
        assert delete_market_data(session, record.id) is True
        assert delete_market_data(session, record.id) is False
        assert list_market_data(session) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

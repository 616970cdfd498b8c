"""
Relational storage for synced market data.

Usage:
    from marketdash.db import init_db, upsert_market_data
"""

from .tables import Base, MarketDataRow
from .market_data import (
    create_engine_from_url,
    init_db,
    session_factory,
    list_market_data,
    get_market_data_by_id,
    upsert_market_data,
    delete_market_data,
)

__all__ = [
    'Base',
    'MarketDataRow',
    'create_engine_from_url',
    'init_db',
    'session_factory',
    'list_market_data',
    'get_market_data_by_id',
    'upsert_market_data',
    'delete_market_data',
]

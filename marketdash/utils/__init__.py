"""Utility modules for marketdash."""
from .config import Config, NotionConfig, SyncConfig, DatabaseConfig, PropertyMap
from .logger import get_logger, setup_logging, set_level
from .exceptions import (
    MarketDashError,
    ConfigurationError,
    ExternalServiceError,
    ValidationError,
    PersistenceError,
)

__all__ = [
    # Config
    'Config',
    'NotionConfig',
    'SyncConfig',
    'DatabaseConfig',
    'PropertyMap',
    # Logger
    'get_logger',
    'setup_logging',
    'set_level',
    # Exceptions
    'MarketDashError',
    'ConfigurationError',
    'ExternalServiceError',
    'ValidationError',
    'PersistenceError',
]

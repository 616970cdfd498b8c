"""
Configuration for marketdash.

Supports:
- Environment variables
- .env file (loaded with python-dotenv)
- YAML config file (optional)

Usage:
    from marketdash.utils.config import Config

    config = Config.load("marketdash.yaml")
    print(config.notion.database_id)
"""
import os
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, field

import yaml
from dotenv import load_dotenv

from .exceptions import ConfigurationError


DEFAULT_NOTION_VERSION: str = "2025-09-03"
DEFAULT_DATABASE_URL: str = "sqlite:///marketdash.db"

# Notion reports market sizes in units of 100 million (億円)
DEFAULT_MARKET_SIZE_UNIT: int = 100_000_000


def _default_years() -> Dict[int, str]:
    return {
        2025: "2025年市場規模",
        2030: "2030年市場規模",
    }


def _to_int(value: Any, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}", config_key=key, cause=e) from e


def _to_number(value: Any, key: str) -> float:
    # PyYAML reads exponent forms like 1e8 as strings
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{key} must be a number, got {value!r}", config_key=key, cause=e) from e
    return int(number) if number.is_integer() else number


# =============================================================================
# CONFIG CLASSES
# =============================================================================

@dataclass
class PropertyMap:
    """Notion property names read by the page mapper."""
    segment: str = "市場セグメント"
    issue: str = "課題"
    issue_fallback: str = "Issue"
    growth_rate: str = "市場成長率"
    top10_ratio: str = "上位10社比率"
    players: str = "主要プレイヤー"
    links: str = "リンク"
    remarks: str = "備考"


@dataclass
class NotionConfig:
    """Notion API settings."""
    api_key: str = ""
    database_id: str = ""
    version: str = DEFAULT_NOTION_VERSION
    page_size: int = 50


@dataclass
class SyncConfig:
    """Sync pipeline settings."""
    batch_size: int = 5
    max_depth: int = 2
    market_size_unit: float = DEFAULT_MARKET_SIZE_UNIT
    years: Dict[int, str] = field(default_factory=_default_years)
    properties: PropertyMap = field(default_factory=PropertyMap)


@dataclass
class DatabaseConfig:
    """Relational store settings."""
    url: str = DEFAULT_DATABASE_URL


@dataclass
class Config:
    """Main configuration class."""

    notion: NotionConfig = field(default_factory=NotionConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        *,
        env_file: Optional[str] = ".env",
    ) -> "Config":
        """
        Load configuration from the environment and an optional YAML file.

        Values in the YAML file win over environment variables.

        Args:
            config_path: Path to YAML config file. If None, only env is used.
            env_file: .env file to load first (existing env vars are kept).

        Returns:
            Config instance
        """
        if env_file:
            load_dotenv(Path(env_file))

        config = cls()
        config.notion.api_key = os.environ.get("NOTION_API_KEY", "")
        config.notion.database_id = os.environ.get("NOTION_DATABASE_ID", "")
        config.notion.version = os.environ.get("NOTION_VERSION", DEFAULT_NOTION_VERSION)
        config.database.url = os.environ.get("MARKETDASH_DATABASE_URL", DEFAULT_DATABASE_URL)

        if config_path is None:
            return config

        path = Path(config_path)
        if not path.exists():
            return config

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}", cause=e) from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config root must be a mapping: {path}")

        config._apply(data)
        return config

    def _apply(self, data: Dict[str, Any]) -> None:
        if 'notion' in data:
            n = data['notion'] or {}
            self.notion.api_key = n.get('api_key', self.notion.api_key)
            self.notion.database_id = n.get('database_id', self.notion.database_id)
            self.notion.version = n.get('version', self.notion.version)
            self.notion.page_size = _to_int(n.get('page_size', self.notion.page_size), "notion.page_size")

        if 'sync' in data:
            s = data['sync'] or {}
            self.sync.batch_size = _to_int(s.get('batch_size', self.sync.batch_size), "sync.batch_size")
            self.sync.max_depth = _to_int(s.get('max_depth', self.sync.max_depth), "sync.max_depth")
            self.sync.market_size_unit = _to_number(
                s.get('market_size_unit', self.sync.market_size_unit), "sync.market_size_unit"
            )
            if s.get('years'):
                if not isinstance(s['years'], dict):
                    raise ConfigurationError("sync.years must be a mapping", config_key="sync.years")
                self.sync.years = {
                    _to_int(year, "sync.years"): str(name) for year, name in s['years'].items()
                }
            if s.get('properties'):
                try:
                    self.sync.properties = PropertyMap(**s['properties'])
                except TypeError as e:
                    raise ConfigurationError(
                        "Unknown key in sync.properties", config_key="sync.properties", cause=e
                    ) from e

        if 'database' in data:
            d = data['database'] or {}
            self.database.url = d.get('url', self.database.url)

    def save(self, config_path: str) -> None:
        """Save non-secret settings to a YAML file."""
        data = {
            'notion': {
                'database_id': self.notion.database_id,
                'version': self.notion.version,
                'page_size': self.notion.page_size,
            },
            'sync': {
                'batch_size': self.sync.batch_size,
                'max_depth': self.sync.max_depth,
                'market_size_unit': self.sync.market_size_unit,
                'years': dict(self.sync.years),
                'properties': dict(vars(self.sync.properties)),
            },
            'database': {
                'url': self.database.url,
            },
        }
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(data, f, default_flow_style=False, allow_unicode=True)

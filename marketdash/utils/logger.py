"""
Unified logging system for marketdash.

Usage:
    from marketdash.utils.logger import get_logger, setup_logging

    logger = get_logger(__name__)
    logger.info("Starting sync...")

    setup_logging(level="DEBUG", log_file="sync.log")
"""
import json
import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional, Literal

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

ROOT_LOGGER = "marketdash"

# Color codes for terminal output
COLORS = {
    'DEBUG': '\033[36m',     # Cyan
    'INFO': '\033[32m',      # Green
    'WARNING': '\033[33m',   # Yellow
    'ERROR': '\033[31m',     # Red
    'CRITICAL': '\033[35m',  # Magenta
    'RESET': '\033[0m',
    'DIM': '\033[2m',
}

SUPPORTS_COLOR = hasattr(sys.stderr, 'isatty') and sys.stderr.isatty()


class ColoredFormatter(logging.Formatter):
    """Formatter with colored output for terminal."""

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color and SUPPORTS_COLOR

    def format(self, record: logging.LogRecord) -> str:
        if self.use_color:
            color = COLORS.get(record.levelname, COLORS['RESET'])
            reset = COLORS['RESET']
            dim = COLORS['DIM']
        else:
            color = reset = dim = ""

        name = record.name
        if name.startswith(f'{ROOT_LOGGER}.'):
            name = name[len(ROOT_LOGGER) + 1:]

        timestamp = datetime.now().strftime("%H:%M:%S")

        # Format: HH:MM:SS [LEVEL] module: message
        formatted = f"{dim}{timestamp}{reset} {color}[{record.levelname:7}]{reset} {name}: {record.getMessage()}"

        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"

        return formatted


class FileFormatter(logging.Formatter):
    """Formatter for file output (no colors, full timestamps)."""

    def __init__(self):
        super().__init__(
            fmt='%(asctime)s [%(levelname)-7s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for scheduled runs feeding a log collector."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, ensure_ascii=False)


_configured = False


def setup_logging(
    level: LogLevel = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
    quiet: bool = False
) -> None:
    """
    Setup logging for the whole package.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for log output
        json_format: Use JSON format for file output
        quiet: Suppress console output
    """
    global _configured

    log_level = getattr(logging, level.upper())

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(log_level)
    root.handlers.clear()

    # Console goes to stderr so `sync` can print its JSON result on stdout
    if not quiet:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(log_level)
        console.setFormatter(ColoredFormatter())
        root.addHandler(console)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JSONFormatter() if json_format else FileFormatter())
        root.addHandler(file_handler)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger in the marketdash namespace.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Processing started")
    """
    if not _configured:
        setup_logging()

    if not name.startswith(ROOT_LOGGER):
        name = ROOT_LOGGER if name.startswith('__') else f'{ROOT_LOGGER}.{name}'

    return logging.getLogger(name)


def set_level(level: LogLevel) -> None:
    """Change log level at runtime."""
    logging.getLogger(ROOT_LOGGER).setLevel(getattr(logging, level.upper()))

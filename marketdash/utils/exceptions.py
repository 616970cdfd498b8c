"""
Custom exceptions for marketdash.

Usage:
    from marketdash.utils.exceptions import ExternalServiceError, ValidationError

    raise ExternalServiceError("Notion API error 502", status_code=502, body="Bad Gateway")
"""
from typing import Optional, Dict, Any


class MarketDashError(Exception):
    """Base exception for all marketdash errors."""

    def __init__(
        self,
        message: str,
        *,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        parts = [self.message]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


class ConfigurationError(MarketDashError):
    """Missing credentials or container id. Fatal before any page is touched."""

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, cause=cause, details=details)
        self.config_key = config_key
        if config_key:
            self.details["config_key"] = config_key


class ExternalServiceError(MarketDashError):
    """Non-success response from the document database API."""

    def __init__(
        self,
        message: str,
        *,
        api_name: str = "Notion",
        status_code: Optional[int] = None,
        body: Optional[str] = None,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, cause=cause, details=details)
        self.api_name = api_name
        self.status_code = status_code
        self.body = body
        self.details["api"] = api_name
        if status_code:
            self.details["status_code"] = status_code


class ValidationError(MarketDashError):
    """A required field is missing on a source page."""

    def __init__(
        self,
        message: str,
        *,
        page_id: Optional[str] = None,
        field: Optional[str] = None,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, cause=cause, details=details)
        self.page_id = page_id
        self.field = field
        if page_id:
            self.details["page_id"] = page_id
        if field:
            self.details["field"] = field


class PersistenceError(MarketDashError):
    """Upsert or lookup round-trip against the relational store failed."""

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,  # upsert, get, delete, etc.
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, cause=cause, details=details)
        self.operation = operation
        if operation:
            self.details["operation"] = operation

"""Error types for pgmodel-cli."""

from typing import Optional, Dict, Any


class ExtractorError(Exception):
    """Base exception for extraction errors."""

    def __init__(self, message: str, code: str = "EXTRACTOR_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON output."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class DatabaseConnectionError(ExtractorError):
    """Error connecting to the database server."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONNECTION_ERROR", details=details)


class QueryExecutionError(ExtractorError):
    """A catalog query failed to execute.

    The failing SQL text is kept in ``details["sql"]`` for triage.
    """

    def __init__(self, message: str, sql: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        if sql is not None:
            details["sql"] = sql
        super().__init__(message, code="QUERY_ERROR", details=details)
        self.sql = sql


class ConfigurationError(ExtractorError):
    """Invalid or missing configuration."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONFIGURATION_ERROR", details=details)

"""
Velocity Error Handling.

Exception hierarchy for the analytics engine. Analytics functions return
neutral results for degenerate input; these errors cover caller mistakes
(bad week numbers, bad windows) and unreadable input at the boundary.
"""

from typing import Any, Optional


class VelocityError(Exception):
    """
    Base exception for all Velocity errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error
    """

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error string."""
        if self.context:
            return f"{self.message} Context: {self.context}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class InvalidRecordError(VelocityError):
    """
    A raw session record cannot be normalized.

    Raised per record by the normalizer and counted there; it never escapes
    `normalize_records`.
    """

    def __init__(self, message: str, record_id: Optional[str] = None, reason: str = "malformed"):
        super().__init__(message, context={"record_id": record_id, "reason": reason})
        self.record_id = record_id
        self.reason = reason


class InvalidWeekError(VelocityError, ValueError):
    """Year/week pair or week key that does not name an ISO-8601 week."""
    pass


class InvalidWindowError(VelocityError, ValueError):
    """Weekly series window that is neither a positive int nor 'full'."""
    pass


class DataSourceError(VelocityError):
    """A data file exists but cannot be read or parsed."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, context={"path": path} if path else None)
        self.path = path


class ConfigError(VelocityError):
    """Invalid configuration value in the environment or .env file."""
    pass

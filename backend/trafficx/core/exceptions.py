"""
Error taxonomy shared by the store, the exchange protocol and the API.

Each error carries the HTTP status it maps to at the API boundary; the
application-level handler turns it into a ``{"message": ...}`` body.
"""

from typing import Any, Dict, Optional


class ExchangeError(Exception):
    """Base exception for all traffic exchange errors."""

    http_status: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class MalformedError(ExchangeError):
    """Raised when input is rejected by schema or validation rules."""
    http_status = 400


class UnauthenticatedError(ExchangeError):
    """Raised when a request carries no valid caller identity."""
    http_status = 401


class ForbiddenError(ExchangeError):
    """Raised when the caller does not own the resource."""
    http_status = 403


class NotFoundError(ExchangeError):
    """Raised when an identifier has no matching record."""
    http_status = 404

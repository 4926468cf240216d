"""
Errors raised by the SABnzbd client.

Network failures are not wrapped: ``httpx.TransportError`` and
``httpx.HTTPStatusError`` reach the caller exactly as httpx raised
them.  The classes below cover the failures that belong to this
package itself.
"""

from __future__ import annotations

from typing import Optional


class SabnzbdError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(SabnzbdError):
    """Raised when the client configuration is incomplete or invalid."""


class DecodeError(SabnzbdError, ValueError):
    """The response body is not a JSON object or lacks the expected field."""

    def __init__(self, message: str, field: Optional[str] = None, body: str = "") -> None:
        super().__init__(message)
        self.field = field
        # Keep only the head of the body; SABnzbd error pages can be large.
        self.body = body[:200]


class OperationNotImplemented(SabnzbdError, NotImplementedError):
    """Raised by API operations that the client declares but does not provide."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"SABnzbd operation '{operation}' is not implemented")
        self.operation = operation


__all__ = [
    "SabnzbdError",
    "ConfigurationError",
    "DecodeError",
    "OperationNotImplemented",
]

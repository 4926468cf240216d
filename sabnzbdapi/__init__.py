"""
Synchronous client for the SABnzbd HTTP API.

This package exposes the `SabnzbdClient` class, which wraps the queue,
history and status parts of the SABnzbd API, along with its
configuration and error types.
"""

from .config import ClientConfig, load_config
from .exceptions import ConfigurationError, DecodeError, OperationNotImplemented, SabnzbdError
from .requests import SabnzbdClient

__all__ = [
    "SabnzbdClient",
    "ClientConfig",
    "load_config",
    "SabnzbdError",
    "ConfigurationError",
    "DecodeError",
    "OperationNotImplemented",
]

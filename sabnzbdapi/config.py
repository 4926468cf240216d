"""
Connection settings for the SABnzbd client.

Credentials are looked up the same way the rest of the project does it:
a ``credentials.json`` file is consulted first and environment variables
fill in whatever the file does not provide.  The following keys are
recognised in both places:

``SABNZBD_HOST``
    Host name or IP address of the SABnzbd server, without scheme.

``SABNZBD_PORT``
    Port the SABnzbd web interface listens on.  Defaults to ``8080``.

``SABNZBD_API_KEY``
    The API key shown under *Config > General* in SABnzbd.

The location of the credentials file can be overridden with the
``CREDENTIALS_PATH`` environment variable.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .exceptions import ConfigurationError

LOGGER = logging.getLogger(__name__)

DEFAULT_PORT = 8080


@dataclass(frozen=True)
class ClientConfig:
    """Immutable connection settings owned by a single client."""

    host: str
    port: int
    api_key: str

    def __post_init__(self) -> None:
        # frozen dataclass, so normalise through object.__setattr__
        object.__setattr__(self, "host", self.host.rstrip("/"))
        object.__setattr__(self, "port", int(self.port))

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}/api"


def _read_credentials(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, json.JSONDecodeError) as exc:
        LOGGER.warning(f"Failed to read credentials file {path}: {exc}")
        return {}
    if not isinstance(data, dict):
        LOGGER.warning(f"Ignoring credentials file {path}: expected a JSON object")
        return {}
    return data


def load_config(path: Optional[str] = None) -> ClientConfig:
    """
    Build a :class:`ClientConfig` from ``credentials.json`` and the environment.

    :param path: Explicit credentials file.  When omitted
        ``CREDENTIALS_PATH`` is used, falling back to ``credentials.json``
        in the current working directory.
    :raises ConfigurationError: if the host or API key cannot be found,
        or the port is not an integer.
    """
    cred_path = path or os.environ.get(
        "CREDENTIALS_PATH", os.path.join(os.getcwd(), "credentials.json")
    )
    creds = _read_credentials(cred_path)

    host = creds.get("SABNZBD_HOST") or os.environ.get("SABNZBD_HOST")
    api_key = creds.get("SABNZBD_API_KEY") or os.environ.get("SABNZBD_API_KEY")
    port = creds.get("SABNZBD_PORT") or os.environ.get("SABNZBD_PORT") or DEFAULT_PORT

    if not host or not api_key:
        raise ConfigurationError(
            "SABnzbd credentials are missing. Set SABNZBD_HOST and SABNZBD_API_KEY "
            "in credentials.json or environment variables."
        )
    try:
        port = int(port)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid SABNZBD_PORT value: {port!r}") from exc

    return ClientConfig(host=str(host), port=port, api_key=str(api_key))


__all__ = ["ClientConfig", "DEFAULT_PORT", "load_config"]

import json
import logging
from types import TracebackType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, Union
from urllib.parse import parse_qsl, urlencode, urlsplit

import httpx

from .config import DEFAULT_PORT, ClientConfig, load_config
from .exceptions import DecodeError
from .operations import NotImplementedOperation, is_implemented, unimplemented_names

LOGGER = logging.getLogger(__name__)

MASK = "***"

Scalar = Union[str, int, float, bool, None]
ParamValue = Union[Scalar, List[Scalar], tuple]


def _serialize(value: ParamValue) -> str:
    """Render one query parameter value the way SABnzbd expects it."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(_serialize(v) for v in value)
    return str(value)


def _join_ids(ids: Union[str, Iterable[str]]) -> str:
    """Comma-join job ids.  A single id given as a string is sent as-is."""
    if isinstance(ids, str):
        return ids
    return ",".join(ids)


class SabnzbdClient:
    """
    A synchronous SABnzbd API wrapper.

    Every operation is one GET against ``http://{host}:{port}/api`` with
    ``mode``, ``apikey`` and ``output=json`` plus the operation's own
    parameters.  The JSON envelope is decoded and the operation's field
    returned as-is.  Operations the client declares but does not wrap
    raise ``NotImplementedError`` without touching the network.

    Transport problems (``httpx.TransportError``) and non-2xx responses
    (``httpx.HTTPStatusError``) are not caught here.
    """

    def __init__(
        self,
        host: str,
        api_key: str,
        port: Union[int, str] = DEFAULT_PORT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = ClientConfig(host=host, port=int(port), api_key=api_key)
        self._client = httpx.Client(transport=transport)

    @classmethod
    def from_config(
        cls, config: ClientConfig, transport: Optional[httpx.BaseTransport] = None
    ) -> "SabnzbdClient":
        """Create a client from an existing :class:`ClientConfig`."""
        return cls(config.host, config.api_key, config.port, transport=transport)

    @classmethod
    def from_env(
        cls, path: Optional[str] = None, transport: Optional[httpx.BaseTransport] = None
    ) -> "SabnzbdClient":
        """Create a client from ``credentials.json`` and environment variables."""
        return cls.from_config(load_config(path), transport=transport)

    @property
    def config(self) -> ClientConfig:
        """The immutable connection settings."""
        return self._config

    # Plumbing ----------------------------------------------------------------
    def build_url(self, mode: str, params: Optional[Mapping[str, ParamValue]] = None) -> str:
        """
        Compose the full request URL for one API call.

        ``params`` override ``output`` on a key collision, but ``mode`` and
        ``apikey`` always come from the call and the client configuration.
        """
        query: Dict[str, ParamValue] = {
            "mode": mode,
            "apikey": self._config.api_key,
            "output": "json",
        }
        query.update(params or {})
        query["mode"] = mode
        query["apikey"] = self._config.api_key
        encoded = urlencode({key: _serialize(value) for key, value in query.items()})
        return f"{self._config.base_url}?{encoded}"

    def _get(self, mode: str, params: Optional[Mapping[str, ParamValue]] = None) -> httpx.Response:
        url = self.build_url(mode, params)
        LOGGER.debug(f"SABnzbd GET {self._redact(mode, url)}")
        response = self._client.get(url)
        response.raise_for_status()
        return response

    @staticmethod
    def _redact(mode: str, url: str) -> str:
        # NZB urls carry the indexer's own api key
        hidden = {"apikey", "name"} if mode == "addurl" else {"apikey"}
        parts = urlsplit(url)
        pairs = [
            (key, MASK if key in hidden else value)
            for key, value in parse_qsl(parts.query, keep_blank_values=True)
        ]
        return parts._replace(query=urlencode(pairs, safe="*")).geturl()

    def _request(self, mode: str, params: Optional[Mapping[str, ParamValue]] = None) -> Dict[str, Any]:
        """
        Perform a GET request against the SABnzbd API and return the decoded envelope.

        Raises :class:`DecodeError` when the body is not a JSON object.
        """
        response = self._get(mode, params)
        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DecodeError(
                f"SABnzbd returned a non-JSON body for mode '{mode}'", body=response.text
            ) from exc
        if not isinstance(data, dict):
            raise DecodeError(
                f"SABnzbd returned {type(data).__name__} instead of an object for mode '{mode}'",
                body=response.text,
            )
        return data

    def _field(self, mode: str, field: str, params: Optional[Mapping[str, ParamValue]] = None) -> Any:
        data = self._request(mode, params)
        if field not in data:
            raise DecodeError(
                f"SABnzbd response for mode '{mode}' has no '{field}' field",
                field=field,
                body=json.dumps(data),
            )
        return data[field]

    # Informational -----------------------------------------------------------
    def version(self) -> str:
        """Return the SABnzbd version string."""
        return self._field("version", "version")

    def warnings(self) -> List[Any]:
        """Return all warnings SABnzbd has logged."""
        return self._field("warnings", "warnings")

    def categories(self) -> List[str]:
        """Return the configured categories."""
        return self._field("get_cats", "categories")

    def scripts(self) -> List[str]:
        """Return the available post-processing scripts."""
        return self._field("get_scripts", "scripts")

    def restart(self) -> None:
        """Restart the SABnzbd daemon.  The response body is ignored."""
        self._get("restart")

    # Queue -------------------------------------------------------------------
    def queue(self, start: int = 0, limit: int = 100) -> Dict[str, Any]:
        """
        Return the queue: its slots and aggregate status.
        """
        return self._field("queue", "queue", {"start": start, "limit": limit})

    def delete_queue_entry(self, entry_id: str) -> bool:
        """Delete one job from the queue."""
        return self.delete_queue_entries([entry_id])

    def delete_queue_entries(self, ids: Union[str, Iterable[str]]) -> bool:
        """
        Delete jobs from the queue.  An empty ``ids`` is sent as-is and
        SABnzbd decides what that means.
        """
        return self._field("queue", "status", {"name": "delete", "value": _join_ids(ids)})

    def delete_all_queue_entries(self) -> bool:
        """Empty the queue."""
        return self._field("queue", "status", {"name": "delete", "value": "all"})

    def switch_queue_entries(self, first: str, second: str) -> Any:
        """Swap the queue positions of two jobs."""
        return self._field("switch", "result", {"value": first, "value2": second})

    def pause_queue(self) -> bool:
        """Pause the whole queue."""
        return self._field("set_pause", "status")

    def pause_queue_temporary(self, minutes: int) -> bool:
        """
        Pause the whole queue for ``minutes`` minutes.  The value is
        forwarded unchecked.
        """
        return self._field("config", "status", {"name": "set_pause", "value": minutes})

    def resume_queue(self) -> bool:
        """Resume the queue after a pause."""
        return self._field("resume", "status")

    def add_url(
        self,
        url: str,
        nice_name: Optional[str] = None,
        priority: int = -100,
        category: str = "",
        post_processing: int = 3,
        script: str = "",
    ) -> Dict[str, Any]:
        """
        Add an NZB by URL.

        ``nzbname`` is only sent when ``nice_name`` is given.  The whole
        envelope is returned because its shape varies between versions.
        """
        params: Dict[str, ParamValue] = {
            "name": url,
            "priority": priority,
            "category": category,
            "pp": post_processing,
            "script": script,
        }
        if nice_name:
            params["nzbname"] = nice_name
        return self._request("addurl", params)

    # History -----------------------------------------------------------------
    def history(
        self,
        category: str = "",
        start: int = 0,
        limit: int = 100,
        failed_only: bool = False,
    ) -> Dict[str, Any]:
        """Return the history: its slots and aggregate totals."""
        params = {
            "category": category,
            "start": start,
            "limit": limit,
            "failed_only": failed_only,
        }
        return self._field("history", "history", params)

    def delete_history_entry(self, entry_id: str, with_files: bool = True) -> bool:
        """Delete one history entry, by default together with its files."""
        return self.delete_history_entries([entry_id], with_files)

    def delete_history_entries(self, ids: Union[str, Iterable[str]], with_files: bool = True) -> bool:
        """Delete history entries, by default together with their files."""
        return self._delete_history(_join_ids(ids), with_files)

    def delete_all_history_entries(self, with_files: bool = True) -> bool:
        """Clear the whole history."""
        return self._delete_history("all", with_files)

    def delete_all_failed_history_entries(self, with_files: bool = True) -> bool:
        """Clear the failed jobs from the history."""
        return self._delete_history("failed", with_files)

    def _delete_history(self, value: str, with_files: bool) -> bool:
        params = {"name": "delete", "del_files": with_files, "value": value}
        return self._field("history", "status", params)

    # Not wrapped yet ---------------------------------------------------------
    shutdown = NotImplementedOperation("Shut down the SABnzbd daemon.")
    add_file = NotImplementedOperation("Upload an NZB file.")
    change_script = NotImplementedOperation("Change the script of a queue entry.")
    change_category = NotImplementedOperation("Change the category of a queue entry.")
    queue_complete_action = NotImplementedOperation("Set the action run when the queue finishes.")
    change_post_processing = NotImplementedOperation("Change the post-processing of a queue entry.")
    change_priority = NotImplementedOperation("Change the priority of a queue entry.")
    pause_queue_entry = NotImplementedOperation("Pause a single queue entry.")
    resume_queue_entry = NotImplementedOperation("Resume a single queue entry.")
    get_queue_entry_files = NotImplementedOperation("List the files of a queue entry.")
    change_queue_entry_name = NotImplementedOperation("Rename a queue entry.")
    pause_post_processing = NotImplementedOperation("Pause post-processing.")
    resume_post_processing = NotImplementedOperation("Resume post-processing.")

    # Capabilities and lifecycle ----------------------------------------------
    def supports(self, operation: str) -> bool:
        """
        Return whether ``operation`` is implemented by this client.

        Raises ``AttributeError`` for names the client does not declare.
        """
        return is_implemented(getattr(type(self), operation))

    @classmethod
    def unimplemented_operations(cls) -> List[str]:
        """Sorted names of the operations this client declares but does not wrap."""
        return unimplemented_names(cls)

    def close(self) -> None:
        """
        Close the underlying HTTP client.
        """
        self._client.close()

    def __enter__(self) -> "SabnzbdClient":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()

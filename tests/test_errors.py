"""
Test cases for error handling
"""

import httpx
import pytest

from sabnzbdapi import DecodeError, SabnzbdClient, SabnzbdError

EXTRACTING_CALLS = [
    ("queue", ()),
    ("history", ()),
    ("version", ()),
    ("warnings", ()),
    ("categories", ()),
    ("scripts", ()),
    ("delete_queue_entry", ("a",)),
    ("delete_queue_entries", (["a", "b"],)),
    ("delete_all_queue_entries", ()),
    ("switch_queue_entries", ("a", "b")),
    ("pause_queue", ()),
    ("pause_queue_temporary", (10,)),
    ("resume_queue", ()),
    ("add_url", ("http://indexer/get/1.nzb",)),
    ("delete_history_entry", ("a",)),
    ("delete_history_entries", (["a"],)),
    ("delete_all_history_entries", ()),
    ("delete_all_failed_history_entries", ()),
]


@pytest.mark.parametrize("name, args", EXTRACTING_CALLS)
def test_invalid_json_raises_decode_error(client, server, name, args):
    server.respond_with("<html>not json</html>")

    with pytest.raises(DecodeError) as excinfo:
        getattr(client, name)(*args)
    assert "not json" in excinfo.value.body


@pytest.mark.parametrize("name, args", EXTRACTING_CALLS)
def test_non_object_body_raises_decode_error(client, server, name, args):
    server.respond_with("[1, 2, 3]")

    with pytest.raises(DecodeError):
        getattr(client, name)(*args)


def test_missing_field_raises_decode_error(client, server):
    server.respond_with({"error": "API Key Incorrect"})

    with pytest.raises(DecodeError) as excinfo:
        client.queue()
    assert excinfo.value.field == "queue"


def test_add_url_returns_error_envelope_untouched(client, server):
    server.respond_with({"status": False, "error": "API Key Incorrect"})

    assert client.add_url("http://indexer/get/1.nzb") == {
        "status": False,
        "error": "API Key Incorrect",
    }


def test_decode_error_is_value_error():
    assert issubclass(DecodeError, ValueError)
    assert issubclass(DecodeError, SabnzbdError)


def test_http_status_error_propagates(client, server):
    server.respond_with("Forbidden", status_code=403)

    with pytest.raises(httpx.HTTPStatusError):
        client.version()


def test_transport_error_propagates_without_retry(api_key):
    calls = []

    def refuse(request):
        calls.append(request)
        raise httpx.ConnectError("Connection refused", request=request)

    with SabnzbdClient("sab.local", api_key, transport=httpx.MockTransport(refuse)) as sab:
        with pytest.raises(httpx.ConnectError):
            sab.queue()
    assert len(calls) == 1

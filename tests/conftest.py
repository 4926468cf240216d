"""
Pytest configuration and fixtures for the SABnzbd client tests
"""

import json

import httpx
import pytest

from sabnzbdapi import SabnzbdClient

API_KEY = "0123456789abcdef"


class FakeSabnzbd:
    """
    Stand-in for a SABnzbd server behind ``httpx.MockTransport``.
    Records every request and answers with a canned body.
    """

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.body = "{}"

    def respond_with(self, payload, status_code=200):
        self.body = payload if isinstance(payload, str) else json.dumps(payload)
        self.status_code = status_code

    def handler(self, request):
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.body)

    @property
    def last_params(self):
        """Query parameters of the most recent request as a plain dict."""
        return dict(self.requests[-1].url.params)


@pytest.fixture
def server():
    return FakeSabnzbd()


@pytest.fixture
def client(server):
    """
    A client wired to the fake server. Closed after each test.
    """
    sab = SabnzbdClient(
        "sab.local", API_KEY, port=8080, transport=httpx.MockTransport(server.handler)
    )
    try:
        yield sab
    finally:
        sab.close()


@pytest.fixture
def api_key():
    return API_KEY

"""
Shared pytest fixtures for all tests.

Provides recording logger sinks and httpx/requests clients backed by
in-memory transports so no test touches the network.
"""

import httpx
import pytest
import requests
from requests.adapters import BaseAdapter

BASE_URL = "https://api.example.test"


class RecordingLogger:
    """Logger sink that keeps every call's positional values."""

    def __init__(self):
        self.infos = []
        self.errors = []

    def info(self, *values):
        self.infos.append(values)

    def error(self, *values):
        self.errors.append(values)

    @property
    def calls(self):
        return len(self.infos) + len(self.errors)


class FailingRaw:
    """Raw body whose first read fails."""

    def __init__(self, error):
        self.error = error

    def read(self, *args, **kwargs):
        raise self.error


class StubAdapter(BaseAdapter):
    """requests adapter answering every call with a canned response or error."""

    def __init__(self, status_code=200, reason="OK", error=None, body_error=None):
        super().__init__()
        self.body_error = body_error
        self.status_code = status_code
        self.reason = reason
        self.error = error
        self.sent = []
        self.closed = False

    def send(self, request, **kwargs):
        self.sent.append((request, kwargs))
        if self.error is not None:
            raise self.error
        response = requests.Response()
        response.status_code = self.status_code
        response.reason = self.reason
        response.url = request.url
        response.request = request
        if self.body_error is not None:
            response.raw = FailingRaw(self.body_error)
        else:
            response._content = b'{"ok": true}'
        return response

    def close(self):
        self.closed = True


def echo_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/missing":
        return httpx.Response(404, json={"detail": "not found"})
    return httpx.Response(
        200,
        json={"method": request.method, "path": request.url.path},
    )


@pytest.fixture
def sink():
    return RecordingLogger()


@pytest.fixture
def async_client():
    return httpx.AsyncClient(
        base_url=BASE_URL, transport=httpx.MockTransport(echo_handler)
    )


@pytest.fixture
def sync_client():
    return httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(echo_handler))


@pytest.fixture
def stub_adapter():
    return StubAdapter()


@pytest.fixture
def session(stub_adapter):
    s = requests.Session()
    s.mount("https://", stub_adapter)
    return s


@pytest.fixture
def make_adapter():
    return StubAdapter

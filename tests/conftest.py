"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

No test touches the network: a mock server is an httpx.MockTransport
wrapping a handler function, and every request it sees is recorded.
"""

import io
import json
from collections.abc import Callable

import httpx
import pytest
from rich.console import Console

from reqcli.core.logging import setup_logging

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def _configure_logging() -> None:
    """Route structlog through stdlib at WARNING on stderr, as the CLI does."""
    setup_logging(level="WARNING")


class MockServer:
    """Records requests and answers them with a handler."""

    def __init__(self, handler: Handler) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def json_bodies(self) -> list[dict]:
        return [json.loads(request.content) for request in self.requests]


@pytest.fixture
def mock_server() -> Callable[[Handler], MockServer]:
    """
    Factory for a recording mock server.

    Usage:
        def test_get(mock_server):
            server = mock_server(lambda request: httpx.Response(200, text="hello"))
            client = HTTPClient(transport=server.transport)
    """
    return MockServer


@pytest.fixture
def text_server() -> MockServer:
    """Answers every request with 200 text/plain `hello`."""
    return MockServer(
        lambda request: httpx.Response(200, headers={"Content-Type": "text/plain"}, text="hello"),
    )


@pytest.fixture
def echo_server() -> MockServer:
    """Answers every request with its own body as JSON."""
    return MockServer(
        lambda request: httpx.Response(
            200,
            headers={"Content-Type": "application/json"},
            content=request.content,
        ),
    )


@pytest.fixture
def output() -> io.StringIO:
    """Buffer behind the `console` fixture."""
    return io.StringIO()


@pytest.fixture
def console(output: io.StringIO) -> Console:
    """Plain (no colour) console writing into `output`."""
    return Console(file=output, width=200, color_system=None)

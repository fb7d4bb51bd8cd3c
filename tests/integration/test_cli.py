"""
Integration Tests for the reqcli command line.

Runs whole invocations (parse, execute, render) against a mock server.
"""

import io
import json
import subprocess
import sys
from pathlib import Path

import httpx
import pytest
from rich.console import Console

from reqcli.cli.app import EXIT_OK, EXIT_TRANSPORT_ERROR, EXIT_USAGE_ERROR, run

PROJECT_ROOT = Path(__file__).parent.parent.parent

pytestmark = pytest.mark.integration


class Terminal:
    """Captures stdout and stderr of one run()."""

    def __init__(self) -> None:
        self.stdout = io.StringIO()
        self.stderr = io.StringIO()
        self.console = Console(file=self.stdout, width=200, color_system=None)
        self.err_console = Console(file=self.stderr, width=200, color_system=None)

    def run(self, argv: list[str], transport: httpx.AsyncBaseTransport | None = None) -> int:
        return run(argv, transport=transport, console=self.console, err_console=self.err_console)


@pytest.fixture
def terminal() -> Terminal:
    return Terminal()


class TestGet:
    """End-to-end GET requests."""

    def test_prints_status_then_body(self, terminal: Terminal, text_server) -> None:
        exit_code = terminal.run(["get", "https://example.com"], text_server.transport)

        assert exit_code == EXIT_OK
        out = terminal.stdout.getvalue()
        status_line = out.splitlines()[0]
        assert "200" in status_line
        assert "hello" in out
        assert out.index("200") < out.index("hello")
        assert len(text_server.requests) == 1

    def test_prints_headers(self, terminal: Terminal, text_server) -> None:
        terminal.run(["get", "https://example.com"], text_server.transport)

        assert "Content-Type: text/plain" in terminal.stdout.getvalue()

    def test_http_error_status_exits_zero(self, terminal: Terminal, mock_server) -> None:
        server = mock_server(lambda request: httpx.Response(500, text="boom"))

        exit_code = terminal.run(["get", "https://example.com"], server.transport)

        assert exit_code == EXIT_OK
        assert "500 Internal Server Error" in terminal.stdout.getvalue()

    def test_json_response_is_pretty_printed(self, terminal: Terminal, mock_server) -> None:
        server = mock_server(lambda request: httpx.Response(200, json={"x": 1, "y": [True]}))

        terminal.run(["get", "https://example.com"], server.transport)

        assert '"y": [\n    true\n  ]' in terminal.stdout.getvalue()


class TestPost:
    """End-to-end POST requests."""

    def test_server_receives_json_object(self, terminal: Terminal, echo_server) -> None:
        exit_code = terminal.run(["post", "https://example.com", "a=1"], echo_server.transport)

        assert exit_code == EXIT_OK
        assert echo_server.json_bodies() == [{"a": "1"}]
        assert '"a": "1"' in terminal.stdout.getvalue()

    def test_duplicate_keys_last_wins(self, terminal: Terminal, echo_server) -> None:
        terminal.run(["post", "https://example.com", "a=1", "b=2", "a=3"], echo_server.transport)

        assert echo_server.json_bodies() == [{"a": "3", "b": "2"}]

    def test_timeout_option(self, terminal: Terminal, echo_server) -> None:
        exit_code = terminal.run(
            ["--timeout", "2", "post", "https://example.com", "k=v"],
            echo_server.transport,
        )

        assert exit_code == EXIT_OK
        assert json.loads(echo_server.requests[0].content) == {"k": "v"}


class TestArgumentErrors:
    """Argument failures exit non-zero and never reach the server."""

    @pytest.mark.parametrize(
        "argv",
        [
            ["get"],
            [],
            ["put", "https://example.com"],
            ["get", "--nope", "https://example.com"],
        ],
    )
    def test_usage_error(self, terminal: Terminal, text_server, argv: list[str]) -> None:
        exit_code = terminal.run(argv, text_server.transport)

        assert exit_code == EXIT_USAGE_ERROR
        assert text_server.requests == []
        assert "Usage:" in terminal.stderr.getvalue()
        assert "Error:" in terminal.stderr.getvalue()
        assert terminal.stdout.getvalue() == ""

    def test_invalid_url(self, terminal: Terminal, text_server) -> None:
        exit_code = terminal.run(["get", "abc"], text_server.transport)

        assert exit_code == EXIT_USAGE_ERROR
        assert text_server.requests == []
        assert "Invalid URL 'abc'" in terminal.stderr.getvalue()

    def test_invalid_pair(self, terminal: Terminal, echo_server) -> None:
        exit_code = terminal.run(["post", "https://example.com", "a"], echo_server.transport)

        assert exit_code == EXIT_USAGE_ERROR
        assert echo_server.requests == []
        assert "Invalid key=value pair 'a'" in terminal.stderr.getvalue()


class TestTransportErrors:
    """Network failures exit non-zero with a message."""

    def test_connection_refused(self, terminal: Terminal, mock_server) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused")

        exit_code = terminal.run(["get", "https://example.com"], mock_server(handler).transport)

        assert exit_code == EXIT_TRANSPORT_ERROR
        assert "Connection refused" in terminal.stderr.getvalue()
        assert terminal.stdout.getvalue() == ""


class TestInfoOptions:
    """--help and --version."""

    def test_version(self, terminal: Terminal, capsys: pytest.CaptureFixture[str]) -> None:
        assert terminal.run(["--version"]) == EXIT_OK
        assert capsys.readouterr().out.startswith("reqcli ")

    def test_help(self, terminal: Terminal, capsys: pytest.CaptureFixture[str]) -> None:
        assert terminal.run(["--help"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "get" in out
        assert "post" in out


class TestScript:
    """The cli.py entry script."""

    def test_version(self) -> None:
        result = subprocess.run(
            [sys.executable, "cli.py", "--version"],
            cwd=PROJECT_ROOT,
            capture_output=True,
            text=True,
        )

        assert result.returncode == 0
        assert result.stdout.startswith("reqcli ")

    def test_missing_url(self) -> None:
        result = subprocess.run(
            [sys.executable, "cli.py", "get"],
            cwd=PROJECT_ROOT,
            capture_output=True,
            text=True,
        )

        assert result.returncode == 2
        assert "Usage:" in result.stderr
        assert result.stdout == ""


class TestLogging:
    """Log output goes to stderr and follows the verbosity flags."""

    def test_verbose_logs_request_events(
        self, terminal: Terminal, text_server, capsys: pytest.CaptureFixture[str]
    ) -> None:
        exit_code = terminal.run(["-v", "get", "https://example.com"], text_server.transport)

        assert exit_code == EXIT_OK
        err = capsys.readouterr().err
        assert "HTTP request" in err
        assert "HTTP response" in err
        assert "HTTP request headers" not in err

    def test_default_level_is_quiet(
        self, terminal: Terminal, text_server, capsys: pytest.CaptureFixture[str]
    ) -> None:
        terminal.run(["get", "https://example.com"], text_server.transport)

        assert "HTTP request" not in capsys.readouterr().err

    def test_transport_failure_reported_once(
        self, terminal: Terminal, mock_server, capsys: pytest.CaptureFixture[str]
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused")

        exit_code = terminal.run(["get", "https://example.com"], mock_server(handler).transport)

        assert exit_code == EXIT_TRANSPORT_ERROR
        assert terminal.stderr.getvalue().count("Connection refused") == 1
        assert "HTTP request failed" not in capsys.readouterr().err

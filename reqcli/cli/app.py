"""
CLI Entry Point.

Parses the command line, executes the request and prints the response.

Exit codes:
    0  response received (any HTTP status) or --help/--version
    1  transport failure (DNS, connect, TLS, timeout)
    2  usage or argument error; no request is sent
"""

import asyncio
import sys
from collections.abc import Sequence

import httpx
from rich.console import Console
from rich.text import Text

from reqcli.cli.command import parse_invocation
from reqcli.cli.client import HTTPClient
from reqcli.cli.render import render
from reqcli.core.config import ClientConfig
from reqcli.core.exceptions import ArgumentError, TransportError, UsageError
from reqcli.core.logging import setup_logging

EXIT_OK = 0
EXIT_TRANSPORT_ERROR = 1
EXIT_USAGE_ERROR = 2


def _print_error(err_console: Console, message: str) -> None:
    err_console.print(Text(f"Error: {message}", style="red"), soft_wrap=True)


def run(
    argv: Sequence[str],
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    console: Console | None = None,
    err_console: Console | None = None,
) -> int:
    """
    Run one invocation and return the process exit code.

    Args:
        argv: Arguments without the program name
        transport: Optional httpx transport, used by tests to stand in for a server
        console: Console for the response. Defaults to stdout.
        err_console: Console for errors. Defaults to stderr.
    """
    console = console or Console()
    err_console = err_console or Console(stderr=True)

    setup_logging()

    try:
        invocation = parse_invocation(argv)
    except UsageError as e:
        if e.usage:
            err_console.print(e.usage, markup=False, highlight=False, soft_wrap=True)
        _print_error(err_console, e.message)
        return EXIT_USAGE_ERROR
    except ArgumentError as e:
        _print_error(err_console, e.message)
        return EXIT_USAGE_ERROR

    if invocation is None:
        return EXIT_OK

    options = invocation.options
    if options.log_level is not None:
        setup_logging(level=options.log_level, format_type="console")

    client = HTTPClient(ClientConfig.from_options(options), transport=transport)

    try:
        response = asyncio.run(client.execute(invocation.intent))
    except TransportError as e:
        _print_error(err_console, e.message)
        return EXIT_TRANSPORT_ERROR

    render(response, console)
    return EXIT_OK


def main() -> None:
    """Console script entry point."""
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()

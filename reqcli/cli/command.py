"""
Command Model.

Turns the process argument list into a validated RequestIntent.

Grammar:
    reqcli [--timeout SECONDS] [-v] [-d] get URL
    reqcli [--timeout SECONDS] [-v] [-d] post URL [KEY=VALUE ...]

Parsing is done by a Typer app whose commands build and return the intent
instead of executing it, so every URL and body token is validated before
the pipeline ever opens a connection.
"""

from collections.abc import Sequence
from enum import Enum
from typing import List, Optional

import click
import httpx
import typer
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from reqcli import __version__
from reqcli.core.config import CliOptions
from reqcli.core.exceptions import InvalidKeyValuePairError, InvalidUrlError, UsageError

PROG_NAME = "reqcli"
ALLOWED_SCHEMES = frozenset({"http", "https"})
PAIR_SEPARATOR = "="

# Newer typer releases raise their own bundled click exception classes.
USAGE_ERRORS: tuple[type[Exception], ...] = tuple(
    {click.UsageError}
    | {cls for cls in typer.BadParameter.__mro__ if cls.__name__ == "UsageError"}
)


class Verb(str, Enum):
    """HTTP method selected by the subcommand."""

    GET = "GET"
    POST = "POST"


class KeyValue(BaseModel):
    """One `key=value` field of a POST body."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    value: str


class RequestIntent(BaseModel):
    """What HTTP call to make. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    verb: Verb
    url: str
    body: tuple[KeyValue, ...] = ()

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        return validate_url(value)

    @model_validator(mode="after")
    def _check_body(self) -> "RequestIntent":
        if self.verb is Verb.GET and self.body:
            raise ValueError("GET requests carry no body")
        return self

    def json_body(self) -> dict[str, str]:
        """Body pairs as a JSON object. The last occurrence of a key wins."""
        return {pair.key: pair.value for pair in self.body}


class Invocation(BaseModel):
    """A parsed command line: the request plus the global options."""

    model_config = ConfigDict(frozen=True)

    intent: RequestIntent
    options: CliOptions = CliOptions()


def validate_url(value: str) -> str:
    """
    Check that value is an absolute http(s) URL with a host.

    Args:
        value: URL as typed on the command line

    Returns:
        The URL, unchanged

    Raises:
        InvalidUrlError: If the URL cannot be parsed, has no http/https scheme or no host
    """
    try:
        url = httpx.URL(value)
    except httpx.InvalidURL as e:
        raise InvalidUrlError(value, str(e)) from e

    if url.scheme not in ALLOWED_SCHEMES:
        raise InvalidUrlError(value, "missing http:// or https:// scheme")
    if not url.host:
        raise InvalidUrlError(value, "missing host")
    return value


def parse_key_value(token: str) -> KeyValue:
    """
    Split a `key=value` token on the first '='.

    Everything after the first separator belongs to the value, so
    `a=b=c` gives key `a` and value `b=c`.

    Raises:
        InvalidKeyValuePairError: If there is no '=' or the key is empty
    """
    key, separator, value = token.partition(PAIR_SEPARATOR)
    if not separator or not key:
        raise InvalidKeyValuePairError(token)
    return KeyValue(key=key, value=value)


parser = typer.Typer(
    name=PROG_NAME,
    help="Send GET and POST requests and print the response.",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{PROG_NAME} {__version__}")
        raise typer.Exit()


@parser.callback()
def options(
    ctx: typer.Context,
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Request timeout in seconds (default: 30)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """
    A tiny httpie-style HTTP client.

    POST bodies are built from key=value pairs and sent as JSON.
    """
    if timeout is not None and timeout <= 0:
        raise typer.BadParameter("must be greater than 0", param_hint="'--timeout'")
    ctx.obj = CliOptions(timeout=timeout, verbose=verbose, debug=debug)


def _options(ctx: typer.Context) -> CliOptions:
    return ctx.obj if isinstance(ctx.obj, CliOptions) else CliOptions()


@parser.command("get")
def get_command(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Target URL, e.g. https://httpbin.org/get"),
) -> Invocation:
    """
    Send a GET request to URL and print the response.

    Examples:
        reqcli get https://httpbin.org/get
    """
    intent = RequestIntent(verb=Verb.GET, url=validate_url(url))
    return Invocation(intent=intent, options=_options(ctx))


@parser.command("post")
def post_command(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Target URL, e.g. https://httpbin.org/post"),
    pairs: Optional[List[str]] = typer.Argument(
        None,
        metavar="KEY=VALUE...",
        help="Body fields, sent as a JSON object",
    ),
) -> Invocation:
    """
    Send key=value pairs to URL as a JSON object and print the response.

    Examples:
        reqcli post https://httpbin.org/post name=alice role=admin
    """
    url = validate_url(url)
    body = tuple(parse_key_value(token) for token in pairs or [])
    intent = RequestIntent(verb=Verb.POST, url=url, body=body)
    return Invocation(intent=intent, options=_options(ctx))


def parse_invocation(argv: Sequence[str]) -> Invocation | None:
    """
    Parse a command line into an Invocation.

    Args:
        argv: Arguments without the program name

    Returns:
        The parsed Invocation, or None when only --help or --version was
        requested (their text has already been printed).

    Raises:
        UsageError: Missing arguments, unknown command or unknown flag
        InvalidUrlError: The URL fails validation
        InvalidKeyValuePairError: A body token is malformed
    """
    command = typer.main.get_command(parser)
    try:
        result = command.main(args=list(argv), prog_name=PROG_NAME, standalone_mode=False)
    except USAGE_ERRORS as e:
        ctx = getattr(e, "ctx", None)
        usage = ctx.get_usage() if ctx is not None else None
        raise UsageError(e.format_message(), usage=usage) from e

    if isinstance(result, Invocation):
        return result
    return None


def parse_arguments(argv: Sequence[str]) -> RequestIntent | None:
    """Parse a command line into a RequestIntent. See parse_invocation."""
    invocation = parse_invocation(argv)
    return invocation.intent if invocation is not None else None

"""
Response Rendering.

Prints a RenderedResponse: status line, headers in server order, then the
body. The body goes through a BodyRenderer chosen from the content type.
A renderer that fails never fails the command; the raw body is printed
instead.
"""

from typing import Protocol

from rich.console import Console
from rich.json import JSON
from rich.text import Text

from reqcli.cli.client import RenderedResponse
from reqcli.core.exceptions import RenderError
from reqcli.core.logging import get_logger

logger = get_logger(__name__)

JSON_MEDIA_TYPE = "application/json"


class BodyRenderer(Protocol):
    """Strategy for printing a response body."""

    def render(self, body: str, console: Console) -> None:
        """Print body, raising RenderError if it cannot be rendered."""
        ...


class PlainTextRenderer:
    """Prints the body verbatim."""

    def render(self, body: str, console: Console) -> None:
        console.out(body, highlight=False)


class HighlightedJsonRenderer:
    """Pretty-prints and syntax-highlights a JSON body."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def render(self, body: str, console: Console) -> None:
        try:
            renderable = JSON(body, indent=self.indent)
        except ValueError as e:
            raise RenderError(f"Body is not valid JSON: {e}") from e
        console.print(renderable, soft_wrap=True)


def select_renderer(content_type: str | None) -> BodyRenderer:
    """Pick the body renderer for a parsed media type."""
    if content_type == JSON_MEDIA_TYPE:
        return HighlightedJsonRenderer()
    return PlainTextRenderer()


def render_head(response: RenderedResponse, console: Console) -> None:
    """Print the status line and the headers."""
    status_style = "bold green" if response.status_code < 400 else "bold red"
    console.print(
        Text.assemble(
            (response.http_version, "blue"),
            " ",
            (str(response.status_code), status_style),
            " ",
            (response.reason_phrase, "cyan"),
        ),
        soft_wrap=True,
    )
    for name, value in response.headers:
        console.print(Text.assemble((name, "cyan"), ": ", value), soft_wrap=True)


def render(
    response: RenderedResponse,
    console: Console,
    renderer: BodyRenderer | None = None,
) -> None:
    """
    Print a response to the terminal.

    Args:
        response: The response to print
        console: Rich console to print to
        renderer: Body renderer. If None, chosen from the response content type.
    """
    render_head(response, console)
    console.print()

    if not response.text:
        return

    body_renderer = renderer or select_renderer(response.content_type)
    try:
        body_renderer.render(response.text, console)
    except RenderError as e:
        logger.warning(
            "Body rendering failed, printing raw body",
            content_type=response.content_type,
            error=e.message,
        )
        PlainTextRenderer().render(response.text, console)

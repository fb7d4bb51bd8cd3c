"""
HTTP Client for the CLI.

Executes one RequestIntent with an async httpx client and returns a
RenderedResponse. Default headers and the timeout come from ClientConfig.
"""

from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict

from reqcli.cli.command import RequestIntent, Verb
from reqcli.core.config import ClientConfig
from reqcli.core.exceptions import TransportError
from reqcli.core.logging import get_logger

logger = get_logger(__name__)


def parse_media_type(value: str | None) -> str | None:
    """
    Extract `type/subtype` from a Content-Type header value.

    Parameters such as `charset` are dropped and the result is lower-cased.
    Returns None when the header is missing or malformed.
    """
    if not value:
        return None
    media_type = value.split(";", 1)[0].strip().lower()
    main_type, slash, subtype = media_type.partition("/")
    if not slash or not main_type or not subtype or " " in media_type:
        return None
    return media_type


class RenderedResponse(BaseModel):
    """A received response, prepared for printing."""

    model_config = ConfigDict(frozen=True)

    http_version: str
    status_code: int
    reason_phrase: str
    headers: tuple[tuple[str, str], ...]
    content_type: str | None = None
    text: str = ""

    @property
    def status_line(self) -> str:
        return f"{self.http_version} {self.status_code} {self.reason_phrase}".rstrip()

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "RenderedResponse":
        """Build from an httpx response whose body has been read."""
        encoding = response.headers.encoding
        return cls(
            http_version=response.http_version,
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            headers=tuple(
                (name.decode(encoding), value.decode(encoding))
                for name, value in response.headers.raw
            ),
            content_type=parse_media_type(response.headers.get("Content-Type")),
            text=response.text,
        )


class HTTPClient:
    """
    HTTP client for one request/response round-trip.

    Features:
    - Default headers (User-Agent, X-Powered-By) from ClientConfig
    - Explicit request timeout
    - Structured logging of requests/responses
    - Transport failures wrapped in TransportError

    Usage:
        client = HTTPClient(ClientConfig())
        response = await client.execute(intent)
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            config: Headers and timeout. Defaults to ClientConfig().
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests.
        """
        self.config = config or ClientConfig()
        self._transport = transport

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=self.config.headers(),
            timeout=self.config.timeout,
            transport=self._transport,
        )

    @staticmethod
    def _request_kwargs(intent: RequestIntent) -> dict[str, Any]:
        if intent.verb is Verb.POST:
            return {
                "json": intent.json_body(),
                "headers": {"Content-Type": "application/json"},
            }
        return {}

    async def execute(self, intent: RequestIntent) -> RenderedResponse:
        """
        Send the request described by intent.

        Returns:
            The response, whatever its status code

        Raises:
            TransportError: On DNS, connection, TLS, timeout or protocol failure
        """
        method = intent.verb.value
        logger.info("HTTP request", method=method, url=intent.url)
        logger.debug("HTTP request headers", headers=self.config.headers(), timeout=self.config.timeout)

        async with self._build_client() as client:
            try:
                response = await client.request(method, intent.url, **self._request_kwargs(intent))
            except httpx.HTTPError as e:
                logger.info("HTTP request failed", method=method, url=intent.url, error=str(e))
                raise TransportError(
                    f"{method} {intent.url} failed: {str(e) or type(e).__name__}",
                    url=intent.url,
                ) from e

        logger.info(
            "HTTP response",
            method=method,
            url=intent.url,
            status_code=response.status_code,
        )
        return RenderedResponse.from_httpx(response)

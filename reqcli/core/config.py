"""
Configuration Management.

Typed client configuration. There are no config files and no environment
variables: values come from the defaults below and from command-line flags.

Models are frozen and forbid unknown fields, so a typo in an override raises
a clear ValidationError instead of being silently ignored.
"""

from pydantic import BaseModel, ConfigDict, Field

from reqcli import __version__

DEFAULT_TIMEOUT = 30.0
USER_AGENT_HEADER = "User-Agent"
POWERED_BY_HEADER = "X-Powered-By"


class _StrictBase(BaseModel):
    """Base with extra='forbid' and frozen instances."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class CliOptions(_StrictBase):
    """Global options taken from the command line."""

    timeout: float | None = Field(default=None, gt=0)
    verbose: bool = False
    debug: bool = False

    @property
    def log_level(self) -> str | None:
        """Log level implied by the flags, or None for the default."""
        if self.debug:
            return "DEBUG"
        if self.verbose:
            return "INFO"
        return None


class ClientConfig(_StrictBase):
    """
    Configuration passed into the HTTP client.

    Holds the headers sent with every request and the request timeout,
    so both can be inspected and overridden in tests.
    """

    user_agent: str = f"reqcli/{__version__}"
    powered_by: str = "reqcli"
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    extra_headers: dict[str, str] = Field(default_factory=dict)

    def headers(self) -> dict[str, str]:
        """Default headers for every request."""
        return {
            USER_AGENT_HEADER: self.user_agent,
            POWERED_BY_HEADER: self.powered_by,
            **self.extra_headers,
        }

    @classmethod
    def from_options(cls, options: CliOptions) -> "ClientConfig":
        """Build a config from defaults plus command-line overrides."""
        overrides = {}
        if options.timeout is not None:
            overrides["timeout"] = options.timeout
        return cls(**overrides)

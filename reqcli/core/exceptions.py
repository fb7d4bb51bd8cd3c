"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class ArgumentError(ApplicationError):
    """Raised when the command line cannot be turned into a request."""

    def __init__(self, message: str = "Invalid arguments", code: str = "ARG_INVALID") -> None:
        super().__init__(message, code=code)


class UsageError(ArgumentError):
    """Raised for a malformed command line (missing args, unknown command or flag)."""

    def __init__(self, message: str = "Invalid usage", usage: str | None = None) -> None:
        self.usage = usage
        super().__init__(message, code="ARG_USAGE")


class InvalidUrlError(ArgumentError):
    """Raised when a URL is not an absolute http(s) URL with a host."""

    def __init__(self, url: str, reason: str = "expected an absolute http(s) URL") -> None:
        self.url = url
        super().__init__(f"Invalid URL {url!r}: {reason}", code="ARG_INVALID_URL")


class InvalidKeyValuePairError(ArgumentError):
    """Raised when a body token is not of the form key=value."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(
            f"Invalid key=value pair {token!r}: expected a non-empty key followed by '='",
            code="ARG_INVALID_PAIR",
        )


class TransportError(ApplicationError):
    """Raised when the HTTP call fails below the HTTP layer (DNS, connect, TLS, timeout)."""

    def __init__(self, message: str = "Request failed", url: str | None = None) -> None:
        self.url = url
        super().__init__(message, code="SYS_TRANSPORT_ERROR")


class RenderError(ApplicationError):
    """Raised by a body renderer. Never fatal: rendering falls back to plain text."""

    def __init__(self, message: str = "Could not render body") -> None:
        super().__init__(message, code="RENDER_FAILED")

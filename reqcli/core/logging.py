"""
Centralized Logging Configuration.

All modules must use this logging setup. Do not create standalone loggers.

Logs always go to stderr. Stdout belongs to the rendered response, so
piping `reqcli get ... | jq` keeps working with logging enabled.

Structured fields in every log record:
    timestamp   - ISO 8601 UTC timestamp
    level       - Log level (debug, info, warning, error, critical)
    logger      - Module path (e.g., reqcli.cli.client)
    event       - Log message
    func_name   - Function that emitted the log
    lineno      - Line number in source file

Usage:
    from reqcli.core.logging import get_logger, setup_logging

    # Setup at application start
    setup_logging()

    # Verbose console output
    setup_logging(level="DEBUG", format_type="console")

    # Get logger in modules
    logger = get_logger(__name__)
    logger.info("Request sent", method="GET", url=url)
"""

import logging
import sys
from typing import Any

import structlog
from structlog.typing import Processor

DEFAULT_LEVEL = "WARNING"
DEFAULT_FORMAT = "console"
VALID_FORMATS = frozenset({"console", "json"})


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults to WARNING.
        format_type: Output format ('json' or 'console'). Defaults to console.

    Raises:
        ValueError: If the level or format is not recognized
    """
    effective_level = (level or DEFAULT_LEVEL).upper()
    effective_format = format_type or DEFAULT_FORMAT

    if effective_format not in VALID_FORMATS:
        raise ValueError(f"Unknown log format: {effective_format}")

    log_level = logging.getLevelName(effective_level)
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {effective_level}")

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if effective_format == "console":
        renderer: Processor = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    else:
        renderer = structlog.processors.JSONRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # httpx logs every request at INFO; keep it quiet unless debugging.
    logging.getLogger("httpx").setLevel(logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """
    Get a logger instance for the given name.

    Args:
        name: Logger name, typically __name__

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)

"""Structured logging configuration.

Log records go to stderr so that stdout stays reserved for NDJSON event
output in raw mode.

Features:
- Human-readable colored output (default)
- JSON-formatted output (``A2ACLI_LOG_FORMAT=json``)
- Tool context on every entry
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from a2acli import __version__
from a2acli.core.config import Settings, get_settings


def add_tool_context(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add tool name and version to all log entries.

    Args:
        logger: The wrapped logger object.
        method_name: The name of the method called on the logger.
        event_dict: The event dictionary to process.

    Returns:
        Updated event dictionary with tool context.
    """
    event_dict["tool"] = "a2acli"
    event_dict["version"] = __version__
    return event_dict


def stderr_logger_factory(*args: Any) -> structlog.PrintLogger:
    """Logger writing to whatever sys.stderr is at log time.

    rich.live.Live swaps sys.stderr while the interactive view runs, so the
    stream is looked up per logger rather than captured at configure time.
    """
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structured logging for the CLI.

    Args:
        settings: Resolved settings. Uses get_settings() if not provided.
    """
    settings = settings or get_settings()
    use_json = settings.log_format.lower() == "json"
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.WARNING

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_tool_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if use_json:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=stderr_logger_factory,
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Optional logger name (module name recommended).

    Returns:
        Configured structlog BoundLogger instance.

    Example:
        ```python
        from a2acli.core.logging import get_logger

        logger = get_logger(__name__)
        logger.debug("Opening stream", transport="json-rpc")
        ```
    """
    return structlog.get_logger(name)


Logger = structlog.BoundLogger

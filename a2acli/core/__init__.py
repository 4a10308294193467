"""Core module - Configuration, logging, HTTP clients, and shared constants.

Exports:
    - Settings, get_settings, load_settings: Pydantic Settings configuration
    - configure_logging, get_logger: Structured logging (structlog)
    - HTTPClientFactory: httpx client construction
    - Exception classes: A2ACliError, NegotiationError, etc.
"""

from a2acli.core.config import Settings, get_settings, load_settings
from a2acli.core.exceptions import (
    A2ACliError,
    ArtifactWriteError,
    ConfigError,
    NegotiationError,
    TransportError,
)
from a2acli.core.http import HTTPClientFactory
from a2acli.core.logging import configure_logging, get_logger


__all__ = [
    "A2ACliError",
    "ArtifactWriteError",
    "ConfigError",
    "HTTPClientFactory",
    "NegotiationError",
    "Settings",
    "TransportError",
    "configure_logging",
    "get_logger",
    "get_settings",
    "load_settings",
]

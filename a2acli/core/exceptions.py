"""Custom exceptions for the A2A CLI.

All exceptions derive from A2ACliError so the command layer can turn any
of them into a non-zero exit with a single except clause.

Taxonomy:
- NegotiationError: forced transport is unknown or unusable (before any stream)
- TransportError: any failure reported by a transport client or mid-stream
- ArtifactWriteError: local I/O failure while saving an artifact (non-fatal)
- ConfigError: unreadable config file or unknown environment profile
"""

from pathlib import Path


class A2ACliError(Exception):
    """Base exception for all CLI errors."""


class NegotiationError(A2ACliError):
    """Raised when a transport binding cannot be selected.

    Always raised before a connection is attempted.
    """

    def __init__(self, message: str, requested: str | None = None) -> None:
        """Initialize negotiation error.

        Args:
            message: Error description
            requested: The transport value that was requested
        """
        self.requested = requested
        super().__init__(message)


class TransportError(A2ACliError):
    """Raised when the remote service or the connection to it fails.

    Covers HTTP status errors, network errors, malformed frames and
    JSON-RPC error objects alike.
    """

    def __init__(
        self,
        message: str,
        code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize transport error.

        Args:
            message: Error description
            code: HTTP status or JSON-RPC error code if one was reported
            cause: Original exception that caused this error
        """
        self.code = code
        self.cause = cause
        if cause:
            self.__cause__ = cause
        super().__init__(message)


class ArtifactWriteError(A2ACliError):
    """Raised when an artifact cannot be written to disk."""

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize artifact write error.

        Args:
            message: Error description
            path: Target path of the failed write
            cause: Original OSError
        """
        self.path = path
        if cause:
            self.__cause__ = cause
        super().__init__(message)


class ConfigError(A2ACliError):
    """Raised when configuration cannot be loaded."""

    def __init__(self, message: str, source: str | None = None) -> None:
        """Initialize configuration error.

        Args:
            message: Error description
            source: Config file or profile that caused the error
        """
        self.source = source
        super().__init__(message)


__all__ = [
    "A2ACliError",
    "ArtifactWriteError",
    "ConfigError",
    "NegotiationError",
    "TransportError",
]

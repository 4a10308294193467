"""HTTP client factory for A2A service communication.

All transports use httpx for async HTTP operations. The factory applies
the configured timeout and bearer token consistently.

Example:
    ```python
    factory = HTTPClientFactory(settings)
    async with factory.get_client() as client:
        response = await client.get("/.well-known/agent-card.json")
    ```
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

import httpx

from a2acli.core.config import Settings, get_settings
from a2acli.core.logging import get_logger


logger = get_logger(__name__)


class HTTPClientFactory:
    """Factory for creating HTTP clients to an A2A service.

    Provides:
    - Consistent timeout configuration
    - ``Authorization: Bearer`` header when a token is configured
    - Optional injected ``httpx`` transport (used by tests)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client factory.

        Args:
            settings: Resolved settings. Uses get_settings() if not provided.
            transport: Optional httpx transport, e.g. ``httpx.MockTransport``.
        """
        self._settings = settings or get_settings()
        self._transport = transport

    def default_headers(self) -> dict[str, str]:
        """Headers sent with every request."""
        headers = {"User-Agent": "a2acli"}
        token = self._settings.auth_token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def create_client(
        self,
        base_url: str = "",
        timeout: float | None = None,
        **kwargs: Any,
    ) -> httpx.AsyncClient:
        """Create a standalone HTTP client (caller manages lifecycle).

        Args:
            base_url: Base URL for relative request paths.
            timeout: Request timeout in seconds.
            **kwargs: Additional arguments passed to httpx.AsyncClient.

        Returns:
            Configured httpx.AsyncClient instance.

        Warning:
            Caller is responsible for calling `await client.aclose()`.
        """
        request_timeout = timeout or self._settings.http_timeout_seconds
        logger.debug("Creating HTTP client", base_url=base_url, timeout=request_timeout)
        if self._transport is not None:
            kwargs.setdefault("transport", self._transport)
        return httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(request_timeout),
            headers=self.default_headers(),
            **kwargs,
        )

    @asynccontextmanager
    async def get_client(
        self,
        base_url: str = "",
        timeout: float | None = None,
        **kwargs: Any,
    ) -> AsyncGenerator[httpx.AsyncClient, None]:
        """Get an HTTP client scoped to a context manager.

        Yields:
            Configured httpx.AsyncClient instance.
        """
        client = self.create_client(base_url, timeout, **kwargs)
        try:
            yield client
        finally:
            await client.aclose()

"""Shared HTTP plumbing for the JSON-RPC and HTTP+JSON transports.

Every httpx failure is converted into TransportError so the session layer
handles all transport failures uniformly.
"""

import json
from collections.abc import AsyncIterator, Callable
from typing import Any

import httpx

from a2acli.a2a.events import Event, parse_event
from a2acli.a2a.models import Message, Task
from a2acli.clients.sse import EVENT_STREAM_MEDIA_TYPE, is_event_stream, iter_sse_data
from a2acli.core.exceptions import TransportError
from a2acli.core.logging import get_logger


logger = get_logger(__name__)


def decode_json(raw: str | bytes) -> Any:
    """Decode a JSON document, raising TransportError on malformed input."""
    try:
        return json.loads(raw)
    except ValueError as e:
        raise TransportError(f"malformed JSON from service: {e}", cause=e) from e


def as_task_or_message(payload: Any) -> Task | Message:
    """Parse a send/get result that must be a Task or a Message."""
    event = parse_event(payload)
    if not isinstance(event, (Task, Message)):
        raise TransportError(f"expected a task or message, got {event.kind!r}")
    return event


def status_error(response: httpx.Response) -> TransportError:
    """Build a TransportError from an unsuccessful HTTP response."""
    detail = response.text.strip() if response.is_stream_consumed else ""
    message = f"HTTP {response.status_code} from {response.request.url}"
    if detail:
        message = f"{message}: {detail[:200]}"
    return TransportError(message, code=response.status_code)


class HTTPTransport:
    """Base class holding the endpoint URL and httpx client."""

    def __init__(self, url: str, client: httpx.AsyncClient) -> None:
        """Initialize the transport.

        Args:
            url: Endpoint URL advertised for this binding.
            client: Configured httpx client; closed by ``aclose``.
        """
        self._url = url.rstrip("/")
        self._client = client

    @property
    def url(self) -> str:
        return self._url

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(f"request to {url} failed: {e}", cause=e) from e
        if response.is_error:
            raise status_error(response)
        return decode_json(response.content)

    async def _stream_payloads(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> AsyncIterator[Any]:
        """Open an SSE request and yield each decoded data payload.

        A plain JSON body (some servers answer errors that way) is yielded
        as a single payload.
        """
        headers = {"Accept": EVENT_STREAM_MEDIA_TYPE, **kwargs.pop("headers", {})}
        try:
            async with self._client.stream(method, url, headers=headers, **kwargs) as response:
                if response.is_error:
                    await response.aread()
                    raise status_error(response)
                if not is_event_stream(response):
                    yield decode_json(await response.aread())
                    return
                logger.debug("Event stream opened", url=url)
                async for data in iter_sse_data(response):
                    yield decode_json(data)
        except httpx.HTTPError as e:
            raise TransportError(f"stream from {url} failed: {e}", cause=e) from e

    async def _events(
        self,
        payloads: AsyncIterator[Any],
        unwrap: Callable[[Any], Any],
    ) -> AsyncIterator[Event]:
        async for payload in payloads:
            yield parse_event(unwrap(payload))

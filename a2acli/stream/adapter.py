"""Stream adapter: pull-style event source to push-style delivery.

A background pump task drains the transport's lazy event iterator into a
capacity-1 queue; the consumer reads StreamItem records from the adapter.

Guarantees:
- events are delivered in source order
- exactly one termination: the adapter closes after the last event, or
  delivers one record carrying the source's exception and then closes
- the consumer never blocks the pump beyond the single-slot handoff
- source errors are forwarded, never retried
"""

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass
from types import TracebackType

from a2acli.a2a.events import Event
from a2acli.core.logging import get_logger


logger = get_logger(__name__)

# Time allowed for a cancelled pump to release its connection
PUMP_SHUTDOWN_SECONDS = 1.0


@dataclass(frozen=True)
class StreamItem:
    """One delivery from the adapter: an event or the terminating error."""

    event: Event | None = None
    error: Exception | None = None


class StreamAdapter:
    """Bridge an async event iterator into an ordered delivery channel.

    Example:
        ```python
        async with StreamAdapter(client.send_streaming_message(request)) as stream:
            async for item in stream:
                if item.error:
                    ...
        ```
    """

    def __init__(self, source: AsyncIterator[Event]) -> None:
        """Initialize the adapter.

        Args:
            source: Lazy event sequence; raising ends the sequence with an error.
        """
        self._source = source
        self._queue: asyncio.Queue[StreamItem | None] = asyncio.Queue(maxsize=1)
        self._pump: asyncio.Task[None] | None = None
        self._finished = False

    def start(self) -> None:
        """Start the background pump (idempotent)."""
        if self._pump is None:
            self._pump = asyncio.create_task(self._run(), name="a2a-stream-pump")

    async def _run(self) -> None:
        try:
            async for event in self._source:
                await self._queue.put(StreamItem(event=event))
        except Exception as e:  # forwarded to the consumer, not swallowed
            logger.debug("Event source failed", error=str(e))
            await self._queue.put(StreamItem(error=e))
            return
        await self._queue.put(None)

    @property
    def finished(self) -> bool:
        """Whether the termination has been delivered."""
        return self._finished

    async def get(self) -> StreamItem | None:
        """Next record, or None once the stream has terminated."""
        if self._finished:
            return None
        self.start()
        item = await self._queue.get()
        if item is None or item.error is not None:
            self._finished = True
        return item

    def __aiter__(self) -> "StreamAdapter":
        return self

    async def __anext__(self) -> StreamItem:
        item = await self.get()
        if item is None:
            raise StopAsyncIteration
        return item

    async def aclose(self) -> None:
        """Abandon the pump without draining the source."""
        self._finished = True
        pump = self._pump
        if pump is None or pump.done():
            return
        pump.cancel()
        await asyncio.wait({pump}, timeout=PUMP_SHUTDOWN_SECONDS)
        # A pump cancelled while blocked on put leaves the source suspended at a yield
        if pump.done() and hasattr(self._source, "aclose"):
            await self._source.aclose()

    async def __aenter__(self) -> "StreamAdapter":
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

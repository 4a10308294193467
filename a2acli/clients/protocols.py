"""Transport client protocol.

Duck typing protocol for transport clients - enables fake transports in
tests. Every call may fail with TransportError.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from a2acli.a2a.events import Event
    from a2acli.a2a.models import Message, SendMessageRequest, Task
    from a2acli.core.constants import TransportBinding


@runtime_checkable
class TransportClient(Protocol):
    """Protocol for A2A transport clients.

    Methods:
        send_message: Send a message and block for the final result
        send_streaming_message: Send a message and stream its events
        get_task: Fetch the current state of a task
        subscribe_to_task: Re-attach to the event stream of a running task
        aclose: Release HTTP client resources
    """

    binding: TransportBinding

    async def send_message(self, request: SendMessageRequest) -> Task | Message:
        """Send a message and wait for the resulting task or message."""
        ...

    def send_streaming_message(self, request: SendMessageRequest) -> AsyncIterator[Event]:
        """Send a message and lazily yield its events in order."""
        ...

    async def get_task(self, task_id: str, history_length: int | None = None) -> Task:
        """Fetch a task by identifier."""
        ...

    def subscribe_to_task(self, task_id: str) -> AsyncIterator[Event]:
        """Lazily yield the remaining events of a running task."""
        ...

    async def aclose(self) -> None:
        """Close underlying connections."""
        ...

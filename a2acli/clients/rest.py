"""HTTP+JSON (REST) transport binding.

Endpoints used, relative to the advertised interface URL:
- ``POST /v1/message:send``
- ``POST /v1/message:stream`` (SSE)
- ``GET /v1/tasks/{id}``
- ``GET /v1/tasks/{id}:subscribe`` (SSE)
"""

from collections.abc import AsyncIterator
from typing import Any
from urllib.parse import quote

from a2acli.a2a.events import Event
from a2acli.a2a.models import Message, SendMessageRequest, Task
from a2acli.clients.base import HTTPTransport, as_task_or_message
from a2acli.core.constants import TransportBinding
from a2acli.core.exceptions import TransportError


def _identity(payload: Any) -> Any:
    return payload


class RestTransport(HTTPTransport):
    """A2A client over the HTTP+JSON binding."""

    binding = TransportBinding.HTTP_JSON

    def _path(self, suffix: str) -> str:
        return f"{self._url}/v1/{suffix}"

    def _task_path(self, task_id: str, action: str = "") -> str:
        return self._path(f"tasks/{quote(task_id, safe='')}{action}")

    async def send_message(self, request: SendMessageRequest) -> Task | Message:
        body = await self._request_json("POST", self._path("message:send"), json=request.to_wire())
        return as_task_or_message(body)

    def send_streaming_message(self, request: SendMessageRequest) -> AsyncIterator[Event]:
        payloads = self._stream_payloads("POST", self._path("message:stream"), json=request.to_wire())
        return self._events(payloads, _identity)

    async def get_task(self, task_id: str, history_length: int | None = None) -> Task:
        params = {"historyLength": history_length} if history_length is not None else None
        body = await self._request_json("GET", self._task_path(task_id), params=params)
        if isinstance(body, dict) and "kind" not in body and "task" not in body:
            body = {"kind": "task", **body}
        task = as_task_or_message(body)
        if not isinstance(task, Task):
            raise TransportError("task lookup did not return a task")
        return task

    def subscribe_to_task(self, task_id: str) -> AsyncIterator[Event]:
        payloads = self._stream_payloads("GET", self._task_path(task_id, ":subscribe"))
        return self._events(payloads, _identity)

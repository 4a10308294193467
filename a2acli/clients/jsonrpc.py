"""JSON-RPC 2.0 transport binding.

Methods used:
- ``message/send``: blocking send, returns a Task or Message
- ``message/stream``: send with SSE event stream
- ``tasks/get``: fetch a task
- ``tasks/resubscribe``: re-attach to a running task's stream
"""

import uuid
from collections.abc import AsyncIterator
from typing import Any

from a2acli.a2a.events import Event
from a2acli.a2a.models import Message, SendMessageRequest, Task
from a2acli.clients.base import HTTPTransport, as_task_or_message
from a2acli.core.constants import TransportBinding
from a2acli.core.exceptions import TransportError


def rpc_envelope(method: str, params: dict[str, Any]) -> dict[str, Any]:
    """Build a JSON-RPC 2.0 request object."""
    return {
        "jsonrpc": "2.0",
        "id": uuid.uuid4().hex,
        "method": method,
        "params": params,
    }


def rpc_result(body: Any) -> Any:
    """Extract the result of a JSON-RPC response.

    Raises:
        TransportError: If the response carries an error object or no result.
    """
    if not isinstance(body, dict):
        raise TransportError(f"malformed JSON-RPC response: {body!r}")
    error = body.get("error")
    if error is not None:
        if isinstance(error, dict):
            code = error.get("code")
            message = error.get("message", "unknown error")
            raise TransportError(f"JSON-RPC error {code}: {message}", code=code)
        raise TransportError(f"JSON-RPC error: {error}")
    if "result" not in body:
        raise TransportError("JSON-RPC response has neither result nor error")
    return body["result"]


class JsonRpcTransport(HTTPTransport):
    """A2A client over JSON-RPC 2.0 with SSE streaming."""

    binding = TransportBinding.JSON_RPC

    async def _call(self, method: str, params: dict[str, Any]) -> Any:
        body = await self._request_json("POST", self._url, json=rpc_envelope(method, params))
        return rpc_result(body)

    def _stream(self, method: str, params: dict[str, Any]) -> AsyncIterator[Event]:
        payloads = self._stream_payloads("POST", self._url, json=rpc_envelope(method, params))
        return self._events(payloads, rpc_result)

    async def send_message(self, request: SendMessageRequest) -> Task | Message:
        return as_task_or_message(await self._call("message/send", request.to_wire()))

    def send_streaming_message(self, request: SendMessageRequest) -> AsyncIterator[Event]:
        return self._stream("message/stream", request.to_wire())

    async def get_task(self, task_id: str, history_length: int | None = None) -> Task:
        params: dict[str, Any] = {"id": task_id}
        if history_length is not None:
            params["historyLength"] = history_length
        result = await self._call("tasks/get", params)
        task = as_task_or_message({"kind": "task", **result} if isinstance(result, dict) else result)
        if not isinstance(task, Task):
            raise TransportError("tasks/get did not return a task")
        return task

    def subscribe_to_task(self, task_id: str) -> AsyncIterator[Event]:
        return self._stream("tasks/resubscribe", {"id": task_id})

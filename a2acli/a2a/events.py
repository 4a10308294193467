"""A2A Protocol Event Models.

A stream delivers a closed set of event kinds:

- ``message``: an agent Message
- ``task``: a full Task snapshot (typically the first event)
- ``status-update``: TaskStatusUpdateEvent
- ``artifact-update``: TaskArtifactUpdateEvent

Implements:
- TaskStatusUpdateEvent / TaskArtifactUpdateEvent models
- Event union and ``parse_event`` for JSON-RPC and HTTP+JSON payloads
- NDJSON serialization for raw output
"""

import json
from typing import Any, Literal, Union

from pydantic import ConfigDict, Field, ValidationError

from a2acli.a2a.models import A2AModel, Artifact, Message, Task, TaskStatus
from a2acli.core.exceptions import TransportError


class TaskStatusUpdateEvent(A2AModel):
    """Task status update event.

    Emitted when a task transitions between states (submitted -> working -> completed).

    Attributes:
        kind: Always "status-update"
        task_id: Task identifier
        context_id: Conversation context identifier
        status: New task status, with optional message
        final: Whether the server considers this the last event
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["status-update"] = "status-update"
    task_id: str | None = None
    context_id: str | None = None
    status: TaskStatus
    final: bool = False
    metadata: dict[str, Any] | None = None


class TaskArtifactUpdateEvent(A2AModel):
    """Task artifact update event.

    Emitted when a task produces an output artifact.

    Attributes:
        kind: Always "artifact-update"
        task_id: Task identifier
        context_id: Conversation context identifier
        artifact: Task output artifact with parts
        append: Whether this chunk extends a previously sent artifact
        last_chunk: Whether this is the final chunk of the artifact
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["artifact-update"] = "artifact-update"
    task_id: str | None = None
    context_id: str | None = None
    artifact: Artifact
    append: bool | None = None
    last_chunk: bool | None = None
    metadata: dict[str, Any] | None = None


Event = Union[Message, Task, TaskStatusUpdateEvent, TaskArtifactUpdateEvent]

_EVENT_KINDS: dict[str, type[A2AModel]] = {
    "message": Message,
    "task": Task,
    "status-update": TaskStatusUpdateEvent,
    "artifact-update": TaskArtifactUpdateEvent,
}

# HTTP+JSON stream responses wrap the payload in a single keyed field
_WRAPPER_KINDS: dict[str, str] = {
    "message": "message",
    "msg": "message",
    "task": "task",
    "statusUpdate": "status-update",
    "artifactUpdate": "artifact-update",
}


def parse_event(payload: Any) -> Event:
    """Build an Event from a decoded wire payload.

    Accepts kind-tagged objects (JSON-RPC results) and single-key wrappers
    (HTTP+JSON stream responses).

    Args:
        payload: Decoded JSON object.

    Returns:
        The typed event.

    Raises:
        TransportError: If the payload is not a recognizable event.
    """
    if not isinstance(payload, dict):
        raise TransportError(f"unexpected event payload: {payload!r}")

    kind = payload.get("kind")
    body = payload
    if kind is None and len(payload) == 1:
        (key, inner), = payload.items()
        kind = _WRAPPER_KINDS.get(key)
        body = inner if isinstance(inner, dict) else {}
        body = {**body, "kind": kind} if kind else body

    model = _EVENT_KINDS.get(kind or "")
    if model is None:
        raise TransportError(f"unknown event kind: {kind!r}")

    try:
        return model.model_validate(body)  # type: ignore[return-value]
    except ValidationError as e:
        raise TransportError(f"malformed {kind} event: {e}", cause=e) from e


def task_id_of(event: Event) -> str | None:
    """Task identifier carried by an event, if any."""
    if isinstance(event, Task):
        return event.id or None
    return getattr(event, "task_id", None) or None


def event_to_json(event: Event) -> str:
    """Serialize an event to a single JSON line (no trailing newline)."""
    return json.dumps(event.to_wire(), ensure_ascii=False, separators=(",", ":"))


__all__ = [
    "Event",
    "TaskArtifactUpdateEvent",
    "TaskStatusUpdateEvent",
    "event_to_json",
    "parse_event",
    "task_id_of",
]

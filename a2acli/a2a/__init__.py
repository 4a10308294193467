"""A2A Protocol Models Package.

Contains pydantic models for the Agent-to-Agent (A2A) protocol as seen by
a client: agent cards, tasks, messages and stream events.
"""

from a2acli.a2a.events import (
    Event,
    TaskArtifactUpdateEvent,
    TaskStatusUpdateEvent,
    event_to_json,
    parse_event,
    task_id_of,
)
from a2acli.a2a.models import (
    AgentCard,
    Artifact,
    DataPart,
    FilePart,
    Message,
    Task,
    TaskState,
    TaskStatus,
    TextPart,
)

__all__ = [
    "AgentCard",
    "Artifact",
    "DataPart",
    "Event",
    "FilePart",
    "Message",
    "Task",
    "TaskArtifactUpdateEvent",
    "TaskState",
    "TaskStatus",
    "TaskStatusUpdateEvent",
    "TextPart",
    "event_to_json",
    "parse_event",
    "task_id_of",
]

"""A2A Protocol Models.

Pydantic models for the subset of the A2A protocol the CLI consumes.
Field names are snake_case in Python and camelCase on the wire; unknown
wire fields are preserved so that raw output echoes events faithfully.

Implements:
- Skill, AgentCapabilities, AgentInterface, AgentCard: service discovery
- TaskState: task lifecycle states
- TextPart, DataPart, FilePart: message/artifact content parts
- Artifact: task output artifact
- Message: A2A protocol message
- TaskStatus, Task: task with lifecycle
- SendMessageRequest: request body for send/stream calls
"""

import uuid
from enum import Enum
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from a2acli.core.constants import TERMINAL_STATES, normalize_binding


class A2AModel(BaseModel):
    """Base model with camelCase wire aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_wire(self) -> dict[str, Any]:
        """Serialize with wire aliases, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# Agent Card
# =============================================================================


class Skill(A2AModel):
    """A2A Skill model representing an agent capability.

    Attributes:
        id: Unique identifier
        name: Human-readable display name
        description: Detailed capability description
        tags: Categorization tags
        examples: Example use cases
        security: Security requirements, scheme name to scopes
    """

    id: str
    name: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list)
    security: list[dict[str, list[str]]] = Field(default_factory=list)


class AgentCapabilities(A2AModel):
    """A2A capability flags.

    Attributes:
        streaming: Supports streaming responses
        push_notifications: Supports webhook notifications
        state_transition_history: Maintains task state history
    """

    streaming: bool = False
    push_notifications: bool = False
    state_transition_history: bool = False


class AgentInterface(A2AModel):
    """One endpoint/binding pair advertised by an agent.

    Older cards name the binding ``transport``; newer ones ``protocolBinding``.
    """

    url: str = ""
    transport: str | None = None
    protocol_binding: str | None = None

    @property
    def binding(self) -> str:
        return self.protocol_binding or self.transport or ""


class AgentCard(A2AModel):
    """A2A Agent Card for service discovery.

    Attributes:
        name: Service identifier
        description: Service description
        url: Primary endpoint
        version: Service version
        protocol_version: A2A protocol version
        preferred_transport: Binding served at ``url``
        additional_interfaces: Further endpoint/binding pairs
        supported_interfaces: Endpoint/binding pairs (newer cards)
        capabilities: Feature capability flags
        skills: List of available skills
    """

    name: str
    description: str = ""
    url: str = ""
    version: str = ""
    protocol_version: str = "0.3.0"
    preferred_transport: str | None = None
    additional_interfaces: list[AgentInterface] = Field(default_factory=list)
    supported_interfaces: list[AgentInterface] = Field(default_factory=list)
    capabilities: AgentCapabilities = Field(default_factory=AgentCapabilities)
    skills: list[Skill] = Field(default_factory=list)

    def interfaces(self) -> list[AgentInterface]:
        """All advertised interfaces, the preferred one first."""
        found: list[AgentInterface] = []
        if self.preferred_transport:
            found.append(AgentInterface(url=self.url, transport=self.preferred_transport))
        found.extend(self.supported_interfaces)
        found.extend(self.additional_interfaces)
        return found

    def advertised_bindings(self) -> list[str]:
        """Distinct binding names in advertisement order, as spelled by the card."""
        seen: list[str] = []
        for iface in self.interfaces():
            if iface.binding and iface.binding not in seen:
                seen.append(iface.binding)
        return seen

    def url_for(self, binding: str) -> str:
        """Endpoint URL for a binding, falling back to the card's main URL."""
        wanted = normalize_binding(binding)
        for iface in self.interfaces():
            if iface.url and normalize_binding(iface.binding) == wanted:
                return iface.url
        return self.url


# =============================================================================
# Task State
# =============================================================================


class TaskState(str, Enum):
    """A2A task state enumeration.

    Agents may report states outside this set; those are carried as plain
    strings.
    """

    SUBMITTED = "submitted"
    WORKING = "working"
    INPUT_REQUIRED = "input-required"
    AUTH_REQUIRED = "auth-required"
    COMPLETED = "completed"
    FAILED = "failed"
    REJECTED = "rejected"
    CANCELED = "canceled"
    UNKNOWN = "unknown"


def state_name(state: "TaskState | str") -> str:
    """Plain string value of a known or agent-defined state."""
    return state.value if isinstance(state, TaskState) else str(state)


def is_terminal(state: "TaskState | str | None") -> bool:
    """Whether no further state changes are expected after ``state``."""
    if state is None:
        return False
    return state_name(state) in TERMINAL_STATES


# =============================================================================
# Parts and Artifacts
# =============================================================================


class TextPart(A2AModel):
    """Plain text content."""

    kind: Literal["text"] = "text"
    text: str
    metadata: dict[str, Any] | None = None


class DataPart(A2AModel):
    """Structured JSON content."""

    kind: Literal["data"] = "data"
    data: Any
    metadata: dict[str, Any] | None = None


class FileContent(A2AModel):
    """File payload, inline base64 bytes or a URI."""

    name: str | None = None
    mime_type: str | None = None
    bytes: str | None = None
    uri: str | None = None


class FilePart(A2AModel):
    """File content."""

    kind: Literal["file"] = "file"
    file: FileContent
    metadata: dict[str, Any] | None = None


Part = Union[TextPart, DataPart, FilePart]


def text_of(parts: list[Part]) -> list[str]:
    """Text of the text parts, in order."""
    return [p.text for p in parts if isinstance(p, TextPart)]


class Artifact(A2AModel):
    """Task output artifact.

    Attributes:
        artifact_id: Artifact identifier
        name: Artifact name, used as the default file name
        description: Human-readable description
        parts: Content parts making up the artifact
    """

    artifact_id: str = ""
    name: str | None = None
    description: str | None = None
    parts: list[Part] = Field(default_factory=list)
    metadata: dict[str, Any] | None = None


# =============================================================================
# Messages
# =============================================================================


class Message(A2AModel):
    """A2A protocol message.

    Attributes:
        role: ``user`` or ``agent``
        parts: Message content parts
        message_id: Message identifier
        task_id: Task this message belongs to, if any
        context_id: Conversation context identifier
        reference_task_ids: Tasks referenced as context
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["message"] = "message"
    role: str = "agent"
    parts: list[Part] = Field(default_factory=list)
    message_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    task_id: str | None = None
    context_id: str | None = None
    reference_task_ids: list[str] | None = None
    metadata: dict[str, Any] | None = None

    def text(self, sep: str = " ") -> str:
        """Text parts joined with ``sep``."""
        return sep.join(text_of(self.parts))


class SendMessageRequest(A2AModel):
    """Request body for send and stream calls.

    Attributes:
        message: The message to send
        configuration: Optional send configuration
        metadata: Request metadata (e.g. ``skillId``)
    """

    message: Message
    configuration: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None


# =============================================================================
# Task
# =============================================================================


class TaskStatus(A2AModel):
    """Task state plus optional accompanying message."""

    model_config = ConfigDict(frozen=True)

    state: TaskState | str
    message: Message | None = None
    timestamp: str | None = None

    @field_validator("state", mode="before")
    @classmethod
    def _known_state(cls, value: Any) -> Any:
        try:
            return TaskState(value)
        except ValueError:
            return value


class Task(A2AModel):
    """A2A task with full lifecycle.

    Attributes:
        id: Unique task identifier
        context_id: Conversation context identifier
        status: Current task status
        artifacts: Output artifacts
        history: Messages exchanged so far
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["task"] = "task"
    id: str
    context_id: str | None = None
    status: TaskStatus
    artifacts: list[Artifact] = Field(default_factory=list)
    history: list[Message] = Field(default_factory=list)
    metadata: dict[str, Any] | None = None


__all__ = [
    "A2AModel",
    "AgentCapabilities",
    "AgentCard",
    "AgentInterface",
    "Artifact",
    "DataPart",
    "FileContent",
    "FilePart",
    "Message",
    "Part",
    "SendMessageRequest",
    "Skill",
    "Task",
    "TaskState",
    "TaskStatus",
    "TextPart",
    "is_terminal",
    "state_name",
    "text_of",
]

"""Task lifecycle projection.

Folds stream events into a single TaskProjection and reports each change
as a renderer-agnostic diff. Both renderers drive the same projector, so
interactive and raw sessions apply identical state transitions.

Transitions:
- Message: log ``Agent: <text>``; phase unchanged
- Task / status-update: set the phase and log ``[<phase>] <text>`` unless
  the projection is already terminal, in which case the event is ignored
- artifact-update: always processed; log a header, save the artifact when a
  destination is configured (failures are logged, never raised), and log
  previews of its parts
- the first non-empty task id is captured and never replaced
"""

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from a2acli.a2a.events import (
    Event,
    TaskArtifactUpdateEvent,
    TaskStatusUpdateEvent,
    task_id_of,
)
from a2acli.a2a.models import (
    Artifact,
    DataPart,
    FilePart,
    Message,
    Task,
    TaskStatus,
    TextPart,
    is_terminal,
    state_name,
)
from a2acli.core.constants import (
    DEFAULT_HISTORY_SIZE,
    INTERACTIVE_PREVIEW_CHARS,
    INTERACTIVE_TRUNCATION_MARKER,
)
from a2acli.core.exceptions import ArtifactWriteError
from a2acli.core.logging import get_logger
from a2acli.stream.materializer import ArtifactSink, ArtifactWriteRecord, render_data


logger = get_logger(__name__)


# =============================================================================
# Diffs
# =============================================================================


class LineKind(str, Enum):
    """Kinds of log lines, so renderers can style them."""

    AGENT = "agent"
    STATUS = "status"
    ARTIFACT = "artifact"
    PREVIEW = "preview"
    SAVED = "saved"
    SAVE_ERROR = "save-error"


@dataclass(frozen=True)
class LogLine:
    """A line appended to the projection log.

    Attributes:
        kind: What the line reports
        text: Main content
        label: Preview heading (previews only)
        phase: Phase name (status lines only)
    """

    kind: LineKind
    text: str
    label: str = ""
    phase: str = ""

    @property
    def plain(self) -> str:
        """Unstyled rendering of the line."""
        if self.kind is LineKind.AGENT:
            return f"Agent: {self.text}"
        if self.kind is LineKind.STATUS:
            return f"[{self.phase}] {self.text}"
        if self.kind is LineKind.ARTIFACT:
            return f"ARTIFACT: {self.text}"
        if self.kind is LineKind.PREVIEW:
            return f"{self.label}\n{self.text}"
        if self.kind is LineKind.SAVED:
            return f"Saved to: {self.text}"
        return f"Error saving: {self.text}"


@dataclass(frozen=True)
class PhaseChanged:
    phase: str


@dataclass(frozen=True)
class TaskIdCaptured:
    task_id: str


@dataclass(frozen=True)
class ArtifactSaved:
    record: ArtifactWriteRecord


@dataclass(frozen=True)
class ArtifactSaveFailed:
    name: str
    error: str


@dataclass(frozen=True)
class StreamFailed:
    error: str


Diff = Union[LogLine, PhaseChanged, TaskIdCaptured, ArtifactSaved, ArtifactSaveFailed, StreamFailed]


# =============================================================================
# Projection
# =============================================================================


@dataclass
class TaskProjection:
    """Locally maintained task state for one stream session.

    Owned by the consuming coroutine; never shared across tasks.

    Attributes:
        phase: Current phase name, None until the first status arrives
        task_id: First non-empty task id seen
        log: Most recent log lines
        terminal: Whether a terminal phase or an error was recorded
        error: Stream error message, if the stream failed
        artifacts: Names of artifacts seen, in arrival order
    """

    history_size: int = DEFAULT_HISTORY_SIZE
    phase: str | None = None
    task_id: str | None = None
    terminal: bool = False
    error: str | None = None
    artifacts: list[str] = field(default_factory=list)
    log: deque[LogLine] = field(init=False)

    def __post_init__(self) -> None:
        self.log = deque(maxlen=self.history_size)


# =============================================================================
# Previews
# =============================================================================


def truncate(text: str, limit: int, marker: str) -> tuple[str, bool]:
    """Cut ``text`` to ``limit`` characters, appending ``marker`` when cut.

    Returns:
        Tuple of (preview, whether it was truncated).
    """
    if len(text) <= limit:
        return text, False
    return text[:limit] + marker, True


def artifact_previews(artifact: Artifact, limit: int, marker: str) -> tuple[list[LogLine], bool]:
    """Preview lines for each part of an artifact.

    Data parts are serialized in full before truncation.

    Returns:
        Tuple of (preview lines, whether any preview was truncated).
    """
    lines: list[LogLine] = []
    truncated = False
    for part in artifact.parts:
        if isinstance(part, DataPart):
            body, cut = truncate(render_data(part.data), limit, marker)
            lines.append(LogLine(LineKind.PREVIEW, body, label="Data (Preview):"))
        elif isinstance(part, TextPart):
            body, cut = truncate(part.text, limit, marker)
            lines.append(LogLine(LineKind.PREVIEW, body, label="Content (Preview):"))
        elif isinstance(part, FilePart):
            cut = False
            described = part.file.name or part.file.uri or "unnamed"
            if part.file.mime_type:
                described = f"{described} ({part.file.mime_type})"
            lines.append(LogLine(LineKind.PREVIEW, described, label="File:"))
        else:
            continue
        truncated = truncated or cut
    return lines, truncated


def artifact_label(artifact: Artifact) -> str:
    return artifact.name or artifact.artifact_id or "(unnamed)"


# =============================================================================
# Projector
# =============================================================================


class TaskProjector:
    """State-transition function over TaskProjection.

    Attributes:
        sink: Artifact writer; artifacts are only saved when it is enabled
        preview_chars: Maximum preview length per part
        truncation_marker: Appended to truncated previews
    """

    def __init__(
        self,
        sink: ArtifactSink | None = None,
        preview_chars: int = INTERACTIVE_PREVIEW_CHARS,
        truncation_marker: str = INTERACTIVE_TRUNCATION_MARKER,
    ) -> None:
        self.sink = sink
        self.preview_chars = preview_chars
        self.truncation_marker = truncation_marker

    def apply(self, projection: TaskProjection, event: Event) -> list[Diff]:
        """Fold one event into the projection.

        Args:
            projection: State to update in place.
            event: Next event from the stream.

        Returns:
            The changes made, in order.
        """
        diffs: list[Diff] = []

        task_id = task_id_of(event)
        if task_id and projection.task_id is None:
            projection.task_id = task_id
            diffs.append(TaskIdCaptured(task_id))

        if isinstance(event, Message):
            text = event.text()
            if text:
                diffs.append(LogLine(LineKind.AGENT, text))
        elif isinstance(event, TaskStatusUpdateEvent):
            diffs.extend(self._apply_status(projection, event.status))
        elif isinstance(event, Task):
            diffs.extend(self._apply_status(projection, event.status))
        elif isinstance(event, TaskArtifactUpdateEvent):
            projection.artifacts.append(artifact_label(event.artifact))
            diffs.extend(self._apply_artifact(event.artifact))
        else:
            raise TypeError(f"unhandled event type: {type(event).__name__}")

        for diff in diffs:
            if isinstance(diff, LogLine):
                projection.log.append(diff)
        return diffs

    def fail(self, projection: TaskProjection, error: Exception | str) -> list[Diff]:
        """Record a stream error; the projection becomes terminal."""
        message = str(error) or type(error).__name__
        projection.error = message
        projection.terminal = True
        return [StreamFailed(message)]

    def _apply_status(self, projection: TaskProjection, status: TaskStatus) -> list[Diff]:
        if projection.terminal:
            logger.debug("Ignoring status after terminal phase", state=state_name(status.state))
            return []

        phase = state_name(status.state)
        diffs: list[Diff] = []
        if phase != projection.phase:
            projection.phase = phase
            diffs.append(PhaseChanged(phase))
        projection.terminal = is_terminal(phase)

        text = status.message.text() if status.message else ""
        if text:
            diffs.append(LogLine(LineKind.STATUS, text, phase=phase))
        return diffs

    def _apply_artifact(self, artifact: Artifact) -> list[Diff]:
        name = artifact_label(artifact)
        diffs: list[Diff] = [LogLine(LineKind.ARTIFACT, name)]

        if self.sink is not None and self.sink.enabled:
            try:
                record = self.sink.save(artifact)
            except ArtifactWriteError as e:
                logger.debug("Failed to save artifact", artifact=name, error=str(e))
                diffs.append(ArtifactSaveFailed(name, str(e)))
                diffs.append(LogLine(LineKind.SAVE_ERROR, str(e)))
            else:
                diffs.append(ArtifactSaved(record))
                diffs.append(LogLine(LineKind.SAVED, str(record.path)))

        previews, _ = artifact_previews(artifact, self.preview_chars, self.truncation_marker)
        diffs.extend(previews)
        return diffs

"""Unit tests for the task lifecycle projector.

Test Coverage:
- Phase transitions and terminal stickiness
- Idempotence of duplicate terminal updates
- Write-once task id capture
- Log lines, history bound and previews
- Artifact saves (and non-fatal save failures)
"""

import json
import os
import unittest
from pathlib import Path

import pytest

from a2acli.a2a.models import Artifact, DataPart, FileContent, FilePart, Task, TaskStatus, TextPart
from a2acli.stream.materializer import ArtifactSink
from a2acli.stream.projector import (
    ArtifactSaved,
    ArtifactSaveFailed,
    LineKind,
    LogLine,
    PhaseChanged,
    StreamFailed,
    TaskIdCaptured,
    TaskProjection,
    TaskProjector,
    artifact_previews,
    truncate,
)
from tests.fakes.fake_transport import (
    agent_message,
    data_artifact_event,
    status_event,
    text_artifact_event,
)


def _apply_all(projector, projection, events):
    diffs = []
    for event in events:
        diffs.extend(projector.apply(projection, event))
    return diffs


class TestPhaseTransitions(unittest.TestCase):
    """Test suite for status handling."""

    def test_phases_follow_status_updates(self) -> None:
        projector, projection = TaskProjector(), TaskProjection()

        diffs = _apply_all(
            projector,
            projection,
            [status_event("submitted"), status_event("working"), status_event("completed")],
        )

        assert [d.phase for d in diffs if isinstance(d, PhaseChanged)] == [
            "submitted",
            "working",
            "completed",
        ]
        assert projection.phase == "completed"
        assert projection.terminal

    def test_terminal_phase_sticks(self) -> None:
        projector, projection = TaskProjector(), TaskProjection()

        _apply_all(projector, projection, [status_event("failed", "boom")])
        diffs = projector.apply(projection, status_event("working", "late"))

        assert diffs == []
        assert projection.phase == "failed"
        assert [line.plain for line in projection.log] == ["[failed] boom"]

    def test_duplicate_terminal_update_is_idempotent(self) -> None:
        projector, projection = TaskProjector(), TaskProjection()
        done = status_event("completed", "all done", final=True)

        projector.apply(projection, done)
        snapshot = (projection.phase, projection.task_id, list(projection.log))
        projector.apply(projection, done)

        assert (projection.phase, projection.task_id, list(projection.log)) == snapshot

    def test_canceled_is_terminal(self) -> None:
        projector, projection = TaskProjector(), TaskProjection()

        projector.apply(projection, status_event("canceled"))

        assert projection.terminal

    def test_same_phase_with_new_message_logs_without_phase_change(self) -> None:
        projector, projection = TaskProjector(), TaskProjection()

        projector.apply(projection, status_event("working", "step 1"))
        diffs = projector.apply(projection, status_event("working", "step 2"))

        assert not any(isinstance(d, PhaseChanged) for d in diffs)
        assert [line.plain for line in projection.log] == ["[working] step 1", "[working] step 2"]

    def test_task_snapshot_sets_phase(self) -> None:
        projector, projection = TaskProjector(), TaskProjection()
        task = Task(id="t9", status=TaskStatus(state="submitted"))

        diffs = projector.apply(projection, task)

        assert TaskIdCaptured("t9") in diffs
        assert projection.phase == "submitted"

    def test_unknown_state_is_carried_as_phase(self) -> None:
        projector, projection = TaskProjector(), TaskProjection()

        projector.apply(projection, status_event("paused-for-review"))

        assert projection.phase == "paused-for-review"
        assert not projection.terminal


class TestTaskIdCapture:
    """Tests for write-once task id capture."""

    def test_first_non_empty_id_is_kept(self) -> None:
        projector, projection = TaskProjector(), TaskProjection()

        projector.apply(projection, status_event("submitted", task_id="first"))
        projector.apply(projection, status_event("working", task_id="second"))

        assert projection.task_id == "first"

    def test_empty_id_does_not_overwrite(self) -> None:
        projector, projection = TaskProjector(), TaskProjection()

        projector.apply(projection, status_event("submitted", task_id="first"))
        projector.apply(projection, status_event("working", task_id=""))

        assert projection.task_id == "first"

    def test_empty_id_is_not_captured(self) -> None:
        projector, projection = TaskProjector(), TaskProjection()

        diffs = projector.apply(projection, status_event("submitted", task_id=""))

        assert projection.task_id is None
        assert not any(isinstance(d, TaskIdCaptured) for d in diffs)


class TestLogLines:
    """Tests for message, status and artifact log lines."""

    def test_agent_message_logged(self) -> None:
        projector, projection = TaskProjector(), TaskProjection()

        projector.apply(projection, agent_message("Hello there"))

        assert projection.log[-1] == LogLine(LineKind.AGENT, "Hello there")
        assert projection.log[-1].plain == "Agent: Hello there"
        assert projection.phase is None

    def test_empty_message_not_logged(self) -> None:
        projector, projection = TaskProjector(), TaskProjection()

        projector.apply(projection, agent_message(""))

        assert list(projection.log) == []

    def test_history_is_bounded(self) -> None:
        projector, projection = TaskProjector(), TaskProjection(history_size=3)

        _apply_all(projector, projection, [agent_message(f"m{i}") for i in range(10)])

        assert [line.text for line in projection.log] == ["m7", "m8", "m9"]

    def test_artifact_header_then_preview(self) -> None:
        projector, projection = TaskProjector(), TaskProjection()

        projector.apply(projection, text_artifact_event("report.txt", "hello"))

        assert [line.plain for line in projection.log] == [
            "ARTIFACT: report.txt",
            "Content (Preview):\nhello",
        ]
        assert projection.artifacts == ["report.txt"]

    def test_artifact_after_terminal_is_still_processed(self) -> None:
        projector, projection = TaskProjector(), TaskProjection()

        projector.apply(projection, status_event("completed"))
        projector.apply(projection, text_artifact_event("late.txt", "x"))

        assert projection.artifacts == ["late.txt"]

    def test_unhandled_event_type_raises(self) -> None:
        projector, projection = TaskProjector(), TaskProjection()

        with pytest.raises(TypeError):
            projector.apply(projection, object())  # type: ignore[arg-type]


class TestPreviews:
    """Tests for truncation and artifact previews."""

    def test_truncate(self) -> None:
        assert truncate("abc", 3, "...") == ("abc", False)
        assert truncate("abcdef", 3, "...") == ("abc...", True)

    def test_data_preview_serialized_then_truncated(self) -> None:
        artifact = Artifact(parts=[DataPart(data={"key": "v" * 300})])

        lines, truncated = artifact_previews(artifact, 200, "...")

        assert truncated
        assert lines[0].label == "Data (Preview):"
        assert lines[0].text == json.dumps({"key": "v" * 300}, indent=2)[:200] + "..."

    def test_file_preview_describes_file(self) -> None:
        artifact = Artifact(
            parts=[FilePart(file=FileContent(name="r.pdf", mime_type="application/pdf", uri="u"))]
        )

        lines, truncated = artifact_previews(artifact, 200, "...")

        assert lines == [LogLine(LineKind.PREVIEW, "r.pdf (application/pdf)", label="File:")]
        assert not truncated

    def test_every_part_is_previewed(self) -> None:
        artifact = Artifact(parts=[TextPart(text="a"), DataPart(data=1)])

        lines, _ = artifact_previews(artifact, 200, "...")

        assert [line.label for line in lines] == ["Content (Preview):", "Data (Preview):"]


class TestArtifactSaving:
    """Tests for artifact saving through the sink."""

    def test_saved_when_sink_enabled(self, tmp_path: Path) -> None:
        projector = TaskProjector(sink=ArtifactSink(directory=tmp_path))
        projection = TaskProjection()

        diffs = projector.apply(projection, data_artifact_event("d.json", {"a": 1}))

        saved = [d for d in diffs if isinstance(d, ArtifactSaved)]
        assert saved and saved[0].record.path == tmp_path / "d.json"
        assert [line.kind for line in projection.log] == [
            LineKind.ARTIFACT,
            LineKind.SAVED,
            LineKind.PREVIEW,
        ]

    def test_not_saved_without_destination(self, tmp_path: Path) -> None:
        projector = TaskProjector(sink=ArtifactSink())

        diffs = projector.apply(TaskProjection(), text_artifact_event("r.txt", "x"))

        assert not any(isinstance(d, (ArtifactSaved, ArtifactSaveFailed)) for d in diffs)

    def test_save_failure_is_not_fatal(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken_replace(src, dst):
            raise OSError("read-only file system")

        monkeypatch.setattr(os, "replace", broken_replace)
        projector = TaskProjector(sink=ArtifactSink(directory=tmp_path))
        projection = TaskProjection()

        diffs = projector.apply(projection, text_artifact_event("r.txt", "x"))
        projector.apply(projection, status_event("completed"))

        failed = [d for d in diffs if isinstance(d, ArtifactSaveFailed)]
        assert failed and "read-only" in failed[0].error
        assert any(line.kind is LineKind.SAVE_ERROR for line in projection.log)
        assert projection.phase == "completed"
        assert projection.error is None


class TestFail:
    """Tests for stream failure."""

    def test_fail_records_error_and_terminates(self) -> None:
        projector, projection = TaskProjector(), TaskProjection()
        projector.apply(projection, status_event("working"))

        diffs = projector.fail(projection, ConnectionResetError("connection reset"))

        assert diffs == [StreamFailed("connection reset")]
        assert projection.error == "connection reset"
        assert projection.terminal
        assert projection.phase == "working"

    def test_fail_without_message_uses_type_name(self) -> None:
        projector, projection = TaskProjector(), TaskProjection()

        projector.fail(projection, TimeoutError())

        assert projection.error == "TimeoutError"

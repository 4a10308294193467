"""Unit tests for the interactive renderer.

Rendering goes to a non-terminal rich Console backed by a StringIO.
"""

import io

from rich.console import Console

from a2acli.render.interactive import (
    QUIT_HINT,
    InteractiveRenderer,
    render_line,
    status_text,
    task_hint,
)
from a2acli.stream.projector import LineKind, LogLine, TaskProjection, TaskProjector
from tests.fakes.fake_transport import agent_message, status_event, text_artifact_event


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=100, force_terminal=False, color_system=None), buffer


class TestRenderHelpers:
    """Tests for line and status rendering."""

    def test_render_line_matches_plain_text(self) -> None:
        lines = [
            LogLine(LineKind.AGENT, "hi"),
            LogLine(LineKind.STATUS, "step", phase="working"),
            LogLine(LineKind.ARTIFACT, "r.txt"),
            LogLine(LineKind.PREVIEW, "body", label="Content (Preview):"),
            LogLine(LineKind.SAVED, "out/r.txt"),
            LogLine(LineKind.SAVE_ERROR, "disk full"),
        ]

        for line in lines:
            assert render_line(line).plain == line.plain

    def test_status_text_before_first_phase(self) -> None:
        assert status_text(TaskProjection()).plain == "INITIALIZING..."

    def test_status_text_with_phase_and_task(self) -> None:
        projection = TaskProjection(phase="working", task_id="t1")

        assert status_text(projection).plain == "WORKING | Task: t1"

    def test_task_hint(self) -> None:
        assert task_hint("t1") == "Task ID: t1 (use --task t1 to continue, or --ref t1 to reference)"


class TestInteractiveRenderer:
    """Tests for the live view lifecycle."""

    def test_final_view_shows_log_phase_and_hint(self) -> None:
        console, buffer = _console()
        renderer = InteractiveRenderer(console)
        projector, projection = TaskProjector(), TaskProjection()

        with renderer.live(projection):
            for event in (
                status_event("working", "thinking"),
                agent_message("Here is your report"),
                text_artifact_event("report.txt", "hello"),
                status_event("completed"),
            ):
                projector.apply(projection, event)
                renderer.update(projection)
            renderer.finish(projection)

        output = buffer.getvalue()
        assert "[working] thinking" in output
        assert "Agent: Here is your report" in output
        assert "ARTIFACT: report.txt" in output
        assert "COMPLETED | Task: task-1" in output
        assert QUIT_HINT in output
        assert task_hint("task-1") in output

    def test_error_view_replaces_log(self) -> None:
        console, buffer = _console()
        renderer = InteractiveRenderer(console)
        projector, projection = TaskProjector(), TaskProjection()

        with renderer.live(projection):
            projector.apply(projection, status_event("working"))
            projector.fail(projection, "connection reset")
            renderer.finish(projection)

        output = buffer.getvalue()
        assert "Error: connection reset" in output
        assert "Task ID:" not in output

"""Semantic styles for terminal output (ayu dark palette)."""

from rich.style import Style

from a2acli.a2a.models import TaskState


# Primary landmarks: headers, status line
ACCENT = Style(color="#59c2ff", bold=True)
# Scan targets: command names, the "Agent:" prefix
COMMAND = Style(color="#bfbdb6", bold=True)
# De-emphasized metadata
MUTED = Style(color="#6c7680")
PASS = Style(color="#c2d94c", bold=True)
WARN = Style(color="#ffb454", bold=True)
FAIL = Style(color="#f07178", bold=True)
# Task and skill identifiers
ID = Style(color="#95e6cb")
ARTIFACT = Style(bold=True, underline=True)


def phase_style(phase: str | None) -> Style:
    """Style for a task phase: pass, fail, or warn for anything in flight."""
    if phase == TaskState.COMPLETED.value:
        return PASS
    if phase in (TaskState.FAILED.value, TaskState.REJECTED.value, TaskState.CANCELED.value):
        return FAIL
    return WARN

"""Interactive renderer for human operators.

A rich Live view showing the most recent log lines, a status line with a
spinner while the task is in flight, the phase and the task id. The final
view stays on screen when the session ends.
"""

from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.padding import Padding
from rich.spinner import Spinner
from rich.text import Text

from a2acli.render import style
from a2acli.stream.projector import LineKind, LogLine, TaskProjection


QUIT_HINT = "(q or ctrl+c to quit)"


def render_line(line: LogLine) -> Text:
    """Styled rendering of one log line."""
    if line.kind is LineKind.AGENT:
        return Text.assemble(("Agent:", style.COMMAND), " ", line.text)
    if line.kind is LineKind.STATUS:
        return Text.assemble(
            "[",
            (line.phase, style.phase_style(line.phase)),
            "] ",
            (line.text, style.MUTED),
        )
    if line.kind is LineKind.ARTIFACT:
        return Text(f"ARTIFACT: {line.text}", style=style.ARTIFACT)
    if line.kind is LineKind.PREVIEW:
        return Text.assemble((line.label, style.MUTED), "\n", line.text)
    if line.kind is LineKind.SAVED:
        return Text(f"Saved to: {line.text}", style=style.ACCENT)
    return Text(f"Error saving: {line.text}", style=style.FAIL)


def status_text(projection: TaskProjection) -> Text:
    """Phase and task id, as shown next to the spinner."""
    phase = (projection.phase or "initializing...").upper()
    text = Text(phase, style=style.ACCENT)
    if projection.task_id:
        text.append(" | Task: ")
        text.append(projection.task_id, style=style.ID)
    return text


def task_hint(task_id: str) -> str:
    """Follow-up hint printed after a session."""
    return f"Task ID: {task_id} (use --task {task_id} to continue, or --ref {task_id} to reference)"


class InteractiveRenderer:
    """Live terminal view driven by TaskProjection snapshots.

    Example:
        ```python
        renderer = InteractiveRenderer(console)
        with renderer.live(projection):
            ...
            renderer.update(projection)
        renderer.finish(projection)
        ```
    """

    def __init__(
        self,
        console: Console | None = None,
        refresh_per_second: float = 12.5,
    ) -> None:
        self.console = console or Console()
        self._spinner = Spinner("dots", style=style.ACCENT)
        self._refresh_per_second = refresh_per_second
        self._live: Live | None = None
        self._stopped = False

    def build_view(self, projection: TaskProjection, busy: bool = True) -> RenderableType:
        """Renderable for the current projection."""
        if projection.error is not None:
            return Padding(Text(f"Error: {projection.error}", style=style.FAIL), (1, 2))

        status = status_text(projection)
        if busy and not projection.terminal:
            self._spinner.update(text=status)
            status_line: RenderableType = self._spinner
        else:
            status_line = status

        return Padding(
            Group(
                *(render_line(line) for line in projection.log),
                Text(""),
                status_line,
                Text(""),
                Text(QUIT_HINT, style=style.MUTED),
            ),
            (1, 2),
        )

    def live(self, projection: TaskProjection) -> Live:
        """Start the live view; use as a context manager."""
        self._live = Live(
            self.build_view(projection),
            console=self.console,
            refresh_per_second=self._refresh_per_second,
            transient=False,
        )
        return self._live

    def update(self, projection: TaskProjection) -> None:
        """Repaint after an event."""
        if self._live is not None:
            self._live.update(self.build_view(projection), refresh=True)

    def finish(self, projection: TaskProjection) -> None:
        """Freeze the final view and print the follow-up hint."""
        if self._live is not None:
            self._live.update(self.build_view(projection, busy=False), refresh=True)
            self._live.stop()
            self._live = None
        if projection.error is None and projection.task_id:
            self.console.print()
            self.console.print(task_hint(projection.task_id), highlight=False)

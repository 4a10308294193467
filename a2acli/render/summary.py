"""One-shot human-readable views: agent card, task status, task result."""

from rich.console import Console
from rich.text import Text

from a2acli.a2a.models import AgentCard, Task, state_name
from a2acli.core.constants import SUMMARY_PREVIEW_CHARS, SUMMARY_TRUNCATION_MARKER
from a2acli.core.exceptions import ArtifactWriteError
from a2acli.render import style
from a2acli.render.interactive import render_line
from a2acli.stream.materializer import ArtifactSink
from a2acli.stream.projector import artifact_previews


def render_agent_card(card: AgentCard, console: Console) -> None:
    """Print name, bindings, capabilities and skills of an agent."""
    console.print(Text.assemble(("Agent: ", style.COMMAND), card.name))
    if card.description:
        console.print(Text.assemble(("Description: ", style.COMMAND), card.description))
    bindings = card.advertised_bindings()
    if bindings:
        console.print(Text.assemble(("Supported Bindings: ", style.COMMAND), ", ".join(bindings)))
    console.print(
        Text.assemble(
            ("Capabilities: ", style.COMMAND),
            f"[Streaming: {str(card.capabilities.streaming).lower()}]",
        )
    )

    console.print()
    console.print(Text("Skills:", style=style.ACCENT))
    for skill in card.skills:
        console.print(Text.assemble("  - [", (skill.id, style.ID), "] ", skill.name))
        if skill.description:
            console.print(Text(f"    Description: {skill.description}", style=style.MUTED))
        schemes = [name for requirement in skill.security for name in requirement]
        if schemes:
            console.print(Text(f"    Security: {', '.join(schemes)}", style=style.MUTED))


def render_task_status(task: Task, console: Console) -> None:
    """Print id, state, status message, artifact count and metadata of a task."""
    state = state_name(task.status.state)
    console.print(Text.assemble(("Task ID: ", style.COMMAND), (task.id, style.ID)))
    console.print(Text.assemble(("Status:  ", style.COMMAND), (state, style.phase_style(state))))
    if task.status.message is not None:
        for text in task.status.message.text(sep="\n").splitlines():
            console.print(Text.assemble(("Message: ", style.COMMAND), text))
    console.print(Text.assemble(("Artifacts: ", style.COMMAND), str(len(task.artifacts))))

    if task.metadata:
        console.print()
        console.print(Text("Metadata:", style=style.ACCENT))
        for key, value in task.metadata.items():
            console.print(f"  {key}: {value}", highlight=False, markup=False)


def render_task_summary(task: Task, console: Console, sink: ArtifactSink | None = None) -> None:
    """Print the final result of a terminal task with full artifact previews.

    Artifacts are saved through ``sink`` when it has a destination.
    """
    state = state_name(task.status.state)
    console.print(Text.assemble("Task Status: [", (state, style.phase_style(state)), "]"))

    if not task.artifacts:
        console.print("No artifacts produced.")
        return

    console.print()
    console.print(Text(f"--- {len(task.artifacts)} ARTIFACT(S) AVAILABLE ---", style=style.ACCENT))
    for artifact in task.artifacts:
        console.print()
        console.print(Text(f"Name: {artifact.name or ''}", style=style.ARTIFACT))
        console.print(Text(f"Description: {artifact.description or ''}", style=style.MUTED))

        previews, truncated = artifact_previews(
            artifact, SUMMARY_PREVIEW_CHARS, SUMMARY_TRUNCATION_MARKER
        )
        for line in previews:
            console.print(render_line(line))

        if sink is not None and sink.enabled:
            try:
                record = sink.save(artifact)
            except ArtifactWriteError as e:
                console.print(Text(f"Error saving artifact: {e}", style=style.FAIL))
            else:
                console.print(Text(f">> Saved to: {record.path}", style=style.ACCENT))
        elif truncated:
            console.print(
                Text("(Hint: Use --out-dir <path> to save the full artifact content)", style=style.MUTED)
            )
    console.print()
    console.print("------------------------------")

"""Stream sessions: negotiate, open, project and render.

Control flow for one session:

1. validate any forced transport (no network traffic before this)
2. resolve the agent card and negotiate the binding
3. open the event stream (send, or re-attach to an existing task)
4. adapt it into a StreamAdapter, fold each item through TaskProjector
5. paint every step with the raw or the interactive renderer

Exit codes: 0 on a completed rendering (or a user quit), 1 on any
negotiation, transport or stream error.
"""

import asyncio
import sys
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.text import Text

from a2acli.a2a.agent_card import resolve_agent_card
from a2acli.a2a.events import Event
from a2acli.a2a.models import Message, SendMessageRequest, Task, TextPart, is_terminal
from a2acli.clients.factory import create_transport
from a2acli.clients.negotiation import negotiate, validate_transport
from a2acli.clients.protocols import TransportClient
from a2acli.core.config import Settings
from a2acli.core.constants import (
    CLIENT_TRANSPORTS,
    DEFAULT_HISTORY_SIZE,
    INTERACTIVE_PREVIEW_CHARS,
    INTERACTIVE_TRUNCATION_MARKER,
)
from a2acli.core.exceptions import A2ACliError, ArtifactWriteError, TransportError
from a2acli.core.http import HTTPClientFactory
from a2acli.core.logging import get_logger
from a2acli.render import style
from a2acli.render.interactive import InteractiveRenderer, task_hint
from a2acli.render.keys import QuitKeyWatcher
from a2acli.render.raw import RawRenderer
from a2acli.render.summary import render_task_summary
from a2acli.stream.adapter import StreamAdapter
from a2acli.stream.materializer import ArtifactSink
from a2acli.stream.projector import TaskProjection, TaskProjector


logger = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1

IN_MEMORY_STORE_HINT = (
    "Hint: If you are using the default in-memory store, restarting the server wipes all tasks."
)

Connector = Callable[[], Awaitable[TransportClient]]


@dataclass
class SessionOptions:
    """Inputs of one CLI session.

    Attributes:
        service_url: Base URL of the A2A service
        message: Text to send (invoke only)
        transport: Forced transport binding, if any
        out_dir: Directory to save artifacts to
        file_name: Explicit artifact file name
        task_id: Existing task to continue (invoke) or re-attach to (resume)
        ref_task_id: Task referenced as context
        skill_id: Skill to invoke
        token: Bearer token for the default connector
        interactive: Live view (True) or NDJSON (False)
        history_size: Log lines kept in the live view
    """

    service_url: str
    message: str = ""
    transport: str | None = None
    out_dir: Path | None = None
    file_name: str | None = None
    task_id: str | None = None
    ref_task_id: str | None = None
    skill_id: str | None = None
    token: str | None = None
    interactive: bool = True
    history_size: int = DEFAULT_HISTORY_SIZE


class SessionOutput:
    """Destination streams and error reporting for the active mode."""

    def __init__(
        self,
        interactive: bool,
        console: Console | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.interactive = interactive
        self.console = console or Console(file=stdout or sys.stdout)
        self.raw = RawRenderer(stdout, stderr)

    def info(self, message: str) -> None:
        if self.interactive:
            self.console.print(Text(message, style=style.MUTED))

    def error(self, error: Exception | str) -> None:
        message = str(error) or type(error).__name__
        if self.interactive:
            self.console.print(Text(f"Error: {message}", style=style.FAIL))
        else:
            self.raw.error(message)


def build_request(options: SessionOptions) -> SendMessageRequest:
    """Message request for an invoke session."""
    message = Message(
        role="user",
        parts=[TextPart(text=options.message)],
        task_id=options.task_id or None,
        reference_task_ids=[options.ref_task_id] if options.ref_task_id else None,
    )
    metadata = {"skillId": options.skill_id} if options.skill_id else None
    return SendMessageRequest(message=message, metadata=metadata)


async def open_transport(
    options: SessionOptions,
    factory: HTTPClientFactory,
) -> TransportClient:
    """Resolve the agent card, negotiate a binding and open its client.

    Raises:
        NegotiationError: If the forced transport cannot be used.
        TransportError: If the agent card cannot be fetched.
    """
    validate_transport(options.transport)
    card = await resolve_agent_card(options.service_url, factory)
    binding = negotiate(card.advertised_bindings(), options.transport, CLIENT_TRANSPORTS)
    logger.debug("Negotiated transport", binding=binding.value, agent=card.name)
    return create_transport(binding, card, options.service_url, factory)


def default_factory(options: SessionOptions) -> HTTPClientFactory:
    """HTTP client factory carrying the session's token."""
    return HTTPClientFactory(Settings(service_url=options.service_url, token=options.token))


async def _connect(
    options: SessionOptions,
    output: SessionOutput,
    connect: Connector | None,
    factory: HTTPClientFactory | None,
) -> TransportClient | None:
    try:
        validate_transport(options.transport)
        if connect is not None:
            client = await connect()
        else:
            client = await open_transport(options, factory or default_factory(options))
    except A2ACliError as e:
        output.error(e)
        return None
    output.info(f"Transport: {client.binding.value}")
    return client


# =============================================================================
# Stream consumption
# =============================================================================


async def consume_raw(
    source: AsyncIterator[Event],
    projector: TaskProjector,
    projection: TaskProjection,
    renderer: RawRenderer,
) -> int:
    """Emit every event as NDJSON; stop with exit 1 on the first error."""
    async with StreamAdapter(source) as stream:
        async for item in stream:
            if item.error is not None:
                projector.fail(projection, item.error)
                renderer.error(projection.error or "stream failed")
                return EXIT_ERROR
            assert item.event is not None
            renderer.event(item.event)
            projector.apply(projection, item.event)
    return EXIT_OK


async def consume_interactive(
    source: AsyncIterator[Event],
    projector: TaskProjector,
    projection: TaskProjection,
    renderer: InteractiveRenderer,
    keys: QuitKeyWatcher,
) -> int:
    """Drive the live view until the stream ends, fails, or the user quits."""
    with renderer.live(projection):
        async with StreamAdapter(source) as stream:
            quit_wait = asyncio.ensure_future(keys.wait())
            try:
                while True:
                    getter = asyncio.ensure_future(stream.get())
                    done, _ = await asyncio.wait(
                        {getter, quit_wait},
                        return_when=asyncio.FIRST_COMPLETED,
                    )
                    if quit_wait in done:
                        getter.cancel()
                        logger.debug("User quit; abandoning stream")
                        break
                    item = getter.result()
                    if item is None:
                        break
                    if item.error is not None:
                        projector.fail(projection, item.error)
                        renderer.update(projection)
                        break
                    assert item.event is not None
                    projector.apply(projection, item.event)
                    renderer.update(projection)
            finally:
                quit_wait.cancel()
        renderer.finish(projection)
    return EXIT_ERROR if projection.error is not None else EXIT_OK


async def drive_stream(
    source: AsyncIterator[Event],
    options: SessionOptions,
    output: SessionOutput,
    keys: QuitKeyWatcher | None = None,
) -> int:
    """Project and render one event stream in the configured mode."""
    sink = ArtifactSink(options.out_dir, options.file_name)
    projection = TaskProjection(history_size=options.history_size)
    projector = TaskProjector(
        sink=sink,
        preview_chars=INTERACTIVE_PREVIEW_CHARS,
        truncation_marker=INTERACTIVE_TRUNCATION_MARKER,
    )

    if not options.interactive:
        return await consume_raw(source, projector, projection, output.raw)

    renderer = InteractiveRenderer(output.console)
    with (keys or QuitKeyWatcher()) as watcher:
        return await consume_interactive(source, projector, projection, renderer, watcher)


# =============================================================================
# Entry points
# =============================================================================


async def run_session(
    options: SessionOptions,
    connect: Connector | None = None,
    *,
    factory: HTTPClientFactory | None = None,
    output: SessionOutput | None = None,
    keys: QuitKeyWatcher | None = None,
) -> int:
    """Send a message and follow its event stream.

    Args:
        options: Session inputs.
        connect: Opens the transport client; defaults to card resolution
            plus negotiation against ``options.service_url``.
        factory: HTTP client factory for the default connector.
        output: Output streams; defaults to the process stdout/stderr.
        keys: Quit-key watcher for interactive sessions.

    Returns:
        Process exit code.
    """
    output = output or SessionOutput(options.interactive)
    client = await _connect(options, output, connect, factory)
    if client is None:
        return EXIT_ERROR

    try:
        if options.task_id:
            output.info(f"Continuing Task: {options.task_id}")
        if options.ref_task_id:
            output.info(f"Referencing Task: {options.ref_task_id}")
        output.info("Invoking A2A Service (Streaming)...")
        source = client.send_streaming_message(build_request(options))
        return await drive_stream(source, options, output, keys)
    finally:
        await client.aclose()


async def run_resume(
    options: SessionOptions,
    connect: Connector | None = None,
    *,
    factory: HTTPClientFactory | None = None,
    output: SessionOutput | None = None,
    keys: QuitKeyWatcher | None = None,
) -> int:
    """Re-attach to a task by id.

    A terminal task is summarized and its artifacts saved; an active task's
    remaining events are streamed like an invoke session.
    """
    if not options.task_id:
        raise ValueError("run_resume requires options.task_id")

    output = output or SessionOutput(options.interactive)
    client = await _connect(options, output, connect, factory)
    if client is None:
        return EXIT_ERROR

    try:
        output.info(f"Resuming Task {options.task_id} ...")
        try:
            task = await client.get_task(options.task_id)
        except TransportError as e:
            output.error(e)
            output.info(IN_MEMORY_STORE_HINT)
            return EXIT_ERROR

        if is_terminal(task.status.state):
            return display_task_result(task, options, output)

        output.info("Task is active. Connecting to stream...")
        return await drive_stream(client.subscribe_to_task(options.task_id), options, output, keys)
    finally:
        await client.aclose()


def display_task_result(task: Task, options: SessionOptions, output: SessionOutput) -> int:
    """Show the result of a terminal task and save its artifacts."""
    sink = ArtifactSink(options.out_dir, options.file_name)
    if options.interactive:
        render_task_summary(task, output.console, sink)
        output.console.print(task_hint(task.id), highlight=False)
        return EXIT_OK

    output.raw.document(task.to_wire())
    if sink.enabled:
        for artifact in task.artifacts:
            try:
                sink.save(artifact)
            except ArtifactWriteError as e:
                logger.warning("Failed to save artifact", artifact=artifact.name, error=str(e))
    return EXIT_OK

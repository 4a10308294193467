"""Command handlers.

Each handler takes the parsed arguments, the resolved settings and the
output mode, and returns a process exit code.
"""

import argparse

from rich.console import Console
from rich.text import Text

from a2acli.a2a.agent_card import resolve_agent_card
from a2acli.core.config import Settings
from a2acli.core.exceptions import A2ACliError
from a2acli.core.http import HTTPClientFactory
from a2acli.render import style
from a2acli.render.summary import render_agent_card, render_task_status
from a2acli.session import (
    EXIT_ERROR,
    EXIT_OK,
    SessionOptions,
    SessionOutput,
    open_transport,
    run_resume,
    run_session,
)


SUPPLEMENT_HEADER = "Supplemental Instructions:"


def session_options(
    args: argparse.Namespace,
    settings: Settings,
    interactive: bool,
    message: str = "",
) -> SessionOptions:
    """SessionOptions from parsed arguments and settings."""
    return SessionOptions(
        service_url=settings.service_url,
        message=message,
        transport=settings.transport,
        out_dir=getattr(args, "out_dir", None),
        file_name=getattr(args, "file_name", None),
        task_id=getattr(args, "task_id", None),
        ref_task_id=getattr(args, "ref_task_id", None),
        skill_id=getattr(args, "skill", None),
        token=settings.auth_token,
        interactive=interactive,
        history_size=settings.history_size,
    )


def compose_message(args: argparse.Namespace) -> str:
    """Message text, with the instruction file appended when given.

    Raises:
        OSError: If the instruction file cannot be read.
    """
    text = " ".join(args.message)
    if args.instruction_file is not None:
        supplement = args.instruction_file.read_text(encoding="utf-8")
        text = f"{text}\n\n{SUPPLEMENT_HEADER}\n{supplement}"
    return text


async def describe(args: argparse.Namespace, settings: Settings, interactive: bool) -> int:
    output = SessionOutput(interactive)
    try:
        card = await resolve_agent_card(settings.service_url, HTTPClientFactory(settings))
    except A2ACliError as e:
        output.error(e)
        return EXIT_ERROR

    if interactive:
        render_agent_card(card, output.console)
    else:
        output.raw.document(card.to_wire())
    return EXIT_OK


async def invoke(args: argparse.Namespace, settings: Settings, interactive: bool) -> int:
    output = SessionOutput(interactive)
    try:
        message = compose_message(args)
    except OSError as e:
        output.error(f"reading instruction file: {e}")
        return EXIT_ERROR

    options = session_options(args, settings, interactive, message)
    return await run_session(options, factory=HTTPClientFactory(settings), output=output)


async def resume(args: argparse.Namespace, settings: Settings, interactive: bool) -> int:
    options = session_options(args, settings, interactive)
    return await run_resume(
        options,
        factory=HTTPClientFactory(settings),
        output=SessionOutput(interactive),
    )


async def status(args: argparse.Namespace, settings: Settings, interactive: bool) -> int:
    output = SessionOutput(interactive)
    options = session_options(args, settings, interactive)
    try:
        client = await open_transport(options, HTTPClientFactory(settings))
    except A2ACliError as e:
        output.error(e)
        return EXIT_ERROR

    try:
        task = await client.get_task(args.task_id)
    except A2ACliError as e:
        output.error(f"retrieving task: {e}")
        return EXIT_ERROR
    finally:
        await client.aclose()

    if interactive:
        render_task_status(task, output.console)
    else:
        output.raw.document(task.to_wire())
    return EXIT_OK


async def show_config(args: argparse.Namespace, settings: Settings, interactive: bool) -> int:
    console = Console(highlight=False, soft_wrap=True)
    used = str(settings.config_file) if settings.config_file else "<none>"
    token = "<set>" if settings.auth_token else "<none>"
    rows = [
        ("Config File Used: ", used),
        ("Active Environment: ", settings.env or ""),
        ("Service URL: ", settings.service_url),
        ("Auth Token: ", token),
        ("Transport: ", settings.transport or "<negotiated>"),
    ]
    for label, value in rows:
        console.print(Text.assemble((label, style.COMMAND), value))
    return EXIT_OK

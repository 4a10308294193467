"""a2acli command line.

Commands:
    describe            Describe the agent card
    invoke MESSAGE      Invoke a skill (streaming)
    resume TASK_ID      Resume listening to an existing task
    status TASK_ID      Get the status of a task
    config              Show the resolved configuration

Usage:
    a2acli invoke "Summarize the Q3 report" -u http://localhost:9001 -o out/
    a2acli --no-tui invoke "Generate a changelog" --file CHANGELOG.md
"""

import argparse
import asyncio
import os
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console

from a2acli import __version__
from a2acli.cli import commands
from a2acli.core.config import Settings, load_settings
from a2acli.core.exceptions import ConfigError
from a2acli.core.logging import configure_logging, get_logger


logger = get_logger(__name__)

EXIT_INTERRUPTED = 130


def _common_options() -> argparse.ArgumentParser:
    """Options accepted both before and after the command name."""
    common = argparse.ArgumentParser(add_help=False)
    group = common.add_argument_group("global options")
    # SUPPRESS keeps a subcommand from clobbering a value given before it
    group.add_argument(
        "-u", "--service-url", default=argparse.SUPPRESS,
        help="Base URL of the A2A service",
    )
    group.add_argument("-t", "--token", default=argparse.SUPPRESS, help="Auth token")
    group.add_argument(
        "-e", "--env", default=argparse.SUPPRESS,
        help="Config profile to use (envs.<name> in the config file)",
    )
    group.add_argument(
        "--config", type=Path, default=argparse.SUPPRESS,
        help="Path to the YAML config file",
    )
    group.add_argument(
        "--transport", default=argparse.SUPPRESS,
        help="Force a transport binding: grpc, json-rpc or http+json",
    )
    group.add_argument(
        "--no-tui", action="store_true", default=argparse.SUPPRESS,
        help="Disable the terminal UI (useful for scripting and CI)",
    )
    group.add_argument(
        "--log-level", default=argparse.SUPPRESS,
        help="Log level for diagnostics on stderr (default: WARNING)",
    )
    return common


def _artifact_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-o", "--out-dir", type=Path, default=None,
        help="Directory to save artifacts to",
    )
    parser.add_argument(
        "--file", dest="file_name", default=None,
        help="File name to save artifacts as (repeats get _1, _2, ...)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all commands."""
    common = _common_options()
    parser = argparse.ArgumentParser(
        prog="a2acli",
        description="A2A CLI Client",
        parents=[common],
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    describe = sub.add_parser("describe", parents=[common], help="Describe the agent card")
    describe.set_defaults(handler=commands.describe)

    invoke = sub.add_parser("invoke", parents=[common], help="Invoke a skill (streaming)")
    invoke.add_argument("message", nargs="+", help="Message to send")
    invoke.add_argument("-s", "--skill", default=None, help="Skill ID")
    invoke.add_argument(
        "-k", "--task", dest="task_id", default=None,
        help="Existing Task ID to continue (must be non-terminal)",
    )
    invoke.add_argument(
        "-r", "--ref", dest="ref_task_id", default=None,
        help="Task ID to reference as context (works for completed tasks)",
    )
    invoke.add_argument(
        "-i", "--instruction-file", type=Path, default=None,
        help="Path to a file with supplemental instructions",
    )
    _artifact_options(invoke)
    invoke.set_defaults(handler=commands.invoke)

    resume = sub.add_parser("resume", parents=[common], help="Resume listening to an existing task")
    resume.add_argument("task_id", help="Task ID")
    _artifact_options(resume)
    resume.set_defaults(handler=commands.resume)

    status = sub.add_parser("status", parents=[common], help="Get the status of a task")
    status.add_argument("task_id", help="Task ID")
    status.set_defaults(handler=commands.status)

    config = sub.add_parser("config", parents=[common], help="Show the resolved configuration")
    config.set_defaults(handler=commands.show_config)

    return parser


def resolve_settings(args: argparse.Namespace) -> Settings:
    """Settings with explicit flags applied over environment and profile."""
    overrides = {
        "service_url": getattr(args, "service_url", None),
        "token": getattr(args, "token", None),
        "transport": getattr(args, "transport", None),
        "log_level": getattr(args, "log_level", None),
        "no_tui": True if getattr(args, "no_tui", False) else None,
    }
    return load_settings(
        config_file=getattr(args, "config", None),
        env_name=getattr(args, "env", None),
        overrides=overrides,
    )


def is_interactive(settings: Settings) -> bool:
    """Whether to use the live view rather than NDJSON output."""
    return not (settings.no_tui or os.environ.get("NO_COLOR"))


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = resolve_settings(args)
    except ConfigError as e:
        Console(stderr=True).print(f"Error: {e}", style="bold red", highlight=False)
        return 1

    configure_logging(settings)
    interactive = is_interactive(settings)
    logger.debug("Starting", command=args.command, interactive=interactive)

    try:
        return asyncio.run(args.handler(args, settings, interactive))
    except KeyboardInterrupt:
        # ctrl+c is the quit key of the interactive view
        return 0 if interactive else EXIT_INTERRUPTED


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()

"""Quit-key detection for the interactive view.

Puts the terminal in cbreak mode so single key presses are delivered
without Enter, and watches stdin from the event loop. The original
terminal attributes are always restored on exit. Outside a POSIX TTY the
watcher is inert and only ctrl+c (KeyboardInterrupt) quits.
"""

import asyncio
import os
import sys
from types import TracebackType
from typing import TextIO

try:
    import termios
    import tty
except ImportError:  # Windows
    termios = None  # type: ignore[assignment]
    tty = None  # type: ignore[assignment]

from a2acli.core.logging import get_logger


logger = get_logger(__name__)

QUIT_KEYS = frozenset({"q", "Q", "\x03"})


class QuitKeyWatcher:
    """Context manager that sets ``pressed`` when a quit key is typed."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdin
        self._fd: int | None = None
        self._saved: list | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self.pressed = asyncio.Event()

    @property
    def active(self) -> bool:
        return self._fd is not None

    def __enter__(self) -> "QuitKeyWatcher":
        if termios is None or not self._stream.isatty():
            return self
        fd = self._stream.fileno()
        loop = asyncio.get_running_loop()
        self._saved = termios.tcgetattr(fd)
        tty.setcbreak(fd)
        try:
            loop.add_reader(fd, self._on_input)
        except NotImplementedError:
            termios.tcsetattr(fd, termios.TCSADRAIN, self._saved)
            self._saved = None
            return self
        self._fd = fd
        self._loop = loop
        return self

    def _on_input(self) -> None:
        assert self._fd is not None
        try:
            data = os.read(self._fd, 64).decode(errors="ignore")
        except OSError:
            return
        if any(ch in QUIT_KEYS for ch in data):
            logger.debug("Quit key pressed")
            self.pressed.set()

    async def wait(self) -> None:
        await self.pressed.wait()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._fd is None:
            return
        if self._loop is not None:
            self._loop.remove_reader(self._fd)
        if self._saved is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved)
        self._fd = None

"""Raw (NDJSON) renderer for scripts and agents.

stdout carries exactly one JSON object per event; a stream error is
reported as a single ``{"error": ...}`` object on stderr.
"""

import json
import sys
from typing import TextIO

from a2acli.a2a.events import Event, event_to_json


class RawRenderer:
    """Line-oriented machine-readable output."""

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None) -> None:
        self._out = out or sys.stdout
        self._err = err or sys.stderr

    def event(self, event: Event) -> None:
        """Emit one event as a JSON line."""
        self._out.write(event_to_json(event) + "\n")
        self._out.flush()

    def document(self, payload: object) -> None:
        """Emit an indented JSON document (describe/status output)."""
        self._out.write(json.dumps(payload, indent=2, ensure_ascii=False) + "\n")
        self._out.flush()

    def error(self, message: str) -> None:
        """Emit one structured error line on stderr."""
        self._err.write(json.dumps({"error": message}, ensure_ascii=False) + "\n")
        self._err.flush()

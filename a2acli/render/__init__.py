"""Renderers: interactive live view, raw NDJSON, and one-shot summaries."""

from a2acli.render.interactive import InteractiveRenderer
from a2acli.render.raw import RawRenderer

__all__ = ["InteractiveRenderer", "RawRenderer"]

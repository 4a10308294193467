"""Streaming event projection: adapter, projector and artifact materializer."""

from a2acli.stream.adapter import StreamAdapter, StreamItem
from a2acli.stream.materializer import ArtifactSink, ArtifactWriteRecord, write_artifact
from a2acli.stream.projector import LogLine, TaskProjection, TaskProjector

__all__ = [
    "ArtifactSink",
    "ArtifactWriteRecord",
    "LogLine",
    "StreamAdapter",
    "StreamItem",
    "TaskProjection",
    "TaskProjector",
    "write_artifact",
]

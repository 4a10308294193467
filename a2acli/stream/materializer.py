"""Artifact materialization.

Writes artifact content to disk, one whole-file replacement per artifact
occurrence.

Naming:
- An explicit file name wins; repeated writes of the same name within a
  session get ``_<n>`` inserted before the extension (``out.json``,
  ``out_1.json``, ...).
- Otherwise the artifact's own name (base name only) is used, with the same
  suffix rule.
- Otherwise a name is synthesized: ``artifact_<unix time>_<n>.<ext>``.

Content:
- data part: indented JSON
- text part: verbatim
- file part: decoded bytes, or the URI when no inline bytes are given

When an artifact carries several parts, the last part wins.
"""

import base64
import binascii
import json
import os
import tempfile
import time
from collections import Counter
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path, PurePath

from a2acli.a2a.models import Artifact, DataPart, FilePart, TextPart
from a2acli.core.exceptions import ArtifactWriteError
from a2acli.core.logging import get_logger


logger = get_logger(__name__)

FILE_MODE = 0o644


@dataclass(frozen=True)
class ArtifactWriteRecord:
    """Outcome of a successful artifact write."""

    name: str
    path: Path
    bytes_written: int


def render_data(data: object) -> str:
    """Indented JSON text for a structured-data payload."""
    return json.dumps(data, indent=2, ensure_ascii=False)


def artifact_content(artifact: Artifact) -> tuple[bytes, str]:
    """Bytes to write for an artifact and the extension they suggest.

    Args:
        artifact: Artifact to serialize.

    Returns:
        Tuple of (content, extension including the dot).

    Raises:
        ArtifactWriteError: If a file part carries invalid base64.
    """
    content = b""
    extension = ".txt"
    # NOTE: last part wins; multi-part artifacts are not merged
    for part in artifact.parts:
        if isinstance(part, DataPart):
            content = render_data(part.data).encode("utf-8")
            extension = ".json"
        elif isinstance(part, TextPart):
            content = part.text.encode("utf-8")
            extension = ".txt"
        elif isinstance(part, FilePart):
            content, extension = _file_content(part)
    return content, extension


def _file_content(part: FilePart) -> tuple[bytes, str]:
    extension = PurePath(part.file.name or "").suffix or ".bin"
    if part.file.bytes is not None:
        try:
            return base64.b64decode(part.file.bytes, validate=True), extension
        except binascii.Error as e:
            raise ArtifactWriteError(f"invalid base64 in file part: {e}") from e
    return (part.file.uri or "").encode("utf-8"), ".txt"


def base_name(artifact: Artifact, file_name: str | None = None) -> str:
    """Name an artifact is saved under before collision suffixes.

    Artifact names come from the remote agent, so only their final path
    component is used. An empty result means a name will be synthesized.
    """
    if file_name:
        return file_name
    if artifact.name:
        name = PurePath(artifact.name.replace("\\", "/")).name
        if name not in ("", ".", ".."):
            return name
    return ""


def artifact_path(
    artifact: Artifact,
    index: int,
    directory: Path | str | None = None,
    file_name: str | None = None,
    now: float | None = None,
) -> Path:
    """Target path for the ``index``-th occurrence of an artifact's base name.

    Args:
        artifact: Artifact being saved.
        index: Occurrence index of the base name within the session (0-based).
        directory: Output directory, if any.
        file_name: Explicit file name override, if any.
        now: Timestamp for synthesized names; defaults to the current time.

    Returns:
        Path the artifact should be written to.
    """
    name = base_name(artifact, file_name)
    if name:
        path = Path(name)
        if index > 0:
            path = path.with_name(f"{path.stem}_{index}{path.suffix}")
    else:
        _, extension = artifact_content(artifact)
        stamp = int(time.time() if now is None else now)
        path = Path(f"artifact_{stamp}_{index}{extension}")
    if directory:
        return Path(directory) / path
    return path


def write_artifact(
    artifact: Artifact,
    index: int = 0,
    directory: Path | str | None = None,
    file_name: str | None = None,
) -> ArtifactWriteRecord:
    """Write one artifact occurrence to disk.

    Content goes to a temporary file next to the target which is then
    renamed over it, so the target is either fully written or untouched.

    Args:
        artifact: Artifact to write.
        index: Occurrence index of the artifact's base name in this session.
        directory: Output directory; created if missing.
        file_name: Explicit file name override.

    Returns:
        Record of the written file.

    Raises:
        ArtifactWriteError: If the content is invalid or the write fails.
    """
    path = artifact_path(artifact, index, directory, file_name)
    return _write(artifact, path)


def _write(artifact: Artifact, path: Path) -> ArtifactWriteRecord:
    content, _ = artifact_content(artifact)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
            os.chmod(tmp_name, FILE_MODE)
            os.replace(tmp_name, path)
        except BaseException:
            with suppress(OSError):
                os.unlink(tmp_name)
            raise
    except OSError as e:
        raise ArtifactWriteError(f"cannot write {path}: {e}", path=path, cause=e) from e

    logger.debug("Artifact written", path=str(path), bytes=len(content))
    return ArtifactWriteRecord(
        name=artifact.name or path.name,
        path=path,
        bytes_written=len(content),
    )


class ArtifactSink:
    """Session-scoped artifact writer.

    Tracks how often each base name has been used so that every occurrence
    lands on its own path.

    Example:
        >>> sink = ArtifactSink(directory="out", file_name="out.json")
        >>> sink.save(first).path, sink.save(second).path
        (PosixPath('out/out.json'), PosixPath('out/out_1.json'))
    """

    def __init__(
        self,
        directory: Path | str | None = None,
        file_name: str | None = None,
    ) -> None:
        """Initialize the sink.

        Args:
            directory: Output directory, if any.
            file_name: Explicit file name override, if any.
        """
        self.directory = Path(directory) if directory else None
        self.file_name = file_name or None
        self._counts: Counter[str] = Counter()
        self._used: set[Path] = set()
        self.records: list[ArtifactWriteRecord] = []

    @property
    def enabled(self) -> bool:
        """Whether a destination was configured."""
        return self.directory is not None or self.file_name is not None

    def next_path(self, artifact: Artifact) -> Path:
        """Reserve the path for the next occurrence of this artifact's base name."""
        key = base_name(artifact, self.file_name)
        while True:
            index = self._counts[key]
            self._counts[key] += 1
            path = artifact_path(artifact, index, self.directory, self.file_name)
            if path not in self._used:
                self._used.add(path)
                return path

    def save(self, artifact: Artifact) -> ArtifactWriteRecord:
        """Write an artifact occurrence.

        Raises:
            ArtifactWriteError: If the write fails.
        """
        record = _write(artifact, self.next_path(artifact))
        self.records.append(record)
        return record

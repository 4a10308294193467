"""Server-Sent Events frame reader.

Yields the ``data`` payload of each event in an ``text/event-stream``
response. Multi-line data fields are joined with newlines; comment lines
and other fields (``event``, ``id``, ``retry``) are skipped.
"""

from collections.abc import AsyncIterator

import httpx


EVENT_STREAM_MEDIA_TYPE = "text/event-stream"


def is_event_stream(response: httpx.Response) -> bool:
    """Whether the response is an SSE stream."""
    return EVENT_STREAM_MEDIA_TYPE in response.headers.get("content-type", "")


async def iter_sse_data(response: httpx.Response) -> AsyncIterator[str]:
    """Yield the data payload of each SSE event in order."""
    data_lines: list[str] = []
    async for line in response.aiter_lines():
        if not line:
            if data_lines:
                yield "\n".join(data_lines)
                data_lines = []
            continue
        if line.startswith(":"):
            continue
        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "data":
            data_lines.append(value)
    # Stream ended without a trailing blank line
    if data_lines:
        yield "\n".join(data_lines)

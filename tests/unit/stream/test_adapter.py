"""Unit tests for the stream adapter.

Test Coverage:
- Events delivered in source order
- Exactly one termination (close or a single error record)
- aclose() abandons a source that never ends and finalizes it
"""

import asyncio

import pytest

from a2acli.core.exceptions import TransportError
from a2acli.stream.adapter import StreamAdapter, StreamItem
from tests.fakes.fake_transport import agent_message, status_event


async def _source(items):
    for item in items:
        await asyncio.sleep(0)
        if isinstance(item, Exception):
            raise item
        yield item


class TestStreamAdapter:
    """Tests for StreamAdapter."""

    @pytest.mark.asyncio
    async def test_events_in_order_then_close(self) -> None:
        events = [status_event("submitted"), agent_message("hi"), status_event("completed")]

        async with StreamAdapter(_source(events)) as stream:
            items = [item async for item in stream]

        assert [item.event for item in items] == events
        assert all(item.error is None for item in items)
        assert stream.finished

    @pytest.mark.asyncio
    async def test_error_is_delivered_once_and_terminates(self) -> None:
        error = TransportError("connection reset")
        events = [status_event("submitted"), error, status_event("working")]

        async with StreamAdapter(_source(events)) as stream:
            first = await stream.get()
            second = await stream.get()
            third = await stream.get()

        assert first == StreamItem(event=events[0])
        assert second is not None and second.error is error
        assert third is None

    @pytest.mark.asyncio
    async def test_get_after_close_returns_none(self) -> None:
        async with StreamAdapter(_source([])) as stream:
            assert await stream.get() is None
            assert await stream.get() is None

    @pytest.mark.asyncio
    async def test_get_starts_pump_lazily(self) -> None:
        stream = StreamAdapter(_source([status_event("working")]))

        item = await stream.get()
        await stream.aclose()

        assert item is not None and item.event is not None

    @pytest.mark.asyncio
    async def test_aclose_abandons_endless_source(self) -> None:
        release = asyncio.Event()

        async def endless():
            yield status_event("working")
            await release.wait()
            yield status_event("completed")

        stream = StreamAdapter(endless())
        stream.start()
        item = await stream.get()

        await asyncio.wait_for(stream.aclose(), timeout=2)

        assert item is not None
        assert stream.finished
        assert await stream.get() is None

    @pytest.mark.asyncio
    async def test_aclose_finalizes_source_blocked_on_handoff(self) -> None:
        finalized = asyncio.Event()

        async def chatty():
            try:
                for i in range(10):
                    yield status_event("working", text=str(i))
            finally:
                finalized.set()

        stream = StreamAdapter(chatty())
        stream.start()
        await asyncio.sleep(0.01)

        await stream.aclose()

        assert finalized.is_set()

    @pytest.mark.asyncio
    async def test_single_slot_backpressure(self) -> None:
        produced: list[int] = []

        async def counting():
            for i in range(5):
                produced.append(i)
                yield status_event("working", text=str(i))

        async with StreamAdapter(counting()) as stream:
            await asyncio.sleep(0.01)
            # one item queued, one held by the blocked put
            assert len(produced) <= 2
            items = [item async for item in stream]

        assert len(items) == 5

"""Tests for the in-memory StreamSink pipe."""

from __future__ import annotations

import asyncio

import pytest

from ssekit.core.errors import SinkWriteError
from ssekit.core.sink import StreamSink


class TestStreamSinkIO:
    @pytest.mark.asyncio
    async def test_write_then_read_in_order(self):
        sink = StreamSink()
        await sink.write(b"one")
        await sink.write(b"two")
        assert await sink.read() == b"one"
        assert await sink.read() == b"two"

    @pytest.mark.asyncio
    async def test_iteration_drains_then_stops_on_close(self):
        sink = StreamSink()
        await sink.write(b"a")
        await sink.write(b"b")
        sink.close()

        chunks = [chunk async for chunk in sink]
        assert chunks == [b"a", b"b"]

    @pytest.mark.asyncio
    async def test_close_wakes_blocked_reader(self):
        sink = StreamSink()
        reader = asyncio.create_task(sink.read())
        await asyncio.sleep(0)
        sink.close()
        assert await asyncio.wait_for(reader, timeout=1.0) is None

    @pytest.mark.asyncio
    async def test_write_after_close_raises(self):
        sink = StreamSink()
        sink.close()
        with pytest.raises(SinkWriteError):
            await sink.write(b"late")


class TestStreamSinkBackpressure:
    @pytest.mark.asyncio
    async def test_write_blocks_when_full(self):
        sink = StreamSink(max_pending=1)
        await sink.write(b"first")

        writer = asyncio.create_task(sink.write(b"second"))
        await asyncio.sleep(0.05)
        assert not writer.done()

        assert await sink.read() == b"first"
        await asyncio.wait_for(writer, timeout=1.0)
        assert await sink.read() == b"second"

    @pytest.mark.asyncio
    async def test_close_releases_blocked_writer(self):
        sink = StreamSink(max_pending=1)
        await sink.write(b"first")

        writer = asyncio.create_task(sink.write(b"second"))
        await asyncio.sleep(0.05)
        sink.close()

        with pytest.raises(SinkWriteError):
            await asyncio.wait_for(writer, timeout=1.0)

    @pytest.mark.asyncio
    async def test_reader_stops_when_closed_while_full(self):
        sink = StreamSink(max_pending=2)
        await sink.write(b"a")
        await sink.write(b"b")
        sink.close()

        chunks = [chunk async for chunk in sink]
        assert chunks == [b"a", b"b"]


class TestStreamSinkClose:
    def test_listeners_fire_once(self):
        sink = StreamSink()
        calls = []
        sink.on_close(lambda: calls.append("a"))
        sink.on_close(lambda: calls.append("b"))

        sink.close()
        sink.close()

        assert calls == ["a", "b"]
        assert sink.closed

    def test_listener_added_after_close_fires_immediately(self):
        sink = StreamSink()
        sink.close()
        calls = []
        sink.on_close(lambda: calls.append("late"))
        assert calls == ["late"]

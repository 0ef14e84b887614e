"""Outbound byte sinks for SSE sessions."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator, Callable
from typing import Protocol

from .errors import SinkWriteError


class Sink(Protocol):
    """Writable byte stream a session frames events into.

    A session never owns its sink: it writes to it and reacts to its
    close signal.
    """

    @property
    def closed(self) -> bool: ...

    async def write(self, data: bytes) -> None: ...

    def on_close(self, callback: Callable[[], None]) -> None: ...

    def close(self) -> None: ...


class StreamSink:
    """In-memory pipe between a session and the HTTP response body.

    The HTTP layer iterates the sink (``async for chunk in sink``) while the
    session writes into it. Writes block once ``max_pending`` chunks are
    waiting, so a slow client pushes back on its producers.
    """

    def __init__(self, max_pending: int = 100) -> None:
        self._queue: asyncio.Queue[bytes | None] = asyncio.Queue(maxsize=max_pending)
        self._closed = False
        self._closed_event = asyncio.Event()
        self._listeners: list[Callable[[], None]] = []

    @property
    def closed(self) -> bool:
        return self._closed

    async def write(self, data: bytes) -> None:
        if self._closed:
            raise SinkWriteError("Sink is closed")
        try:
            self._queue.put_nowait(data)
            return
        except asyncio.QueueFull:
            pass

        # Queue is full: wait for room, but give up if the sink closes first
        put = asyncio.ensure_future(self._queue.put(data))
        closing = asyncio.ensure_future(self._closed_event.wait())
        try:
            await asyncio.wait({put, closing}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            closing.cancel()
            if not put.done():
                put.cancel()
        if not put.done() or put.cancelled():
            raise SinkWriteError("Sink closed while waiting for the reader")

    async def read(self) -> bytes | None:
        """Return the next chunk, or None once the sink is closed and drained."""
        if self._closed and self._queue.empty():
            return None
        return await self._queue.get()

    def on_close(self, callback: Callable[[], None]) -> None:
        """Register a close listener. Fires immediately if already closed."""
        if self._closed:
            callback()
            return
        self._listeners.append(callback)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._closed_event.set()
        # Wake a reader blocked on an empty queue
        with contextlib.suppress(asyncio.QueueFull):
            self._queue.put_nowait(None)

        listeners, self._listeners = self._listeners, []
        for callback in listeners:
            callback()

    async def __aiter__(self) -> AsyncIterator[bytes]:
        while True:
            chunk = await self.read()
            if chunk is None:
                return
            yield chunk

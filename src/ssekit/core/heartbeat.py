"""HeartbeatController - keep-alive comments and the retry directive.

Intermediaries (proxies, load balancers) drop connections that stay silent
too long. The controller writes an SSE comment line on a fixed interval;
clients ignore comments, so heartbeats never consume a message id.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from .errors import SinkWriteError
from .frames import HEARTBEAT, encode_retry

logger = logging.getLogger(__name__)


class HeartbeatController:
    """Timer-driven writer for one session.

    Args:
        write: Serialized write path of the owning session.
        heartbeat_interval_ms: Delay between heartbeat comments.
        retry_interval_ms: Reconnect backoff announced to the client.
        on_error: Receives write failures from the timer loop, which has no
            caller to raise them to.
    """

    def __init__(
        self,
        write: Callable[[bytes], Awaitable[None]],
        heartbeat_interval_ms: int,
        retry_interval_ms: int,
        on_error: Callable[[Exception], None] | None = None,
    ):
        self._write = write
        self.heartbeat_interval_ms = heartbeat_interval_ms
        self.retry_interval_ms = retry_interval_ms
        self._on_error = on_error
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def announce_retry(self) -> None:
        """Write the ``retry:`` directive. Called once, before any event."""
        await self._write(encode_retry(self.retry_interval_ms))

    def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._loop(), name="sse-heartbeat")

    def stop(self) -> None:
        """Cancel the timer. No heartbeat is written after this returns."""
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def _loop(self) -> None:
        interval = self.heartbeat_interval_ms / 1000
        while True:
            await asyncio.sleep(interval)
            try:
                await self._write(HEARTBEAT)
            except SinkWriteError as e:
                logger.warning("Heartbeat write failed: %s", e.message)
                if self._on_error:
                    self._on_error(e)

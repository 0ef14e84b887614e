"""SSESession - one client connection's server-side event stream.

A session owns the write path into one sink:
  1. Negotiates response headers through the caller's callback.
  2. Writes the retry directive and the connect event.
  3. Runs a heartbeat timer next to application writes.
  4. Registers itself so other handlers can push to it by id.

Closing the sink is the only teardown signal. Teardown cancels the heartbeat,
stops stream pumps and unregisters the session, exactly once.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import uuid
from collections.abc import AsyncIterable, Callable, Iterable
from enum import StrEnum
from typing import Any

from .config import SessionConfig
from .errors import (
    ConfigurationError,
    SessionClosedError,
    SessionNotReadyError,
    SinkWriteError,
    SSEError,
)
from .frames import FrameEncoder, serialize_payload
from .heartbeat import HeartbeatController
from .registry import SessionRegistry, session_registry
from .sink import Sink

logger = logging.getLogger(__name__)

RESPONSE_HEADERS: dict[str, str] = {
    "Content-Type": "text/event-stream",
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
}

HeaderSetter = Callable[[dict[str, str]], Any]
ErrorHandler = Callable[["SSESession", Exception], None]


class SessionState(StrEnum):
    CREATED = "created"
    OPEN = "open"
    CLOSED = "closed"


def _default_gen_id() -> str:
    return str(uuid.uuid4())


def _default_process_chunk(chunk: bytes | str) -> str:
    if isinstance(chunk, (bytes, bytearray)):
        return bytes(chunk).decode("utf-8")
    return str(chunk)


class SSESession:
    """Server-Sent Events session bound to one sink.

    Most callers use ``await SSESession.create(...)``, which constructs the
    session and runs setup. Constructing directly requires awaiting
    ``setup()`` before the session is usable.

    Failures in background work (heartbeat timer, stream pumps) have no caller
    to raise to. They are passed to ``on_error`` when given and the most
    recent one is kept on ``last_error``.
    """

    def __init__(
        self,
        sink: Sink,
        set_headers: HeaderSetter | None,
        config: SessionConfig | None = None,
        *,
        gen_id: Callable[[], str] | None = None,
        process_chunk: Callable[[Any], str] | None = None,
        on_error: ErrorHandler | None = None,
        registry: SessionRegistry | None = None,
    ):
        if set_headers is None or not callable(set_headers):
            raise ConfigurationError("set_headers must be a callable")
        if gen_id is not None and not callable(gen_id):
            raise ConfigurationError("gen_id must be a callable")
        if process_chunk is not None and not callable(process_chunk):
            raise ConfigurationError("process_chunk must be a callable")

        self.config = config or SessionConfig()
        self.config.validate()

        self.id = (gen_id or _default_gen_id)()
        self.sink = sink
        self.state = SessionState.CREATED

        self._set_headers = set_headers
        self._process_chunk = process_chunk or _default_process_chunk
        self._on_error = on_error
        self._registry = registry if registry is not None else session_registry

        self._encoder = FrameEncoder(
            with_message_id=self.config.with_message_id,
            initial_message_id=self.config.initial_message_id,
        )
        self._write_lock = asyncio.Lock()
        self._heartbeat = HeartbeatController(
            self._write,
            heartbeat_interval_ms=self.config.heartbeat_interval_ms,
            retry_interval_ms=self.config.retry_interval_ms,
            on_error=self._report_error,
        )
        self._pumps: set[asyncio.Task[None]] = set()
        self.last_error: Exception | None = None

    @classmethod
    async def create(
        cls,
        sink: Sink,
        set_headers: HeaderSetter | None,
        config: SessionConfig | None = None,
        **kwargs: Any,
    ) -> SSESession:
        """Construct a session and run its setup."""
        session = cls(sink, set_headers, config, **kwargs)
        await session.setup()
        return session

    @staticmethod
    def get_instance(
        session_id: str, registry: SessionRegistry | None = None
    ) -> SSESession | None:
        """Look up an open session by id. Returns None when unknown."""
        return (registry if registry is not None else session_registry).get(session_id)

    # --- Properties ---

    @property
    def closed(self) -> bool:
        return self.state == SessionState.CLOSED

    @property
    def next_message_id(self) -> int | None:
        """Id the next event will carry, or None when id-tagging is off."""
        return self._encoder.next_id if self.config.with_message_id else None

    @property
    def heartbeat_running(self) -> bool:
        return self._heartbeat.running

    # --- Lifecycle ---

    async def setup(self) -> None:
        """Send headers and the opening frames, then go live.

        Runs once. The retry directive and connect event are written before
        the heartbeat starts, so they are always the first bytes on the wire.
        """
        if self.state != SessionState.CREATED:
            return

        result = self._set_headers(dict(RESPONSE_HEADERS))
        if inspect.isawaitable(result):
            await result

        await self._heartbeat.announce_retry()
        await self._send(self.config.connect_event_name, self.id)

        self._heartbeat.start()
        self.state = SessionState.OPEN
        self._registry.set(self.id, self)
        self.sink.on_close(self._teardown)
        logger.info("SSE session %s opened", self.id)

    def close(self) -> None:
        """Close the sink. Teardown follows from the close signal."""
        self.sink.close()
        self._teardown()

    def _teardown(self) -> None:
        if self.state == SessionState.CLOSED:
            return
        self.state = SessionState.CLOSED

        self._heartbeat.stop()
        self._registry.delete(self.id, self)
        for pump in list(self._pumps):
            pump.cancel()
        self._pumps.clear()
        logger.info("SSE session %s closed", self.id)

    # --- Sending ---

    async def send(self, event: str, data: Any) -> int | None:
        """Frame one event and write it to the sink.

        Args:
            event: Event name.
            data: String payload, or any JSON-serializable value.

        Returns:
            The message id the frame carried, or None when id-tagging is off.

        Raises:
            SessionClosedError: If the session was torn down.
            SessionNotReadyError: If setup has not finished.
            SerializationError: If the payload cannot be encoded.
            SinkWriteError: If the sink rejects the write.
        """
        self._ensure_open()
        return await self._send(event, data)

    def send_from_stream(
        self,
        source: AsyncIterable[Any] | Iterable[Any],
        event_name: str | None = None,
    ) -> asyncio.Task[None]:
        """Frame every chunk of ``source`` as its own event.

        Each chunk goes through ``process_chunk`` and becomes exactly one
        frame named ``event_name`` (default: ``transform_event_name``). The
        sink stays open when the source is exhausted.

        Returns:
            The pump task. It is cancelled when the session closes.
        """
        self._ensure_open()
        name = event_name or self.config.transform_event_name
        pump = asyncio.create_task(self._pump(source, name), name=f"sse-pump-{self.id}")
        self._pumps.add(pump)
        pump.add_done_callback(self._pumps.discard)
        return pump

    async def _pump(self, source: AsyncIterable[Any] | Iterable[Any], event_name: str) -> None:
        try:
            if isinstance(source, AsyncIterable):
                async for chunk in source:
                    await self._send_chunk(event_name, chunk)
            else:
                for chunk in source:
                    await self._send_chunk(event_name, chunk)
        except SessionClosedError:
            return
        except SSEError as e:
            logger.warning("Stream pump for session %s stopped: %s", self.id, e.message)
            self._report_error(e)
        except Exception as e:
            logger.exception("Stream source for session %s failed", self.id)
            self._report_error(e)

    async def _send_chunk(self, event_name: str, chunk: Any) -> None:
        self._ensure_open()
        await self._send(event_name, self._process_chunk(chunk))

    async def _send(self, event: str, data: Any) -> int | None:
        payload = serialize_payload(data)
        async with self._write_lock:
            # Teardown may have happened while waiting for the lock
            if self.closed:
                raise SessionClosedError("Session is closed", session_id=self.id)
            message_id = self.next_message_id
            frame = self._encoder.encode(event, payload)
            await self._write_unlocked(frame)
            self._encoder.advance()
            return message_id

    async def _write(self, data: bytes) -> None:
        async with self._write_lock:
            await self._write_unlocked(data)

    async def _write_unlocked(self, data: bytes) -> None:
        try:
            await self.sink.write(data)
        except SinkWriteError as e:
            e.session_id = e.session_id or self.id
            raise
        except OSError as e:
            raise SinkWriteError(f"Sink write failed: {e}", session_id=self.id) from e

    def _ensure_open(self) -> None:
        if self.closed:
            raise SessionClosedError("Session is closed", session_id=self.id)
        if self.state != SessionState.OPEN:
            raise SessionNotReadyError("Session setup has not finished", session_id=self.id)

    def _report_error(self, error: Exception) -> None:
        self.last_error = error
        if self._on_error:
            self._on_error(self, error)

    def __repr__(self) -> str:
        return f"SSESession(id={self.id!r}, state={self.state.value})"

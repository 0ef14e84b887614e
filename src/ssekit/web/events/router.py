"""SSE streaming and push endpoints."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from dataclasses import replace

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import StreamingResponse

from ...core.session import SSESession
from ...core.sink import StreamSink
from ..deps import Registry, Sessions, Web
from .models import PushEvent, PushResponse, SessionList

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/events", tags=["events"])


def resume_seed(last_event_id: str | None) -> int:
    """Counter seed for a reconnecting client.

    A client that last saw id N resumes at N + 1. Missing or non-numeric
    values start a fresh count.
    """
    if not last_event_id:
        return 0
    try:
        value = int(last_event_id.strip())
    except ValueError:
        return 0
    return value + 1 if value >= 0 else 0


async def ticks(interval: float) -> AsyncIterator[str]:
    """Demo source: "1", "2", ... every ``interval`` seconds."""
    count = 0
    while True:
        await asyncio.sleep(interval)
        count += 1
        yield str(count)


async def _stream(sink: StreamSink) -> AsyncIterator[bytes]:
    try:
        async for chunk in sink:
            yield chunk
    finally:
        # Client disconnect lands here (cancellation or generator close)
        sink.close()


class SessionStreamResponse(StreamingResponse):
    """Streams a session sink and closes it however the response ends.

    The body generator only cleans up once it has started, and a client can
    disconnect before the first chunk is pulled.
    """

    def __init__(self, sink: StreamSink, headers: dict[str, str]):
        super().__init__(_stream(sink), headers=headers)
        self.sink = sink

    async def __call__(self, scope, receive, send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            self.sink.close()


@router.get("/connect")
async def connect(
    request: Request,
    registry: Registry,
    session_config: Sessions,
    web_config: Web,
    last_event_id_param: str | None = Query(
        None,
        alias="lastEventId",
        description="Last-Event-ID fallback for clients that can't send headers",
    ),
):
    """Open an SSE stream.

    The first event (``sse-connect`` by default) carries the session id, which
    other requests use to push events to this stream.
    """
    last_event_id = request.headers.get("Last-Event-ID") or last_event_id_param
    config = replace(session_config, initial_message_id=resume_seed(last_event_id))

    headers: dict[str, str] = {}
    sink = StreamSink(max_pending=web_config.max_pending_chunks)
    session = await SSESession.create(sink, headers.update, config, registry=registry)

    if web_config.tick_interval > 0:
        session.send_from_stream(ticks(web_config.tick_interval), event_name="sse-test")

    headers["X-Accel-Buffering"] = "no"  # Disable nginx buffering
    return SessionStreamResponse(sink, headers)


@router.get("/sessions", response_model=SessionList)
async def list_sessions(registry: Registry):
    session_ids = registry.ids()
    return SessionList(count=len(session_ids), session_ids=session_ids)


@router.post("/{session_id}", response_model=PushResponse)
async def push_event(session_id: str, body: PushEvent, registry: Registry):
    """Send one event to an open session."""
    session = SSESession.get_instance(session_id, registry=registry)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")

    message_id = await session.send(body.event, body.data)
    return PushResponse(session_id=session_id, message_id=message_id)


@router.delete("/{session_id}", status_code=204)
async def close_session(session_id: str, registry: Registry):
    session = SSESession.get_instance(session_id, registry=registry)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    session.close()

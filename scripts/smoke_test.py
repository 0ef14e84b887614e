"""End-to-end smoke test: open a session, push to it over HTTP, read the wire."""

import asyncio

import httpx
from httpx import ASGITransport


async def test():
    from ssekit.core.config import SessionConfig
    from ssekit.core.registry import SessionRegistry
    from ssekit.core.session import SSESession
    from ssekit.core.sink import StreamSink
    from ssekit.web.app import create_app
    from ssekit.web.config import WebConfig

    registry = SessionRegistry()
    config = SessionConfig(heartbeat_interval_ms=500, retry_interval_ms=2000)
    app = create_app(WebConfig(), config, registry=registry)
    transport = ASGITransport(app=app)

    # ASGITransport buffers whole responses, so open the stream directly
    headers: dict[str, str] = {}
    sink = StreamSink()
    session = await SSESession.create(sink, headers.update, config, registry=registry)
    assert headers["Content-Type"] == "text/event-stream"
    print(f"✓ Session opened: {session.id}")

    assert await sink.read() == b"retry: 2000\n"
    connect_frame = await sink.read()
    assert connect_frame == f"id: 0\nevent: sse-connect\ndata: {session.id}\n\n".encode()
    print("✓ Retry directive + connect event")

    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        # 1. Health check
        r = await c.get("/api/health")
        assert r.status_code == 200, f"Health failed: {r.status_code}"
        assert r.json()["sessions"] == 1
        print("✓ Health check")

        # 2. Session listed
        r = await c.get("/api/events/sessions")
        assert r.json()["session_ids"] == [session.id]
        print("✓ Session listed")

        # 3. Push events out of band
        for i in range(1, 4):
            r = await c.post(f"/api/events/{session.id}", json={"event": "tick", "data": str(i)})
            assert r.status_code == 200, f"Push failed: {r.status_code} {r.text}"
            assert r.json()["message_id"] == i
            frame = await sink.read()
            assert frame == f"id: {i}\nevent: tick\ndata: {i}\n\n".encode()
        print("✓ Pushed 3 events with ids 1..3")

        # 4. Structured payload
        r = await c.post(f"/api/events/{session.id}", json={"event": "x", "data": {"a": 1}})
        assert await sink.read() == b'id: 4\nevent: x\ndata: {"a":1}\n\n'
        print("✓ Structured payload framed as compact JSON")

        # 5. Heartbeat
        heartbeat = await asyncio.wait_for(sink.read(), timeout=1.0)
        assert heartbeat == b": \n\n"
        print("✓ Heartbeat comment")

        # 6. Close over HTTP
        r = await c.delete(f"/api/events/{session.id}")
        assert r.status_code == 204
        assert session.closed
        assert len(registry) == 0
        print("✓ Session closed and unregistered")

        # 7. Push after close
        r = await c.post(f"/api/events/{session.id}", json={"event": "x", "data": "y"})
        assert r.status_code == 404
        print("✓ Push after close rejected")

    print()
    print("=" * 60)
    print("  ALL SMOKE TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(test())

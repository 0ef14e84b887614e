"""ssekit: Server-Sent Events sessions for asyncio web servers.

ssekit turns application payloads into text/event-stream frames and keeps
one long-lived stream per client:
- Byte-exact SSE framing with per-session message ids
- Heartbeat comments and a reconnect (retry) directive
- A process-local registry to push events to a session by id
- Streaming any async iterable into a session, one event per chunk

Usage:
    # Python API
    from ssekit import SSESession, StreamSink

    sink = StreamSink()
    session = await SSESession.create(sink, set_headers=response_headers.update)
    await session.send("greeting", {"hello": "world"})

    # Elsewhere in the process
    await SSESession.get_instance(session_id).send("tick", "1")

    # CLI
    $ ssekit serve --port 8080
"""

try:
    from importlib.metadata import version as _get_version

    __version__ = _get_version("ssekit")
except Exception:
    __version__ = "0.0.0-dev"


# Lazy imports keep `ssekit --help` fast
def __getattr__(name: str):
    """Lazy import for main classes."""
    if name == "SSESession":
        from .core.session import SSESession

        return SSESession
    if name == "StreamSink":
        from .core.sink import StreamSink

        return StreamSink
    if name == "SessionRegistry":
        from .core.registry import SessionRegistry

        return SessionRegistry
    if name == "SessionConfig":
        from .core.config import SessionConfig

        return SessionConfig
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "__version__",
    "SSESession",
    "StreamSink",
    "SessionRegistry",
    "SessionConfig",
]

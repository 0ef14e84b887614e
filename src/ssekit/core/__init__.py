"""SSE session engine: framing, heartbeats, session lifecycle and registry."""

from .config import SessionConfig
from .errors import (
    ConfigurationError,
    SerializationError,
    SessionClosedError,
    SessionNotReadyError,
    SinkWriteError,
    SSEError,
)
from .frames import HEARTBEAT, FrameEncoder, encode_frame, encode_retry, serialize_payload
from .heartbeat import HeartbeatController
from .registry import SessionRegistry, session_registry
from .session import RESPONSE_HEADERS, SessionState, SSESession
from .sink import Sink, StreamSink

__all__ = [
    "SessionConfig",
    "SSEError",
    "ConfigurationError",
    "SerializationError",
    "SessionClosedError",
    "SessionNotReadyError",
    "SinkWriteError",
    "HEARTBEAT",
    "FrameEncoder",
    "encode_frame",
    "encode_retry",
    "serialize_payload",
    "HeartbeatController",
    "SessionRegistry",
    "session_registry",
    "RESPONSE_HEADERS",
    "SessionState",
    "SSESession",
    "Sink",
    "StreamSink",
]

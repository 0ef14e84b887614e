"""Exceptions raised by SSE sessions."""

from __future__ import annotations


class SSEError(Exception):
    """Base class for all session errors."""

    def __init__(self, message: str, session_id: str = ""):
        self.message = message
        self.session_id = session_id
        super().__init__(message)


class ConfigurationError(SSEError):
    """Raised when a session is constructed with invalid options."""


class SerializationError(SSEError):
    """Raised when a payload or event name cannot be framed."""


class SessionClosedError(SSEError):
    """Raised when an operation targets a session that was torn down."""


class SinkWriteError(SSEError):
    """Raised when the underlying sink rejects a write."""


class SessionNotReadyError(SSEError):
    """Raised when an operation targets a session whose setup has not finished."""

"""Shared fixtures for session tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from ssekit.core.errors import SinkWriteError
from ssekit.core.registry import SessionRegistry


class RecordingSink:
    """Sink that records every write.

    ``close()`` notifies listeners on every call, like a transport that
    emits its close signal more than once.
    """

    def __init__(self) -> None:
        self.writes: list[bytes] = []
        self.fail_with: Exception | None = None
        self.close_calls = 0
        self._closed = False
        self._listeners: list[Callable[[], None]] = []

    @property
    def closed(self) -> bool:
        return self._closed

    async def write(self, data: bytes) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        if self._closed:
            raise SinkWriteError("Sink is closed")
        self.writes.append(data)

    def on_close(self, callback: Callable[[], None]) -> None:
        if self._closed:
            callback()
            return
        self._listeners.append(callback)

    def close(self) -> None:
        self._closed = True
        self.close_calls += 1
        for callback in list(self._listeners):
            callback()

    @property
    def text(self) -> str:
        return b"".join(self.writes).decode("utf-8")


class HeaderRecorder:
    def __init__(self) -> None:
        self.calls: list[dict[str, str]] = []

    def __call__(self, headers: dict[str, str]) -> None:
        self.calls.append(headers)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def set_headers():
    return HeaderRecorder()


@pytest.fixture
def registry():
    return SessionRegistry()

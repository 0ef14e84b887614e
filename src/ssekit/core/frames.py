"""Frame encoding for the text/event-stream wire format.

A frame is one SSE message block:

    id: 3
    event: tick
    data: 1
    <blank line>

Payloads containing line breaks are emitted as one ``data:`` line per line,
which EventSource clients re-join with ``\\n``.
"""

from __future__ import annotations

import json
import re
from typing import Any

from .errors import SerializationError

HEARTBEAT = b": \n\n"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def serialize_payload(data: Any) -> str:
    """Convert an event payload to its text form.

    Strings are used verbatim, bytes are decoded as UTF-8 and everything
    else goes through compact JSON.

    Raises:
        SerializationError: If the payload cannot be encoded.
    """
    if isinstance(data, str):
        return data
    if isinstance(data, (bytes, bytearray)):
        try:
            return bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise SerializationError(f"Payload is not valid UTF-8: {e}") from e
    try:
        return json.dumps(data, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Payload is not JSON serializable: {e}") from e


def encode_frame(event: str, payload: str, message_id: int | None = None) -> bytes:
    """Build the bytes of one event frame.

    Args:
        event: Event name (``event:`` field).
        payload: Already serialized payload text.
        message_id: Value of the ``id:`` field, omitted when None.

    Raises:
        SerializationError: If the event name contains a line break.
    """
    if _LINE_BREAK.search(event):
        raise SerializationError(f"Event name must be a single line: {event!r}")

    lines = []
    if message_id is not None:
        lines.append(f"id: {message_id}")
    lines.append(f"event: {event}")
    lines.extend(f"data: {line}" for line in _LINE_BREAK.split(payload))
    return ("\n".join(lines) + "\n\n").encode("utf-8")


def encode_retry(retry_interval_ms: int) -> bytes:
    """Build the reconnect-interval directive sent once per connection."""
    return f"retry: {retry_interval_ms}\n".encode()


class FrameEncoder:
    """Frame encoder holding one session's message id counter.

    The counter is only advanced through ``advance()`` so the caller can
    commit an id once the frame actually reached the sink.
    """

    def __init__(self, with_message_id: bool = True, initial_message_id: int = 0):
        self.with_message_id = with_message_id
        self.next_id = initial_message_id

    def encode(self, event: str, payload: str) -> bytes:
        message_id = self.next_id if self.with_message_id else None
        return encode_frame(event, payload, message_id)

    def advance(self) -> None:
        if self.with_message_id:
            self.next_id += 1

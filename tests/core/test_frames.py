"""Tests for SSE frame encoding."""

from __future__ import annotations

import pytest

from ssekit.core.errors import SerializationError
from ssekit.core.frames import (
    HEARTBEAT,
    FrameEncoder,
    encode_frame,
    encode_retry,
    serialize_payload,
)


class TestEncodeFrame:
    def test_without_id(self):
        assert encode_frame("foo", "bar") == b"event: foo\ndata: bar\n\n"

    def test_with_id(self):
        assert encode_frame("foo", "bar", 2) == b"id: 2\nevent: foo\ndata: bar\n\n"

    def test_id_zero_is_emitted(self):
        assert encode_frame("sse-connect", "abc", 0).startswith(b"id: 0\n")

    def test_empty_payload(self):
        assert encode_frame("ping", "") == b"event: ping\ndata: \n\n"

    def test_multiline_payload_gets_one_data_line_per_line(self):
        frame = encode_frame("log", "first\nsecond\r\nthird\rfourth")
        assert frame == (
            b"event: log\ndata: first\ndata: second\ndata: third\ndata: fourth\n\n"
        )

    def test_trailing_newline_keeps_empty_data_line(self):
        assert encode_frame("log", "line\n") == b"event: log\ndata: line\ndata: \n\n"

    def test_unicode_payload_is_utf8(self):
        assert encode_frame("msg", "héllo ✓") == "event: msg\ndata: héllo ✓\n\n".encode()

    @pytest.mark.parametrize("event", ["bad\nname", "bad\rname", "bad\r\nname"])
    def test_event_name_with_line_break_rejected(self, event):
        with pytest.raises(SerializationError):
            encode_frame(event, "x")


class TestDirectives:
    def test_retry(self):
        assert encode_retry(2000) == b"retry: 2000\n"

    def test_heartbeat_is_a_comment(self):
        assert HEARTBEAT == b": \n\n"
        assert not HEARTBEAT.startswith(b"id:")


class TestSerializePayload:
    def test_string_verbatim(self):
        assert serialize_payload('{"already": "json"}') == '{"already": "json"}'

    def test_dict_compact_json(self):
        assert serialize_payload({"a": 1}) == '{"a":1}'

    def test_nested_structure(self):
        assert serialize_payload({"a": [1, 2], "b": None}) == '{"a":[1,2],"b":null}'

    def test_numbers_and_bools(self):
        assert serialize_payload(1) == "1"
        assert serialize_payload(1.5) == "1.5"
        assert serialize_payload(True) == "true"

    def test_bytes_decoded(self):
        assert serialize_payload(b"raw") == "raw"

    def test_invalid_utf8_bytes(self):
        with pytest.raises(SerializationError):
            serialize_payload(b"\xff\xfe")

    def test_unserializable_raises_with_cause(self):
        with pytest.raises(SerializationError) as exc_info:
            serialize_payload({"when": object()})
        assert isinstance(exc_info.value.__cause__, TypeError)

    def test_circular_reference(self):
        data: dict = {}
        data["self"] = data
        with pytest.raises(SerializationError):
            serialize_payload(data)


class TestFrameEncoder:
    def test_counter_advances_only_on_advance(self):
        encoder = FrameEncoder(initial_message_id=5)
        assert encoder.encode("a", "1").startswith(b"id: 5\n")
        assert encoder.encode("a", "1").startswith(b"id: 5\n")
        encoder.advance()
        assert encoder.encode("a", "1").startswith(b"id: 6\n")

    def test_without_ids(self):
        encoder = FrameEncoder(with_message_id=False)
        assert encoder.encode("foo", "bar") == b"event: foo\ndata: bar\n\n"
        encoder.advance()
        assert encoder.next_id == 0

    def test_encoders_do_not_share_counters(self):
        first = FrameEncoder()
        second = FrameEncoder()
        first.advance()
        first.advance()
        assert second.encode("x", "y").startswith(b"id: 0\n")

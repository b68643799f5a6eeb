"""
Unit tests for payload framing.
"""

import pytest

from ws_tcp_bridge.relay.framing import decode_inbound, frame_outbound, message_text


class TestFrameOutbound:
    """Test cases for client -> backend framing."""

    @pytest.mark.unit
    def test_appends_missing_newline(self):
        assert frame_outbound("login bob") == b"login bob\n"

    @pytest.mark.unit
    def test_keeps_existing_newline(self):
        assert frame_outbound("login bob\n") == b"login bob\n"

    @pytest.mark.unit
    def test_only_one_trailing_newline_is_considered(self):
        """Inner and doubled newlines are payload, never stripped."""
        assert frame_outbound("a\nb") == b"a\nb\n"
        assert frame_outbound("a\n\n") == b"a\n\n"

    @pytest.mark.unit
    def test_carriage_return_is_not_a_terminator(self):
        assert frame_outbound("line\r") == b"line\r\n"

    @pytest.mark.unit
    def test_empty_message_becomes_blank_line(self):
        assert frame_outbound("") == b"\n"

    @pytest.mark.unit
    def test_encodes_utf8(self):
        assert frame_outbound("xin chào") == "xin chào\n".encode("utf-8")


class TestDecodeInbound:
    """Test cases for backend -> client decoding."""

    @pytest.mark.unit
    def test_forwards_chunk_verbatim(self):
        assert decode_inbound(b"welcome bob\n") == "welcome bob\n"

    @pytest.mark.unit
    def test_partial_lines_are_not_reassembled(self):
        assert decode_inbound(b"wel") == "wel"

    @pytest.mark.unit
    def test_invalid_utf8_is_replaced(self):
        assert decode_inbound(b"ok \xff") == "ok �"


class TestMessageText:
    """Test cases for extracting text from ASGI receive messages."""

    @pytest.mark.unit
    def test_text_frame(self):
        assert message_text({"type": "websocket.receive", "text": "hi"}) == "hi"

    @pytest.mark.unit
    def test_binary_frame_is_decoded(self):
        message = {"type": "websocket.receive", "bytes": "héllo".encode("utf-8")}
        assert message_text(message) == "héllo"

    @pytest.mark.unit
    def test_text_wins_when_both_keys_present(self):
        message = {"type": "websocket.receive", "text": "t", "bytes": None}
        assert message_text(message) == "t"

    @pytest.mark.unit
    def test_empty_frame(self):
        assert message_text({"type": "websocket.receive", "bytes": None}) == ""

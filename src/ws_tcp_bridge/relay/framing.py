"""
Payload framing between the WebSocket and TCP sides.

The backend protocol is line oriented: every payload written to TCP ends with
exactly one trailing newline. Data read from TCP is forwarded chunk by chunk
without any line reassembly.
"""

from typing import Any, Mapping

LINE_TERMINATOR = "\n"
ENCODING = "utf-8"


def message_text(message: Mapping[str, Any]) -> str:
    """Return the text of an ASGI ``websocket.receive`` message.

    Binary frames are decoded as UTF-8, replacing invalid sequences.
    """
    text = message.get("text")
    if text is not None:
        return text
    data = message.get("bytes") or b""
    return data.decode(ENCODING, errors="replace")


def frame_outbound(text: str) -> bytes:
    """Encode a client message for the backend, newline-terminated."""
    if not text.endswith(LINE_TERMINATOR):
        text += LINE_TERMINATOR
    return text.encode(ENCODING)


def decode_inbound(chunk: bytes) -> str:
    """Decode one backend read as-is for a single WebSocket message."""
    return chunk.decode(ENCODING, errors="replace")

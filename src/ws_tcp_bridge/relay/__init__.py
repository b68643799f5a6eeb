"""
Connection relay between WebSocket clients and the backend TCP server.

This package contains the per-connection relay session and the line
framing applied to payloads crossing it.
"""

from .framing import decode_inbound, frame_outbound, message_text
from .session import (
    DIAGNOSTIC_PREFIX,
    RelaySession,
    SendResult,
    open_backend,
)

__all__ = [
    "RelaySession",
    "SendResult",
    "open_backend",
    "DIAGNOSTIC_PREFIX",
    "frame_outbound",
    "decode_inbound",
    "message_text",
]

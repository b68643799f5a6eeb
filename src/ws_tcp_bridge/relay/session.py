"""
WebSocket <-> TCP relay session.

Every accepted WebSocket gets exactly one backend TCP connection. The two
directions run as independent tasks until either side closes or errors,
then both sides are torn down. Sessions share nothing but the read-only
configuration.
"""

import asyncio
import logging
import socket
from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional, Tuple

from fastapi import WebSocket
from fastapi.websockets import WebSocketDisconnect

from ..config import BridgeConfig
from ..infrastructure.exceptions import BackendConnectionError
from .framing import decode_inbound, frame_outbound, message_text

logger = logging.getLogger(__name__)

DIAGNOSTIC_PREFIX = "[Bridge] TCP error: "

# Raised by Starlette/uvicorn when the client side is already gone.
# uvicorn's ClientDisconnected is an OSError.
CLIENT_GONE_ERRORS = (WebSocketDisconnect, OSError)


@dataclass(frozen=True)
class SendResult:
    """Outcome of a best-effort send to the WebSocket client."""

    delivered: bool
    error: Optional[BaseException] = None


async def open_backend(
    config: BridgeConfig,
) -> Tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """
    Open the backend TCP connection with Nagle's algorithm disabled.

    Raises:
        BackendConnectionError: If the connection cannot be established
    """
    try:
        reader, writer = await asyncio.open_connection(
            config.backend_host, config.backend_port
        )
        sock = writer.get_extra_info("socket")
        if sock is not None:
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
    except OSError as e:
        raise BackendConnectionError(f"connect {config.backend_address} failed: {e}") from e
    return reader, writer


class RelaySession:
    """
    Pairs one WebSocket connection with one backend TCP connection.

    Client messages that arrive while the backend connection is still
    opening are held, up to ``max_pending_messages``, and flushed in order
    once it is up. Anything beyond that limit is dropped with a warning.
    """

    def __init__(self, websocket: WebSocket, config: BridgeConfig) -> None:
        self.websocket = websocket
        self.config = config

        self._writer: Optional[asyncio.StreamWriter] = None
        self._pending: Deque[bytes] = deque()
        self.dropped_messages = 0
        self._client_closed = False

    @property
    def peer(self) -> str:
        client = self.websocket.client
        if client is None:
            return "unknown"
        return f"{client[0]}:{client[1]}"

    @property
    def connected(self) -> bool:
        """True once the backend connection is open and pending messages flushed."""
        return self._writer is not None

    @property
    def pending_messages(self) -> int:
        return len(self._pending)

    async def run(self) -> None:
        """Relay in both directions until either side ends, then tear down."""
        logger.info(f"WS connected from {self.peer}")

        backend_task = asyncio.create_task(self._pump_backend_to_client())
        client_task = asyncio.create_task(self._pump_client_to_backend())
        tasks = (client_task, backend_task)

        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
            if (
                client_task in done
                and client_task.exception() is None
                and self._pending
                and not backend_task.done()
            ):
                # Client left while its first messages are still held
                await asyncio.wait((backend_task,))
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            results = await asyncio.gather(*tasks, return_exceptions=True)
            if self._pending:
                logger.warning(
                    f"Discarded {len(self._pending)} held messages for {self.peer}, "
                    f"backend never connected"
                )
                self._pending.clear()
            await self._close_backend()
            logger.info(f"Session for {self.peer} ended")

        for result in results:
            if isinstance(result, Exception):
                raise result

    async def send_diagnostic(self, text: str) -> SendResult:
        """
        Send a diagnostic text message to the client.

        Never raises: a failed send is returned as ``SendResult(False, error)``.
        Callers discard that result because teardown proceeds either way.
        """
        return await self._send_to_client(text)

    async def _pump_client_to_backend(self) -> None:
        while True:
            message = await self.websocket.receive()
            if message["type"] == "websocket.disconnect":
                self._client_closed = True
                logger.info(f"WS closed by {self.peer} (code={message.get('code')})")
                return

            data = frame_outbound(message_text(message))
            if self._writer is None:
                self._hold(data)
                continue

            try:
                self._writer.write(data)
                await self._writer.drain()
            except OSError as e:
                await self._report_backend_error(
                    BackendConnectionError(f"write to {self.config.backend_address} failed: {e}")
                )
                return

    async def _pump_backend_to_client(self) -> None:
        try:
            reader, writer = await open_backend(self.config)
        except BackendConnectionError as e:
            await self._report_backend_error(e)
            return

        logger.info(f"TCP connected -> {self.config.backend_address} for {self.peer}")
        while self._pending:
            writer.write(self._pending.popleft())
        self._writer = writer

        if self._client_closed:
            return

        while True:
            try:
                chunk = await reader.read(self.config.read_chunk_size)
            except OSError as e:
                await self._report_backend_error(
                    BackendConnectionError(f"read from {self.config.backend_address} failed: {e}")
                )
                return

            if not chunk:
                break

            result = await self._send_to_client(decode_inbound(chunk))
            if not result.delivered:
                logger.debug(f"Client {self.peer} gone while forwarding: {result.error}")
                self._client_closed = True
                return

        logger.info(f"TCP closed by backend for {self.peer}")
        await self._close_client()

    def _hold(self, data: bytes) -> None:
        if len(self._pending) < self.config.max_pending_messages:
            self._pending.append(data)
            return
        self.dropped_messages += 1
        logger.warning(
            f"Backend not connected yet for {self.peer}, dropped early message "
            f"({self.dropped_messages} dropped so far)"
        )

    async def _send_to_client(self, text: str) -> SendResult:
        try:
            await self.websocket.send_text(text)
        except CLIENT_GONE_ERRORS as e:
            return SendResult(delivered=False, error=e)
        except RuntimeError as e:
            # Starlette state errors, not a disconnect
            logger.warning(f"Send to {self.peer} rejected: {e}")
            return SendResult(delivered=False, error=e)
        return SendResult(delivered=True)

    async def _report_backend_error(self, error: BackendConnectionError) -> None:
        logger.warning(f"TCP error for {self.peer}: {error}")
        if self._client_closed:
            return
        self._client_closed = True

        result = await self.send_diagnostic(f"{DIAGNOSTIC_PREFIX}{error}")
        if not result.delivered:
            logger.debug(f"Diagnostic to {self.peer} not delivered: {result.error}")
        await self._close_websocket()

    async def _close_client(self) -> None:
        if self._client_closed:
            return
        self._client_closed = True
        await self._close_websocket()

    async def _close_websocket(self) -> None:
        try:
            await self.websocket.close(code=1000)
        except CLIENT_GONE_ERRORS as e:
            logger.debug(f"WS close for {self.peer} failed: {e}")
        except RuntimeError as e:
            logger.warning(f"WS close for {self.peer} rejected: {e}")

    async def _close_backend(self) -> None:
        writer, self._writer = self._writer, None
        if writer is None:
            return

        try:
            if not writer.is_closing():
                await writer.drain()
            writer.close()
            await writer.wait_closed()
        except OSError as e:
            logger.debug(f"TCP close for {self.peer} failed: {e}")
        logger.info(f"TCP connection to {self.config.backend_address} closed for {self.peer}")

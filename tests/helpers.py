"""
Test doubles and utilities shared by the bridge test suite.
"""

import asyncio
import contextlib
import socket
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from ws_tcp_bridge.api.server import create_server
from ws_tcp_bridge.config import BridgeConfig


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Poll ``predicate`` until it holds or ``timeout`` expires."""

    async def _poll():
        while not predicate():
            await asyncio.sleep(0.01)

    await asyncio.wait_for(_poll(), timeout)


class FakeWebSocket:
    """In-memory stand-in for an accepted Starlette WebSocket."""

    def __init__(self, client: Optional[Tuple[str, int]] = ("127.0.0.1", 50000)):
        self.client = client
        self.incoming: "asyncio.Queue[Union[Dict[str, Any], BaseException]]" = asyncio.Queue()
        self.sent: List[str] = []
        self.closed = asyncio.Event()
        self.close_code: Optional[int] = None
        # Raised by send_text, e.g. WebSocketDisconnect for a vanished client
        self.send_error: Optional[BaseException] = None

    def push_text(self, text: str) -> None:
        self.incoming.put_nowait({"type": "websocket.receive", "text": text})

    def push_bytes(self, data: bytes) -> None:
        self.incoming.put_nowait({"type": "websocket.receive", "bytes": data})

    def push_error(self, error: BaseException) -> None:
        self.incoming.put_nowait(error)

    def disconnect(self, code: int = 1000) -> None:
        self.incoming.put_nowait({"type": "websocket.disconnect", "code": code})

    async def receive(self) -> Dict[str, Any]:
        item = await self.incoming.get()
        if isinstance(item, BaseException):
            raise item
        return item

    async def send_text(self, data: str) -> None:
        if self.send_error is not None:
            raise self.send_error
        if self.closed.is_set():
            raise RuntimeError('Cannot call "send" once a close message has been sent.')
        self.sent.append(data)

    async def close(self, code: int = 1000, reason: Optional[str] = None) -> None:
        if self.closed.is_set():
            raise RuntimeError("WebSocket already closed")
        self.close_code = code
        self.closed.set()

    async def wait_for_sent(self, count: int, timeout: float = 2.0) -> List[str]:
        await wait_until(lambda: len(self.sent) >= count, timeout)
        return self.sent


class Backend:
    """Real asyncio TCP server standing in for the line-oriented backend."""

    def __init__(self) -> None:
        self.connections: "asyncio.Queue[Tuple[asyncio.StreamReader, asyncio.StreamWriter]]" = (
            asyncio.Queue()
        )
        self._writers: List[asyncio.StreamWriter] = []
        self.server: Optional[asyncio.AbstractServer] = None
        self.port: int = 0

    async def start(self) -> None:
        self.server = await asyncio.start_server(self._on_connect, "127.0.0.1", 0)
        self.port = self.server.sockets[0].getsockname()[1]

    async def _on_connect(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        self._writers.append(writer)
        await self.connections.put((reader, writer))

    async def accept(
        self, timeout: float = 2.0
    ) -> Tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        return await asyncio.wait_for(self.connections.get(), timeout)

    async def stop(self) -> None:
        for writer in self._writers:
            writer.close()
            with contextlib.suppress(OSError):
                await writer.wait_closed()
        self.server.close()
        await self.server.wait_closed()


def unused_port() -> int:
    """Return a local port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@contextlib.asynccontextmanager
async def serve_bridge(config: BridgeConfig):
    """Run the bridge server in-process and yield the port it listens on."""
    server = create_server(config)
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    task = asyncio.create_task(server.serve(sockets=[sock]))
    try:
        await wait_until(lambda: server.started or task.done(), timeout=5.0)
        if task.done():
            task.result()
        yield sock.getsockname()[1]
    finally:
        server.should_exit = True
        await asyncio.wait_for(task, 5.0)
        sock.close()

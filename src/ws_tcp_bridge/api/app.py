"""
FastAPI application for the WS-TCP bridge.
"""

import logging
from pathlib import Path

from fastapi import FastAPI, WebSocket
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from .. import __version__
from ..config import BridgeConfig
from ..relay import RelaySession

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Response model for the health endpoint."""
    status: str
    backend: str
    ws_path: str


def create_app(config: BridgeConfig) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Bridge configuration shared by every session

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="WS-TCP Bridge",
        description="Relays WebSocket sessions to a line-oriented TCP backend",
        version=__version__,
    )
    app.state.config = config

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            backend=config.backend_address,
            ws_path=config.ws_path,
        )

    async def relay(websocket: WebSocket):
        """Accept the client, then relay it to its own backend connection."""
        await websocket.accept()
        await RelaySession(websocket, config).run()

    # Accept both "/ws" and "/ws/"
    base_path = config.ws_path.rstrip("/")
    if base_path:
        app.add_api_websocket_route(base_path, relay)
        app.add_api_websocket_route(base_path + "/", relay)
    else:
        app.add_api_websocket_route("/", relay)

    # Mounted last so "/" never shadows the routes above
    static_dir = Path(config.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        logger.warning(f"Static directory {static_dir} not found, web client disabled")

    return app

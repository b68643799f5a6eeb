"""
WS-TCP Bridge - relays WebSocket clients to a line-oriented TCP backend.

Each WebSocket session gets its own TCP connection to a fixed backend.
Client messages are forwarded newline-terminated; backend reads are
forwarded to the client one message per read.

Architecture:
- Relay: per-connection session and payload framing
- API: FastAPI application, uvicorn runner and CLI
- Config: Environment loading and validation
- Infrastructure: Logging and exceptions
"""

__version__ = "1.0.0"

# Configuration
from .config import BridgeConfig, BridgeConfigManager

# Infrastructure
from .infrastructure.logging import setup_logging, get_logger
from .infrastructure.exceptions import (
    BridgeError,
    ConfigurationError,
    ValidationError,
    NetworkError,
    BackendConnectionError,
)

# Relay
from .relay import RelaySession, SendResult, open_backend

# Application
from .api import create_app, create_server, run_bridge

__all__ = [
    "__version__",
    # Configuration
    "BridgeConfig",
    "BridgeConfigManager",
    # Infrastructure
    "setup_logging",
    "get_logger",
    "BridgeError",
    "ConfigurationError",
    "ValidationError",
    "NetworkError",
    "BackendConnectionError",
    # Relay
    "RelaySession",
    "SendResult",
    "open_backend",
    # Application
    "create_app",
    "create_server",
    "run_bridge",
]

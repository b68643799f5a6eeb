"""
Infrastructure components for the WS-TCP bridge.

This package contains infrastructure concerns including:
- Logging configuration and utilities with environment controls
- Custom exception definitions
"""

from .logging import setup_logging, get_logger
from .logging_manager import LoggingManager, Environment, get_environment
from .exceptions import (
    BridgeError,
    ConfigurationError,
    ValidationError,
    NetworkError,
    BackendConnectionError,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "LoggingManager",
    "Environment",
    "get_environment",
    # Exceptions
    "BridgeError",
    "ConfigurationError",
    "ValidationError",
    "NetworkError",
    "BackendConnectionError",
]

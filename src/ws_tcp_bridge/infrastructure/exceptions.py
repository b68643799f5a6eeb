"""
Custom exceptions for the WS-TCP bridge.

This module defines the exceptions raised by the bridge, split into
configuration problems found at startup and network failures found
while relaying.
"""


class BridgeError(Exception):
    """Base exception for all bridge related errors."""

    pass


class ConfigurationError(BridgeError):
    """Raised when there are configuration-related errors."""

    pass


class ValidationError(ConfigurationError):
    """Raised when a configuration value fails validation."""

    pass


class NetworkError(BridgeError):
    """Raised when there are network communication errors."""

    pass


class BackendConnectionError(NetworkError):
    """Raised when the backend TCP connection cannot be opened, read or written."""

    pass

"""
Configuration management for the WS-TCP bridge.

This package provides:
- The immutable ``BridgeConfig`` shared by all sessions
- Environment and dotenv loading with fail-fast validation
"""

from .settings import BridgeConfig, BridgeConfigManager

__all__ = [
    "BridgeConfig",
    "BridgeConfigManager",
]

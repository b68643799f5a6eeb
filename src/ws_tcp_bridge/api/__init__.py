"""
HTTP application, server runner and command line entry point.
"""

from .app import create_app
from .server import create_server, run_bridge, main

__all__ = [
    "create_app",
    "create_server",
    "run_bridge",
    "main",
]

"""
Test suite for the WS-TCP bridge.

This package contains tests organized by type:
- Unit tests for the relay, configuration, API and infrastructure
- Integration tests running the full server against a TCP backend
- Shared test doubles in ``helpers``
"""

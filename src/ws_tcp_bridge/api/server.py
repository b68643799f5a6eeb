"""
Server runner and command line entry point for the WS-TCP bridge.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import uvicorn

from ..config import BridgeConfig, BridgeConfigManager
from ..infrastructure import ConfigurationError, setup_logging
from .app import create_app

COMPONENT_NAME = "ws_tcp_bridge"

logger = logging.getLogger(__name__)


def create_server(config: BridgeConfig) -> uvicorn.Server:
    """
    Build the uvicorn server hosting the bridge application.

    Args:
        config: Bridge configuration

    Returns:
        Server ready to ``serve()``
    """
    uvicorn_config = uvicorn.Config(
        app=create_app(config),
        host=config.host,
        port=config.port,
        ws="websockets-sansio",
        ws_ping_interval=config.ws_ping_interval or None,
        lifespan="off",
        # Logging is configured by setup_logging
        log_config=None,
        log_level=config.log_level.lower() if config.log_level else None,
    )
    return uvicorn.Server(uvicorn_config)


async def run_bridge(config: BridgeConfig) -> None:
    """Serve the bridge until the process is asked to stop."""
    server = create_server(config)

    logger.info(
        f"Bridge listening on http://{config.host}:{config.port} "
        f"(WS {config.ws_path}) -> TCP {config.backend_address}"
    )
    await server.serve()


def build_parser() -> argparse.ArgumentParser:
    """Command line flags; each one overrides its environment variable."""
    parser = argparse.ArgumentParser(
        description="Relay WebSocket clients to a line-oriented TCP backend"
    )
    parser.add_argument("--host", help="Listen address (LISTEN_HOST)")
    parser.add_argument("--port", type=int, help="HTTP/WebSocket port (PORT)")
    parser.add_argument("--ws-path", help="WebSocket upgrade path (WS_PATH)")
    parser.add_argument("--backend-host", help="Backend TCP host (BACKEND_HOST)")
    parser.add_argument("--backend-port", type=int, help="Backend TCP port (BACKEND_PORT)")
    parser.add_argument("--static-dir", help="Directory served at / (STATIC_DIR)")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (LOG_LEVEL)",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Optional dotenv file read before the environment",
    )
    return parser


def load_config(args: argparse.Namespace) -> BridgeConfig:
    """
    Build the configuration from the environment and parsed flags.

    Raises:
        ConfigurationError: If any value is invalid
    """
    overrides = {
        "LISTEN_HOST": args.host,
        "PORT": args.port,
        "WS_PATH": args.ws_path,
        "BACKEND_HOST": args.backend_host,
        "BACKEND_PORT": args.backend_port,
        "STATIC_DIR": args.static_dir,
        "LOG_LEVEL": args.log_level,
    }
    return BridgeConfigManager(env_file_path=args.env_file).get_config(overrides)


def main(argv: Optional[List[str]] = None) -> None:
    """Main function to run the bridge."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
    except ConfigurationError as e:
        bridge_logger = setup_logging(COMPONENT_NAME, log_level=args.log_level)
        bridge_logger.critical(f"Invalid configuration: {e}")
        sys.exit(1)

    # LOG_LEVEL and ENVIRONMENT may come from the dotenv file
    setup_logging(
        COMPONENT_NAME,
        log_level=config.log_level,
        environment=config.environment,
    )

    try:
        asyncio.run(run_bridge(config))
    except KeyboardInterrupt:
        logger.info("Bridge shutdown requested")


if __name__ == "__main__":
    main()

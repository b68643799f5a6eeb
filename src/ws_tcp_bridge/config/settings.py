"""
Configuration management for the WS-TCP bridge.

Configuration is read once at startup from an optional dotenv file and the
process environment, validated, and frozen into a ``BridgeConfig`` that is
passed explicitly to the application. Nothing below the entry point reads
the environment.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from dotenv import dotenv_values

from ..infrastructure.exceptions import ValidationError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class BridgeConfig:
    """Immutable configuration shared read-only by every relay session."""

    backend_host: str = "127.0.0.1"
    backend_port: int = 12345
    host: str = "0.0.0.0"
    port: int = 8080
    ws_path: str = "/ws"
    static_dir: str = "public"

    # Messages held while the backend connection is still opening
    max_pending_messages: int = 64
    read_chunk_size: int = 65536

    # Seconds between server pings, 0 disables them
    ws_ping_interval: float = 30.0
    # None selects the level for the current environment
    log_level: Optional[str] = None
    # development, staging or production; None leaves it to the process environment
    environment: Optional[str] = None

    @property
    def backend_address(self) -> str:
        return f"{self.backend_host}:{self.backend_port}"


class BridgeConfigManager:
    """Builds a validated ``BridgeConfig`` from environment sources."""

    def __init__(
        self,
        env_file_path: str = ".env",
        environ: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize configuration manager.

        Args:
            env_file_path: Path to an optional dotenv file
            environ: Environment mapping, defaults to ``os.environ``.
                     Its values take precedence over the dotenv file.
        """
        self.env_file_path = env_file_path
        self._values: Dict[str, Optional[str]] = {}
        self._load_environment(os.environ if environ is None else environ)

    def _load_environment(self, environ: Mapping[str, str]) -> None:
        """Merge the dotenv file and the environment mapping."""
        if os.path.exists(self.env_file_path):
            self._values.update(dotenv_values(self.env_file_path))
            logger.info(f"Loaded environment from {self.env_file_path}")
        else:
            logger.debug(f"Environment file {self.env_file_path} not found")
        self._values.update(environ)

    def _get_optional_env(self, key: str, default: str) -> str:
        """Return the stripped value for ``key``, or ``default`` when unset or empty."""
        value = self._values.get(key)
        if value is None or not value.strip():
            return default
        return value.strip()

    def _get_int(self, key: str, default: int, minimum: int, maximum: int) -> int:
        raw = self._get_optional_env(key, str(default))
        try:
            value = int(raw)
        except ValueError:
            raise ValidationError(f"{key} must be an integer, got {raw!r}") from None
        if not minimum <= value <= maximum:
            raise ValidationError(
                f"{key} must be between {minimum} and {maximum}, got {value}"
            )
        return value

    def _get_port(self, key: str, default: int) -> int:
        return self._get_int(key, default, 1, 65535)

    def _get_ping_interval(self) -> float:
        raw = self._get_optional_env("WS_PING_INTERVAL", "30")
        try:
            value = float(raw)
        except ValueError:
            raise ValidationError(
                f"WS_PING_INTERVAL must be a number of seconds, got {raw!r}"
            ) from None
        if value < 0:
            raise ValidationError(f"WS_PING_INTERVAL must not be negative, got {value}")
        return value

    def _get_log_level(self) -> Optional[str]:
        raw = self._values.get("LOG_LEVEL")
        if raw is None or not raw.strip():
            return None
        level = raw.strip().upper()
        if level not in LOG_LEVELS:
            raise ValidationError(
                f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {raw.strip()!r}"
            )
        return level

    def _get_environment(self) -> Optional[str]:
        raw = self._values.get("ENVIRONMENT")
        if raw is None or not raw.strip():
            return None
        return raw.strip().lower()

    def _get_ws_path(self) -> str:
        path = self._get_optional_env("WS_PATH", "/ws")
        if not path.startswith("/"):
            path = "/" + path
        return path

    def get_config(self, overrides: Optional[Mapping[str, Any]] = None) -> BridgeConfig:
        """
        Get the bridge configuration.

        Args:
            overrides: Environment-style keys (e.g. ``{"PORT": "9000"}``) that
                       take precedence over every other source. ``None``
                       values are ignored.

        Returns:
            BridgeConfig: Validated configuration

        Raises:
            ValidationError: If a value is malformed or out of range
        """
        if overrides:
            self._values.update(
                {key: str(value) for key, value in overrides.items() if value is not None}
            )

        config = BridgeConfig(
            backend_host=self._get_optional_env("BACKEND_HOST", "127.0.0.1"),
            backend_port=self._get_port("BACKEND_PORT", 12345),
            host=self._get_optional_env("LISTEN_HOST", "0.0.0.0"),
            port=self._get_port("PORT", 8080),
            ws_path=self._get_ws_path(),
            static_dir=self._get_optional_env("STATIC_DIR", "public"),
            max_pending_messages=self._get_int("MAX_PENDING_MESSAGES", 64, 0, 1_000_000),
            read_chunk_size=self._get_int("READ_CHUNK_SIZE", 65536, 1, 16 * 1024 * 1024),
            ws_ping_interval=self._get_ping_interval(),
            log_level=self._get_log_level(),
            environment=self._get_environment(),
        )

        logger.debug(f"Configuration loaded: {config}")
        return config

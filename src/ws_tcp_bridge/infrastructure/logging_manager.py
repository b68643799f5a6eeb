"""
Logging management for the WS-TCP bridge.

This module provides centralized logging configuration with environment-based
log levels and YAML configuration support.

Environment Log Levels:
- Development: DEBUG and above
- Staging: INFO and above
- Production: WARNING and above
"""

import copy
import logging
import logging.config
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

# Third-party loggers that stay at WARNING whatever the bridge level is
NOISY_LOGGERS = (
    "websockets",
    "uvicorn.access",
    "asyncio",
)


class Environment(Enum):
    """Environment enumeration."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LoggingManager:
    """Centralized logging management with environment controls."""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        environment: Optional[str] = None,
    ):
        """
        Initialize logging manager.

        Args:
            config_path: Path to YAML configuration file. If None, uses the packaged one.
            environment: Environment name, usually ENVIRONMENT from the bridge
                         configuration. If None, the process environment is read.
        """
        if config_path is None:
            config_path = Path(__file__).parent.parent / "logging.yaml"

        self.config_path = config_path
        self._config_cache: Optional[Dict[str, Any]] = None
        self._environment = self._detect_environment(environment)

    def _detect_environment(self, environment: Optional[str] = None) -> Environment:
        """Resolve the environment name, falling back to the ENVIRONMENT variable."""
        if environment is None:
            environment = os.getenv("ENVIRONMENT", "development")
        env = environment.strip().lower()

        if env in ["prod", "production"]:
            return Environment.PRODUCTION
        elif env in ["staging", "stage"]:
            return Environment.STAGING
        else:
            return Environment.DEVELOPMENT

    def _load_yaml_config(self) -> Optional[Dict[str, Any]]:
        """Load YAML logging configuration."""
        if self._config_cache is not None:
            return self._config_cache

        if not self.config_path.exists():
            return None

        try:
            with open(self.config_path, "r") as f:
                config = yaml.safe_load(f)
            self._config_cache = config
            return config
        except (yaml.YAMLError, IOError) as e:
            print(f"Warning: Failed to load YAML logging config: {e}")
            return None

    def _get_environment_log_level(self) -> str:
        """Get appropriate log level for current environment."""
        if self._environment == Environment.PRODUCTION:
            return "WARNING"
        elif self._environment == Environment.STAGING:
            return "INFO"
        else:
            return "DEBUG"

    def _apply_environment_level(
        self, config: Dict[str, Any], log_level: str
    ) -> Dict[str, Any]:
        """Apply the effective level to the root and bridge loggers."""
        if "root" in config:
            config["root"]["level"] = log_level

        for logger_name, logger_config in config.get("loggers", {}).items():
            if logger_name in NOISY_LOGGERS:
                continue
            logger_config["level"] = log_level

        return config

    def _ensure_log_dirs(self, config: Dict[str, Any]) -> None:
        """Create directories for file handlers declared in the config."""
        for handler_config in config.get("handlers", {}).values():
            filename = handler_config.get("filename")
            if filename:
                Path(filename).parent.mkdir(parents=True, exist_ok=True)

    def setup_logging(
        self,
        component_name: str,
        log_level: Optional[str] = None,
        log_file: Optional[str] = None,
    ) -> logging.Logger:
        """
        Set up logging for a component with environment-aware configuration.

        Args:
            component_name: Name of the component
            log_level: Override log level (if None, uses environment-appropriate level:
                      Development=DEBUG, Staging=INFO, Production=WARNING)
            log_file: Log file path for the basic fallback configuration

        Returns:
            Configured logger instance
        """
        if log_level is None:
            log_level = self._get_environment_log_level()
        log_level = log_level.upper()

        config = self._load_yaml_config()

        if config:
            # dictConfig mutates its input
            config = self._apply_environment_level(copy.deepcopy(config), log_level)
            self._ensure_log_dirs(config)
            logging.config.dictConfig(config)

            logger = logging.getLogger(component_name)
            logger.setLevel(getattr(logging, log_level))
            self._suppress_noisy_loggers()
            return logger
        else:
            return self._setup_basic_logging(component_name, log_level, log_file)

    def _setup_basic_logging(
        self,
        component_name: str,
        log_level: str,
        log_file: Optional[str],
    ) -> logging.Logger:
        """Set up basic logging when YAML config is not available."""
        logger = logging.getLogger(component_name)
        logger.setLevel(getattr(logging, log_level))
        logger.handlers.clear()

        if self._environment == Environment.PRODUCTION:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        else:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )

        console_handler = logging.StreamHandler()
        console_handler.setLevel(logger.level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logger.level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        self._suppress_noisy_loggers()

        return logger

    def _suppress_noisy_loggers(self):
        """Suppress noisy third-party library loggers."""
        for logger_name in NOISY_LOGGERS:
            logging.getLogger(logger_name).setLevel(logging.WARNING)

    def get_environment(self) -> Environment:
        """Get current environment."""
        return self._environment


def setup_logging(
    component_name: str,
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    environment: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging for a component (convenience function).

    A new manager is built on every call so the environment is resolved
    when logging is configured, not when this module is imported.

    Args:
        component_name: Name of the component
        log_level: Override log level
        log_file: Log file path for the basic fallback configuration
        environment: Environment name, None reads ENVIRONMENT

    Returns:
        Configured logger instance
    """
    manager = LoggingManager(environment=environment)
    return manager.setup_logging(component_name, log_level, log_file)


def get_logger(component_name: str) -> logging.Logger:
    """Get a logger for a component."""
    return logging.getLogger(component_name)


def get_environment(environment: Optional[str] = None) -> Environment:
    """Resolve an environment name, None reads ENVIRONMENT."""
    return LoggingManager(environment=environment).get_environment()

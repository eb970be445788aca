"""Configuration management for the zooevents service."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_DATASET_PATH = "data/events.json"
DEFAULT_SERVER_BIND = "0.0.0.0"  # nosec B104 - service is meant to be reachable on the LAN
DEFAULT_SERVER_PORT = 3000
DEFAULT_MAX_INSTANCES = 10000

_TRUTHY = ("1", "true", "yes", "on")


class ConfigManager:
    """Manages application configuration from environment variables and .env files."""

    def __init__(self, env_file_path: Path | None = None):
        """Initialize configuration manager.

        Args:
            env_file_path: Optional path to .env file (defaults to .env in current directory)
        """
        self.env_file_path = env_file_path or Path.cwd() / ".env"

    def load_env_file(self) -> list[str]:
        """Load .env file and set environment variables.

        Only sets variables that are not already in the environment to avoid
        surprising overrides of user's environment.

        Returns:
            List of environment variable keys that were loaded from .env file
        """
        if not self.env_file_path.exists():
            logger.debug("No .env file found at %s", self.env_file_path)
            return []

        set_keys = []

        try:
            content = self.env_file_path.read_text(encoding="utf-8")
        except OSError:
            logger.warning("Failed to read .env file %s (continuing)", self.env_file_path, exc_info=True)
            return []

        for raw_line in content.splitlines():
            line = raw_line.strip()

            if not line or line.startswith("#") or "=" not in line:
                continue

            key, val = line.split("=", 1)
            key = key.strip()
            val = val.strip().strip('"').strip("'")

            if key and key not in os.environ:
                os.environ[key] = val
                set_keys.append(key)

        if set_keys:
            logger.debug("Loaded .env defaults for keys: %s", ", ".join(set_keys))

        return set_keys

    def build_config_from_env(self) -> dict[str, Any]:
        """Build configuration dictionary from environment variables.

        Recognizes:
        - ZOOEVENTS_DATASET_PATH -> 'dataset_path'
        - ZOOEVENTS_DEFAULT_TIMEZONE -> 'default_timezone'
        - ZOOEVENTS_WEB_HOST -> 'server_bind'
        - ZOOEVENTS_WEB_PORT -> 'server_port' (int)
        - ZOOEVENTS_MAX_INSTANCES -> 'max_instances_per_definition' (int)
        - ZOOEVENTS_DETERMINISTIC_TIES -> 'deterministic_ties' (bool)
        - ZOOEVENTS_LOG_LEVEL -> 'log_level'
        - ZOOEVENTS_DEBUG or ZOOEVENTS_LOG_LEVEL=DEBUG -> 'debug_logging' (bool)

        Returns:
            Configuration dictionary compatible with start_server
        """
        cfg: dict[str, Any] = {
            "dataset_path": os.environ.get("ZOOEVENTS_DATASET_PATH", DEFAULT_DATASET_PATH),
            "server_bind": os.environ.get("ZOOEVENTS_WEB_HOST", DEFAULT_SERVER_BIND),
            "server_port": DEFAULT_SERVER_PORT,
            "max_instances_per_definition": DEFAULT_MAX_INSTANCES,
        }

        port = os.environ.get("ZOOEVENTS_WEB_PORT")
        if port:
            try:
                cfg["server_port"] = int(port)
            except ValueError:
                logger.warning("Invalid ZOOEVENTS_WEB_PORT=%r; ignoring", port)

        max_instances = os.environ.get("ZOOEVENTS_MAX_INSTANCES")
        if max_instances:
            try:
                value = int(max_instances)
                if value <= 0:
                    raise ValueError(max_instances)
                cfg["max_instances_per_definition"] = value
            except ValueError:
                logger.warning("Invalid ZOOEVENTS_MAX_INSTANCES=%r; ignoring", max_instances)

        ties = os.environ.get("ZOOEVENTS_DETERMINISTIC_TIES")
        if ties is not None:
            cfg["deterministic_ties"] = ties.strip().lower() in _TRUTHY

        if os.environ.get("ZOOEVENTS_DEFAULT_TIMEZONE"):
            cfg["default_timezone"] = get_default_timezone()

        log_level = os.environ.get("ZOOEVENTS_LOG_LEVEL")
        if log_level:
            cfg["log_level"] = log_level.upper()

        cfg["debug_logging"] = (
            os.environ.get("ZOOEVENTS_DEBUG", "").strip().lower() in _TRUTHY
            or cfg.get("log_level") == "DEBUG"
        )

        return cfg

    def load_full_config(self) -> dict[str, Any]:
        """Load .env file and build configuration from environment.

        Returns:
            Configuration dictionary
        """
        self.load_env_file()
        return self.build_config_from_env()


def get_default_timezone(fallback: str = "UTC") -> str:
    """Get default timezone from environment with validation.

    Args:
        fallback: Fallback timezone if not configured or invalid

    Returns:
        Valid IANA timezone string
    """
    import zoneinfo

    timezone = os.environ.get("ZOOEVENTS_DEFAULT_TIMEZONE", fallback)

    try:
        zoneinfo.ZoneInfo(timezone)
        return timezone
    except (zoneinfo.ZoneInfoNotFoundError, ValueError):
        logger.warning("Invalid timezone %r, falling back to %r", timezone, fallback)
        return fallback


def get_config_value(config: Any, key: str, default: Any = None) -> Any:
    """Get configuration value supporting both dict and dataclass-like objects.

    Args:
        config: Configuration object (dict or object with attributes)
        key: Configuration key to retrieve
        default: Default value if key not found

    Returns:
        Configuration value or default
    """
    if isinstance(config, dict):
        return config.get(key, default)
    return getattr(config, key, default)

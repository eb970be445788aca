"""
Central logging configuration for zooevents.

Sets package and third-party logger levels so request handling stays quiet in
production while expansion diagnostics remain available in debug mode.
"""

import logging
import os
from typing import Optional

# Loggers of the package that follow the debug switch
PACKAGE_LOGGERS = (
    "zooevents",
    "zooevents.recurrence_expander",
    "zooevents.event_aggregator",
    "zooevents.dataset",
    "zooevents.api.server",
    "zooevents.api.routes",
)

# Third-party libraries that generate excessive debug logs
SUPPRESSED_LOGGERS = (
    "aiohttp.access",
    "aiohttp.server",
    "aiohttp.web_log",
    "asyncio",
)


def configure_lite_logging(debug_mode: bool = False, force_debug: Optional[bool] = None) -> None:
    """
    Configure logging levels for zooevents.

    Args:
        debug_mode: Whether to enable debug logging for zooevents modules
        force_debug: Override debug mode setting (None to use env var detection)

    Environment Variables:
        ZOOEVENTS_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        ZOOEVENTS_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv("ZOOEVENTS_DEBUG", "").lower() in ("1", "true", "yes")
    env_log_level = os.getenv("ZOOEVENTS_LOG_LEVEL", "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = logging.DEBUG if final_debug else logging.INFO
    if env_log_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
        root_level = getattr(logging, env_log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    logger_config: dict[str, int] = {name: logging.WARNING for name in SUPPRESSED_LOGGERS}
    logger_config["aiohttp.web"] = logging.INFO

    package_level = logging.DEBUG if final_debug else logging.INFO
    for module in PACKAGE_LOGGERS:
        logger_config[module] = package_level

    for logger_name, level in logger_config.items():
        logging.getLogger(logger_name).setLevel(level)

    if final_debug:
        root_logger.info("Debug logging enabled for zooevents modules")
    else:
        root_logger.info("Production logging configuration applied")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}

    for logger_name in ("zooevents", "aiohttp.access", "aiohttp.server", "asyncio"):
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)

    return status

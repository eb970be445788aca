"""zooevents - recurring event expansion for the Zoo app.

The package root exposes the expansion core. The aiohttp adapter lives in
``zooevents.api`` and is only imported when the server is started.
"""

__version__ = "0.1.0"

from typing import Any, Optional

from .calendar_step import FIXED_UNIT_DURATIONS, CalendarStep
from .event_aggregator import EventSetAggregator, expand_all
from .exceptions import (
    DatasetError,
    EventRangeError,
    ExpansionLimitError,
    RecurrenceConfigurationError,
    ZooEventsError,
)
from .instance_ids import InstanceIdAllocator
from .interval_overlap import overlaps
from .lite_models import EventDefinition, EventInstance, Recurrence, RecurrenceUnit
from .recurrence_expander import ExpanderConfig, RecurrenceExpander

__all__ = [
    "FIXED_UNIT_DURATIONS",
    "CalendarStep",
    "DatasetError",
    "EventDefinition",
    "EventInstance",
    "EventRangeError",
    "EventSetAggregator",
    "ExpanderConfig",
    "ExpansionLimitError",
    "InstanceIdAllocator",
    "Recurrence",
    "RecurrenceConfigurationError",
    "RecurrenceExpander",
    "RecurrenceUnit",
    "ZooEventsError",
    "expand_all",
    "overlaps",
    "run_server",
]


def _init_logging(level_name: Optional[str]) -> None:
    """Initialize root logging to stream to console.

    Honors ZOOEVENTS_DEBUG (truthy values: "1", "true", "yes", "on") which
    forces DEBUG verbosity regardless of the requested level.
    """
    import logging
    import os
    import sys

    from colorlog import ColoredFormatter

    debug_env = os.environ.get("ZOOEVENTS_DEBUG", "")
    if debug_env.strip().lower() in ("1", "true", "yes", "on"):
        level_name = "DEBUG"

    root = logging.getLogger()
    # Only configure a handler if none is present to avoid duplicate output.
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        # HH:MM:SS  LEVEL   logger.name: message, only the level is colorized
        fmt = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
        log_colors = {
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        }
        handler.setFormatter(ColoredFormatter(fmt, datefmt="%H:%M:%S", log_colors=log_colors))
        root.addHandler(handler)

    level = logging.INFO
    if isinstance(level_name, str):
        level = getattr(logging, level_name.upper(), logging.INFO)
    root.setLevel(level)
    logging.getLogger(__name__).debug(
        "Logging initialized at level %s", logging.getLevelName(level)
    )


def run_server(config: Optional[dict[str, Any]] = None) -> None:
    """Start the HTTP server with configuration from the environment.

    Args:
        config: Overrides applied on top of the environment configuration
    """
    import logging
    import os

    _init_logging(os.environ.get("ZOOEVENTS_LOG_LEVEL"))

    from .api.server import _build_default_config_from_env, start_server

    cfg = _build_default_config_from_env()
    if config:
        cfg.update(config)

    logger = logging.getLogger(__name__)
    logger.debug(
        "Resolved configuration (diagnostic): %s",
        {k: cfg.get(k) for k in ("dataset_path", "default_timezone", "server_bind", "server_port")},
    )
    start_server(cfg)

"""zooevents.api.server: aiohttp HTTP adapter around the expansion core.

Exposes GET /events?from=...&to=... (expanded instances of the configured
dataset) and GET /health. The dataset is re-read on every request so edits to
the JSON file are picked up without a restart.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional
from zoneinfo import ZoneInfo

from aiohttp import web

from ..config_manager import (
    DEFAULT_DATASET_PATH,
    DEFAULT_SERVER_BIND,
    DEFAULT_SERVER_PORT,
    ConfigManager,
    get_config_value,
)
from ..dataset import load_event_definitions
from ..event_aggregator import EventSetAggregator
from ..lite_logging import configure_lite_logging
from ..lite_models import EventDefinition
from .routes import DefinitionsProvider, register_event_routes

logger = logging.getLogger(__name__)


def _build_default_config_from_env() -> dict[str, Any]:
    """Load .env defaults and build the server configuration."""
    return ConfigManager().load_full_config()


def _resolve_timezone(config: Any) -> Optional[ZoneInfo]:
    name = get_config_value(config, "default_timezone")
    return ZoneInfo(name) if name else None


def create_app(
    config: Any,
    definitions_provider: Optional[DefinitionsProvider] = None,
) -> web.Application:
    """Create aiohttp web application with event routes.

    Args:
        config: dict or object with dataset_path, default_timezone,
            max_instances_per_definition and deterministic_ties
        definitions_provider: Override for the dataset loader (tests)
    """
    if definitions_provider is None:
        dataset_path = get_config_value(config, "dataset_path", DEFAULT_DATASET_PATH)

        def _load_dataset() -> list[EventDefinition]:
            return load_event_definitions(dataset_path)

        definitions_provider = _load_dataset

    app = web.Application()
    register_event_routes(
        app,
        definitions_provider=definitions_provider,
        aggregator=EventSetAggregator.from_settings(config),
        timezone=_resolve_timezone(config),
    )

    async def _shutdown(_app: web.Application) -> None:
        logger.info("Application shutdown requested")

    app.on_shutdown.append(_shutdown)
    return app


async def _serve(config: Any) -> None:
    """Run the web server until cancelled."""
    app = create_app(config)
    runner = web.AppRunner(app)
    await runner.setup()

    host = get_config_value(config, "server_bind", DEFAULT_SERVER_BIND)
    port = int(get_config_value(config, "server_port", DEFAULT_SERVER_PORT))
    site = web.TCPSite(runner, host=host, port=port)
    try:
        await site.start()
    except OSError:
        logger.exception("Failed to start server on %s:%d", host, port)
        await runner.cleanup()
        raise

    logger.info("Server running at http://%s:%d", host, port)
    try:
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()


def start_server(config: Any) -> None:
    """Start the asyncio event loop and HTTP server.

    Blocks the calling thread until interrupted.
    """
    configure_lite_logging(debug_mode=get_config_value(config, "debug_logging", False))

    try:
        asyncio.run(_serve(config))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")

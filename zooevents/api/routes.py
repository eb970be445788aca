"""Event API routes for zooevents."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Optional
from zoneinfo import ZoneInfo

from aiohttp import web

from ..event_aggregator import EventSetAggregator
from ..exceptions import (
    DatasetError,
    EventRangeError,
    ExpansionLimitError,
    RecurrenceConfigurationError,
)
from ..lite_datetime_utils import coerce_timestamp
from ..lite_logging import get_logging_status
from ..lite_models import EventDefinition

logger = logging.getLogger(__name__)

DefinitionsProvider = Callable[[], list[EventDefinition]]


def _error_response(status: int, error: str, message: str) -> web.Response:
    return web.json_response({"error": error, "message": message}, status=status)


def _parse_window(request: web.Request) -> tuple[Any, Any]:
    """Read ``from``/``to`` query parameters as aware datetimes.

    Raises:
        ValueError: If a parameter is missing or not a timestamp
    """
    params = {}
    for name in ("from", "to"):
        raw = request.query.get(name)
        if raw is None:
            raise ValueError(f"Missing required query parameter '{name}'")
        try:
            params[name] = coerce_timestamp(raw)
        except ValueError as e:
            raise ValueError(f"Invalid '{name}' parameter: {e}") from e
    return params["from"], params["to"]


def register_event_routes(
    app: web.Application,
    definitions_provider: DefinitionsProvider,
    aggregator: EventSetAggregator,
    timezone: Optional[ZoneInfo] = None,
) -> None:
    """Register event routes.

    Args:
        app: aiohttp web application
        definitions_provider: Callable returning the current event definitions
        aggregator: Configured aggregator used to expand definitions
        timezone: Calendar for all-day boundaries and month/year stepping
    """

    async def list_events(request: web.Request) -> web.Response:
        """Expand all event definitions over the ``from``/``to`` window."""
        try:
            window_start, window_end = _parse_window(request)
        except ValueError as e:
            return _error_response(400, "invalid_request", str(e))

        if window_start > window_end:
            return _error_response(400, "invalid_range", "'from' must not be after 'to'")

        epoch_ms = request.query.get("format", "iso").lower() == "ms"

        try:
            definitions = definitions_provider()
            instances = aggregator.expand_all(
                definitions, window_start, window_end, timezone=timezone
            )
        except EventRangeError as e:
            logger.warning("Rejected event window %s - %s: %s", window_start, window_end, e)
            return _error_response(400, "invalid_range", str(e))
        except (RecurrenceConfigurationError, ExpansionLimitError, DatasetError) as e:
            logger.exception("Event expansion failed for window %s - %s", window_start, window_end)
            return _error_response(500, type(e).__name__, str(e))

        logger.debug(" /events returned %d instances", len(instances))
        return web.json_response(
            {
                "from": window_start.isoformat(),
                "to": window_end.isoformat(),
                "count": len(instances),
                "events": [instance.to_api_dict(epoch_ms=epoch_ms) for instance in instances],
            }
        )

    async def health_check(_request: web.Request) -> web.Response:
        """Report whether the event dataset can be loaded, with current log levels."""
        try:
            definition_count = len(definitions_provider())
        except DatasetError as e:
            logger.warning("Health check failed: %s", e)
            return web.json_response({"status": "degraded", "error": str(e)}, status=503)
        return web.json_response(
            {
                "status": "ok",
                "definition_count": definition_count,
                "logging": get_logging_status(),
            }
        )

    app.router.add_get("/events", list_events)
    app.router.add_get("/health", health_check)

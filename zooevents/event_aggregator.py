"""Expansion of a whole set of event definitions into one sorted timeline."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Optional
from zoneinfo import ZoneInfo

from .lite_datetime_utils import coerce_timestamp
from .lite_models import EventDefinition, EventInstance
from .recurrence_expander import ExpanderConfig, RecurrenceExpander

logger = logging.getLogger(__name__)


def _start_key(instance: EventInstance) -> Any:
    return instance.start_date


def _start_then_id_key(instance: EventInstance) -> Any:
    return (instance.start_date, instance.definition_id, instance.sequence)


class EventSetAggregator:
    """Runs a RecurrenceExpander over many definitions and merges the results."""

    def __init__(self, expander: Optional[RecurrenceExpander] = None):
        self.expander = expander or RecurrenceExpander()

    @classmethod
    def from_settings(cls, settings: Any) -> EventSetAggregator:
        """Build an aggregator from a config dict or settings object."""
        return cls(RecurrenceExpander(ExpanderConfig.from_settings(settings)))

    def expand_all(
        self,
        definitions: Iterable[EventDefinition],
        window_start: Any,
        window_end: Any,
        *,
        timezone: Optional[ZoneInfo] = None,
        deterministic_ties: Optional[bool] = None,
    ) -> list[EventInstance]:
        """Expand every definition and return all instances sorted by start_date.

        Instances with equal start times keep the order in which their
        definitions were given unless ``deterministic_ties`` is set, in which
        case they are ordered by definition id and then sequence.

        Args:
            definitions: Event definitions to expand
            window_start: Window start (datetime, epoch ms or ISO string)
            window_end: Window end (datetime, epoch ms or ISO string)
            timezone: Calendar for all-day boundaries and month/year stepping
            deterministic_ties: Override the configured tie-break behaviour

        Raises:
            RecurrenceConfigurationError: If any definition has an invalid recurrence
            ExpansionLimitError: If any definition exceeds the instance limit
        """
        window_start = coerce_timestamp(window_start)
        window_end = coerce_timestamp(window_end)
        if deterministic_ties is None:
            deterministic_ties = self.expander.config.deterministic_ties

        instances: list[EventInstance] = []
        definition_count = 0
        for definition in definitions:
            definition_count += 1
            instances.extend(self.expander.expand(definition, window_start, window_end, timezone))

        instances.sort(key=_start_then_id_key if deterministic_ties else _start_key)
        logger.debug(
            "Expanded %d definitions into %d instances for window %s - %s",
            definition_count,
            len(instances),
            window_start.isoformat(),
            window_end.isoformat(),
        )
        return instances


def expand_all(
    definitions: Iterable[EventDefinition],
    window_start: Any,
    window_end: Any,
    *,
    timezone: Optional[ZoneInfo] = None,
    deterministic_ties: Optional[bool] = None,
    config: Optional[ExpanderConfig] = None,
) -> list[EventInstance]:
    """Expand ``definitions`` over [window_start, window_end], sorted by start_date.

    Convenience wrapper around :class:`EventSetAggregator` for callers that do
    not keep an aggregator around.
    """
    aggregator = EventSetAggregator(RecurrenceExpander(config))
    return aggregator.expand_all(
        definitions,
        window_start,
        window_end,
        timezone=timezone,
        deterministic_ties=deterministic_ties,
    )

"""Recurrence expansion of a single event definition into window instances."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional
from zoneinfo import ZoneInfo

from .calendar_step import CalendarStep, add_elapsed, elapsed_between, parse_unit
from .config_manager import DEFAULT_MAX_INSTANCES, get_config_value
from .exceptions import ExpansionLimitError, RecurrenceConfigurationError
from .instance_ids import InstanceIdAllocator
from .interval_overlap import overlaps
from .lite_datetime_utils import coerce_timestamp, end_of_day, localize, start_of_day
from .lite_models import EventDefinition, EventInstance, RecurrenceUnit

logger = logging.getLogger(__name__)


@dataclass
class ExpanderConfig:
    """Configuration for recurrence expansion.

    Consolidates expansion settings with explicit defaults.
    """

    max_instances_per_definition: int = DEFAULT_MAX_INSTANCES
    deterministic_ties: bool = False

    @classmethod
    def from_settings(cls, settings: Any) -> ExpanderConfig:
        """Extract expansion configuration from a settings dict or object.

        Args:
            settings: Configuration dict or object with expansion settings

        Returns:
            ExpanderConfig with values from settings or defaults
        """
        if settings is None:
            return cls()
        return cls(
            max_instances_per_definition=int(
                get_config_value(settings, "max_instances_per_definition", DEFAULT_MAX_INSTANCES)
            ),
            deterministic_ties=bool(get_config_value(settings, "deterministic_ties", False)),
        )


class RecurrenceExpander:
    """Expands one EventDefinition into the instances intersecting a window."""

    def __init__(self, config: Optional[ExpanderConfig] = None, stepper: Optional[CalendarStep] = None):
        """Initialize expander.

        Args:
            config: Expansion limits (defaults to ExpanderConfig())
            stepper: Calendar stepping rules (defaults to CalendarStep())
        """
        self.config = config or ExpanderConfig()
        self.stepper = stepper or CalendarStep()

    def expand(
        self,
        definition: EventDefinition,
        window_start: Any,
        window_end: Any,
        timezone: Optional[ZoneInfo] = None,
    ) -> list[EventInstance]:
        """Return every occurrence of ``definition`` overlapping [window_start, window_end].

        Args:
            definition: Event definition to expand (not modified)
            window_start: Window start (datetime, epoch ms or ISO string)
            window_end: Window end (datetime, epoch ms or ISO string)
            timezone: Calendar used for all-day boundaries and month/year
                stepping; defaults to each timestamp's own tzinfo

        Returns:
            Instances in chronological order with ids ``"<id>:0"``, ``"<id>:1"``, ...

        Raises:
            RecurrenceConfigurationError: If the recurrence unit or count is invalid
            ExpansionLimitError: If more than max_instances_per_definition
                instances overlap the window
        """
        window_start = coerce_timestamp(window_start)
        window_end = coerce_timestamp(window_end)
        # Bad recurrences are reported whatever the window, never skipped silently.
        rule = self._validate_recurrence(definition) if definition.is_recurring else None
        if window_start > window_end:
            return []

        start, end = self._effective_bounds(definition, timezone)
        if start > window_end:
            return []
        # Applies to single events only: a recurring definition whose first
        # occurrence ends before the window can still have later occurrences in it.
        if rule is None and end < window_start:
            return []

        allocator = InstanceIdAllocator(definition)

        if rule is None:
            if overlaps(start, end, window_start, window_end):
                allocator.allocate(start, end)
            return allocator.instances

        unit, count = rule
        duration = elapsed_between(start, end)

        index = self._fast_forward_index(start, duration, unit, count, window_start)
        skipped = index
        current_start = self._occurrence(start, unit, count, index)
        while current_start <= window_end:
            current_end = add_elapsed(current_start, duration)
            if overlaps(current_start, current_end, window_start, window_end):
                if len(allocator) >= self.config.max_instances_per_definition:
                    raise ExpansionLimitError(
                        f"Event {definition.id!r} produces more than "
                        f"{self.config.max_instances_per_definition} instances in the window"
                    )
                allocator.allocate(current_start, current_end)
            index += 1
            current_start = self._next_occurrence(start, unit, count, index)
            if current_start is None:
                break

        logger.debug(
            "Expanded %s (%s x%d): fast-forwarded %d steps, %d instances in window",
            definition.id,
            unit.value,
            count,
            skipped,
            len(allocator),
        )
        return allocator.instances

    def _effective_bounds(
        self, definition: EventDefinition, timezone: Optional[ZoneInfo]
    ) -> tuple[datetime, datetime]:
        """Definition start/end in the expansion calendar, widened to whole days if all-day."""
        start = localize(definition.start_date, timezone)
        end = localize(definition.end_date, timezone)
        if definition.all_day:
            start = start_of_day(start)
            end = end_of_day(end)
        return start, end

    def _validate_recurrence(self, definition: EventDefinition) -> tuple[RecurrenceUnit, int]:
        recurrence = definition.recurrence
        if recurrence is None:
            raise RecurrenceConfigurationError("Definition has no recurrence", definition.id)
        unit = parse_unit(recurrence.unit, definition.id)
        if recurrence.count <= 0:
            raise RecurrenceConfigurationError(
                f"Recurrence count must be positive, got {recurrence.count}", definition.id
            )
        return unit, recurrence.count

    def _occurrence(self, anchor: datetime, unit: RecurrenceUnit, count: int, index: int) -> datetime:
        """Start of the ``index``-th occurrence, always measured from the series anchor."""
        if index == 0:
            return anchor
        return self.stepper.step(anchor, unit, count * index)

    def _fast_forward_index(
        self,
        anchor: datetime,
        duration: timedelta,
        unit: RecurrenceUnit,
        count: int,
        window_start: datetime,
    ) -> int:
        """Index of an occurrence at or before the first one that can overlap the window.

        Occurrences starting before ``window_start - duration`` end before the
        window. The step estimate is rounded down, then backed off until the
        chosen occurrence does not start after that bound, so no overlapping
        occurrence is ever skipped.
        """
        try:
            earliest_start = add_elapsed(window_start, -duration)
        except OverflowError:
            return 0
        if anchor >= earliest_start:
            return 0

        index = self.stepper.approximate_step_count(anchor, earliest_start, unit, count)
        while index > 0 and self._occurrence(anchor, unit, count, index) > earliest_start:
            index -= 1
        return index

    def _next_occurrence(
        self, anchor: datetime, unit: RecurrenceUnit, count: int, index: int
    ) -> Optional[datetime]:
        """Like _occurrence, but None once the series runs past the datetime range."""
        try:
            return self._occurrence(anchor, unit, count, index)
        except RecurrenceConfigurationError:
            raise
        except (OverflowError, ValueError):
            # Beyond year 9999, which is past any representable window end.
            return None

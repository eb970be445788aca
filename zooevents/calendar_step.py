"""Per-unit stepping rules for recurring events.

Hour, day and week are fixed durations and are added on the UTC timeline.
Month and year are calendar-variable and are added with
``dateutil.relativedelta``, which clamps to the last day of a shorter target
month: Jan 31 + 1 month is Feb 28 (Feb 29 in leap years), and Feb 29 + 1 year
is Feb 28. Callers that need a stable day-of-month across a series step from
the series anchor (``anchor + n * count``) rather than chaining steps, so a
single clamp never carries into later occurrences.
"""

from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from types import MappingProxyType
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from .exceptions import RecurrenceConfigurationError
from .lite_models import RecurrenceUnit

FIXED_UNIT_DURATIONS: Mapping[RecurrenceUnit, timedelta] = MappingProxyType(
    {
        RecurrenceUnit.HOUR: timedelta(milliseconds=3_600_000),
        RecurrenceUnit.DAY: timedelta(milliseconds=86_400_000),
        RecurrenceUnit.WEEK: timedelta(milliseconds=604_800_000),
    }
)

# Longest real length of each calendar-variable unit. Dividing by these keeps
# step-count estimates from ever being too large.
LONGEST_CALENDAR_UNIT: Mapping[RecurrenceUnit, timedelta] = MappingProxyType(
    {
        RecurrenceUnit.MONTH: timedelta(days=31),
        RecurrenceUnit.YEAR: timedelta(days=366),
    }
)


def parse_unit(
    unit: Union[str, RecurrenceUnit], definition_id: Optional[str] = None
) -> RecurrenceUnit:
    """Resolve a unit name to a RecurrenceUnit.

    Raises:
        RecurrenceConfigurationError: If the unit is not recognized
    """
    if isinstance(unit, RecurrenceUnit):
        return unit
    try:
        return RecurrenceUnit(unit)
    except ValueError as e:
        raise RecurrenceConfigurationError(
            f"Unsupported recurrence unit {unit!r}", definition_id
        ) from e


def add_elapsed(timestamp: datetime, delta: timedelta) -> datetime:
    """Add an exact duration, ignoring wall-clock shifts of the timestamp's zone."""
    if timestamp.tzinfo is None:
        return timestamp + delta
    return (timestamp.astimezone(UTC) + delta).astimezone(timestamp.tzinfo)


def elapsed_between(start: datetime, end: datetime) -> timedelta:
    """Exact time between two timestamps, ignoring wall-clock shifts."""
    if start.tzinfo is None or end.tzinfo is None:
        return end - start
    return end.astimezone(UTC) - start.astimezone(UTC)


class CalendarStep:
    """Advance timestamps by whole recurrence units."""

    def __init__(self, fixed_durations: Mapping[RecurrenceUnit, timedelta] = FIXED_UNIT_DURATIONS):
        """Initialize stepper.

        Args:
            fixed_durations: Exact length of each fixed-duration unit
        """
        self.fixed_durations = fixed_durations

    def step(
        self, timestamp: datetime, unit: Union[str, RecurrenceUnit], multiplier: int
    ) -> datetime:
        """Return ``timestamp`` advanced by ``multiplier`` repetitions of ``unit``.

        Raises:
            RecurrenceConfigurationError: If multiplier is not positive or the
                unit has no stepping rule
        """
        unit = parse_unit(unit)
        if multiplier <= 0:
            raise RecurrenceConfigurationError(
                f"Step multiplier must be positive, got {multiplier}"
            )

        if unit is RecurrenceUnit.MONTH:
            return timestamp + relativedelta(months=multiplier)
        if unit is RecurrenceUnit.YEAR:
            return timestamp + relativedelta(years=multiplier)

        duration = self.fixed_durations.get(unit)
        if duration is None:
            raise RecurrenceConfigurationError(f"No fixed duration configured for unit {unit.value!r}")
        return add_elapsed(timestamp, duration * multiplier)

    def approximate_step_count(
        self,
        anchor: datetime,
        target: datetime,
        unit: Union[str, RecurrenceUnit],
        multiplier: int,
    ) -> int:
        """Estimate how many steps of ``multiplier`` units fit between anchor and target.

        Exact for fixed-duration units. For month and year the longest
        possible unit length is used, so the estimate rounds down and may
        undershoot by a few steps but never exceeds the true count.
        """
        unit = parse_unit(unit)
        if multiplier <= 0:
            raise RecurrenceConfigurationError(
                f"Step multiplier must be positive, got {multiplier}"
            )
        if target <= anchor:
            return 0

        if unit.is_calendar_variable:
            unit_length = LONGEST_CALENDAR_UNIT[unit]
        else:
            unit_length = self.fixed_durations.get(unit)
            if unit_length is None:
                raise RecurrenceConfigurationError(
                    f"No fixed duration configured for unit {unit.value!r}"
                )
        return elapsed_between(anchor, target) // (unit_length * multiplier)

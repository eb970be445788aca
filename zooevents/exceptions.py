"""Custom exception hierarchy for event expansion errors.

This module provides specific exception types for the expansion core so the
HTTP layer and CLI can translate failures into proper status codes without
matching on generic exceptions.
"""

from __future__ import annotations

from typing import Optional


class ZooEventsError(Exception):
    """Base exception for all zooevents errors.

    All custom exceptions in the package inherit from this base class to
    enable centralized exception handling and consistent error responses.
    """


class EventRangeError(ZooEventsError, ValueError):
    """An interval passed to the overlap check is inverted.

    Raised when:
    - An event interval has start after end
    - A query window has from after to

    Should result in HTTP 400 Bad Request response.
    """


class RecurrenceConfigurationError(ZooEventsError, ValueError):
    """A recurrence definition cannot be expanded.

    Raised when:
    - recurrence.count is zero or negative
    - recurrence.unit is not one of hour/day/week/month/year
    - A calendar step is requested with a non-positive multiplier

    Should result in HTTP 500 Internal Server Error response, since the
    dataset rather than the request is at fault.
    """

    def __init__(self, message: str, definition_id: Optional[str] = None):
        self.definition_id = definition_id
        if definition_id is not None:
            message = f"{message} (event {definition_id!r})"
        super().__init__(message)


class ExpansionLimitError(ZooEventsError):
    """A single definition produced more instances than allowed.

    Raised instead of silently truncating the result when the query window
    is large compared to the recurrence interval (e.g. hourly over years).
    """


class DatasetError(ZooEventsError):
    """The event dataset is missing, unreadable or malformed."""

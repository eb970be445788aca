"""Closed-interval overlap check between an event and a query window."""

from datetime import datetime

from .exceptions import EventRangeError


def overlaps(
    event_start: datetime,
    event_end: datetime,
    window_start: datetime,
    window_end: datetime,
) -> bool:
    """Check whether an event interval intersects a query window.

    Both intervals are closed: an event ending exactly at ``window_start`` or
    starting exactly at ``window_end`` counts as overlapping. This is the
    union of three cases:

        --S-+++++++-E--   event spans the whole window
        --S-++++++E+---   event ends inside the window
        ---+S++++++-E--   event starts inside the window

    Args:
        event_start: Start of the event occurrence
        event_end: End of the event occurrence
        window_start: Start of the query window
        window_end: End of the query window

    Returns:
        True if the two intervals share at least one instant

    Raises:
        EventRangeError: If either interval is inverted
    """
    if event_start > event_end:
        raise EventRangeError(
            f"Event interval is inverted: {event_start.isoformat()} > {event_end.isoformat()}"
        )
    if window_start > window_end:
        raise EventRangeError(
            f"Query window is inverted: {window_start.isoformat()} > {window_end.isoformat()}"
        )
    return max(event_start, window_start) <= min(event_end, window_end)

"""Unit tests for zooevents.interval_overlap.overlaps."""

from datetime import UTC, datetime, timedelta

import pytest

from zooevents.exceptions import EventRangeError
from zooevents.interval_overlap import overlaps

pytestmark = [pytest.mark.unit, pytest.mark.fast]

T0 = datetime(2023, 1, 1, tzinfo=UTC)


def at(hours: float) -> datetime:
    return T0 + timedelta(hours=hours)


def three_case_overlap(event_start, event_end, window_start, window_end) -> bool:
    """Reference formulation as three disjoint-looking cases."""
    return (
        (event_start <= window_start and event_end >= window_end)
        or (window_start <= event_end <= window_end)
        or (window_start <= event_start <= window_end)
    )


class TestOverlaps:
    """Closed-interval semantics."""

    def test_event_inside_window(self):
        assert overlaps(at(2), at(3), at(1), at(4))

    def test_event_spans_window(self):
        assert overlaps(at(0), at(10), at(4), at(5))

    def test_event_end_inside_window(self):
        assert overlaps(at(0), at(2), at(1), at(4))

    def test_event_start_inside_window(self):
        assert overlaps(at(3), at(9), at(1), at(4))

    def test_event_before_window(self):
        assert not overlaps(at(0), at(1), at(2), at(3))

    def test_event_after_window(self):
        assert not overlaps(at(4), at(5), at(2), at(3))

    def test_end_touching_window_start_is_included(self):
        assert overlaps(at(0), at(2), at(2), at(3))

    def test_start_touching_window_end_is_included(self):
        assert overlaps(at(3), at(5), at(2), at(3))

    def test_point_event_on_point_window(self):
        assert overlaps(at(1), at(1), at(1), at(1))

    def test_point_event_next_to_point_window(self):
        assert not overlaps(at(1), at(1), at(1.5), at(1.5))

    @pytest.mark.parametrize("event", [(0, 1), (0, 2), (1, 3), (2, 2), (3, 4), (4, 6), (0, 6), (5, 6)])
    @pytest.mark.parametrize("window", [(2, 4), (2, 2), (4, 4)])
    def test_matches_three_case_formulation(self, event, window):
        """max/min formulation agrees with the three-case formulation on every boundary."""
        args = (at(event[0]), at(event[1]), at(window[0]), at(window[1]))
        assert overlaps(*args) == three_case_overlap(*args)


class TestOverlapPreconditions:
    """Inverted ranges are errors, not False."""

    def test_inverted_event_raises(self):
        with pytest.raises(EventRangeError, match="Event interval"):
            overlaps(at(2), at(1), at(0), at(5))

    def test_inverted_window_raises(self):
        with pytest.raises(EventRangeError, match="Query window"):
            overlaps(at(1), at(2), at(5), at(0))

    def test_range_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            overlaps(at(2), at(1), at(0), at(5))

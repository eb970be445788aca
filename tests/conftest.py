"""Shared fixtures for zooevents tests."""

from collections.abc import Callable, Generator
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from zooevents.lite_models import EventDefinition


@pytest.fixture
def make_definition() -> Callable[..., EventDefinition]:
    """Factory building EventDefinitions with sensible defaults.

    Keyword arguments override fields; ``duration`` (timedelta) sets
    end_date relative to start_date when end_date is not given.
    """

    def _make(
        id: str = "e1",
        start_date: Any = datetime(2023, 1, 1, tzinfo=UTC),
        end_date: Any = None,
        duration: timedelta = timedelta(hours=1),
        **extra: Any,
    ) -> EventDefinition:
        if end_date is None:
            end_date = start_date + duration
        return EventDefinition(id=id, start_date=start_date, end_date=end_date, **extra)

    return _make


@pytest.fixture
def weekly_definition(make_definition: Callable[..., EventDefinition]) -> EventDefinition:
    """Weekly one-hour event starting 2023-01-01T00:00Z."""
    return make_definition(recurrence={"unit": "week", "count": 1})


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, Any, None]:
    """Ensure ZOOEVENTS_* variables from the host do not leak into tests."""
    import os

    for key in list(os.environ):
        if key.startswith("ZOOEVENTS_"):
            monkeypatch.delenv(key, raising=False)
    yield

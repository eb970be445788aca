"""Static JSON dataset provider for event definitions."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from .exceptions import DatasetError
from .lite_models import EventDefinition

logger = logging.getLogger(__name__)

_DEFINITIONS_ADAPTER = TypeAdapter(list[EventDefinition])


def parse_event_definitions(data: Iterable[Any]) -> list[EventDefinition]:
    """Validate raw JSON-like records into EventDefinitions.

    Raises:
        DatasetError: If any record is malformed
    """
    try:
        return _DEFINITIONS_ADAPTER.validate_python(list(data))
    except ValidationError as e:
        raise DatasetError(f"Invalid event definitions: {e.error_count()} error(s)\n{e}") from e


def load_event_definitions(path: str | Path) -> list[EventDefinition]:
    """Load and validate the event dataset at ``path``.

    The file holds a JSON array of definitions, or an object with an
    ``events`` array.

    Raises:
        DatasetError: If the file cannot be read, is not JSON or fails validation
    """
    dataset_path = Path(path)
    try:
        raw = json.loads(dataset_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise DatasetError(f"Cannot read event dataset {dataset_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise DatasetError(f"Event dataset {dataset_path} is not valid JSON: {e}") from e

    if isinstance(raw, dict):
        raw = raw.get("events")
    if not isinstance(raw, list):
        raise DatasetError(f"Event dataset {dataset_path} must contain a list of events")

    definitions = parse_event_definitions(raw)
    logger.debug("Loaded %d event definitions from %s", len(definitions), dataset_path)
    return definitions

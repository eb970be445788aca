"""Instance id allocation for expanded occurrences."""

from collections import Counter
from datetime import datetime

from .lite_models import EventDefinition, EventInstance


class InstanceIdAllocator:
    """Stamp occurrences of one definition with ``"<id>:<n>"`` ids.

    ``n`` counts the instances already produced for the same base id, so ids
    are dense and start at 0 within a single expansion. Ids are not unique
    across definitions that share a base id.
    """

    def __init__(self, definition: EventDefinition):
        self.definition = definition
        self.instances: list[EventInstance] = []
        self._sequences: Counter[str] = Counter()
        self._template = definition.model_dump(exclude={"id", "start_date", "end_date", "definition_id", "sequence"})

    def allocate(self, start: datetime, end: datetime) -> EventInstance:
        """Create the next instance with concrete times and append it."""
        base_id = self.definition.id
        sequence = self._sequences[base_id]
        instance = EventInstance(
            **self._template,
            id=f"{base_id}:{sequence}",
            start_date=start,
            end_date=end,
            definition_id=base_id,
            sequence=sequence,
        )
        self._sequences[base_id] += 1
        self.instances.append(instance)
        return instance

    def __len__(self) -> int:
        return len(self.instances)

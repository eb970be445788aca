"""Data models for event definitions and expanded instances."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from .lite_datetime_utils import coerce_timestamp, to_epoch_ms


class RecurrenceUnit(str, Enum):
    """Supported recurrence granularities."""

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def is_calendar_variable(self) -> bool:
        """Month and year have no fixed length in milliseconds."""
        return self in (RecurrenceUnit.MONTH, RecurrenceUnit.YEAR)


class Recurrence(BaseModel):
    """Recurrence pattern of an event definition.

    ``unit`` and ``count`` are deliberately loose here: a dataset entry with
    an unknown unit or a non-positive count must still load so that the
    expander can report it as a configuration error naming the event.
    """

    unit: str = Field(..., description="One of hour, day, week, month, year")
    count: int = Field(..., description="Number of units between occurrences")

    model_config = ConfigDict(frozen=True)


class EventDefinition(BaseModel):
    """A caller-supplied, possibly recurring, event description.

    Fields beyond the ones declared here (title, description, image, ...)
    are kept and copied onto every expanded instance.
    """

    id: str = Field(..., description="Caller-assigned unique identifier")
    start_date: datetime = Field(..., description="Start of the first occurrence")
    end_date: datetime = Field(..., description="End of the first occurrence")
    all_day: bool = Field(default=False, description="Occupies whole calendar days")
    recurrence: Optional[Recurrence] = Field(default=None, description="Repeat pattern")

    model_config = ConfigDict(extra="allow", frozen=True)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def coerce_dates(cls, value: Any) -> datetime:
        return coerce_timestamp(value)

    @model_validator(mode="after")
    def check_date_order(self) -> "EventDefinition":
        if self.start_date > self.end_date:
            raise ValueError(
                f"start_date {self.start_date.isoformat()} is after "
                f"end_date {self.end_date.isoformat()}"
            )
        return self

    @property
    def is_recurring(self) -> bool:
        """Check if the definition repeats."""
        return self.recurrence is not None


class EventInstance(EventDefinition):
    """One concrete occurrence of an EventDefinition.

    ``id`` is ``"<definition_id>:<sequence>"``; start and end are the
    occurrence's absolute times.
    """

    definition_id: str = Field(..., description="Id of the originating definition")
    sequence: int = Field(..., ge=0, description="Zero-based position in the expansion")

    @field_serializer("start_date", "end_date", when_used="json")
    def serialize_dates(self, value: datetime) -> str:
        return value.isoformat()

    def to_api_dict(self, epoch_ms: bool = False) -> dict[str, Any]:
        """Serialize for JSON responses.

        Args:
            epoch_ms: Emit start/end as epoch milliseconds (the dataset format)
                instead of ISO-8601 strings
        """
        data = self.model_dump(mode="json")
        if epoch_ms:
            data["start_date"] = to_epoch_ms(self.start_date)
            data["end_date"] = to_epoch_ms(self.end_date)
        return data

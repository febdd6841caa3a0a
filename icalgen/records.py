"""Internal calendar records handed from the builder to the encoder."""

from datetime import date, datetime
from enum import Enum
from typing import Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

ICAL_PRODUCT_ID = "-//Paqrat76//ical-gen-app//EN"
ICAL_SCALE_GREGORIAN = "GREGORIAN"


class Classification(str, Enum):
    """Access classification of an event (RFC 5545 CLASS)."""

    PUBLIC = "PUBLIC"


class Transparency(str, Enum):
    """Whether an event blocks time for free/busy lookups (RFC 5545 TRANSP)."""

    TRANSPARENT = "TRANSPARENT"
    OPAQUE = "OPAQUE"


class AllDayTiming(BaseModel):
    """Timing of an all-day event."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["all_day"] = "all_day"
    start_date: date = Field(..., description="Day the event takes place")


class TimedTiming(BaseModel):
    """Timing of an event bounded by two instants."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["timed"] = "timed"
    start: datetime = Field(..., description="Offset-aware start instant")
    end: datetime = Field(..., description="Offset-aware end instant")


EventTiming = Union[AllDayTiming, TimedTiming]


class EventRecord(BaseModel):
    """One VEVENT ready for encoding."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(..., description="Globally unique event identifier (UID)")
    timestamp: datetime = Field(..., description="Shared UTC generation timestamp (DTSTAMP)")
    classification: Classification = Classification.PUBLIC
    summary: str
    description: Optional[str] = None
    location: Optional[str] = None
    categories: Optional[tuple[str, ...]] = None
    recurrence_rule: Optional[str] = None
    recurrence_dates: Optional[tuple[Union[datetime, date], ...]] = None
    exception_dates: Optional[tuple[Union[datetime, date], ...]] = None
    timing: EventTiming = Field(..., discriminator="kind")
    transparency: Transparency

    @property
    def is_all_day(self) -> bool:
        """Check if the event covers whole days."""
        return isinstance(self.timing, AllDayTiming)


class CalendarRecord(BaseModel):
    """Calendar object assembled from a validated document."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None
    events: tuple[EventRecord, ...] = Field(default_factory=tuple)

    @property
    def product_id(self) -> str:
        return ICAL_PRODUCT_ID

    @property
    def scale(self) -> str:
        return ICAL_SCALE_GREGORIAN

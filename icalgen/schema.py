"""Input models for the JSON calendar document.

An event is either an all-day event (``allDayStart``) or a timed event
(``start``/``end``), never both and never neither. The choice is made by
``event_shape`` before any field of the event is validated, so a document only
ever reports errors against the branch that applies to it.
"""

from collections.abc import Mapping
from typing import Annotated, Any, Optional, Union

from icalendar.prop import vRecur
from pydantic import AfterValidator, BaseModel, ConfigDict, Discriminator, Field, Tag, model_validator
from pydantic_core import PydanticCustomError

from .datetime_utils import parse_date_time, parse_full_date, to_utc_seconds

ALL_DAY_EVENT_TAG = "allDayEvent"
TIMED_EVENT_TAG = "timedEvent"
EVENT_BRANCH_TAGS = frozenset({ALL_DAY_EVENT_TAG, TIMED_EVENT_TAG})

RRULE_PREFIX = "RRULE:"
RRULE_PATTERN = "^RRULE:.+$"
ONE_OF_ERROR_TYPE = "oneOf"
ONE_OF_ERROR_MESSAGE = "must match exactly one schema in oneOf"


def _check_full_date(value: str) -> str:
    try:
        parse_full_date(value)
    except ValueError:
        raise PydanticCustomError("format", 'must match format "{format}"', {"format": "date"}) from None
    return value


def _check_date_time(value: str) -> str:
    try:
        # Encoded as UTC, so the converted instant must be representable too
        to_utc_seconds(parse_date_time(value))
    except (ValueError, OverflowError):
        raise PydanticCustomError(
            "format", 'must match format "{format}"', {"format": "date-time"}
        ) from None
    return value


def _check_recurrence_rule(value: str) -> str:
    body = value[len(RRULE_PREFIX) :]
    if not value.startswith(RRULE_PREFIX) or not body or "\n" in value or "\r" in value:
        raise PydanticCustomError("pattern", 'must match pattern "{pattern}"', {"pattern": RRULE_PATTERN})

    try:
        recur = vRecur.from_ical(body)
    except ValueError:
        recur = None
    if not recur or "FREQ" not in recur:
        raise PydanticCustomError("format", "must be a valid RFC 5545 recurrence rule")
    return value


FullDate = Annotated[str, AfterValidator(_check_full_date)]
DateTimeString = Annotated[str, AfterValidator(_check_date_time)]
RecurrenceRule = Annotated[str, AfterValidator(_check_recurrence_rule)]


class EventInputBase(BaseModel):
    """Fields shared by both event shapes."""

    model_config = ConfigDict(strict=True, frozen=True, populate_by_name=True, extra="ignore")

    summary: str
    description: Optional[str] = None
    location: Optional[str] = None
    categories: Optional[list[str]] = None
    recurrence_rule: Optional[RecurrenceRule] = Field(default=None, alias="recurrenceRule")


class AllDayEventInput(EventInputBase):
    """Event covering a whole day, described by a single full-date."""

    all_day_start: FullDate = Field(..., alias="allDayStart")
    recurrence_dates: Optional[list[FullDate]] = Field(default=None, alias="recurrenceDates")
    exception_dates: Optional[list[FullDate]] = Field(default=None, alias="exceptionDates")


class TimedEventInput(EventInputBase):
    """Event described by a start and an end instant."""

    start: DateTimeString
    end: DateTimeString
    recurrence_dates: Optional[list[DateTimeString]] = Field(default=None, alias="recurrenceDates")
    exception_dates: Optional[list[DateTimeString]] = Field(default=None, alias="exceptionDates")

    @model_validator(mode="after")
    def _check_end_after_start(self) -> "TimedEventInput":
        if parse_date_time(self.end) <= parse_date_time(self.start):
            raise PydanticCustomError("range", "end must be later than start")
        return self


def event_shape(value: Any) -> Optional[str]:
    """Return the branch tag for a raw or validated event, None when ambiguous."""
    if isinstance(value, AllDayEventInput):
        return ALL_DAY_EVENT_TAG
    if isinstance(value, TimedEventInput):
        return TIMED_EVENT_TAG
    if not isinstance(value, Mapping):
        # Non-objects fail the timed branch's type check
        return TIMED_EVENT_TAG

    has_all_day = "allDayStart" in value
    has_timed = "start" in value or "end" in value
    if has_all_day == has_timed:
        return None
    return ALL_DAY_EVENT_TAG if has_all_day else TIMED_EVENT_TAG


EventInput = Annotated[
    Union[
        Annotated[AllDayEventInput, Tag(ALL_DAY_EVENT_TAG)],
        Annotated[TimedEventInput, Tag(TIMED_EVENT_TAG)],
    ],
    Discriminator(
        event_shape,
        custom_error_type=ONE_OF_ERROR_TYPE,
        custom_error_message=ONE_OF_ERROR_MESSAGE,
    ),
]


class CalendarInput(BaseModel):
    """Validated calendar document."""

    model_config = ConfigDict(
        strict=True,
        frozen=True,
        extra="forbid",
        title="CalendarInput",
        json_schema_extra={
            "description": "JSON source document consumed by the iCalendar generator",
        },
    )

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    events: list[EventInput] = Field(..., min_length=1)

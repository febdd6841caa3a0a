"""RFC 5545 encoding of calendar records.

Property typing, text escaping (§3.3.11) and line folding at 75 octets (§3.1) are
delegated to the icalendar library; this module decides which properties are
emitted, in which order and with which values.
"""

import logging
from datetime import date, datetime
from typing import Any, Optional, Union

from icalendar import Calendar, Event as ICalEvent
from icalendar.prop import vInline

from .datetime_utils import to_utc_seconds
from .exceptions import ContractViolationError, EncodingInvariantError
from .records import AllDayTiming, CalendarRecord, EventRecord, TimedTiming
from .schema import RRULE_PREFIX

logger = logging.getLogger(__name__)

ICAL_VERSION = "2.0"
DATE_VALUE_PARAMS = {"VALUE": "DATE"}


def _date_list_value(
    event: EventRecord, values: tuple[Union[datetime, date], ...], all_day: bool
) -> tuple[list[Any], Optional[dict[str, str]]]:
    if all(isinstance(value, datetime) != all_day for value in values):
        if all_day:
            return list(values), DATE_VALUE_PARAMS
        return [to_utc_seconds(value) for value in values if isinstance(value, datetime)], None
    raise EncodingInvariantError(
        f"Event {event.id} has date list values that do not match its start value type.",
        source="encode_calendar",
    )


def _apply_timing(ical_event: ICalEvent, event: EventRecord) -> bool:
    timing = event.timing
    if isinstance(timing, AllDayTiming):
        ical_event.add("dtstart", timing.start_date)
        return True
    if isinstance(timing, TimedTiming):
        ical_event.add("dtstart", to_utc_seconds(timing.start))
        ical_event.add("dtend", to_utc_seconds(timing.end))
        return False
    raise EncodingInvariantError(
        f"Event {event.id} has no all-day or timed variant and cannot be encoded.",
        source="encode_calendar",
    )


def _apply_optional_fields(ical_event: ICalEvent, event: EventRecord, all_day: bool) -> None:
    if event.description:
        ical_event.add("description", event.description)

    if event.location:
        ical_event.add("location", event.location)

    if event.categories:
        ical_event.add("categories", list(event.categories))

    if event.recurrence_rule:
        rule = event.recurrence_rule
        if rule.startswith(RRULE_PREFIX):
            rule = rule[len(RRULE_PREFIX) :]
        # Emitted verbatim; vRecur would reorder the rule parts
        ical_event.add("rrule", vInline(rule), encode=False)

    if event.recurrence_dates:
        values, params = _date_list_value(event, event.recurrence_dates, all_day)
        ical_event.add("rdate", values, parameters=params)

    if event.exception_dates:
        values, params = _date_list_value(event, event.exception_dates, all_day)
        ical_event.add("exdate", values, parameters=params)


def encode_event(event: EventRecord) -> ICalEvent:
    """Build the VEVENT component for one event record."""
    ical_event = ICalEvent()
    ical_event.add("uid", str(event.id))
    ical_event.add("dtstamp", to_utc_seconds(event.timestamp))
    ical_event.add("class", event.classification.value)

    all_day = _apply_timing(ical_event, event)

    ical_event.add("transp", event.transparency.value)
    ical_event.add("summary", event.summary)
    _apply_optional_fields(ical_event, event, all_day)
    return ical_event


def build_ical_calendar(record: CalendarRecord) -> Calendar:
    """Build the VCALENDAR component tree for a calendar record."""
    calendar = Calendar()
    calendar.add("version", ICAL_VERSION)
    calendar.add("prodid", record.product_id)
    calendar.add("calscale", record.scale)
    calendar.add("name", record.name)
    calendar.add("x-wr-calname", record.name)
    if record.description:
        calendar.add("description", record.description)
        calendar.add("x-wr-caldesc", record.description)

    for event in record.events:
        calendar.add_component(encode_event(event))
    return calendar


def encode_calendar(record: Optional[CalendarRecord]) -> str:
    """Serialize a calendar record into RFC 5545 text.

    The output uses CRLF line endings and folded content lines. For a record whose
    identifiers and timestamp are fixed the result is byte-for-byte reproducible.

    Args:
        record: Calendar record produced by the builder

    Returns:
        The iCalendar document text

    Raises:
        ContractViolationError: If no record is given
        EncodingInvariantError: If an event carries no timing variant
    """
    if record is None:
        raise ContractViolationError("record is required.")

    text = build_ical_calendar(record).to_ical(sorted=False).decode("utf-8")
    logger.debug("Encoded calendar '%s' (%d event(s), %d bytes)", record.name, len(record.events), len(text))
    return text

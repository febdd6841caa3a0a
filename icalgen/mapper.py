"""Mapping of validated input events onto event records."""

import logging
from datetime import date, datetime
from typing import Optional, Union
from uuid import UUID

from .datetime_utils import parse_date_time, parse_full_date
from .exceptions import ContractViolationError
from .records import AllDayTiming, Classification, EventRecord, TimedTiming, Transparency
from .schema import AllDayEventInput, EventInputBase, TimedEventInput

logger = logging.getLogger(__name__)


def _optional_text(value: Optional[str]) -> Optional[str]:
    return value if value else None


def _optional_dates(
    values: Optional[list[str]], all_day: bool
) -> Optional[tuple[Union[datetime, date], ...]]:
    if not values:
        return None
    parse = parse_full_date if all_day else parse_date_time
    return tuple(parse(value) for value in values)


def map_event(event: EventInputBase, *, event_id: UUID, timestamp: datetime) -> EventRecord:
    """Map one validated input event into an event record.

    All-day events carry only their date and are transparent; timed events carry
    both instants and are opaque. Optional text fields are kept only when non-empty,
    categories keep their order (duplicates included) and the recurrence rule is
    copied verbatim.

    Args:
        event: Validated all-day or timed input event
        event_id: Identifier to assign to the event
        timestamp: Shared UTC generation timestamp

    Returns:
        Immutable event record

    Raises:
        ContractViolationError: If the event is not one of the validated shapes
    """
    if isinstance(event, AllDayEventInput):
        timing: Union[AllDayTiming, TimedTiming] = AllDayTiming(
            start_date=parse_full_date(event.all_day_start)
        )
        transparency = Transparency.TRANSPARENT
        recurrence_dates = _optional_dates(event.recurrence_dates, all_day=True)
        exception_dates = _optional_dates(event.exception_dates, all_day=True)
    elif isinstance(event, TimedEventInput):
        timing = TimedTiming(start=parse_date_time(event.start), end=parse_date_time(event.end))
        transparency = Transparency.OPAQUE
        recurrence_dates = _optional_dates(event.recurrence_dates, all_day=False)
        exception_dates = _optional_dates(event.exception_dates, all_day=False)
    else:
        raise ContractViolationError(
            f"event must be a validated all-day or timed event, got {type(event).__name__}."
        )

    record = EventRecord(
        id=event_id,
        timestamp=timestamp,
        classification=Classification.PUBLIC,
        summary=event.summary,
        description=_optional_text(event.description),
        location=_optional_text(event.location),
        categories=tuple(event.categories) if event.categories else None,
        recurrence_rule=_optional_text(event.recurrence_rule),
        recurrence_dates=recurrence_dates,
        exception_dates=exception_dates,
        timing=timing,
        transparency=transparency,
    )
    logger.debug("Mapped event %s (%s): %s", record.id, timing.kind, record.summary)
    return record

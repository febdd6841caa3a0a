"""Assembly of calendar records from validated documents."""

import logging
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Optional
from uuid import UUID

from .datetime_utils import to_utc_seconds
from .exceptions import ContractViolationError
from .mapper import map_event
from .records import CalendarRecord
from .schema import CalendarInput

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
IdFactory = Callable[[], UUID]


def utc_now() -> datetime:
    """Current UTC instant, used as the default builder clock."""
    return datetime.now(UTC)


class CalendarBuilder:
    """Builds a CalendarRecord from a validated CalendarInput.

    The clock and identifier source are collaborators so callers (and tests) can
    pin DTSTAMP and UID values to get reproducible output.
    """

    def __init__(self, clock: Optional[Clock] = None, id_factory: Optional[IdFactory] = None) -> None:
        """Initialize the builder.

        Args:
            clock: Returns the current instant; must be timezone-aware
            id_factory: Returns a fresh identifier for every event
        """
        self._clock: Clock = clock or utc_now
        self._id_factory: IdFactory = id_factory or uuid.uuid4

    def build(self, document: Optional[CalendarInput]) -> CalendarRecord:
        """Build the calendar record for a validated document.

        Every event of one build shares the same generation timestamp (RFC 5545
        §3.8.7.2) and receives its own identifier. Event order is preserved.

        Args:
            document: Document returned by a successful validation

        Returns:
            Immutable calendar record

        Raises:
            ContractViolationError: If no document is given or the clock is naive
        """
        if document is None:
            raise ContractViolationError("document is required.")
        if not isinstance(document, CalendarInput):
            raise ContractViolationError(
                f"document must be a validated CalendarInput, got {type(document).__name__}."
            )

        now = self._clock()
        if now.tzinfo is None:
            raise ContractViolationError("clock must return a timezone-aware datetime.")
        timestamp = to_utc_seconds(now)

        events = tuple(
            map_event(event, event_id=self._id_factory(), timestamp=timestamp)
            for event in document.events
        )
        logger.debug("Built calendar '%s' with %d event(s) at %s", document.name, len(events), timestamp)

        return CalendarRecord(
            name=document.name,
            description=document.description or None,
            events=events,
        )


def build_calendar(
    document: Optional[CalendarInput],
    *,
    clock: Optional[Clock] = None,
    id_factory: Optional[IdFactory] = None,
) -> CalendarRecord:
    """Build a calendar record with the given (or default) clock and id source."""
    return CalendarBuilder(clock=clock, id_factory=id_factory).build(document)

"""Generate RFC 5545 iCalendar documents from declarative JSON calendar descriptions."""

__version__ = "1.0.0"

from .builder import CalendarBuilder, build_calendar
from .encoder import encode_calendar
from .exceptions import (
    ContractViolationError,
    EncodingInvariantError,
    GenerationError,
    ICalGenError,
)
from .generator import GenerationResult, generate_calendar
from .records import (
    ICAL_PRODUCT_ID,
    ICAL_SCALE_GREGORIAN,
    AllDayTiming,
    CalendarRecord,
    Classification,
    EventRecord,
    TimedTiming,
    Transparency,
)
from .schema import AllDayEventInput, CalendarInput, TimedEventInput
from .validator import ValidationErrorEntry, ValidationResult, validate_document

__all__ = [
    "ICAL_PRODUCT_ID",
    "ICAL_SCALE_GREGORIAN",
    "AllDayEventInput",
    "AllDayTiming",
    "CalendarBuilder",
    "CalendarInput",
    "CalendarRecord",
    "Classification",
    "ContractViolationError",
    "EncodingInvariantError",
    "EventRecord",
    "GenerationError",
    "GenerationResult",
    "ICalGenError",
    "TimedEventInput",
    "TimedTiming",
    "Transparency",
    "ValidationErrorEntry",
    "ValidationResult",
    "__version__",
    "build_calendar",
    "encode_calendar",
    "generate_calendar",
    "validate_document",
]

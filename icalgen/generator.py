"""Validate, build and encode a calendar document in one call."""

import logging
from typing import Any, Optional

from pydantic import BaseModel

from .builder import CalendarBuilder
from .encoder import encode_calendar
from .validator import ValidationErrorEntry, validate_document

logger = logging.getLogger(__name__)


class GenerationResult(BaseModel):
    """Result of generating a calendar document.

    On success ``content`` holds the iCalendar text; on a validation failure
    ``message`` and ``errors`` describe every problem found and nothing is encoded.
    """

    success: bool
    content: Optional[str] = None
    message: Optional[str] = None
    errors: Optional[list[ValidationErrorEntry]] = None


def generate_calendar(data: Any, *, builder: Optional[CalendarBuilder] = None) -> GenerationResult:
    """Turn a parsed JSON value into iCalendar text.

    Validation failures are returned as an unsuccessful result. Contract and
    encoding invariant errors propagate to the caller.

    Args:
        data: Parsed JSON calendar document
        builder: Builder to use; pass one with a fixed clock/id source for
            reproducible output

    Returns:
        GenerationResult with the document text or the validation errors
    """
    validation = validate_document(data)
    if not validation.is_valid:
        logger.debug("Calendar document failed validation: %s", validation.message)
        return GenerationResult(success=False, message=validation.message, errors=validation.errors)

    record = (builder or CalendarBuilder()).build(validation.document)
    return GenerationResult(success=True, content=encode_calendar(record))

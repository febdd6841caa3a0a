"""Validation of untrusted JSON calendar documents.

Validation runs in two steps. A cheap shape guard first rejects anything that is
not an object with a ``name`` and an array of ``events``; such input gets one
stable ``type`` error. Everything else is validated against the CalendarInput
model and *all* problems are reported, each as an entry naming the offending
path, a JSON-Schema style keyword and a message.
"""

import logging
from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic_core import ErrorDetails

from .schema import EVENT_BRANCH_TAGS, CalendarInput

logger = logging.getLogger(__name__)

DOCUMENT_TYPE_NAME = "CalendarInput"
INVALID_TYPE_ERROR_MESSAGE = f"Provided JSON data is not a valid {DOCUMENT_TYPE_NAME} object."
INVALID_SCHEMA_VALIDATION_MESSAGE = (
    "Provided JSON data failed schema validation. See 'errors' for details."
)

# pydantic error types -> JSON Schema keywords
_KEYWORDS = {
    "missing": "required",
    "extra_forbidden": "additionalProperties",
    "too_short": "minItems",
    "string_too_short": "minLength",
    "string_type": "type",
    "list_type": "type",
    "model_type": "type",
    "model_attributes_type": "type",
    "dict_type": "type",
}
_SCALAR_TYPES = (str, int, float, bool, type(None))


class ValidationErrorEntry(BaseModel):
    """One problem found in a calendar document."""

    model_config = ConfigDict(frozen=True)

    keyword: str = Field(..., description="Rule that failed, e.g. 'required' or 'oneOf'")
    path: str = Field(..., description="JSON pointer to the offending value")
    schema_path: str = Field(..., description="Location of the failed rule in the schema")
    message: str
    params: dict[str, Any] = Field(default_factory=dict)


class ValidationResult(BaseModel):
    """Outcome of validating a calendar document."""

    is_valid: bool
    message: Optional[str] = None
    errors: Optional[list[ValidationErrorEntry]] = None
    document: Optional[CalendarInput] = Field(
        default=None, description="Validated document, set only when is_valid is True"
    )


INVALID_TYPE_ERROR = ValidationErrorEntry(
    keyword="type",
    path="$",
    schema_path="$",
    params={"type": DOCUMENT_TYPE_NAME},
    message=INVALID_TYPE_ERROR_MESSAGE,
)


@lru_cache(maxsize=1)
def get_document_adapter() -> TypeAdapter[CalendarInput]:
    """Return the shared, lazily built validator for calendar documents."""
    logger.debug("Building calendar document validator")
    return TypeAdapter(CalendarInput)


def calendar_json_schema() -> dict[str, Any]:
    """Return the JSON Schema describing calendar documents."""
    schema = get_document_adapter().json_schema(by_alias=True)
    schema.setdefault("$schema", "https://json-schema.org/draft/2020-12/schema")
    return schema


def is_calendar_document(value: Any) -> bool:
    """Check that a value looks like a calendar document before full validation."""
    return isinstance(value, Mapping) and "name" in value and isinstance(value.get("events"), list)


def _escape_pointer(part: str) -> str:
    return part.replace("~", "~0").replace("/", "~1")


def _schema_path(parts: list[str], branch: Optional[str], keyword: str) -> str:
    if len(parts) >= 2 and parts[0] == "events":
        base = f"#/definitions/{branch}" if branch else "#/definitions/event"
        rest = parts[2:]
    else:
        base = "#"
        rest = parts

    # required/additionalProperties belong to the enclosing object
    if keyword in ("required", "additionalProperties") and rest:
        rest = rest[:-1]

    segments = ["items" if part.isdigit() else f"properties/{part}" for part in rest]
    return "/".join([base, *segments, keyword])


def _to_error_entry(error: ErrorDetails) -> ValidationErrorEntry:
    parts: list[str] = []
    branch: Optional[str] = None
    for position, loc in enumerate(error["loc"]):
        # pydantic inserts the branch tag right after ("events", <index>)
        if position == 2 and parts[0] == "events" and loc in EVENT_BRANCH_TAGS:
            branch = str(loc)
            continue
        parts.append(str(loc))

    error_type = error["type"]
    keyword = _KEYWORDS.get(error_type, error_type)
    params = {
        key: value for key, value in (error.get("ctx") or {}).items() if isinstance(value, _SCALAR_TYPES)
    }

    message = error["msg"]
    if keyword == "required" and parts:
        params["missingProperty"] = parts[-1]
        message = f"must have required property '{parts[-1]}'"
    elif keyword == "additionalProperties" and parts:
        params["additionalProperty"] = parts[-1]
        message = "must NOT have additional properties"

    return ValidationErrorEntry(
        keyword=keyword,
        path="/" + "/".join(_escape_pointer(part) for part in parts) if parts else "",
        schema_path=_schema_path(parts, branch, keyword),
        message=message,
        params=params,
    )


def validate_document(data: Any = None) -> ValidationResult:
    """Validate a parsed JSON value against the calendar document schema.

    Never raises for bad input: both the shape guard and the schema validation
    report through the returned result.

    Args:
        data: Parsed JSON value (any type; omitted is treated like None)

    Returns:
        ValidationResult with the validated document on success, or a message and
        the complete list of error entries on failure
    """
    if not is_calendar_document(data):
        logger.debug("Rejected input of type %s before schema validation", type(data).__name__)
        return ValidationResult(
            is_valid=False,
            message=INVALID_TYPE_ERROR_MESSAGE,
            errors=[INVALID_TYPE_ERROR],
        )

    try:
        document = get_document_adapter().validate_python(data)
    except ValidationError as exc:
        errors = [_to_error_entry(error) for error in exc.errors(include_url=False)]
        logger.debug("Schema validation found %d error(s)", len(errors))
        return ValidationResult(
            is_valid=False,
            message=INVALID_SCHEMA_VALIDATION_MESSAGE,
            errors=errors,
        )

    return ValidationResult(is_valid=True, document=document)

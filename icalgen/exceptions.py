"""Exceptions raised by the iCalendar generator."""

from typing import Optional


class ICalGenError(Exception):
    """Base exception for iCalendar generation errors."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.source = source


class ContractViolationError(ICalGenError):
    """Raised when a caller breaks a precondition of a core operation."""


class EncodingInvariantError(ICalGenError):
    """Raised when a calendar record reaches the encoder in an unrepresentable state."""


class GenerationError(ICalGenError):
    """Uniform wrapper for unexpected failures while generating a calendar file."""

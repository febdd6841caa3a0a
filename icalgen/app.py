"""File-based iCalendar generation.

`ICalGeneratorApp` reads a JSON calendar document from disk, runs it through the
generator pipeline and writes the resulting ``.ics`` file next to the source file,
replacing the ``.json`` extension.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from . import __version__
from .builder import CalendarBuilder
from .config import ICalGenSettings, get_settings
from .exceptions import ContractViolationError, GenerationError
from .generator import generate_calendar
from .validator import ValidationErrorEntry

logger = logging.getLogger(__name__)

PACKAGE_NAME = "icalgen"


def read_json_file(file_path: Path, extension: str = ".json") -> Any:
    """Read and parse a JSON file.

    Raises:
        ContractViolationError: If the path does not have the expected extension
        OSError: If the file cannot be read
        json.JSONDecodeError: If the content is not valid JSON
    """
    if file_path.suffix.lower() != extension:
        raise ContractViolationError(f"filePath does not have a '{extension}' extension.")
    return json.loads(file_path.read_text(encoding="utf-8"))


def to_error(error: BaseException, source: str, app_version: str) -> GenerationError:
    """Convert any failure into a GenerationError naming where it happened."""
    prefix = f"Error in {source}/{app_version}"
    message = getattr(error, "message", None) or str(error) or type(error).__name__
    return GenerationError(f"{prefix}: {message}", source=source)


class ICalGeneratorApp:
    """Converts a JSON calendar document file into an iCalendar file.

    The output file name is derived from the source file name by swapping the
    ``.json`` extension for ``.ics``. Validation problems are logged and reported
    through the returned status message; nothing is written in that case.
    """

    def __init__(
        self,
        source_file: Union[str, Path, None],
        debug: bool = False,
        settings: Optional[ICalGenSettings] = None,
        builder: Optional[CalendarBuilder] = None,
    ) -> None:
        """Initialize the application.

        Args:
            source_file: Path to the JSON calendar document
            debug: Log debug output, including the generated document
            settings: Settings to use instead of the process-wide ones
            builder: Calendar builder, e.g. one with a fixed clock for tests

        Raises:
            ContractViolationError: If the source file is missing or not a JSON file
        """
        self.settings = settings or get_settings()
        self.source_file = self._assert_valid_source_file(source_file)
        self.output_file = self.source_file.with_suffix(self.settings.output_extension)
        self.debug_enabled = debug or self.settings.debug
        self.app_version = f"{PACKAGE_NAME}@{__version__}"
        self.builder = builder or CalendarBuilder()

        self._log_debug(f"source_file={self.source_file} output_file={self.output_file}")

    def _assert_valid_source_file(self, source_file: Union[str, Path, None]) -> Path:
        if not source_file:
            raise ContractViolationError("sourceFile is required")

        path = Path(source_file)
        if not path.exists():
            raise ContractViolationError(f"sourceFile does not exist: {path}")

        extension = self.settings.source_extension
        if path.suffix.lower() != extension:
            raise ContractViolationError(
                f"sourceFile does not have a '{extension}' extension: {path.name}"
            )
        return path

    def generate(self) -> str:
        """Generate the iCalendar file for the source document.

        Returns:
            Status message for the user: success with the output path, or a
            validation failure notice

        Raises:
            GenerationError: On any unexpected failure (I/O, malformed JSON, ...)
        """
        try:
            source_json = read_json_file(self.source_file, self.settings.source_extension)

            result = generate_calendar(source_json, builder=self.builder)
            if not result.success:
                self._log_validation_errors(result.errors or [])
                return (
                    "Failed to generate the iCalendar file due to invalid JSON data in "
                    f"'{self.source_file}'.\nPlease correct the JSON data and try again."
                )

            content = result.content or ""
            self._log_debug(content)
            self.output_file.write_text(content, encoding="utf-8", newline="")

            logger.info("Wrote %s", self.output_file)
            return f"Successfully generated the iCalendar file at {self.output_file}"
        except Exception as e:
            raise to_error(e, "ICalGeneratorApp.generate()", self.app_version) from e

    def _log_validation_errors(self, errors: list[ValidationErrorEntry]) -> None:
        logger.error(
            "JSON schema validation errors in '%s' (%s):\n%s",
            self.source_file,
            self.app_version,
            json.dumps([error.model_dump() for error in errors], indent=2),
        )

    def _log_debug(self, message: str) -> None:
        if self.debug_enabled:
            logger.debug("%s - %s", self.app_version, message)

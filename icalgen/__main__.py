"""Command-line entry for icalgen.

Usage:
    python -m icalgen --source-file calendar.json [--debug] [--config icalgen.yaml]
    python -m icalgen --print-schema

Exit codes: 0 on success or a reported validation failure, 1 on any error,
2 on invalid command-line usage, 130 when interrupted.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .app import ICalGeneratorApp
from .config import load_settings
from .logging_setup import configure_logging
from .validator import calendar_json_schema

logger = logging.getLogger(__name__)

CLI_NAME = "icalgen"


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the icalgen CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog=CLI_NAME,
        description="Generate an iCalendar file from a JSON data file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
The ".ics" file is generated in the same directory as the JSON data file with the
same basename. The JSON data file must conform to the calendar document schema
(see --print-schema).

Examples:
  icalgen -s holidays.json             # Writes holidays.ics
  icalgen -s holidays.json --debug     # Also logs the generated document
  icalgen --print-schema > schema.json
        """,
    )

    parser.add_argument(
        "-s",
        "--source-file",
        dest="source_file",
        metavar="FILE",
        help="(REQUIRED) local path to the source JSON file to be processed",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="output extra debugging info")
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        metavar="FILE",
        help="YAML settings file (ICALGEN_* environment variables take precedence)",
    )
    parser.add_argument(
        "--print-schema",
        action="store_true",
        help="print the JSON schema of calendar documents and exit",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run the icalgen CLI.

    Args:
        argv: Arguments to parse instead of sys.argv

    Returns:
        Process exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.print_schema:
        print(json.dumps(calendar_json_schema(), indent=2))
        return 0

    if not args.source_file:
        parser.error("the following arguments are required: -s/--source-file")

    try:
        settings = load_settings(args.config, debug=True if args.debug else None)
        configure_logging(debug_mode=settings.debug, log_level=settings.log_level)

        print(f"***** Beginning iCalendar generation for '{args.source_file}'...")
        app = ICalGeneratorApp(args.source_file, debug=settings.debug, settings=settings)
        status = app.generate()
        print(f"***** {status}")
        return 0
    except KeyboardInterrupt:
        print("Operation cancelled by user")
        return 130
    except Exception as e:
        logger.debug("icalgen failed", exc_info=True)
        print(f"***** Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""
Central logging configuration for icalgen.

The core modules only create module loggers; handlers and levels are set here by
the command-line wrapper. Third-party libraries are kept at WARNING so debug runs
show the generator's own diagnostics.
"""

import logging
import os
from typing import Optional

LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"

_NOISY_LOGGERS = ("icalendar", "pydantic", "yaml")


def configure_logging(debug_mode: bool = False, log_level: str = "INFO", force_debug: Optional[bool] = None) -> None:
    """
    Configure the root logger and the icalgen package loggers.

    Args:
        debug_mode: Whether to enable debug logging for icalgen modules
        log_level: Root level name used when debug logging is off
        force_debug: Override debug mode setting (None to use env var detection)

    Environment Variables:
        ICALGEN_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        ICALGEN_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv("ICALGEN_DEBUG", "").lower() in ("1", "true", "yes")
    env_log_level = os.getenv("ICALGEN_LOG_LEVEL", "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = getattr(logging, log_level.upper(), logging.INFO)
    if final_debug:
        root_level = logging.DEBUG
    elif env_log_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
        root_level = getattr(logging, env_log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    # Only add a handler if the host application has not configured one
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(handler)

    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logging.getLogger("icalgen").setLevel(logging.DEBUG if final_debug else root_level)

    if final_debug:
        root_logger.debug("Debug logging enabled for icalgen modules")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}
    for logger_name in ("icalgen", *_NOISY_LOGGERS):
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)
    return status

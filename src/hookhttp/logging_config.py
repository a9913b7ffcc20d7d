"""Logging setup for the ``hookhttp`` logger tree."""

import logging
import sys
from typing import Optional, TextIO, Union

LOGGER_NAME = "hookhttp"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown logging level: {level!r}")
    return numeric_level


def setup_logging(
    level: Union[str, int] = "WARNING",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    force: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Set up logging for the hookhttp logger tree.

    What each level shows:
        WARNING: transport failures of send() attempts
        INFO: retries requested by hooks and hook registrations
        DEBUG: every attempt, framed status and multiplex transport id

    Args:
        level: Level name or number; defaults to WARNING so only failures show
        log_file: Optional file path for logging output
        format_string: Optional custom format string for log messages
        force: If True, reconfigure even if handlers exist
        stream: Console stream, stderr by default

    Returns:
        Configured ``hookhttp`` logger

    Raises:
        ValueError: If ``level`` is not a known level name
    """
    numeric_level = _resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    if force or not logger.handlers:
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

        handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
        if log_file:
            handlers.append(logging.FileHandler(log_file))
        for handler in handlers:
            handler.setLevel(numeric_level)
            handler.setFormatter(formatter)
            logger.addHandler(handler)

    # Records stay out of the root logger
    logger.propagate = False

    return logger

"""Logging configuration for the link checker."""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure logging for the link checker.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
        format_string: Optional custom format string
        stream: Console stream (defaults to stderr so results on stdout stay clean)
    """
    if format_string is None:
        format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=format_string,
        handlers=handlers,
        force=True,
    )

    # Third-party loggers stay at WARNING whatever the chosen level
    for name in ('asyncio', 'playwright'):
        logging.getLogger(name).setLevel(logging.WARNING)

"""
Logger wiring helpers and wire-line validation.
"""

import json
import logging
from typing import IO, Optional

from jsonlayout.config import LayoutConfig
from jsonlayout.layout import JSONLayout


def get_logger(
    name: str,
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    config: Optional[LayoutConfig] = None
) -> logging.Logger:
    """
    Get a pre-configured logger instance.

    Args:
        name: Logger name (typically __name__)
        level: Logging level (default: INFO)
        log_file: Optional file path for file handler
        config: Layout configuration (default: message only, 20KB)

    Returns:
        Configured logger instance

    Example:
        logger = get_logger(__name__, config=LayoutConfig(include_context=True))
        logger.info("User action", extra={'context': {'user_id': 123}})
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Check if we already have handlers to avoid duplicates
    has_console_handler = any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
                              for h in logger.handlers)
    has_file_handler = any(isinstance(h, logging.FileHandler) and h.baseFilename == log_file
                           for h in logger.handlers) if log_file else False

    if has_console_handler and (has_file_handler or not log_file):
        return logger

    layout = JSONLayout(config or LayoutConfig())

    if not has_console_handler:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(layout)
        logger.addHandler(console_handler)

    if log_file and not has_file_handler:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(layout)
        logger.addHandler(file_handler)

    return logger


def setup_logging(
    config: Optional[LayoutConfig] = None,
    level: int = logging.INFO,
    stream: Optional[IO[str]] = None
) -> logging.Handler:
    """
    Install a single JSONLayout stream handler on the root logger.

    Existing root handlers are removed so that every record is emitted once.

    Returns:
        The installed handler
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONLayout(config or LayoutConfig()))
    root.addHandler(handler)
    root.setLevel(level)
    return handler


def validate_log_line(log_line: str, prefix: str = '', max_length: Optional[float] = None) -> bool:
    """
    Validate that a log line is a well-formed layout line.

    Args:
        log_line: Line to validate (a trailing newline is allowed)
        prefix: Expected prefix
        max_length: Optional budget in bytes for the JSON body

    Returns:
        True if the line is prefix + single-line ASCII JSON object with a message
    """
    if log_line.endswith('\n'):
        log_line = log_line[:-1]
    if not log_line.startswith(prefix):
        return False

    body = log_line[len(prefix):]
    if not body.isascii() or any(ord(c) < 0x20 for c in body):
        return False
    if max_length is not None and len(body) > max_length:
        return False

    try:
        data = json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return False

    return isinstance(data, dict) and 'message' in data

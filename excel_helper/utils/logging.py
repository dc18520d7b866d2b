"""Logging helpers for the Excel helper.

Usage:
    from excel_helper.utils.logging import get_logger, timed_operation

    logger = get_logger(__name__)

    with timed_operation(logger, "export"):
        ...
"""

import logging
import time
from collections.abc import Generator
from contextlib import contextmanager

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(
    level: int | str = logging.INFO,
    format_string: str | None = None,
) -> None:
    """Configure logging for the application.

    Replaces any handlers on the root logger with a single stream handler.

    Args:
        level: Log level (int or string like "INFO").
        format_string: Custom format string (uses default if None).
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module.

    Args:
        name: Logger name (typically __name__).

    Returns:
        The standard logging.Logger instance.
    """
    return logging.getLogger(name)


@contextmanager
def timed_operation(
    logger: logging.Logger,
    operation: str,
) -> Generator[None, None, None]:
    """Log how long the wrapped block took.

    The duration is logged at INFO on success and at WARNING when the block
    raises; the exception is re-raised unchanged.

    Args:
        logger: Logger to use for output.
        operation: Name of the operation.
    """
    start = time.perf_counter()
    try:
        yield
    except Exception:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.warning("%s failed after %.2f ms", operation, elapsed_ms)
        raise
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info("%s finished in %.2f ms", operation, elapsed_ms)

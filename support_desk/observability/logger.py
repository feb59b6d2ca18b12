"""
Logger configuration.

Single stdout handler with ISO timestamps and correlation ID injection.

Dependencies: logging (stdlib)
System role: Centralized logging configuration
"""

import logging
import sys

from support_desk.observability.correlation import CorrelationIdFilter

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] - %(message)s"


def configure_logging(level: str | int = logging.INFO) -> None:
    """
    Configure root logging for the service.

    Args:
        level: Root log level name or number
    """
    # Remove any existing handlers to avoid duplicates
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    # Reduce noise from verbose third-party libraries
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

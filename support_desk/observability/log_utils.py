"""
Structured logging helpers.

Context passed through `extra` ends up on log records, so every value is
flattened to a short string first: message bodies are clipped, uploads
and payloads are summarized by size, and IDs, enums and timestamps are
rendered the way the API renders them.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import enum
import logging
import uuid
from datetime import datetime
from typing import Any

MAX_VALUE_LENGTH = 200


def safe_log_value(value: Any, max_length: int = MAX_VALUE_LENGTH) -> str:
    """
    Render a context value as a bounded string.

    Args:
        value: Value to render
        max_length: Characters kept before clipping

    Returns:
        str: Log-safe representation
    """
    if value is None:
        return "None"
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        return f"bytes({len(value)})"
    if isinstance(value, dict):
        return f"dict({len(value)} keys)"
    if isinstance(value, (list, tuple, set, frozenset)):
        return f"{type(value).__name__}({len(value)} items)"

    try:
        text = value if isinstance(value, str) else str(value)
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"
    if len(text) <= max_length:
        return text
    return f"{text[:max_length]}... (truncated, {len(text)} total)"


def _safe_context(context: dict[str, Any]) -> dict[str, str]:
    return {key: safe_log_value(value) for key, value in context.items()}


def log_with_context(logger: logging.Logger, level: int, message: str, **context) -> None:
    """Log `message` at `level` with every context value made log-safe."""
    logger.log(level, message, extra=_safe_context(context))


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context,
) -> None:
    """
    Log an error with its traceback.

    Adds `error_type` and `error_msg`, plus `error_details` when the
    exception carries a `details` mapping (SupportDeskException does).

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception being handled
        **context: Additional context
    """
    extra = _safe_context(context)
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(getattr(exc, "message", exc))
    details = getattr(exc, "details", None)
    if details:
        extra["error_details"] = ", ".join(f"{k}={safe_log_value(v)}" for k, v in details.items())
    logger.error(message, exc_info=exc, extra=extra)

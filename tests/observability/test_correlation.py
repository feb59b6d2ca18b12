"""
Test suite for correlation ID propagation and logging helpers.

System role: Verification of request tracing in logs
"""

import logging
import uuid
from datetime import datetime, timezone

from support_desk.boundary.db.models.session_model import TaskStatus
from support_desk.core.exceptions import StorageError
from support_desk.observability.correlation import (
    CorrelationIdFilter,
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from support_desk.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)
from support_desk.observability.logger import LOG_FORMAT, configure_logging


def make_record(message: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, message, None, None)


class TestCorrelationContext:
    """Test suite for set/get/clear."""

    def test_set_generates_id_when_missing(self) -> None:
        value = set_correlation_id()

        assert value
        assert get_correlation_id() == value
        clear_correlation_id()
        assert get_correlation_id() == ""

    def test_set_keeps_supplied_id(self) -> None:
        assert set_correlation_id("abc") == "abc"
        clear_correlation_id()


class TestCorrelationIdFilter:
    """Test suite for CorrelationIdFilter."""

    def test_stamps_current_id(self) -> None:
        set_correlation_id("req-1")
        record = make_record()

        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "req-1"
        clear_correlation_id()

    def test_placeholder_outside_request(self) -> None:
        clear_correlation_id()
        record = make_record()

        CorrelationIdFilter().filter(record)

        assert record.correlation_id == "-"

    def test_format_renders_correlation_id(self) -> None:
        set_correlation_id("req-2")
        record = make_record("done")
        CorrelationIdFilter().filter(record)

        line = logging.Formatter(LOG_FORMAT).format(record)

        assert "[req-2] - done" in line
        clear_correlation_id()


class TestLogHelpers:
    """Test suite for log_utils and configure_logging."""

    def test_safe_log_value_clips_long_text(self) -> None:
        value = safe_log_value("x" * 300)

        assert value.startswith("x" * 200)
        assert value.endswith("(truncated, 300 total)")

    def test_safe_log_value_summarizes_collections(self) -> None:
        assert safe_log_value([1, 2, 3]) == "list(3 items)"
        assert safe_log_value(b"abcd") == "bytes(4)"
        assert safe_log_value(None) == "None"

    def test_log_with_context_passes_safe_extra(self, caplog) -> None:
        logger = logging.getLogger("support_desk.tests")

        with caplog.at_level(logging.INFO, logger="support_desk.tests"):
            log_with_context(logger, logging.INFO, "sent", session_id="s1", payload={"a": 1})

        [record] = caplog.records
        assert record.session_id == "s1"
        assert record.payload == "dict(1 keys)"

    def test_safe_log_value_renders_domain_types(self) -> None:
        session_id = uuid.UUID("12345678-1234-5678-1234-567812345678")

        assert safe_log_value(session_id) == "12345678-1234-5678-1234-567812345678"
        assert safe_log_value(TaskStatus.IN_PROGRESS) == "in_progress"
        assert safe_log_value(datetime(2024, 1, 1, tzinfo=timezone.utc)) == "2024-01-01T00:00:00+00:00"

    def test_log_exception_with_context_includes_error_details(self, caplog) -> None:
        logger = logging.getLogger("support_desk.tests")
        error = StorageError("Failed to delete file", key="a.txt", operation="delete")

        with caplog.at_level(logging.ERROR, logger="support_desk.tests"):
            log_exception_with_context(logger, "Discard failed", error, key="a.txt")

        [record] = caplog.records
        assert record.error_type == "StorageError"
        assert record.error_msg == "Failed to delete file"
        assert record.error_details == "key=a.txt, operation=delete"
        assert record.exc_info[1] is error

    def test_configure_logging_accepts_level_names(self) -> None:
        root = logging.getLogger()
        previous_level, previous_handlers = root.level, root.handlers[:]
        try:
            configure_logging("debug")
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            configure_logging("nonsense")
            assert root.level == logging.INFO
        finally:
            for handler in root.handlers[:]:
                root.removeHandler(handler)
            for handler in previous_handlers:
                root.addHandler(handler)
            root.setLevel(previous_level)

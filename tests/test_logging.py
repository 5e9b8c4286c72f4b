"""Tests for logging infrastructure."""

import json
import logging
import sys

import pytest

from scrybe.core.config import Config
from scrybe.core.logging_setup import (
    JSONFormatter,
    configure_from_config,
    configure_logging,
    log_performance,
)


def _make_record(msg="Test message", level=logging.INFO, exc_info=None):
    record = logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    record.module = "test_module"
    record.funcName = "test_function"
    return record


@pytest.fixture
def clean_root_logger():
    """Remove handlers added by configure_logging after each test."""
    root = logging.getLogger()
    level = root.level
    yield root
    for handler in list(root.handlers):
        if getattr(handler, "_scrybe_handler", False):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class TestJSONFormatter:
    """Tests for JSON structured logging formatter."""

    def test_json_formatter_basic(self):
        """Test basic JSON formatting."""
        log_data = json.loads(JSONFormatter().format(_make_record()))

        assert log_data["level"] == "INFO"
        assert log_data["logger"] == "test.logger"
        assert log_data["message"] == "Test message"
        assert log_data["module"] == "test_module"
        assert log_data["function"] == "test_function"
        assert log_data["line"] == 42
        assert "timestamp" in log_data

    def test_json_formatter_with_extra_fields(self):
        """Test JSON formatting with extra fields."""
        record = _make_record()
        record.extra_fields = {"bulk_kind": "oracle_cards", "operation": "download"}

        log_data = json.loads(JSONFormatter().format(record))

        assert log_data["bulk_kind"] == "oracle_cards"
        assert log_data["operation"] == "download"

    def test_json_formatter_with_exception(self):
        """Test JSON formatting with exception info."""
        try:
            raise ValueError("Test error")
        except ValueError:
            exc_info = sys.exc_info()

        log_data = json.loads(
            JSONFormatter().format(_make_record("Error occurred", logging.ERROR, exc_info))
        )

        assert "exception" in log_data
        assert "ValueError: Test error" in log_data["exception"]


class TestLogPerformance:
    """Tests for the log_performance context manager."""

    def test_success(self, caplog):
        logger = logging.getLogger("scrybe.test.perf")
        with caplog.at_level(logging.INFO, logger="scrybe.test.perf"):
            with log_performance("bulk download oracle_cards", logger):
                pass

        record = caplog.records[-1]
        assert "bulk download oracle_cards completed" in record.getMessage()
        assert record.extra_fields["success"] is True
        assert record.extra_fields["event_type"] == "performance"
        assert record.extra_fields["duration_ms"] >= 0

    def test_failure_is_logged_and_raised(self, caplog):
        """Test the exception propagates and success is False."""
        logger = logging.getLogger("scrybe.test.perf")
        with caplog.at_level(logging.INFO, logger="scrybe.test.perf"):
            with pytest.raises(RuntimeError):
                with log_performance("failing op", logger):
                    raise RuntimeError("boom")

        assert caplog.records[-1].extra_fields["success"] is False


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_console_handler(self, clean_root_logger):
        configure_logging(level="DEBUG")

        handlers = [h for h in clean_root_logger.handlers if getattr(h, "_scrybe_handler", False)]
        assert len(handlers) == 1
        assert clean_root_logger.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_no_duplicate_handlers(self, clean_root_logger):
        """Test calling twice only adjusts the level."""
        configure_logging(level=logging.INFO)
        configure_logging(level=logging.WARNING)

        handlers = [h for h in clean_root_logger.handlers if getattr(h, "_scrybe_handler", False)]
        assert len(handlers) == 1
        assert clean_root_logger.level == logging.WARNING

    def test_json_file_output(self, clean_root_logger, tmp_path):
        """Test JSON lines are written to the log file."""
        log_file = tmp_path / "logs" / "scrybe.log"
        configure_logging(log_file=log_file, use_json=True, console_output=False)

        logging.getLogger("scrybe.test").info("hello %s", "file")
        for handler in clean_root_logger.handlers:
            handler.flush()

        lines = log_file.read_text().strip().splitlines()
        assert json.loads(lines[-1])["message"] == "hello file"
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_invalid_level(self, clean_root_logger):
        with pytest.raises(ValueError):
            configure_logging(level="LOUD")

    def test_configure_from_config(self, clean_root_logger, tmp_path):
        """Test CLI overrides win over configuration."""
        config = Config()
        config.set("logging.file", str(tmp_path / "scrybe.log"))

        configure_from_config(config, level="ERROR", console_output=False)

        assert clean_root_logger.level == logging.ERROR
        assert (tmp_path / "scrybe.log").exists()

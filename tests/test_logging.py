"""
Tests for structured logging system.
"""

import json
import logging
import tempfile
from io import StringIO
from pathlib import Path

import pytest
from typer.testing import CliRunner

from html2md import convert
from html2md.cli import app
from html2md.core.config import Html2MdSettings, LogLevel
from html2md.core.logging import (
    configure_structured_logging,
    correlation_context,
    get_logger,
    log_context,
    log_conversion,
    performance_context,
)


@pytest.fixture
def temp_log_file():
    """Create temporary log file for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir) / "html2md.log"


@pytest.fixture
def settings_with_logging(temp_log_file):
    """Create settings with JSON logging at debug level."""
    return Html2MdSettings(
        structured_logging=True,
        log_level=LogLevel.DEBUG,
        log_file=temp_log_file,
    )


@pytest.fixture
def capture_logs():
    """Capture html2md log output for testing."""
    log_capture = StringIO()
    handler = logging.StreamHandler(log_capture)
    handler.setFormatter(logging.Formatter("%(message)s"))

    package_logger = logging.getLogger("html2md")
    original_handlers = package_logger.handlers[:]
    original_level = package_logger.level
    package_logger.addHandler(handler)

    yield log_capture

    # Cleanup
    for extra in package_logger.handlers[:]:
        if extra not in original_handlers:
            package_logger.removeHandler(extra)
            extra.close()
    package_logger.setLevel(original_level)
    configure_structured_logging(Html2MdSettings(), force=True)


def read_json_lines(capture):
    return [json.loads(line) for line in capture.getvalue().splitlines() if line]


class TestStructuredLoggingConfiguration:
    """Test structured logging configuration."""

    def test_configure_structured_logging_json(
        self, settings_with_logging, capture_logs
    ):
        """Test JSON structured logging configuration."""
        configure_structured_logging(settings_with_logging, force=True)

        logger = get_logger("html2md.test")
        logger.info("Test message", key="value", number=42)

        (log_data,) = read_json_lines(capture_logs)
        assert log_data["event"] == "Test message"
        assert log_data["key"] == "value"
        assert log_data["number"] == 42
        assert log_data["component"] == "html2md"
        assert "timestamp" in log_data
        assert "level" in log_data
        assert "logger" in log_data

    def test_configure_structured_logging_console(self, capture_logs):
        """Test console structured logging configuration."""
        settings = Html2MdSettings(structured_logging=False, log_level=LogLevel.INFO)

        configure_structured_logging(settings, force=True)

        logger = get_logger("html2md.console")
        logger.info("Console test message", data="test")

        log_output = capture_logs.getvalue()
        assert "Console test message" in log_output
        assert "data=test" in log_output

    def test_log_file(self, settings_with_logging, temp_log_file, capture_logs):
        configure_structured_logging(settings_with_logging, force=True)

        get_logger("html2md.file").warning("Written to file")

        assert "Written to file" in temp_log_file.read_text(encoding="utf-8")

    def test_level_filtering(self, capture_logs):
        configure_structured_logging(
            Html2MdSettings(log_level=LogLevel.WARNING), force=True
        )

        logger = get_logger("html2md.levels")
        logger.info("Hidden message")
        logger.warning("Visible message")

        log_output = capture_logs.getvalue()
        assert "Hidden message" not in log_output
        assert "Visible message" in log_output


class TestCorrelationAndContext:
    """Test correlation IDs and logging context."""

    def test_correlation_context(self, settings_with_logging, capture_logs):
        """Test tagging a block of log entries with one correlation ID."""
        configure_structured_logging(settings_with_logging, force=True)
        logger = get_logger("html2md.correlation")

        with correlation_context("test-correlation-123") as correlation_id:
            assert correlation_id == "test-correlation-123"
            logger.info("Test with correlation ID")
        logger.info("Outside")

        inside, outside = read_json_lines(capture_logs)
        assert inside["correlation_id"] == "test-correlation-123"
        assert outside["correlation_id"] == "unknown"

    def test_generated_correlation_ids_differ(self):
        with correlation_context() as first:
            pass
        with correlation_context() as second:
            pass

        assert len(first) == 36
        assert first != second

    def test_each_cli_input_gets_its_own_correlation_id(
        self, settings_with_logging, capture_logs, tmp_path, monkeypatch
    ):
        monkeypatch.setattr(
            "html2md.cli.configure_structured_logging", lambda: None
        )
        configure_structured_logging(settings_with_logging, force=True)
        for name in ("a.html", "b.html"):
            (tmp_path / name).write_text("<p>x</p>", encoding="utf-8")

        result = CliRunner().invoke(
            app, ["check", str(tmp_path / "a.html"), str(tmp_path / "b.html")]
        )

        assert result.exit_code == 0
        conversions = [
            e
            for e in read_json_lines(capture_logs)
            if e.get("event_type") == "conversion"
        ]
        assert [e["source"] for e in conversions] == [
            str(tmp_path / "a.html"),
            str(tmp_path / "b.html"),
        ]
        assert conversions[0]["correlation_id"] != conversions[1]["correlation_id"]

    def test_log_context_is_scoped(self, settings_with_logging, capture_logs):
        configure_structured_logging(settings_with_logging, force=True)
        logger = get_logger("html2md.context")

        with log_context(source="page.html"):
            logger.info("Inside")
        logger.info("Outside")

        inside, outside = read_json_lines(capture_logs)
        assert inside["source"] == "page.html"
        assert "source" not in outside


class TestPerformanceLogging:
    """Test timing helpers."""

    def test_performance_context_success(self, settings_with_logging, capture_logs):
        configure_structured_logging(settings_with_logging, force=True)

        with performance_context("unit_of_work"):
            pass

        events = read_json_lines(capture_logs)
        assert [e["event"] for e in events] == ["Operation started", "Operation completed"]
        assert events[1]["status"] == "success"
        assert events[1]["duration_ms"] >= 0

    def test_performance_context_failure(self, settings_with_logging, capture_logs):
        configure_structured_logging(settings_with_logging, force=True)

        with pytest.raises(ValueError):
            with performance_context("failing_work"):
                raise ValueError("broken")

        failure = read_json_lines(capture_logs)[-1]
        assert failure["event"] == "Operation failed"
        assert failure["error_type"] == "ValueError"
        assert failure["level"] == "error"

    def test_log_conversion(self, settings_with_logging, capture_logs):
        configure_structured_logging(settings_with_logging, force=True)

        log_conversion(html_size=120, markdown_size=40, well_formed=False, duration=0.5)

        (log_data,) = read_json_lines(capture_logs)
        assert log_data["event_type"] == "conversion"
        assert log_data["well_formed"] is False
        assert log_data["duration_ms"] == 500.0

    def test_converter_logs_each_conversion(self, settings_with_logging, capture_logs):
        configure_structured_logging(settings_with_logging, force=True)

        convert("<div><p>unclosed")

        events = read_json_lines(capture_logs)
        conversion = [e for e in events if e.get("event_type") == "conversion"]
        assert len(conversion) == 1
        assert conversion[0]["html_size"] == len("<div><p>unclosed")
        assert conversion[0]["well_formed"] is False
        assert any(e["event"] == "Document is not well formed" for e in events)

"""Unit tests for logging configuration."""

import logging

import pytest
import structlog

from fhirrest.observability.logger import (
    TRACE,
    VERBOSE,
    LogContext,
    _context_processor,
    configure_logging,
    get_log_level,
)


class TestLoggingConfiguration:
    """Test configure_logging."""

    def test_configure_logging_defaults(self):
        configure_logging()

        assert structlog.get_logger("test") is not None
        assert logging.getLogger().level == logging.INFO

    @pytest.mark.parametrize("level", ["DEBUG", "INFO", "WARNING", "ERROR"])
    def test_standard_levels(self, level):
        configure_logging(level=level)

        assert logging.getLogger().level == getattr(logging, level)

    def test_custom_levels(self):
        assert get_log_level("trace") == TRACE
        assert get_log_level("VERBOSE") == VERBOSE
        assert logging.getLevelName(VERBOSE) == "VERBOSE"

    def test_unknown_level_defaults_to_info(self):
        assert get_log_level("LOUD") == logging.INFO

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "fhir.log"

        configure_logging(level="INFO", json_logs=True, log_file=log_file)
        structlog.get_logger("fhirrest.test").info("hello", resource_id="Patient/1")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert log_file.exists()
        assert "Patient/1" in log_file.read_text()


class TestLogContext:
    """Test context binding."""

    def _bound(self) -> dict:
        return _context_processor(logging.getLogger(), "info", {"event": "x"})

    def test_context_manager_restores(self):
        with LogContext(operation="read"):
            assert self._bound()["operation"] == "read"
            with LogContext(resource_id="Patient/1"):
                bound = self._bound()
                assert bound["operation"] == "read"
                assert bound["resource_id"] == "Patient/1"
            assert "resource_id" not in self._bound()

        assert self._bound() == {"event": "x"}

    def test_context_restored_after_exception(self):
        with pytest.raises(RuntimeError):
            with LogContext(operation="delete"):
                raise RuntimeError("boom")

        assert "operation" not in self._bound()

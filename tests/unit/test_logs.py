"""Unit tests for logging helpers."""

import json
import logging

from helios_deployments.logs import JSONFormatter, configure_logging


class TestJSONFormatter:
    """Test the JSONFormatter class."""

    def _record(self, **extra) -> logging.LogRecord:
        record = logging.LogRecord("helios_deployments.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        for name, value in extra.items():
            setattr(record, name, value)
        return record

    def test_formats_basic_fields(self):
        """Test that level, logger and message are emitted."""
        data = json.loads(JSONFormatter().format(self._record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "helios_deployments.test"
        assert data["msg"] == "hello world"
        assert data["ts"].endswith("Z")

    def test_includes_structured_extras(self):
        """Test that known extras are copied into the output."""
        data = json.loads(JSONFormatter().format(self._record(log_name="FeeCollector", event="decision_mandatory")))

        assert data["log_name"] == "FeeCollector"
        assert data["event"] == "decision_mandatory"
        assert "key" not in data


class TestConfigureLogging:
    """Test the configure_logging function."""

    def test_installs_single_handler(self):
        """Test that repeated calls do not stack handlers."""
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging("DEBUG", json_format=True)
            configure_logging("WARNING")

            assert len(root.handlers) == 1
            assert root.level == logging.WARNING
            assert not isinstance(root.handlers[0].formatter, JSONFormatter)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

"""
Test suite for structured logging.
"""

import json
import logging

from hireme.core.logging_config import CustomJsonFormatter, setup_logging


def make_record(level, message="Application 7 accepted"):
    return logging.LogRecord(
        name="hireme.services.application_service",
        level=level,
        pathname=__file__,
        lineno=42,
        msg=message,
        args=(),
        exc_info=None,
        func="accept_application",
    )


class TestJsonFormatter:
    """Tests for the JSON log format"""

    def test_standard_fields(self):
        formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(logger)s %(module)s %(funcName)s %(message)s')

        payload = json.loads(formatter.format(make_record(logging.INFO)))

        assert payload["message"] == "Application 7 accepted"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "hireme.services.application_service"
        assert payload["function"] == "accept_application"
        assert "timestamp" in payload
        assert "line" not in payload

    def test_location_on_warnings(self):
        formatter = CustomJsonFormatter('%(message)s')

        payload = json.loads(formatter.format(make_record(logging.WARNING)))

        assert payload["line"] == 42
        assert payload["pathname"] == __file__


class TestSetupLogging:
    """Tests for root logger configuration"""

    def test_replaces_handlers_and_sets_level(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging("DEBUG", json_logs=False)
            setup_logging("WARNING", json_logs=True)

            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, CustomJsonFormatter)
            assert root.level == logging.WARNING
            assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

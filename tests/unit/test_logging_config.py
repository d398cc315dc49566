"""Unit tests for the structlog logging configuration."""

import logging

import structlog

from homefinder.logging_config import setup_logging


class TestSetupLogging:
    def test_setup_logging_debug(self, capsys):
        setup_logging(debug=True)
        structlog.get_logger("test").debug("debug_event", key="value")

        assert "debug_event" in capsys.readouterr().out

    def test_setup_logging_production_emits_json(self, capsys):
        setup_logging(debug=False)
        structlog.get_logger("test").info("search_completed", count=3)

        out = capsys.readouterr().out
        assert '"event": "search_completed"' in out
        assert '"count": 3' in out

    def test_production_filters_debug(self, capsys):
        setup_logging(debug=False)
        structlog.get_logger("test").debug("hidden_event")

        assert "hidden_event" not in capsys.readouterr().out

    def test_httpx_request_logs_quiet_in_production(self):
        setup_logging(debug=False)
        assert logging.getLogger("httpx").level == logging.WARNING


class TestStructlogContextBinding:
    def test_context_binding_works(self):
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id="test-123", session_id="s-1")

        bound = structlog.contextvars.get_contextvars()
        assert bound["request_id"] == "test-123"
        assert bound["session_id"] == "s-1"

        structlog.contextvars.clear_contextvars()
        assert structlog.contextvars.get_contextvars() == {}

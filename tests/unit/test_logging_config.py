"""Tests for logging configuration."""

import structlog

from specforge.core.logging_config import LogContext, get_logger


class TestLogContext:
    """Test scoped context binding."""

    def test_binds_and_clears(self):
        with LogContext(generation_id="gen_1"):
            assert structlog.contextvars.get_contextvars()["generation_id"] == "gen_1"
        assert "generation_id" not in structlog.contextvars.get_contextvars()

    def test_nested_shared_key_restores_outer(self):
        with LogContext(widget_id="outer"):
            with LogContext(widget_id="inner", phase="Active"):
                assert structlog.contextvars.get_contextvars()["widget_id"] == "inner"
            context = structlog.contextvars.get_contextvars()
            assert context["widget_id"] == "outer"
            assert "phase" not in context
        assert "widget_id" not in structlog.contextvars.get_contextvars()

    def test_get_logger(self):
        assert get_logger(__name__) is not None

"""
Structured Logging Configuration
Logging for the compiler, CLI and runtime with structlog.
"""

import logging
import sys
from typing import Any

import structlog
from pythonjsonlogger import jsonlogger


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Use JSON formatter for machine-readable logs
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Logs go to stderr so CLI output on stdout stays machine-readable
    if json_logs:
        handler = logging.StreamHandler(sys.stderr)
        formatter = jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        handler.setFormatter(formatter)
        logging.basicConfig(level=log_level, handlers=[handler], force=True)
    else:
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            stream=sys.stderr,
            force=True,
        )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class LogContext:
    """Add context to all log messages in scope."""

    def __init__(self, **kwargs: Any):
        self.context = kwargs
        self.tokens: Any = None

    def __enter__(self) -> "LogContext":
        self.tokens = structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, *args: Any) -> None:
        # Restores outer values for keys shared with an enclosing context
        structlog.contextvars.reset_contextvars(**self.tokens)

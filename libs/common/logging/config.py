"""Logging setup for the authentication service.

Example:
    >>> from libs.common.logging.config import configure_logging
    >>> logger = configure_logging(service_name="auth_service", log_level="INFO")
    >>> logger.info("Service started", extra={"auth_mode": "oauth"})
"""

import logging
import sys

from libs.common.logging.context import get_trace_id
from libs.common.logging.formatter import JSONFormatter

# Libraries whose INFO output would echo request URLs (and with them
# authorization codes) into the log stream
QUIET_LOGGERS = ("httpx", "httpcore")


class TraceIDFilter(logging.Filter):
    """Injects the current trace ID into every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = get_trace_id()
        return True


def configure_logging(
    service_name: str,
    log_level: str = "INFO",
    include_context: bool = True,
) -> logging.Logger:
    """Configure structured JSON logging on the root logger.

    Sets up:
    - JSON formatted output to stdout
    - Trace ID injection on all records
    - Specified log level
    - WARNING level for HTTP client libraries

    Call once at service startup. Calling again replaces the handler.

    Args:
        service_name: Name of the service (e.g., "auth_service")
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        include_context: Whether to include extra fields in output

    Returns:
        Configured root logger instance

    Raises:
        ValueError: If log_level is invalid
    """
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(JSONFormatter(service_name=service_name, include_context=include_context))
    handler.addFilter(TraceIDFilter())
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    return root_logger

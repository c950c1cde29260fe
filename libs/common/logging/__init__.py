"""Structured JSON logging with per-request trace IDs.

Usage:
    # At service startup
    from libs.common.logging import configure_logging, add_trace_id_middleware
    configure_logging(service_name="auth_service", log_level="INFO")
    add_trace_id_middleware(app)

    # Anywhere
    logger = logging.getLogger(__name__)
    logger.info("Session issued", extra={"session_id": redact(session_id)})
"""

from libs.common.logging.config import TraceIDFilter, configure_logging
from libs.common.logging.context import (
    TRACE_ID_HEADER,
    clear_trace_id,
    generate_trace_id,
    get_trace_id,
    set_trace_id,
)
from libs.common.logging.formatter import JSONFormatter, redact_fields
from libs.common.logging.middleware import ASGITraceIDMiddleware, add_trace_id_middleware

__all__ = [
    "ASGITraceIDMiddleware",
    "JSONFormatter",
    "TRACE_ID_HEADER",
    "TraceIDFilter",
    "add_trace_id_middleware",
    "clear_trace_id",
    "configure_logging",
    "generate_trace_id",
    "get_trace_id",
    "redact_fields",
    "set_trace_id",
]

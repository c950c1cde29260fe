"""Trace ID generation and context propagation.

Each HTTP request gets a trace ID (taken from ``X-Trace-ID`` or generated as a
UUIDv4) stored in a context variable, so every log line emitted while the
sign-in flow runs can be correlated across the login redirect and callback.

Example:
    >>> set_trace_id(generate_trace_id())
    >>> get_trace_id() is not None
    True
"""

import contextvars
import re
import uuid

_trace_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("trace_id", default=None)

TRACE_ID_HEADER = "X-Trace-ID"
MAX_TRACE_ID_LENGTH = 128

# Incoming IDs end up in log lines and response headers
_TRACE_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]+")


def generate_trace_id() -> str:
    """Generate a new UUIDv4 trace ID."""
    return str(uuid.uuid4())


def is_valid_trace_id(trace_id: str | None) -> bool:
    """Check an inbound trace ID before adopting it."""
    if not trace_id or len(trace_id) > MAX_TRACE_ID_LENGTH:
        return False
    return bool(_TRACE_ID_PATTERN.fullmatch(trace_id))


def get_trace_id() -> str | None:
    return _trace_id_var.get()


def set_trace_id(trace_id: str) -> None:
    """Set the trace ID for the current context.

    Raises:
        ValueError: If trace_id is empty
    """
    if not trace_id:
        raise ValueError("Trace ID cannot be empty")
    _trace_id_var.set(trace_id)


def clear_trace_id() -> None:
    _trace_id_var.set(None)

"""Tests for JSON log formatter.

Tests verify:
- Required schema fields (timestamp, level, service, trace_id, message)
- Extra fields collected as context
- Credential redaction by field name
- Exception information
"""

import json
import logging
import sys

import pytest

from libs.common.logging.formatter import REDACTED, JSONFormatter, is_sensitive_key, redact_fields


def _record(msg: str = "Test message", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="/path/to/file.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    @pytest.fixture()
    def formatter(self) -> JSONFormatter:
        return JSONFormatter(service_name="auth_service")

    def test_basic_log_format(self, formatter: JSONFormatter) -> None:
        log_dict = json.loads(formatter.format(_record(trace_id="trace-123")))

        assert log_dict["level"] == "INFO"
        assert log_dict["service"] == "auth_service"
        assert log_dict["trace_id"] == "trace-123"
        assert log_dict["message"] == "Test message"
        assert log_dict["timestamp"].endswith("Z")
        assert log_dict["source"] == {"file": "/path/to/file.py", "line": 42, "function": None}
        assert "context" not in log_dict

    def test_extra_fields_become_context(self, formatter: JSONFormatter) -> None:
        log_dict = json.loads(formatter.format(_record(state="abc12345...", status_code=400)))

        assert log_dict["context"] == {"state": "abc12345...", "status_code": 400}

    def test_credentials_are_redacted(self, formatter: JSONFormatter) -> None:
        record = _record(
            code="auth-code",
            code_verifier="verifier",
            client_secret="secret",
            session_token="signed",
            password="hunter2",
            has_code=True,
            error_code="TOKEN_EXCHANGE_FAILED",
        )

        context = json.loads(formatter.format(record))["context"]

        assert context["code"] == REDACTED
        assert context["code_verifier"] == REDACTED
        assert context["client_secret"] == REDACTED
        assert context["session_token"] == REDACTED
        assert context["password"] == REDACTED
        assert context["has_code"] is True
        assert context["error_code"] == "TOKEN_EXCHANGE_FAILED"

    def test_explicit_context_dict(self, formatter: JSONFormatter) -> None:
        record = _record(context={"auth_mode": "oauth", "nested": {"access_token": "at"}})

        context = json.loads(formatter.format(record))["context"]

        assert context == {"auth_mode": "oauth", "nested": {"access_token": REDACTED}}

    def test_context_can_be_disabled(self) -> None:
        formatter = JSONFormatter(service_name="auth_service", include_context=False)
        assert "context" not in json.loads(formatter.format(_record(state="abc")))

    def test_exception_info(self, formatter: JSONFormatter) -> None:
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()

        log_dict = json.loads(formatter.format(record))

        assert log_dict["exception"]["type"] == "ValueError"
        assert log_dict["exception"]["message"] == "boom"
        assert "Traceback" in log_dict["exception"]["traceback"]

    def test_timestamp_format(self, formatter: JSONFormatter) -> None:
        assert formatter._format_timestamp(1697884200.0) == "2023-10-21T10:30:00.000Z"


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("code", True),
        ("Set-Cookie", True),
        ("refresh_token", True),
        ("idp_client_secret", True),
        ("has_code", False),
        ("session_id", False),
        ("state", False),
    ],
)
def test_is_sensitive_key(key: str, expected: bool) -> None:
    assert is_sensitive_key(key) is expected


def test_redact_fields_leaves_input_untouched() -> None:
    original = {"password": "p", "user": "u"}
    assert redact_fields(original) == {"password": REDACTED, "user": "u"}
    assert original["password"] == "p"

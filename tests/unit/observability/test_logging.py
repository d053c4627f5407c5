"""Tests for structured logging."""

import json
from io import StringIO

import pytest
import structlog

from warden.observability.logging import (
    PIIRedactor,
    get_logger,
    setup_logging,
)


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_json_format(self) -> None:
        """Should configure JSON format for production."""
        setup_logging(level="INFO", format="json", redact_pii=False)
        logger = get_logger("test")
        logger.info("test_message")

    def test_setup_console_format(self) -> None:
        """Should configure console format for development."""
        setup_logging(level="DEBUG", format="console", redact_pii=False)
        logger = get_logger("test")
        logger.debug("test_message")

    def test_setup_with_pii_redaction(self) -> None:
        """Should configure PII redaction when enabled."""
        setup_logging(level="INFO", format="json", redact_pii=True)
        logger = get_logger("test")
        logger.info("test_message", email="user@example.com")


class TestPIIRedactor:
    """Tests for PII redaction."""

    @pytest.fixture
    def redactor(self) -> PIIRedactor:
        return PIIRedactor()

    def test_redacts_email_by_key(self, redactor: PIIRedactor) -> None:
        event_dict = {"email": "user@example.com", "other": "value"}
        result = redactor(None, None, event_dict)  # type: ignore
        assert result["email"] == "[REDACTED]"
        assert result["other"] == "value"

    def test_redacts_password_by_key(self, redactor: PIIRedactor) -> None:
        event_dict = {"password": "Secret123!", "data": "ok"}
        result = redactor(None, None, event_dict)  # type: ignore
        assert result["password"] == "[REDACTED]"
        assert result["data"] == "ok"

    def test_redacts_profile_change_values(self, redactor: PIIRedactor) -> None:
        """Old and new field values never reach the log output."""
        event_dict = {"field": "phone_number", "old_value": "555", "new_value": "777"}
        result = redactor(None, None, event_dict)  # type: ignore
        assert result["old_value"] == "[REDACTED]"
        assert result["new_value"] == "[REDACTED]"
        assert result["field"] == "phone_number"

    def test_redacts_email_used_as_subject(self, redactor: PIIRedactor) -> None:
        """Failed sign-ins use the email as subject, which the pattern catches."""
        event_dict = {"subject_id": "a@b.com"}
        result = redactor(None, None, event_dict)  # type: ignore
        assert result["subject_id"] == "[EMAIL]"

    def test_redacts_phone_pattern_in_string_value(self, redactor: PIIRedactor) -> None:
        event_dict = {"message": "Call me at +1-555-123-4567 please"}
        result = redactor(None, None, event_dict)  # type: ignore
        assert "+1-555-123-4567" not in result["message"]
        assert "[PHONE]" in result["message"]

    def test_handles_nested_dicts_and_lists(self, redactor: PIIRedactor) -> None:
        event_dict = {
            "user": {"email": "user@example.com", "name": "Jane"},
            "targets": ["x@example.com", 3],
        }
        result = redactor(None, None, event_dict)  # type: ignore
        assert result["user"]["email"] == "[REDACTED]"
        assert result["user"]["name"] == "Jane"
        assert result["targets"] == ["[EMAIL]", 3]

    def test_preserves_non_pii_data(self, redactor: PIIRedactor) -> None:
        event_dict = {
            "event": "profile_committed",
            "changed_fields": 2,
            "status": "success",
        }
        result = redactor(None, None, event_dict)  # type: ignore
        assert result == event_dict


class TestJSONLogging:
    """Tests for JSON log output format."""

    def test_json_output_is_valid_json(self) -> None:
        output = StringIO()
        structlog.configure(
            processors=[
                structlog.processors.add_log_level,
                PIIRedactor(),
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(0),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(output),
            cache_logger_on_first_use=False,
        )

        structlog.get_logger("test").info("sign_in_failed", email="a@b.com")

        parsed = json.loads(output.getvalue().strip())
        assert parsed["event"] == "sign_in_failed"
        assert parsed["email"] == "[REDACTED]"
        assert parsed["level"] == "info"

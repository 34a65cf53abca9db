"""Test suite for logger configuration and request context."""

import json
import sys
from unittest.mock import patch

import pytest

from userdir_api.monitoring.logger import configure_logger
from userdir_api.monitoring.logger import get_formatted_stacktrace
from userdir_api.monitoring.logger import process_log_record
from userdir_api.monitoring.request_context import get_request_context


class TestConfigureLogger:
    """Tests for configure_logger."""

    @patch("userdir_api.monitoring.logger.logger")
    def test_single_stdout_sink(self, mock_logger):
        """Test the default sink is replaced by one stdout sink."""
        configure_logger(log_level="warning")

        mock_logger.remove.assert_called_once_with()
        mock_logger.add.assert_called_once()
        kwargs = mock_logger.add.call_args[1]
        assert kwargs["sink"] is sys.stdout
        assert kwargs["level"] == "WARNING"
        assert kwargs["filter"] is process_log_record
        assert kwargs["diagnose"] is False


class TestProcessLogRecord:
    """Tests for process_log_record."""

    def test_extra_is_serialized_to_json(self):
        """Test structured extras render as a JSON string."""
        record = {"extra": {"operation": "get_by_id", "user_id": 7}, "exception": None}

        result = process_log_record(record)

        assert json.loads(result["extra"]) == {"operation": "get_by_id", "user_id": 7}
        assert result["stacktrace"] == ""

    def test_stacktrace_is_single_line(self):
        """Test tracebacks have newlines replaced with carriage returns."""
        try:
            raise ValueError("boom")
        except ValueError:
            exc_info = sys.exc_info()

        record = {"extra": {}, "exception": exc_info}
        result = process_log_record(record)

        assert "ValueError: boom" in result["stacktrace"]
        assert "\n" not in result["stacktrace"]

    def test_formatted_stacktrace_keeps_newlines_when_asked(self):
        """Test newline replacement is optional."""
        try:
            raise KeyError("missing")
        except KeyError:
            exc_info = sys.exc_info()

        stacktrace = get_formatted_stacktrace(exc_info, replace_newline_character_with_carriage_return=False)

        assert "\n" in stacktrace


class TestLoggingIntegration:
    """Tests that log lines carry repository context."""

    def test_repository_failure_is_logged(self, captured_logs):
        """Test a failed repository call logs the method name and kind."""
        import asyncio
        from unittest.mock import MagicMock

        from userdir_api.db.exceptions import UserStoreError
        from userdir_api.db.repository_user import UserRepository

        pool = MagicMock()
        pool.acquire.side_effect = RuntimeError("User DB pool not initialized - call initialize() first")
        repository = UserRepository(pool)

        with pytest.raises(UserStoreError):
            asyncio.run(repository.get_by_name_id("sub-123"))

        errors = [r for r in captured_logs if r["level"].name == "ERROR"]
        assert len(errors) == 1
        extra = errors[0]["extra"]
        # the stdout sink filter may already have serialized the shared record
        if isinstance(extra, str):
            extra = json.loads(extra)
        assert extra["operation"] == "get_by_name_id"
        assert extra["error_kind"] == "CONNECTIVITY"


def test_request_context_defaults():
    """Test the request context is empty outside of a request."""
    assert get_request_context() == {"request_id": "", "client_ip": "", "request_path": ""}

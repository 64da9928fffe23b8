"""
Unit Tests for Logging Configuration.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest

from notehub.backend.core.config_schema import LoggingSchema
from notehub.backend.core.logging import (
    QUIET_LOGGERS,
    _resolve_log_path,
    get_logger,
    merge_extra,
    setup_logging,
)


@pytest.fixture
def logging_config() -> MagicMock:
    config = MagicMock()
    config.logging = LoggingSchema(
        level="INFO",
        format="json",
        handlers={
            "console": {"enabled": True},
            "file": {
                "enabled": True,
                "path": "data/logs/notehub.jsonl",
                "max_bytes": 10485760,
                "backup_count": 5,
            },
        },
    )
    return config


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_uses_config_defaults(self, logging_config):
        with patch("notehub.backend.core.logging.get_app_config", return_value=logging_config):
            setup_logging(enable_file_logging=False)

        root_logger = logging.getLogger()
        assert root_logger.level == logging.INFO
        assert [type(h).__name__ for h in root_logger.handlers] == ["StreamHandler"]

    def test_override_takes_precedence(self, logging_config):
        with patch("notehub.backend.core.logging.get_app_config", return_value=logging_config):
            setup_logging(level="DEBUG", format_type="console", enable_console=False, enable_file_logging=False)

        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG
        assert root_logger.handlers == []

    def test_file_logging_enabled(self, tmp_path, logging_config):
        """Should create a single RotatingFileHandler for the JSONL file."""
        log_file = tmp_path / "logs" / "notehub.jsonl"

        with patch("notehub.backend.core.logging.get_app_config", return_value=logging_config), \
             patch("notehub.backend.core.logging._resolve_log_path", return_value=log_file):
            setup_logging()

        handler_types = [type(h).__name__ for h in logging.getLogger().handlers]
        assert handler_types.count("RotatingFileHandler") == 1
        assert log_file.parent.is_dir()

    def test_quiets_noisy_libraries(self, logging_config):
        with patch("notehub.backend.core.logging.get_app_config", return_value=logging_config):
            setup_logging(level="DEBUG", enable_file_logging=False)

        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING


class TestMergeExtra:
    def test_lifts_extra_into_record(self):
        event = merge_extra(None, "info", {"event": "Course added", "extra": {"course": "Algorithms"}})

        assert event == {"event": "Course added", "course": "Algorithms"}

    def test_bound_fields_win_over_extra(self):
        event = merge_extra(None, "info", {"event": "x", "request_id": "req-1", "extra": {"request_id": "other"}})

        assert event["request_id"] == "req-1"

    def test_without_extra(self):
        assert merge_extra(None, "info", {"event": "x"}) == {"event": "x"}


class TestGetLogger:
    def test_returns_structlog_logger(self):
        logger = get_logger("notehub.test")
        assert hasattr(logger, "bind")
        assert hasattr(logger, "info")


class TestResolveLogPath:
    def test_relative_to_project_root(self, tmp_path):
        with patch("notehub.backend.core.logging.find_project_root", return_value=tmp_path):
            assert _resolve_log_path("data/logs/notehub.jsonl") == tmp_path / "data" / "logs" / "notehub.jsonl"

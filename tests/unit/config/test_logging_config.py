"""Tests for centralized logging configuration."""

import json
import logging
from decimal import Decimal

import pytest

from analytics_engine.config.logging_config import (
    JSONFormatter,
    LoggingConfig,
    configure_logging,
    get_logger,
    reset_logging,
)


class TestLoggingConfig:
    """Test LoggingConfig class."""

    def test_default_configuration(self):
        """Test default logging configuration."""
        config = LoggingConfig()

        assert config.log_level == "INFO"
        assert config.log_format == "standard"
        assert config.log_file is None
        assert config.enable_console is True
        assert config.enable_file is False
        assert config.max_file_size == 10 * 1024 * 1024  # 10MB
        assert config.backup_count == 5

    def test_level_is_case_insensitive(self):
        """Test that lower-case levels are accepted."""
        assert LoggingConfig(log_level="debug").log_level == "DEBUG"

    def test_from_settings(self, test_config):
        """Test configuration from application settings."""
        config = LoggingConfig.from_settings(test_config, "json")

        assert config.log_level == "DEBUG"
        assert config.log_format == "json"

    def test_debug_mode_forces_debug_level(self, mock_env, monkeypatch):
        """Test that DEBUG=true overrides LOG_LEVEL."""
        from analytics_engine.config import reload_config

        monkeypatch.setenv("DEBUG", "true")
        monkeypatch.setenv("LOG_LEVEL", "ERROR")

        config = LoggingConfig.from_settings(reload_config())

        assert config.log_level == "DEBUG"

    def test_invalid_log_level(self):
        """Test invalid log level raises error."""
        with pytest.raises(ValueError, match="Invalid log level"):
            LoggingConfig(log_level="INVALID")

    def test_invalid_log_format(self):
        """Test invalid log format raises error."""
        with pytest.raises(ValueError, match="Invalid log format"):
            LoggingConfig(log_format="invalid")

    def test_file_logging_enabled_without_path(self):
        """Test file logging enabled without file path raises error."""
        with pytest.raises(ValueError, match="log_file must be specified"):
            LoggingConfig(enable_file=True, log_file=None)


class TestConfigureLogging:
    """Test configure_logging function."""

    def teardown_method(self):
        """Reset logging after each test."""
        reset_logging()

    def test_console_handler_configuration(self):
        """Test console handler is configured correctly."""
        configure_logging(LoggingConfig(log_level="DEBUG", enable_console=True))

        root_logger = logging.getLogger()
        stream_handlers = [
            h for h in root_logger.handlers if isinstance(h, logging.StreamHandler)
        ]
        assert len(stream_handlers) == 1
        assert root_logger.level == logging.DEBUG

    def test_reconfigure_does_not_duplicate_handlers(self):
        """Test that configuring twice replaces handlers."""
        configure_logging(LoggingConfig())
        configure_logging(LoggingConfig())

        assert len(logging.getLogger().handlers) == 1

    def test_log_level_filtering(self):
        """Test handler levels follow the configuration."""
        configure_logging(LoggingConfig(log_level="WARNING"))

        root_logger = logging.getLogger()
        assert root_logger.level == logging.WARNING
        for handler in root_logger.handlers:
            assert handler.level == logging.WARNING

    def test_file_handler_configuration(self, tmp_path):
        """Test file handler writes to the configured file."""
        log_file = tmp_path / "logs" / "engine.log"
        configure_logging(
            LoggingConfig(
                log_level="INFO",
                enable_console=False,
                enable_file=True,
                log_file=str(log_file),
            )
        )

        get_logger("analytics_engine.test").info("Test file message")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "Test file message" in log_file.read_text()

    def test_standard_format(self):
        """Test standard log format."""
        configure_logging(LoggingConfig(log_format="standard"))

        for handler in logging.getLogger().handlers:
            assert not isinstance(handler.formatter, JSONFormatter)

    def test_json_format_structure(self, tmp_path):
        """Test JSON log lines carry the standard fields and extras."""
        log_file = tmp_path / "engine.log"
        configure_logging(
            LoggingConfig(
                log_format="json",
                enable_console=False,
                enable_file=True,
                log_file=str(log_file),
            )
        )

        get_logger("analytics_engine.test").info(
            "Built report", extra={"revenue": Decimal("1000.00")}
        )
        for handler in logging.getLogger().handlers:
            handler.flush()

        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["level"] == "INFO"
        assert record["logger"] == "analytics_engine.test"
        assert record["message"] == "Built report"
        assert record["revenue"] == "1000.00"

    def test_reset_logging(self):
        """Test that reset removes handlers and restores WARNING."""
        configure_logging(LoggingConfig(log_level="DEBUG"))

        reset_logging()

        root_logger = logging.getLogger()
        assert root_logger.handlers == []
        assert root_logger.level == logging.WARNING

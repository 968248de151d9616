"""Tests for logging utilities module.

Tests cover:
- get_logger function
- setup_logging function
- Logger configuration
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from rich.logging import RichHandler

from messaging_apis.core.config import LoggingConfig
from messaging_apis.core.logger import LOGGER_NAMESPACE, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Put the root logger back the way it was after each test."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    logging.getLogger(LOGGER_NAMESPACE).setLevel(logging.NOTSET)


# ==============================================================================
# get_logger Tests
# ==============================================================================


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_returns_logger(self):
        """Test get_logger returns a Logger instance."""
        logger = get_logger("test_module")

        assert isinstance(logger, logging.Logger)

    def test_get_logger_name_prefix(self):
        """Test get_logger adds the package namespace."""
        logger = get_logger("telegram")

        assert logger.name == "messaging_apis.telegram"

    def test_get_logger_same_name_returns_same_logger(self):
        """Test get_logger returns same logger for same name."""
        assert get_logger("same_name") is get_logger("same_name")

    def test_get_logger_different_names(self):
        """Test get_logger returns different loggers for different names."""
        logger1 = get_logger("module_a")
        logger2 = get_logger("module_b")

        assert logger1 is not logger2
        assert logger1.name != logger2.name


# ==============================================================================
# setup_logging Tests
# ==============================================================================


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_default_config(self):
        """Test setup_logging installs a rich console handler."""
        setup_logging()

        handlers = logging.getLogger().handlers
        assert any(isinstance(handler, RichHandler) for handler in handlers)

    def test_setup_logging_custom_level(self):
        """Test setup_logging applies the level to the package namespace."""
        setup_logging(LoggingConfig(level="DEBUG"))

        assert logging.getLogger(LOGGER_NAMESPACE).level == logging.DEBUG

    def test_existing_loggers_follow_new_level(self):
        """Test named loggers created earlier pick up the new level."""
        logger = get_logger("existing")

        setup_logging(LoggingConfig(level="ERROR"))

        assert logger.level == logging.ERROR

    def test_level_is_case_insensitive(self):
        """Test lowercase level names are accepted."""
        assert LoggingConfig(level="warning").level == "WARNING"

    def test_setup_logging_with_file(self, tmp_path: Path):
        """Test setup_logging with file handler."""
        log_file = tmp_path / "messaging.log"
        setup_logging(LoggingConfig(level="INFO", log_file=str(log_file)))

        get_logger("test_file").info("Test file message")

        assert log_file.exists()
        assert "Test file message" in log_file.read_text(encoding="utf-8")

    def test_setup_logging_creates_log_directory(self, tmp_path: Path):
        """Test setup_logging creates log directory if needed."""
        log_file = tmp_path / "subdir" / "nested" / "test.log"

        setup_logging(LoggingConfig(log_file=str(log_file)))

        assert log_file.parent.exists()

    def test_setup_logging_replaces_handlers(self):
        """Test calling setup twice does not stack console handlers."""
        setup_logging()
        setup_logging()

        handlers = logging.getLogger().handlers
        assert sum(isinstance(handler, RichHandler) for handler in handlers) == 1

"""Tests for logging_config.py utility functions."""

import os
import sys
import logging
from unittest.mock import patch

from city_imagery.core.logging_config import (
    setup_logger,
    get_logger,
    quiet_library_loggers,
    set_debug_logging,
    logger,
)


class TestSetupLogger:
    """Tests for setup_logger function."""

    def test_setup_logger_custom_name(self):
        """Test setup_logger with custom name."""
        custom_name = "test-custom-logger"
        test_logger = setup_logger(name=custom_name)
        assert test_logger.name == custom_name
        assert len(test_logger.handlers) == 1
        assert not test_logger.propagate

    def test_setup_logger_custom_level_by_parameter(self):
        """Test setup_logger with custom level via parameter."""
        test_logger = setup_logger(name="test-level-param", level="DEBUG")
        assert test_logger.level == logging.DEBUG

    def test_setup_logger_custom_level_by_env_var(self):
        """Test setup_logger with custom level via environment variable."""
        with patch.dict(os.environ, {"LOG_LEVEL": "WARNING"}):
            test_logger = setup_logger(name="test-env-level")
            assert test_logger.level == logging.WARNING

    def test_setup_logger_invalid_level_defaults_to_info(self):
        """Test setup_logger with invalid level defaults to INFO."""
        test_logger = setup_logger(name="test-invalid-level", level="INVALID_LEVEL")
        assert test_logger.level == logging.INFO

    def test_setup_logger_structured_format(self):
        """Test setup_logger with structured format."""
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("LOG_FORMAT", None)
            test_logger = setup_logger(name="test-structured", format_type="structured")
        format_string = test_logger.handlers[0].formatter._fmt
        assert "%(asctime)s" in format_string
        assert "%(levelname)" in format_string
        assert "%(filename)s" in format_string
        assert "%(funcName)s" in format_string

    def test_setup_logger_env_format_override(self):
        """Test setup_logger format override via environment variable."""
        with patch.dict(os.environ, {"LOG_FORMAT": "simple"}):
            test_logger = setup_logger(name="test-env-format", format_type="structured")
        format_string = test_logger.handlers[0].formatter._fmt
        assert "%(filename)s" not in format_string
        assert "%(message)s" in format_string

    def test_setup_logger_no_duplicate_handlers(self):
        """Test that setup_logger doesn't add duplicate handlers."""
        logger_name = "test-no-duplicates"
        test_logger1 = setup_logger(name=logger_name)
        test_logger2 = setup_logger(name=logger_name)

        assert test_logger1 is test_logger2
        assert len(test_logger1.handlers) == 1

    def test_setup_logger_handler_uses_stdout(self):
        """Test that logger handler uses stdout."""
        test_logger = setup_logger(name="test-stdout")
        handler = test_logger.handlers[0]
        assert handler.stream is sys.stdout


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_custom_name(self):
        test_logger = get_logger(name="test-get-logger")
        assert test_logger.name == "test-get-logger"
        assert not test_logger.propagate


class TestSetDebugLogging:
    def test_set_debug_logging_lowers_levels(self):
        root = logging.getLogger()
        original_root_level = root.level
        test_logger = setup_logger(name="test-debug-switch", level="INFO")
        try:
            set_debug_logging(test_logger)
            assert test_logger.level == logging.DEBUG
            assert root.level == logging.DEBUG
        finally:
            root.setLevel(original_root_level)


class TestDefaultLogger:
    """Tests for default logger instance."""

    def test_default_logger_exists(self):
        assert isinstance(logger, logging.Logger)
        assert logger.name == "city-imagery"
        assert len(logger.handlers) >= 1
        assert not logger.propagate


class TestQuietLibraryLoggers:
    def test_library_loggers_raised_to_warning(self):
        botocore = logging.getLogger("botocore")
        original = botocore.level
        try:
            quiet_library_loggers()
            assert botocore.level == logging.WARNING
            assert logging.getLogger("aiohttp").level == logging.WARNING
        finally:
            botocore.setLevel(original)

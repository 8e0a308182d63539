"""Unit tests for logging configuration module.

Tests verify that the logging configuration functions work correctly with different
scenarios including various log levels, formats, and file logging options.
"""

import logging
from unittest.mock import patch

import pytest

from streamo.core import logging_config
from streamo.core.logging_config import (
    DETAILED_FORMAT,
    JSON_FORMAT,
    MODULE_LOG_LEVELS,
    SIMPLE_FORMAT,
    get_logger,
    setup_logging,
)


def _console_handler():
    return next(
        (h for h in logging.getLogger().handlers if type(h) is logging.StreamHandler),
        None,
    )


class TestSetupLoggingLogLevels:
    """Test setup_logging with different log levels."""

    @pytest.mark.parametrize(
        "log_level,expected_level",
        [
            ("DEBUG", logging.DEBUG),
            ("INFO", logging.INFO),
            ("WARNING", logging.WARNING),
            ("error", logging.ERROR),
        ],
    )
    def test_setup_logging_with_different_levels(self, log_level, expected_level):
        setup_logging(log_level=log_level, enable_file=False)

        console_handler = _console_handler()
        assert console_handler is not None
        assert console_handler.level == expected_level

    def test_root_logger_captures_everything(self):
        setup_logging(log_level="WARNING", enable_file=False)
        assert logging.getLogger().level == logging.DEBUG


class TestSetupLoggingFormats:
    """Test setup_logging with different log formats."""

    @pytest.mark.parametrize(
        "log_format,expected_format",
        [
            ("simple", SIMPLE_FORMAT),
            ("detailed", DETAILED_FORMAT),
            ("json", JSON_FORMAT),
            ("unknown", DETAILED_FORMAT),
        ],
    )
    def test_setup_logging_with_different_formats(self, log_format, expected_format):
        setup_logging(log_format=log_format, enable_file=False)

        assert _console_handler().formatter._fmt == expected_format


class TestFileLogging:
    def test_file_handler_written_to_log_dir(self, tmp_path):
        with patch.object(logging_config, "ENABLE_FILE_LOGGING", True), patch.object(
            logging_config, "LOG_FILE_DIR", str(tmp_path / "logs")
        ):
            setup_logging(enable_file=True)

        file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].baseFilename == str(tmp_path / "logs" / "streamo.log")
        file_handlers[0].close()
        setup_logging(enable_file=False)

    def test_file_logging_disabled_by_setting(self):
        with patch.object(logging_config, "ENABLE_FILE_LOGGING", False):
            setup_logging(enable_file=True)
        assert not [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]

    def test_handlers_are_not_duplicated(self):
        setup_logging(enable_file=False)
        setup_logging(enable_file=False)
        assert len(logging.getLogger().handlers) == 1


class TestModuleLevels:
    def test_module_levels_applied(self):
        setup_logging(enable_file=False)
        for module_name, level in MODULE_LOG_LEVELS.items():
            assert logging.getLogger(module_name).level == getattr(logging, level)

    def test_third_party_noise_reduced(self):
        assert MODULE_LOG_LEVELS["sqlalchemy.engine"] == "WARNING"
        assert MODULE_LOG_LEVELS["streamo.server.api"] == "DEBUG"


def test_get_logger_returns_named_logger():
    logger = get_logger("streamo.server.services.csv_import")
    assert logger.name == "streamo.server.services.csv_import"
    assert logger is logging.getLogger("streamo.server.services.csv_import")

"""Tests for logging setup."""

import logging

import pytest

from kontrolle.common.logger import get_logger, setup_logger


class TestGetLogger:
    """Tests for get_logger()."""

    def test_namespaced(self):
        """Test loggers live under the kontrolle namespace."""
        assert get_logger("rules").name == "kontrolle.rules"
        assert get_logger("kontrolle.rbac").name == "kontrolle.rbac"
        assert get_logger("kontrolle").name == "kontrolle"


class TestSetupLogger:
    """Tests for setup_logger()."""

    def test_console_handler(self):
        """Test a console handler is attached once."""
        logger = setup_logger("test_console", level="DEBUG")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        setup_logger("test_console", level="DEBUG")
        assert len(logger.handlers) == 1

    def test_file_handler(self, tmp_path):
        """Test a rotating file handler when a directory is given."""
        logger = setup_logger("test_file", level="INFO", log_dir=str(tmp_path), console_logging=False)
        logger.info("written")
        for handler in logger.handlers:
            handler.flush()
        assert (tmp_path / "kontrolle.test_file.log").read_text().strip().endswith("written")

    def test_level_from_settings(self, monkeypatch):
        """Test the level falls back to KONTROLLE_LOG_LEVEL."""
        monkeypatch.setenv("KONTROLLE_LOG_LEVEL", "warning")
        logger = setup_logger("test_settings_level", console_logging=False)
        assert logger.level == logging.WARNING

    def test_invalid_level(self):
        """Test unknown levels are rejected."""
        with pytest.raises(ValueError):
            setup_logger("test_invalid", level="LOUD")

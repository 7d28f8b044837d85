"""
Tests for logging setup.
"""

import logging

import pytest

from meeting_radar.config import get_logger, settings, setup_logging
from meeting_radar.config.logger import ColoredFormatter, LOG_FILE_NAME


@pytest.fixture
def package_logger():
    root = logging.getLogger("meeting_radar")
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()


class TestSetupLogging:

    def test_console_only_by_default(self, package_logger, monkeypatch):
        monkeypatch.setattr(settings, "debug", False)

        root = setup_logging(log_level="warning", enable_file_logging=False)

        assert root is package_logger
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, ColoredFormatter)

    def test_debug_setting_forces_debug_level(self, package_logger, monkeypatch):
        monkeypatch.setattr(settings, "debug", True)

        root = setup_logging(enable_file_logging=False)

        assert root.level == logging.DEBUG

    def test_file_logging_writes_under_data_dir(self, package_logger, monkeypatch, tmp_path):
        monkeypatch.setattr(settings, "data_dir", str(tmp_path))

        setup_logging(log_level="INFO", enable_file_logging=True)
        get_logger("test").info("hello file")
        for handler in package_logger.handlers:
            handler.flush()

        content = (tmp_path / "logs" / LOG_FILE_NAME).read_text(encoding="utf-8")
        assert "meeting_radar.test" in content
        assert "hello file" in content
        assert "\033[" not in content

    def test_setup_replaces_previous_handlers(self, package_logger):
        setup_logging(log_level="INFO", enable_file_logging=False)
        setup_logging(log_level="INFO", enable_file_logging=False)

        assert len(package_logger.handlers) == 1


class TestColoredFormatter:

    def test_original_record_is_not_modified(self):
        record = logging.LogRecord("meeting_radar.x", logging.ERROR, __file__, 1, "boom", None, None)

        formatted = ColoredFormatter(fmt="%(levelname)s %(message)s").format(record)

        assert formatted == "\033[31mERROR\033[0m boom"
        assert record.levelname == "ERROR"

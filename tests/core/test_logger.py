"""
Tests for the logging helpers.
"""

import logging
from logging.handlers import RotatingFileHandler

import pytest
from rich.logging import RichHandler

from fml_interpreter.utils.logger import add_file_handler, configure_logging, get_logger


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    yield root
    for handler in list(root.handlers):
        handler.close()
    root.handlers.clear()


class TestGetLogger:

    def test_returns_named_logger(self):
        assert get_logger("fml_interpreter.cli") is logging.getLogger("fml_interpreter.cli")

    def test_rejects_empty_name(self):
        with pytest.raises(ValueError):
            get_logger("")


class TestConfigureLogging:

    def test_rich_console_handler(self, root_logger):
        configure_logging("DEBUG")

        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0], RichHandler)

    def test_plain_console_handler(self, root_logger):
        configure_logging("warning", rich=False)

        assert root_logger.level == logging.WARNING
        assert len(root_logger.handlers) == 1
        assert type(root_logger.handlers[0]) is logging.StreamHandler

    def test_invalid_level(self, root_logger):
        with pytest.raises(ValueError, match="Invalid log level"):
            configure_logging("LOUD")

    def test_log_file_is_written(self, root_logger, tmp_path):
        log_file = tmp_path / "logs" / "fml.log"

        configure_logging("INFO", log_file=str(log_file), rich=False)
        logging.getLogger("fml_interpreter.test").info("layout finished")
        for handler in root_logger.handlers:
            handler.flush()

        assert any(isinstance(h, RotatingFileHandler) for h in root_logger.handlers)
        assert "layout finished" in log_file.read_text()


class TestAddFileHandler:

    def test_rejects_empty_path(self):
        with pytest.raises(ValueError):
            add_file_handler(logging.getLogger("fml_interpreter.test"), "")

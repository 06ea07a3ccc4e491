import logging

import pytest

from logger import LOGGER_NAME, get_logger, setup_logging


@pytest.fixture
def app_logger():
    logger = logging.getLogger(LOGGER_NAME)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


class TestLogging:
    """Tests for logging setup."""

    def test_get_logger_names(self):
        """Test that module loggers live under the application logger."""
        assert get_logger().name == "autocat"
        assert get_logger("services.store").name == "autocat.services.store"

    def test_setup_logging_writes_file(self, test_config, app_logger):
        """Test that log lines are written to a dated file in the log directory."""
        setup_logging(test_config)

        get_logger("tests").info("hello from the tests")
        for handler in app_logger.handlers:
            handler.flush()

        log_files = list(test_config.log_dir.glob("autocat-*.log"))
        assert len(log_files) == 1
        assert "hello from the tests" in log_files[0].read_text()

    def test_setup_logging_is_idempotent(self, test_config, app_logger):
        """Test that repeated setup does not stack handlers."""
        setup_logging(test_config)
        setup_logging(test_config)

        assert len(app_logger.handlers) == 2

    def test_console_level(self, test_config, app_logger):
        """Test that the console handler level can be set."""
        setup_logging(test_config, console_level="INFO")

        stream_handlers = [
            h for h in app_logger.handlers if type(h) is logging.StreamHandler
        ]
        assert [h.level for h in stream_handlers] == [logging.INFO]

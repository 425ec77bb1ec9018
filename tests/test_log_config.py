import sys
from io import StringIO

import pytest
from loguru import logger

from modloom.config import get_settings
from modloom.log_config import configure_logging


def _last_handler():
    handler_id = list(logger._core.handlers.keys())[-1]
    return logger._core.handlers[handler_id]


def _modloom_logger():
    """A logger whose records look like they come from inside the package."""
    return logger.patch(lambda record: record.update(name="modloom.client"))


def test_configure_logging_default_level():
    """configure_logging defaults to the INFO level of the settings."""
    logger.remove()
    configure_logging()

    assert len(logger._core.handlers) == 1
    assert _last_handler()._levelno == logger.level("INFO").no


def test_configure_logging_level_from_settings(monkeypatch):
    monkeypatch.setenv("MODLOOM_LOG_LEVEL", "debug")
    get_settings.cache_clear()

    configure_logging()

    assert _last_handler()._levelno == logger.level("DEBUG").no


@pytest.mark.parametrize("level", ["debug", "WARNING", "Error"])
def test_configure_logging_custom_level(level):
    logger.remove()
    configure_logging(level=level)
    assert _last_handler()._levelno == logger.level(level.upper()).no


def test_configure_logging_removes_existing_handlers():
    """Test that configure_logging removes pre-existing handlers."""
    logger.remove()
    logger.add(lambda _: None, level="ERROR")
    logger.add(lambda _: None, level="ERROR")
    assert len(logger._core.handlers) == 2

    configure_logging(level="INFO")

    assert len(logger._core.handlers) == 1


def test_configure_logging_custom_sink_receives_filtered_messages():
    sink = StringIO()
    configure_logging(level="WARNING", sink=sink)

    _modloom_logger().info("request sent")
    _modloom_logger().warning("rate limited")

    output = sink.getvalue()
    assert "request sent" not in output
    assert "rate limited" in output
    assert "WARNING" in output
    assert "modloom.client:" in output
    # Only stderr is colorized.
    assert "\x1b[" not in output


def test_configure_logging_passes_only_library_records_by_default():
    sink = StringIO()
    configure_logging(level="INFO", sink=sink)

    logger.info("application message")
    _modloom_logger().info("library message")

    output = sink.getvalue()
    assert "application message" not in output
    assert "library message" in output


def test_configure_logging_can_pass_every_record():
    sink = StringIO()
    configure_logging(level="INFO", sink=sink, library_only=False)

    logger.info("application message")

    assert "application message" in sink.getvalue()


@pytest.fixture(autouse=True)
def reset_logger_after_test():
    """Fixture to reset Loguru to a default state after each test in this module."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="INFO")

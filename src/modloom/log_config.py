# modloom/log_config.py
"""Logging configuration for the modloom library using Loguru.

Every module logs through the shared loguru `logger`. Nothing is configured
on import; applications call `configure_logging()` to attach a sink. The level
defaults to the `MODLOOM_LOG_LEVEL` setting, and by default only records
emitted by modloom itself reach the sink.

Credentials never appear in log lines: URLs and headers are redacted by the
client before they are logged, and `diagnose` is off so tracebacks do not dump
local variables such as API keys.
"""

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def configure_logging(
    level: str | None = None, sink=sys.stderr, *, library_only: bool = True
):
    """
    Configures the Loguru logger for modloom.

    Removes existing handlers and adds a new one with the given level and sink.

    Args:
        level: The minimum logging level (e.g., "DEBUG", "INFO", "WARNING").
            Defaults to the `log_level` setting.
        sink: The output sink (e.g., sys.stderr, "modloom.log").
        library_only: Only pass records emitted by the `modloom` package.
    """
    if level is None:
        # Imported here, settings import modules that log through this one.
        from .config import get_settings

        level = get_settings().log_level
    level = level.upper()

    logger.remove()
    logger.add(
        sink,
        level=level,
        format=LOG_FORMAT,
        filter="modloom" if library_only else None,
        colorize=sink is sys.stderr,
        backtrace=True,
        diagnose=False,
    )
    logger.info(f"modloom logging configured with level={level} writing to {sink}")

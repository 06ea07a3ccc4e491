"""Logging configuration for autocat.

Everything is logged under the "autocat" logger hierarchy: a dated log file
gets the full detail, the console only gets what the user needs to see while
the categorization prompt is running.
"""

import logging
from datetime import date
from typing import Optional

from config import Config

LOGGER_NAME = "autocat"


def setup_logging(config: Config, console_level: Optional[str] = None) -> logging.Logger:
    """Set up application logging with file and console handlers.

    Args:
        config: Application configuration containing log settings.
        console_level: Level for the console handler. Defaults to WARNING so
            that log lines don't interleave with interactive prompts.

    Returns:
        Configured logger instance.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.log_level)

    # setup_logging may be called more than once (tests, re-configuration)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(
        config.log_dir / f"autocat-{date.today().isoformat()}.log"
    )
    file_handler.setLevel(config.log_level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level or "WARNING")
    console_handler.setFormatter(logging.Formatter("%(levelname)s - %(message)s"))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get the application logger, or one of its children.

    Args:
        name: Module name, e.g. ``__name__``. Becomes ``autocat.<name>``.
    """
    if not name:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")

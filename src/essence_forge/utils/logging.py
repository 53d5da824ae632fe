"""Logging setup for the command-line session."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "essence_forge"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(
    level: str | int = "INFO",
    log_file: Path | str | None = None,
    enable_color: bool = True,
) -> logging.Logger:
    """
    Configure the package logger and return it.

    Console output goes through rich when colour is enabled, a plain stream
    handler otherwise. A log file, if given, always gets the plain format.
    Calling this again replaces the handlers it installed before.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if enable_color:
        console_handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        console_handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger

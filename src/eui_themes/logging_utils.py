"""Logging setup for the theme build CLI."""

from __future__ import annotations

import logging
from pathlib import Path


DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "eui_themes.log"


def configure_logging(logs_root: Path, level: int = logging.INFO) -> logging.Logger:
    """Route build logs to the console and to `<logs_root>/eui_themes.log`.

    Existing root handlers are replaced, so calling this twice does not duplicate output.
    """

    log_file = logs_root / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(fmt=DEFAULT_LOG_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(), logging.FileHandler(log_file, encoding="utf-8")]
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        root_logger.addHandler(handler)

    logger = logging.getLogger("eui_themes")
    logger.setLevel(level)
    logger.debug("logging.configured log_file=%s level=%s", log_file, logging.getLevelName(level))
    return logger

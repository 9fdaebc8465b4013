"""Logging configuration helpers."""

import logging
import sys
from logging.handlers import RotatingFileHandler

from .config import AppConfig

LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 3


def setup_logging(
    config: AppConfig, verbose: bool = False, logger_name: str = "dotfiles"
) -> logging.Logger:
    """
    Configure a console handler plus an optional rotating file handler.

    Safe to call multiple times; handlers from a previous call are replaced.
    """
    logger = logging.getLogger(logger_name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level = logging.DEBUG if verbose else getattr(logging, config.log_level)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Console output goes to stderr, stdout is reserved for copy notices
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(console_handler)

    log_file_path = config.log_file_path
    if log_file_path is not None:
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            str(log_file_path),
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(name)s %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["setup_logging"]

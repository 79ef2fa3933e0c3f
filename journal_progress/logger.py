"""
Journal Progress Engine - Logging
Colored console output plus an optional rotating log file.
"""

import logging
import sys
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from .config import get_logging_config

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = FILE_FORMAT + " (%(filename)s:%(lineno)d)"


class CustomFormatter(logging.Formatter):
    """Console formatter that colors each line by level"""

    grey = "\x1b[38;20m"
    blue = "\x1b[34;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"

    COLORS = {
        logging.DEBUG: grey,
        logging.INFO: blue,
        logging.WARNING: yellow,
        logging.ERROR: red,
        logging.CRITICAL: bold_red,
    }

    def __init__(self):
        super().__init__(CONSOLE_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record):
        color = self.COLORS.get(record.levelno, self.reset)
        return f"{color}{super().format(record)}{self.reset}"


def setup_logger(
    name: str = "journal_progress",
    level: Optional[str] = None,
    log_dir: Optional[str] = None
) -> logging.Logger:
    """
    Configure and return a logger.

    Level and log directory fall back to the LOG_* settings. The file
    handler is only attached when a log directory is configured.
    """
    config = get_logging_config()

    logger = logging.getLogger(name)
    logger.setLevel((level or config.level).upper())

    # Already configured
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(CustomFormatter())
    logger.addHandler(console_handler)

    # 5MB per file, last 5 kept
    log_dir = log_dir or config.log_dir
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, "progress.log"),
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)

    return logger


# Package logger; module loggers (journal_progress.*) propagate to it
logger = setup_logger()

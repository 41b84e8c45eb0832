"""Logging setup for the course registration service.

All service loggers live under ``coursereg``. Their records go to a rotating
file in ``AppConfig.log_dir`` and, when running interactively, to stderr.
Every handler masks student email addresses before a record is written.
"""

from __future__ import annotations

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

from coursereg.config import AppConfig

ROOT_LOGGER = "coursereg"
LOG_FILE_NAME = "coursereg.log"
ROTATE_AT_BYTES = 10 * 1024 * 1024
ROTATED_FILES_KEPT = 5

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_EMAIL_PATTERN = re.compile(r"([A-Za-z0-9._%+-])[A-Za-z0-9._%+-]*@([A-Za-z0-9.-]+\.[A-Za-z]{2,})")


def sanitize_for_log(text: str) -> str:
    """Mask email addresses, keeping the first character and the domain.

    ``alice@uni.edu`` becomes ``a***@uni.edu``.
    """
    return _EMAIL_PATTERN.sub(r"\1***@\2", text)


class EmailMaskingFilter(logging.Filter):
    """Rewrite each record's message with email addresses masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = sanitize_for_log(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def _attach(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.addFilter(EmailMaskingFilter())
    logger.addHandler(handler)


def setup_logging(
    config: AppConfig | None = None,
    *,
    console: bool = True,
    rotate_at_bytes: int = ROTATE_AT_BYTES,
    rotated_files_kept: int = ROTATED_FILES_KEPT,
) -> logging.Logger:
    """Configure the ``coursereg`` logger from the application config.

    Calling it again replaces the handlers installed by an earlier call.

    Args:
        config: Supplies ``log_dir`` and ``log_level``. Defaults to ``AppConfig()``.
        console: Also write records to stderr.
        rotate_at_bytes: Size at which the log file is rotated.
        rotated_files_kept: Number of rotated files kept next to the live one.

    Returns:
        The ``coursereg`` logger.
    """
    config = config if config is not None else AppConfig()
    level = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    log_path = Path(config.log_dir) / LOG_FILE_NAME
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    _attach(
        logger,
        RotatingFileHandler(
            log_path,
            maxBytes=rotate_at_bytes,
            backupCount=rotated_files_kept,
            encoding="utf-8",
        ),
        level,
    )
    if console:
        _attach(logger, logging.StreamHandler(), level)

    logger.info("Logging to %s at %s", log_path, logging.getLevelName(level))
    return logger

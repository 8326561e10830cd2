"""CLI logging: one loguru sink on stderr, paramiko routed into it."""

from __future__ import annotations

import logging
import sys

from loguru import logger

CLI_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | <level>{message}</level>"


class _LoguruHandler(logging.Handler):
    """Forward stdlib records (paramiko's) to loguru at the matching level."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(exception=record.exc_info).log(level, "[{}] {}", record.name, record.getMessage())


def setup_logging(level: str = "INFO", *, transport_level: str = "WARNING") -> None:
    """Install the stderr sink and route paramiko logging through it.

    ``transport_level`` bounds paramiko's own output, which is noisy below
    WARNING (one line per channel request).
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=CLI_FORMAT)

    paramiko_logger = logging.getLogger("paramiko")
    paramiko_logger.handlers[:] = [_LoguruHandler()]
    paramiko_logger.setLevel(transport_level.upper())
    paramiko_logger.propagate = False

"""Logging helpers for the s3kit package logger."""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional, TextIO

PACKAGE_LOGGER = "s3kit"
LOG_LEVEL_ENV = "S3KIT_LOG_LEVEL"

_RESERVED_RECORD_FIELDS = set(logging.makeLogRecord({}).__dict__.keys())


class TextFormatter(logging.Formatter):
    """One line per record, extra fields appended as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S%z")
        message = f"{timestamp} {record.levelname} {record.name} {record.getMessage()}"

        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_FIELDS and not key.startswith("_")
        }
        if extras:
            message += " " + " ".join(f"{k}={v!r}" for k, v in sorted(extras.items()))

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


def configure_logging(level: Optional[str] = None, stream: Optional[TextIO] = None) -> logging.Logger:
    """Attach a single text handler to the s3kit logger.

    Args:
        level: Level name; falls back to $S3KIT_LOG_LEVEL, then WARNING
        stream: Output stream (defaults to stderr)

    Returns:
        The configured package logger
    """
    level_name = (level or os.getenv(LOG_LEVEL_ENV) or "WARNING").upper()
    resolved = getattr(logging, level_name, None)
    if not isinstance(resolved, int):
        resolved = logging.WARNING

    handler = logging.StreamHandler(stream=stream or sys.stderr)
    handler.setFormatter(TextFormatter())

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(resolved)
    return logger


__all__ = ["configure_logging", "TextFormatter", "PACKAGE_LOGGER"]

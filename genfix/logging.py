"""Logging utilities for genfix components."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "genfix"


def get_logger(category: str | None = None) -> logging.Logger:
    """Return the logger for a pipeline category under the genfix hierarchy."""
    full_name = f"{_LOGGER_NAME}.{category}" if category else _LOGGER_NAME
    return logging.getLogger(full_name)


class _CategoryFormatter(logging.Formatter):
    """Render the logger suffix as the category column."""

    def format(self, record: logging.LogRecord) -> str:
        name = record.name
        prefix = f"{_LOGGER_NAME}."
        record.category = name[len(prefix):] if name.startswith(prefix) else name
        return super().format(record)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the genfix logger with console output and optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(
        _CategoryFormatter("[genfix] %(levelname)s %(category)s: %(message)s")
    )
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]

from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Console logging for the importer.

One line per record with a short label in front: INFO, WARN, ERROR or
SUMMARY. DEBUG lines also name the module that emitted them. Package modules
log through ``logging.getLogger(__name__)`` and reach the single handler on
the ``fleet_import`` logger.
"""

__all__ = [
    "APP_LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "log_summary",
    "set_debug",
    "reset_logging",
]

APP_LOGGER_NAME = "fleet_import"

# INFO (20) < SUMMARY < WARNING (30)
SUMMARY_LEVEL = 25

_LABELS = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    SUMMARY_LEVEL: "SUMMARY",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRITICAL",
}

_configured: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """``LABEL message``, with ``[module]`` before DEBUG messages."""

    def format(self, record: logging.LogRecord) -> str:
        label = _LABELS.get(record.levelno, record.levelname)
        text = record.getMessage()
        if record.levelno == logging.DEBUG and record.name != APP_LOGGER_NAME:
            text = f"[{record.name.removeprefix(APP_LOGGER_NAME + '.')}] {text}"
        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return f"{label} {text}"


def setup_logging(stream: TextIO | None = None) -> logging.Logger:
    """Attach the labeled console handler once and return the app logger.

    Parameters
    ----------
    stream: where lines go; stdout when omitted
    """
    global _configured

    if _configured is not None:
        return _configured

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    app = logging.getLogger(APP_LOGGER_NAME)
    app.handlers.clear()
    console = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console.setFormatter(LabeledFormatter())
    app.addHandler(console)
    app.setLevel(logging.INFO)
    # printed once, never again through root
    app.propagate = False

    _configured = app
    return app


def get_logger() -> logging.Logger:
    return _configured or setup_logging()


def log_summary(message: str) -> None:
    """Emit ``SUMMARY <message>``."""
    get_logger().log(SUMMARY_LEVEL, message)


def set_debug() -> None:
    get_logger().setLevel(logging.DEBUG)


def reset_logging() -> None:
    """Forget the configured logger so the next setup_logging() rebuilds it (tests)."""
    global _configured
    _configured = None

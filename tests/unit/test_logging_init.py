from __future__ import annotations

import logging
from io import StringIO

from fleet_import.logging.init import (
    APP_LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    set_debug,
    setup_logging,
)


def test_setup_logging_creates_logger_with_labeled_formatter():
    logger = setup_logging()
    assert logger.name == APP_LOGGER_NAME
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_setup_logging_is_idempotent():
    assert setup_logging() is setup_logging()
    assert get_logger() is setup_logging()
    assert len(get_logger().handlers) == 1


def test_labeled_prefixes():
    stream = StringIO()
    logger = logging.getLogger("test_fleet_import_labels")
    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    try:
        logger.info("info message")
        logger.warning("warn message")
        logger.error("error message")
        logger.log(SUMMARY_LEVEL, "rows=1")
    finally:
        logger.removeHandler(handler)
    assert stream.getvalue().splitlines() == [
        "INFO info message",
        "WARN warn message",
        "ERROR error message",
        "SUMMARY rows=1",
    ]


def test_module_loggers_reach_app_handler(capsys):
    setup_logging()
    logging.getLogger("fleet_import.services.importer").info("child message")
    assert "INFO child message" in capsys.readouterr().out


def test_log_summary_and_debug(capsys):
    setup_logging()
    log_summary("rows=3 created=3")
    get_logger().debug("hidden")
    set_debug()
    get_logger().debug("shown")
    out = capsys.readouterr().out
    assert "SUMMARY rows=3 created=3" in out
    assert "hidden" not in out
    assert "DEBUG shown" in out


def test_debug_lines_name_the_module():
    stream = StringIO()
    setup_logging(stream)
    set_debug()
    logging.getLogger("fleet_import.services.importer").debug("row 2 mapped")
    get_logger().debug("plain")
    assert stream.getvalue().splitlines() == [
        "DEBUG [services.importer] row 2 mapped",
        "DEBUG plain",
    ]

"""Unit tests for logging setup."""

import json
import logging
import sys

import pytest

from rhythmguard.guard_logging import LOGGER_NAME, JSONFormatter, get_logger, setup_logging


@pytest.fixture(autouse=True)
def reset_logger():
    """Close handlers installed by setup_logging."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True


def test_get_logger_name():
    """Test modules share the package logger."""
    assert get_logger().name == "rhythmguard"


def test_json_log_file(tmp_path):
    """Test JSON file output with lint extras."""
    log_file = tmp_path / "rhythmguard.log"
    logger = setup_logging(log_file=log_file, log_format="json")

    logger.debug("ran rule", extra={"rule_id": "rhythmguard/use-scale", "finding_count": 2})

    entry = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
    assert entry["message"] == "ran rule"
    assert entry["level"] == "DEBUG"
    assert entry["rule_id"] == "rhythmguard/use-scale"
    assert entry["finding_count"] == 2


def test_text_log_file(tmp_path):
    """Test the detailed text format."""
    log_file = tmp_path / "rhythmguard.log"
    setup_logging(log_file=log_file).warning("careful")

    assert "WARNING  | rhythmguard:" in log_file.read_text(encoding="utf-8")


@pytest.mark.parametrize(
    "kwargs,expected",
    [
        ({}, logging.WARNING),
        ({"verbose": True}, logging.DEBUG),
        ({"quiet": True}, logging.ERROR),
        ({"quiet": True, "verbose": True}, logging.ERROR),
    ],
)
def test_console_level(kwargs, expected):
    """Test quiet and verbose select the console level."""
    logger = setup_logging(**kwargs)
    console = [h for h in logger.handlers if isinstance(h, logging.StreamHandler)]

    assert console[0].level == expected


def test_formatter_includes_exception():
    """Test exception text is captured."""
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord(
            "rhythmguard", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
        )

    entry = json.loads(JSONFormatter().format(record))

    assert "RuntimeError: boom" in entry["exception"]

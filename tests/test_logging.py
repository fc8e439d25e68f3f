"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys

import pytest

from habitoid.config import TestConfig
from habitoid.logging_config import JSONFormatter, get_logger, setup_logging


def _record(**kwargs) -> logging.LogRecord:
    options = dict(
        name="test.logger",
        level=logging.INFO,
        pathname="test.py",
        lineno=42,
        msg="Test message",
        args=(),
        exc_info=None,
    )
    options.update(kwargs)
    record = logging.LogRecord(**options)
    record.module = "test_module"
    record.funcName = "test_function"
    return record


def test_json_formatter():
    """JSONFormatter emits the standard fields."""
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.logger"
    assert log_data["message"] == "Test message"
    assert log_data["module"] == "test_module"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data


def test_json_formatter_with_exception():
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(
        JSONFormatter().format(_record(level=logging.ERROR, msg="Error occurred", exc_info=exc_info))
    )
    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"] is not None


def test_json_formatter_keeps_extra_fields():
    record = _record()
    record.user_id = 7
    log_data = json.loads(JSONFormatter().format(record))
    assert log_data["extra"] == {"user_id": 7}


def test_setup_logging(tmp_path):
    """Logging setup creates a rotating JSON log file."""
    config = TestConfig(data_dir=tmp_path)
    logger = setup_logging(config)

    assert logger.name == "habitoid"
    assert len(logger.handlers) == 2  # Console + File

    log_file = tmp_path / "logs" / "habitoid.log"
    assert log_file.exists()

    get_logger("habits").warning("Habit archived", extra={"habit_id": 3})
    for handler in logger.handlers:
        handler.flush()

    entries = [json.loads(line) for line in log_file.read_text().splitlines() if line.strip()]
    assert entries[0]["message"] == "Logging initialized"
    assert entries[-1]["logger"] == "habitoid.habits"
    assert entries[-1]["extra"]["habit_id"] == 3


def test_setup_logging_is_idempotent(tmp_path):
    config = TestConfig(data_dir=tmp_path)
    setup_logging(config)
    logger = setup_logging(config)
    assert len(logger.handlers) == 2


def test_get_logger():
    assert get_logger("module1").name == "habitoid.module1"
    assert get_logger("habitoid.stats").name == "habitoid.stats"
    assert get_logger("module1") is not get_logger("module2")


@pytest.mark.parametrize("dev_mode", [True, False])
def test_logging_levels_by_mode(tmp_path, dev_mode):
    """Console logging level adjusts based on dev mode."""
    config = TestConfig(data_dir=tmp_path)
    config.DEV_MODE = dev_mode

    logger = setup_logging(config)

    console_handler = next(
        handler
        for handler in logger.handlers
        if isinstance(handler, logging.StreamHandler)
        and not isinstance(handler, logging.handlers.RotatingFileHandler)
    )
    expected_level = logging.INFO if dev_mode else logging.WARNING
    assert console_handler.level == expected_level

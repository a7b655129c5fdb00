"""Tests for structured JSONL logging."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from sudo_rule_cache.utils.logging import JsonFormatter, configure_system_logger, get_system_logger
from sudo_rule_cache.utils.logging.logger_setup import get_system_log_path


def _record(msg, level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord("sudo-rule-cache.system", level, __file__, 1, msg, None, None)


@pytest.fixture
def system_logger() -> Iterator[logging.Logger]:
    """Restore the shared logger after a test attaches handlers."""
    logger = get_system_logger()
    level = logger.level
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_dict_message_is_merged(self):
        # Act
        line = JsonFormatter().format(_record({"event": "rules_purged", "deleted": 3}))

        # Assert
        entry = json.loads(line)
        assert entry["event"] == "rules_purged"
        assert entry["deleted"] == 3
        assert entry["level"] == "INFO"
        assert entry["logger"] == "sudo-rule-cache.system"
        assert entry["time"].endswith("+00:00")

    def test_string_message_is_wrapped(self):
        entry = json.loads(JsonFormatter().format(_record("plain text", logging.WARNING)))

        assert entry["message"] == "plain text"
        assert entry["level"] == "WARNING"

    def test_single_line(self):
        line = JsonFormatter().format(_record({"event": "x", "note": "a\nb"}))

        assert "\n" not in line


class TestConfigureSystemLogger:
    """Tests for configure_system_logger."""

    def test_writes_jsonl_file(self, tmp_path: Path, system_logger: logging.Logger):
        # Arrange
        logger = configure_system_logger(log_dir=tmp_path, log_level="INFO")

        # Act
        logger.info({"event": "refreshed_flag_set", "refreshed": True})
        logger.debug({"event": "rule_saved"})
        for handler in logger.handlers:
            handler.flush()

        # Assert
        path = get_system_log_path(tmp_path)
        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["event"] == "refreshed_flag_set"

    def test_reconfigure_replaces_handlers(self, tmp_path: Path, system_logger: logging.Logger):
        configure_system_logger(log_dir=tmp_path)
        logger = configure_system_logger(log_dir=tmp_path, stream=True)

        assert len(logger.handlers) == 2

    def test_no_log_dir_adds_no_file_handler(self, system_logger: logging.Logger):
        logger = configure_system_logger()

        assert logger.handlers == []

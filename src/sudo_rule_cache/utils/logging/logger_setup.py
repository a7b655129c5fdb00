"""Logger setup for structured JSONL logs.

Components log dicts rather than formatted strings:

    logger.warning({"event": "rule_without_name", "subdir": "sudo_rules"})

JsonFormatter turns each record into one JSON line with time, level and
logger name added. Plain string messages are wrapped as {"message": ...}.

Log layout under the configured log_dir:
    <log_dir>/
    └── sudo_rule_cache_logs/
        └── system/
            └── system.jsonl
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from sudo_rule_cache.constants import LOGS_SUBDIR

__all__ = [
    "SYSTEM_LOGGER_NAME",
    "JsonFormatter",
    "configure_system_logger",
    "get_system_log_path",
    "get_system_logger",
]

SYSTEM_LOGGER_NAME = "sudo-rule-cache.system"


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON objects (UTC ISO 8601 time)."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
        }

        if isinstance(record.msg, dict):
            entry.update(record.msg)
        else:
            entry["message"] = record.getMessage()

        if record.exc_info:
            entry.setdefault("stacktrace", self.formatException(record.exc_info))

        return json.dumps(entry, default=str, ensure_ascii=False)


def get_system_log_path(log_dir: str | Path) -> Path:
    """Path to system.jsonl under the given base log directory."""
    return Path(log_dir).expanduser() / LOGS_SUBDIR / "system" / "system.jsonl"


def get_system_logger() -> logging.Logger:
    """Get the shared system logger.

    Handlers are attached by configure_system_logger(); until then records
    propagate to the root logger.
    """
    return logging.getLogger(SYSTEM_LOGGER_NAME)


def configure_system_logger(
    log_dir: str | Path | None = None,
    log_level: str | int = logging.INFO,
    stream: bool = False,
) -> logging.Logger:
    """Attach JSONL handlers to the system logger.

    Safe to call more than once; existing handlers are replaced.

    Args:
        log_dir: Base log directory. If None, no file handler is added.
        log_level: Level name ("DEBUG", "INFO") or numeric level.
        stream: Also write JSON lines to stderr.

    Returns:
        The configured system logger.
    """
    logger = get_system_logger()
    logger.setLevel(log_level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = JsonFormatter()

    if log_dir is not None:
        log_path = get_system_log_path(log_dir)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if stream:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    return logger

"""Structured JSONL logging."""

from sudo_rule_cache.utils.logging.logger_setup import (
    SYSTEM_LOGGER_NAME,
    JsonFormatter,
    configure_system_logger,
    get_system_logger,
)

__all__ = [
    "SYSTEM_LOGGER_NAME",
    "JsonFormatter",
    "configure_system_logger",
    "get_system_logger",
]

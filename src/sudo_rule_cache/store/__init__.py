"""Backing record store for the rule cache.

Providers:
    memory  - InMemoryRecordStore
    sqlite  - SQLiteRecordStore (default)
"""

from __future__ import annotations

import os

from sudo_rule_cache.config import StorageConfig
from sudo_rule_cache.constants import ENV_DB_PATH, ENV_STORAGE_PROVIDER
from sudo_rule_cache.store.provider import RecordStore, coerce_filter
from sudo_rule_cache.store.providers.memory_provider import InMemoryRecordStore
from sudo_rule_cache.store.providers.sqlite_provider import SQLiteRecordStore


def load_record_store(config: StorageConfig | None = None) -> RecordStore:
    """Factory resolver for selecting the runtime record store.

    Environment variables override the config:
        SUDO_RULE_CACHE_STORAGE   provider name
        SUDO_RULE_CACHE_DB_PATH   sqlite database path

    Raises:
        ValueError: If the provider name is unknown.
    """
    config = config or StorageConfig()
    provider = os.getenv(ENV_STORAGE_PROVIDER) or config.provider

    if provider == "memory":
        return InMemoryRecordStore()

    if provider == "sqlite":
        db_path = os.getenv(ENV_DB_PATH) or config.sqlite_path
        return SQLiteRecordStore(os.path.expanduser(db_path))

    raise ValueError(f"Unknown storage provider: {provider}")


__all__ = [
    "InMemoryRecordStore",
    "RecordStore",
    "SQLiteRecordStore",
    "coerce_filter",
    "load_record_store",
]

"""RecordStore protocol - the backing store the rule cache delegates to.

The store is an opaque keyed record store:
- records live in named subdirectories, keyed by name
- search takes a filter (string or expression tree)
- each subdirectory can carry boolean attributes (e.g. "refreshed")
- a separate identity directory resolves users to uid and groups

The store serializes concurrent callers itself; the cache holds no locks.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from sudo_rule_cache.filters import FilterExpr, parse_filter
from sudo_rule_cache.records import RuleRecord

__all__ = ["RecordStore", "coerce_filter"]


def coerce_filter(predicate: str | FilterExpr) -> FilterExpr:
    """Accept a filter string or tree and return a tree."""
    if isinstance(predicate, str):
        return parse_filter(predicate)
    return predicate


@runtime_checkable
class RecordStore(Protocol):
    """Protocol for pluggable record store providers.

    Implementations raise StorageError for backend failures. Absent data is
    reported with neutral values (None, False, empty list), not errors.
    """

    def put(self, subdir: str, key: str, record: RuleRecord) -> None:
        """Insert or replace the record stored under key."""
        ...

    def delete(self, subdir: str, key: str) -> bool:
        """Delete one record. Returns False if it did not exist."""
        ...

    def get(self, subdir: str, key: str) -> RuleRecord | None:
        """Fetch one record by key."""
        ...

    def search(self, subdir: str, predicate: str | FilterExpr) -> list[RuleRecord]:
        """Return copies of all records in subdir matching predicate."""
        ...

    def delete_subtree(self, subdir: str) -> int:
        """Delete a subdirectory recursively. Returns records removed."""
        ...

    def get_bool(self, subdir: str, attr: str) -> bool | None:
        """Read a boolean attribute of a subdirectory (None if unset)."""
        ...

    def set_bool(self, subdir: str, attr: str, value: bool) -> None:
        """Write a boolean attribute of a subdirectory, creating it if needed."""
        ...

    def lookup_user(self, username: str) -> RuleRecord | None:
        """Fetch a user entry (uidNumber, memberOf) from the identity directory."""
        ...

    def add_user(self, username: str, uid: int | None, groups: Sequence[str] = ()) -> None:
        """Insert or replace a user entry in the identity directory."""
        ...

    def close(self) -> None:
        ...

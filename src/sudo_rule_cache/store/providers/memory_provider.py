"""In-memory record store, for tests and local development."""

from __future__ import annotations

from collections.abc import Sequence

from sudo_rule_cache.constants import ATTR_MEMBER_OF, ATTR_NAME, ATTR_UID_NUMBER
from sudo_rule_cache.exceptions import StorageError
from sudo_rule_cache.filters import FilterExpr, matches
from sudo_rule_cache.records import RuleRecord
from sudo_rule_cache.store.provider import RecordStore, coerce_filter


class InMemoryRecordStore(RecordStore):
    """Dict-backed record store. Contents are lost when the process exits.

    Records are copied on the way in and out, so callers never share state
    with the store.
    """

    def __init__(self) -> None:
        self.subdirs: dict[str, dict[str, RuleRecord]] = {}
        self.flags: dict[str, dict[str, bool]] = {}
        self.users: dict[str, RuleRecord] = {}

    def put(self, subdir: str, key: str, record: RuleRecord) -> None:
        if not key:
            raise StorageError("Cannot store a record without a key")
        self.subdirs.setdefault(subdir, {})[key] = record.copy()

    def delete(self, subdir: str, key: str) -> bool:
        return self.subdirs.get(subdir, {}).pop(key, None) is not None

    def get(self, subdir: str, key: str) -> RuleRecord | None:
        rec = self.subdirs.get(subdir, {}).get(key)
        return rec.copy() if rec else None

    def search(self, subdir: str, predicate: str | FilterExpr) -> list[RuleRecord]:
        expr = coerce_filter(predicate)
        return [rec.copy() for rec in self.subdirs.get(subdir, {}).values() if matches(expr, rec)]

    def delete_subtree(self, subdir: str) -> int:
        removed = self.subdirs.pop(subdir, {})
        self.flags.pop(subdir, None)
        return len(removed)

    def get_bool(self, subdir: str, attr: str) -> bool | None:
        return self.flags.get(subdir, {}).get(attr)

    def set_bool(self, subdir: str, attr: str, value: bool) -> None:
        self.flags.setdefault(subdir, {})[attr] = bool(value)

    # identity directory
    def lookup_user(self, username: str) -> RuleRecord | None:
        rec = self.users.get(username)
        return rec.copy() if rec else None

    def add_user(self, username: str, uid: int | None, groups: Sequence[str] = ()) -> None:
        rec = RuleRecord()
        rec.set_values(ATTR_NAME, [username])
        if uid is not None:
            rec.set_values(ATTR_UID_NUMBER, [str(uid)])
        if groups:
            rec.set_values(ATTR_MEMBER_OF, list(groups))
        self.users[username] = rec

    def close(self) -> None:
        return

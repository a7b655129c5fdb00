"""SQLite record store.

Records live in one table keyed by (subdir, name) with attributes as JSON.
Subdirectory flags and the identity directory have their own tables.
"""

from __future__ import annotations

import json
import os
import sqlite3
from collections.abc import Sequence

from sudo_rule_cache.constants import ATTR_MEMBER_OF, ATTR_NAME, ATTR_UID_NUMBER
from sudo_rule_cache.exceptions import StorageError
from sudo_rule_cache.filters import FilterExpr, matches
from sudo_rule_cache.records import RuleRecord
from sudo_rule_cache.store.provider import RecordStore, coerce_filter


class SQLiteRecordStore(RecordStore):
    """Persistent record store on SQLite.

    Attribute bags are stored as JSON. Searches load the subdirectory and
    evaluate the filter in Python, so any filter the tree supports works.
    """

    def __init__(self, path: str = "db/sudo_cache.db"):
        # If no directory, default to current working directory
        dir_path = os.path.dirname(path) or "."
        os.makedirs(dir_path, exist_ok=True)
        try:
            self.db = sqlite3.connect(path, check_same_thread=False)
            self._init()
        except sqlite3.Error as e:
            raise StorageError(f"Could not open cache database {path}: {e}") from e

    def _init(self) -> None:
        c = self.db.cursor()
        c.execute("""CREATE TABLE IF NOT EXISTS records(
            subdir TEXT NOT NULL,
            name TEXT NOT NULL,
            attrs TEXT NOT NULL,
            PRIMARY KEY (subdir, name)
        )""")
        c.execute("""CREATE TABLE IF NOT EXISTS subdir_flags(
            subdir TEXT NOT NULL,
            attr TEXT NOT NULL,
            value INTEGER NOT NULL,
            PRIMARY KEY (subdir, attr)
        )""")
        c.execute("""CREATE TABLE IF NOT EXISTS users(
            name TEXT PRIMARY KEY,
            attrs TEXT NOT NULL
        )""")
        self.db.commit()

    def _write(self, sql: str, params: tuple) -> sqlite3.Cursor:
        try:
            # Connection context commits on success, rolls back on error
            with self.db:
                return self.db.execute(sql, params)
        except sqlite3.Error as e:
            raise StorageError(f"Cache write failed: {e}") from e

    def _read(self, sql: str, params: tuple) -> list[tuple]:
        try:
            return self.db.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Cache read failed: {e}") from e

    @staticmethod
    def _decode(raw: str) -> RuleRecord:
        return RuleRecord.from_dict(json.loads(raw))

    def put(self, subdir: str, key: str, record: RuleRecord) -> None:
        if not key:
            raise StorageError("Cannot store a record without a key")
        self._write(
            "INSERT INTO records(subdir,name,attrs) VALUES(?,?,?) "
            "ON CONFLICT(subdir,name) DO UPDATE SET attrs=excluded.attrs",
            (subdir, key, json.dumps(record.to_dict())),
        )

    def delete(self, subdir: str, key: str) -> bool:
        cur = self._write("DELETE FROM records WHERE subdir=? AND name=?", (subdir, key))
        return cur.rowcount > 0

    def get(self, subdir: str, key: str) -> RuleRecord | None:
        rows = self._read("SELECT attrs FROM records WHERE subdir=? AND name=?", (subdir, key))
        return self._decode(rows[0][0]) if rows else None

    def search(self, subdir: str, predicate: str | FilterExpr) -> list[RuleRecord]:
        expr = coerce_filter(predicate)
        rows = self._read("SELECT attrs FROM records WHERE subdir=? ORDER BY rowid", (subdir,))
        records = [self._decode(raw) for (raw,) in rows]
        return [rec for rec in records if matches(expr, rec)]

    def delete_subtree(self, subdir: str) -> int:
        try:
            with self.db:
                cur = self.db.execute("DELETE FROM records WHERE subdir=?", (subdir,))
                self.db.execute("DELETE FROM subdir_flags WHERE subdir=?", (subdir,))
        except sqlite3.Error as e:
            raise StorageError(f"Could not delete subtree {subdir}: {e}") from e
        return cur.rowcount

    def get_bool(self, subdir: str, attr: str) -> bool | None:
        rows = self._read("SELECT value FROM subdir_flags WHERE subdir=? AND attr=?", (subdir, attr))
        return bool(rows[0][0]) if rows else None

    def set_bool(self, subdir: str, attr: str, value: bool) -> None:
        self._write(
            "INSERT INTO subdir_flags(subdir,attr,value) VALUES(?,?,?) "
            "ON CONFLICT(subdir,attr) DO UPDATE SET value=excluded.value",
            (subdir, attr, int(bool(value))),
        )

    # --- identity directory ---

    def lookup_user(self, username: str) -> RuleRecord | None:
        rows = self._read("SELECT attrs FROM users WHERE name=?", (username,))
        return self._decode(rows[0][0]) if rows else None

    def add_user(self, username: str, uid: int | None, groups: Sequence[str] = ()) -> None:
        attrs: dict[str, list[str]] = {ATTR_NAME: [username]}
        if uid is not None:
            attrs[ATTR_UID_NUMBER] = [str(uid)]
        if groups:
            attrs[ATTR_MEMBER_OF] = list(groups)
        self._write(
            "INSERT INTO users(name,attrs) VALUES(?,?) ON CONFLICT(name) DO UPDATE SET attrs=excluded.attrs",
            (username, json.dumps(attrs)),
        )

    def close(self) -> None:
        self.db.close()

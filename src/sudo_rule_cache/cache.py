"""Sudo rule cache - store, purge, refreshed flag, and rule lookups.

SudoRuleCache binds a RecordStore to one cache subdirectory and keeps the
rule set coherent across refresh cycles:

- full refresh:     purge_all -> store_rules -> set_refreshed(True)
- targeted refresh: purge_matching(filter) -> store_rules
- lookup:           build identity filter -> search -> time filter

Every call is a short, independent transaction against the store. The cache
holds no state between calls and takes no locks.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Literal, NamedTuple

from sudo_rule_cache.constants import (
    ATTR_MEMBER_OF,
    ATTR_NAME,
    ATTR_OBJECTCLASS,
    ATTR_REFRESHED,
    ATTR_UID_NUMBER,
    NOW_SENTINEL,
    SUDO_RULE_OBJECTCLASS,
    SUDORULE_SUBDIR,
)
from sudo_rule_cache.exceptions import LookupNotFoundError
from sudo_rule_cache.filters import FilterExpr, serialize
from sudo_rule_cache.identity import FilterFlags, IdentityDescriptor, build_filter_expression
from sudo_rule_cache.records import RuleRecord
from sudo_rule_cache.timewindow import Instant, filter_active
from sudo_rule_cache.utils.logging import get_system_logger

if TYPE_CHECKING:
    import logging

    from sudo_rule_cache.config import AppConfig
    from sudo_rule_cache.store.provider import RecordStore

__all__ = [
    "ResolvedIdentity",
    "SudoRuleCache",
]


class ResolvedIdentity(NamedTuple):
    """Numeric id and group names of a user from the identity store."""

    uid: int
    group_names: list[str]


class SudoRuleCache:
    """Cache operations for the sudo rules of one subdirectory.

    Attributes:
        store: Backing record store.
        subdir: Subdirectory holding the rules and the refreshed flag.
        time_filter_errors: Policy for malformed timestamps during lookups.
    """

    def __init__(
        self,
        store: "RecordStore",
        subdir: str = SUDORULE_SUBDIR,
        time_filter_errors: Literal["raise", "skip"] = "raise",
        logger: "logging.Logger | None" = None,
    ) -> None:
        self.store = store
        self.subdir = subdir
        self.time_filter_errors = time_filter_errors
        self._logger = logger or get_system_logger()

    @classmethod
    def from_config(cls, config: "AppConfig", store: "RecordStore | None" = None) -> SudoRuleCache:
        """Create a cache from application config.

        Args:
            config: Application configuration.
            store: Store to use. If None, one is created from config.storage.
        """
        if store is None:
            from sudo_rule_cache.store import load_record_store

            store = load_record_store(config.storage)
        return cls(
            store,
            subdir=config.cache.subdir,
            time_filter_errors=config.cache.time_filter_errors,
        )

    # =========================================================================
    # Store
    # =========================================================================

    def save(self, rule_name: str, attrs: RuleRecord) -> None:
        """Save a rule, replacing any rule with the same name.

        objectClass and name are stamped onto attrs before storing; a name
        already present in attrs is replaced by rule_name.

        Raises:
            StorageError: If the store rejects the write.
        """
        attrs.add_string(ATTR_OBJECTCLASS, SUDO_RULE_OBJECTCLASS)
        attrs.set_values(ATTR_NAME, [rule_name])
        self.store.put(self.subdir, rule_name, attrs)

        self._logger.debug({"event": "rule_saved", "rule": rule_name, "subdir": self.subdir})

    @staticmethod
    def _named_batch(rules: Iterable[RuleRecord]) -> list[tuple[str, RuleRecord]]:
        """Pair each rule with its name, rejecting the batch if any is nameless.

        Raises:
            ValueError: If a rule has no name.
        """
        batch = []
        for index, rule in enumerate(rules):
            name = rule.get_string(ATTR_NAME)
            if not name:
                raise ValueError(f"Cannot store a sudo rule without a name attribute (rule #{index})")
            batch.append((name, rule))
        return batch

    def _save_batch(self, batch: list[tuple[str, RuleRecord]]) -> int:
        for name, rule in batch:
            self.save(name, rule)
        return len(batch)

    def store_rules(self, rules: Iterable[RuleRecord]) -> int:
        """Save a batch of rules keyed by their name attribute.

        The whole batch is checked before the first write, so a nameless
        rule leaves the store untouched.

        Returns:
            Number of rules saved.

        Raises:
            ValueError: If a rule has no name.
            StorageError: If the store rejects a write.
        """
        return self._save_batch(self._named_batch(rules))

    # =========================================================================
    # Purge
    # =========================================================================

    def purge_all(self) -> int:
        """Delete the whole rule subdirectory, refreshed flag included.

        Returns:
            Number of rules removed.
        """
        removed = self.store.delete_subtree(self.subdir)
        self._logger.info({"event": "rules_purged", "subdir": self.subdir, "filter": None, "deleted": removed})
        return removed

    def purge_matching(self, predicate: str | FilterExpr | None) -> int:
        """Delete the rules matching a filter.

        A None, empty or whitespace-only filter purges everything. Matched
        records without a name are logged and skipped; the rest are still
        deleted.

        Args:
            predicate: Filter string or expression tree.

        Returns:
            Number of rules deleted. No match is not an error.

        Raises:
            StorageError: If the search or a delete fails.
            FilterSyntaxError: If a filter string is malformed.
        """
        if predicate is None or (isinstance(predicate, str) and not predicate.strip()):
            return self.purge_all()

        matched = self.store.search(self.subdir, predicate)
        filter_text = predicate if isinstance(predicate, str) else serialize(predicate)

        if not matched:
            self._logger.debug({"event": "no_rules_matched", "subdir": self.subdir, "filter": filter_text})
            return 0

        deleted = 0
        for record in matched:
            name = record.get_string(ATTR_NAME)
            if name is None:
                self._logger.warning(
                    {
                        "event": "rule_without_name",
                        "subdir": self.subdir,
                        "filter": filter_text,
                    }
                )
                continue
            if self.store.delete(self.subdir, name):
                deleted += 1

        self._logger.info(
            {"event": "rules_purged", "subdir": self.subdir, "filter": filter_text, "deleted": deleted}
        )
        return deleted

    # =========================================================================
    # Refresh
    # =========================================================================

    def full_refresh(self, rules: Iterable[RuleRecord]) -> int:
        """Replace the whole rule set and mark the cache as refreshed.

        A batch containing a nameless rule is rejected before anything is
        purged; the cached rules and the refreshed flag are left as they were.

        Returns:
            Number of rules stored.

        Raises:
            ValueError: If a rule has no name.
        """
        batch = self._named_batch(rules)
        self.purge_all()
        count = self._save_batch(batch)
        self.set_refreshed(True)
        return count

    def rules_refresh(self, rules: Iterable[RuleRecord], predicate: str | FilterExpr | None) -> int:
        """Replace the rules matching predicate with a freshly fetched batch.

        The refreshed flag is left untouched. With no predicate this purges
        everything first, like a full refresh. A batch containing a nameless
        rule is rejected before anything is purged.

        Returns:
            Number of rules stored.

        Raises:
            ValueError: If a rule has no name.
        """
        batch = self._named_batch(rules)
        self.purge_matching(predicate)
        return self._save_batch(batch)

    def get_refreshed(self) -> bool:
        """Whether a full refresh has completed. Unset reads as False."""
        return bool(self.store.get_bool(self.subdir, ATTR_REFRESHED))

    def set_refreshed(self, refreshed: bool) -> None:
        """Set the refreshed flag of the rule subdirectory."""
        self.store.set_bool(self.subdir, ATTR_REFRESHED, refreshed)
        self._logger.info({"event": "refreshed_flag_set", "subdir": self.subdir, "refreshed": refreshed})

    # =========================================================================
    # Identity and lookups
    # =========================================================================

    def resolve_identity(self, username: str) -> ResolvedIdentity:
        """Resolve a username to its uid and group names.

        Returns:
            ResolvedIdentity; group_names is empty if the user has none.

        Raises:
            LookupNotFoundError: If the user is unknown or has no uid.
            StorageError: If the identity store fails.
        """
        entry = self.store.lookup_user(username)
        if entry is None:
            self._logger.error({"event": "user_lookup_failed", "username": username, "reason": "not_found"})
            raise LookupNotFoundError(username)

        raw_uid = entry.get_string(ATTR_UID_NUMBER)
        try:
            uid = int(raw_uid) if raw_uid is not None else 0
        except ValueError:
            uid = 0
        if uid <= 0:
            self._logger.error({"event": "user_lookup_failed", "username": username, "reason": "no_uid"})
            raise LookupNotFoundError(username, "user has no UID")

        return ResolvedIdentity(uid=uid, group_names=entry.get_values(ATTR_MEMBER_OF))

    def lookup_rules(self, identity: IdentityDescriptor, now: Instant = NOW_SENTINEL) -> list[RuleRecord]:
        """Get the currently active rules that apply to an identity.

        Args:
            identity: Identity and inclusion flags.
            now: Reference instant (0 means current time).

        Returns:
            Time-valid matching rules, in store order.

        Raises:
            MalformedTimestampError: If a rule's timestamps are malformed and
                time_filter_errors is "raise".
        """
        candidates = self.store.search(self.subdir, build_filter_expression(identity))
        return filter_active(candidates, now, on_error=self.time_filter_errors)

    def lookup_user_rules(
        self,
        username: str,
        now: Instant = NOW_SENTINEL,
        flags: FilterFlags = FilterFlags.USER_RULES,
    ) -> list[RuleRecord]:
        """Resolve a user from the identity store and look up their rules.

        Raises:
            LookupNotFoundError: If the user is unknown or has no uid.
        """
        resolved = self.resolve_identity(username)
        identity = IdentityDescriptor.for_user(username, resolved.uid, resolved.group_names, flags)
        return self.lookup_rules(identity, now)

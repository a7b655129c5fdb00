"""Time-validity evaluation for cached sudo rules.

From sudoers.ldap: a timestamp is in the form yyyymmddHHMMSSZ. If multiple
notBefore entries are present, the *earliest* is used. If multiple notAfter
entries are present, the *last one* (in stored order) is used.

A missing bound is unrestricted. A malformed value is an error, never
silently treated as valid or invalid.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Literal, Union

from sudo_rule_cache.constants import (
    ATTR_NAME,
    ATTR_NOT_AFTER,
    ATTR_NOT_BEFORE,
    NOW_SENTINEL,
    SUDO_TIME_FORMAT,
    SUDO_TIME_PATTERN,
)
from sudo_rule_cache.exceptions import MalformedTimestampError
from sudo_rule_cache.records import RuleRecord
from sudo_rule_cache.utils.logging import get_system_logger

__all__ = [
    "Instant",
    "filter_active",
    "is_active",
    "parse_timestamp",
    "resolve_now",
]

# A datetime, or epoch seconds. 0 (or None) means "now".
Instant = Union[datetime, int, float, None]

_TIME_RE = re.compile(SUDO_TIME_PATTERN)


def parse_timestamp(value: str, attribute: str | None = None) -> datetime:
    """Parse a yyyymmddHHMMSSZ timestamp as UTC.

    Args:
        value: Raw attribute value.
        attribute: Attribute name, for the error message.

    Returns:
        Timezone-aware UTC datetime.

    Raises:
        MalformedTimestampError: If the value does not match the format.
    """
    if not _TIME_RE.fullmatch(value):
        raise MalformedTimestampError(value, attribute)
    try:
        parsed = datetime.strptime(value, SUDO_TIME_FORMAT)
    except ValueError as e:
        # Right shape, impossible date (e.g. month 13)
        raise MalformedTimestampError(value, attribute) from e
    return parsed.replace(tzinfo=timezone.utc)


def resolve_now(now: Instant = NOW_SENTINEL) -> datetime:
    """Normalize a reference instant to an aware UTC datetime.

    Naive datetimes are taken to be UTC. 0 and None mean current time.
    """
    if now is None or (not isinstance(now, datetime) and now == NOW_SENTINEL):
        return datetime.now(timezone.utc)
    if isinstance(now, datetime):
        if now.tzinfo is None:
            return now.replace(tzinfo=timezone.utc)
        return now.astimezone(timezone.utc)
    return datetime.fromtimestamp(now, tz=timezone.utc)


def is_active(rule: RuleRecord, now: Instant = NOW_SENTINEL) -> bool:
    """Decide whether a rule is inside its validity window.

    Args:
        rule: Rule record.
        now: Reference instant (0 means current time).

    Returns:
        False if now is strictly before the earliest notBefore or strictly
        after the last notAfter; True otherwise.

    Raises:
        MalformedTimestampError: If a notBefore/notAfter value is malformed.
    """
    ref = resolve_now(now)

    not_before = rule.get_values(ATTR_NOT_BEFORE)
    if not_before:
        earliest = min(parse_timestamp(v, ATTR_NOT_BEFORE) for v in not_before)
        if ref < earliest:
            return False

    not_after = rule.get_values(ATTR_NOT_AFTER)
    if not_after:
        last = parse_timestamp(not_after[-1], ATTR_NOT_AFTER)
        if ref > last:
            return False

    return True


def filter_active(
    rules: Iterable[RuleRecord],
    now: Instant = NOW_SENTINEL,
    *,
    on_error: Literal["raise", "skip"] = "raise",
) -> list[RuleRecord]:
    """Return the rules that are currently active, in input order.

    The input is not modified; a new list is returned.

    Args:
        rules: Candidate rules.
        now: Reference instant (0 means current time), resolved once for
            the whole batch.
        on_error: What to do with a rule whose timestamps are malformed.
            "raise" aborts the batch. "skip" drops that rule and logs a
            warning.

    Returns:
        The active rules.

    Raises:
        MalformedTimestampError: If on_error is "raise" and a rule has a
            malformed timestamp.
    """
    ref = resolve_now(now)
    active: list[RuleRecord] = []

    for rule in rules:
        try:
            allowed = is_active(rule, ref)
        except MalformedTimestampError as e:
            if on_error == "raise":
                raise
            get_system_logger().warning(
                {
                    "event": "rule_time_check_failed",
                    "rule": rule.get_string(ATTR_NAME),
                    "attribute": e.attribute,
                    "value": e.value,
                }
            )
            continue
        if allowed:
            active.append(rule)

    return active

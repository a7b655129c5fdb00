"""Tests for rule time-validity evaluation.

Tests cover:
- Timestamp parsing (format, UTC, malformed values)
- Single-rule evaluation (notBefore earliest, notAfter last element)
- Batch filtering (order, fresh list, raise vs skip policy)

Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from sudo_rule_cache.exceptions import MalformedTimestampError
from sudo_rule_cache.records import RuleRecord
from sudo_rule_cache.timewindow import filter_active, is_active, parse_timestamp, resolve_now


def _rule(name: str = "rule", not_before: list[str] | None = None, not_after: list[str] | None = None) -> RuleRecord:
    rule = RuleRecord({"name": [name], "user": ["ALL"]})
    if not_before is not None:
        rule.set_values("notBefore", not_before)
    if not_after is not None:
        rule.set_values("notAfter", not_after)
    return rule


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


# ============================================================================
# Tests: parse_timestamp
# ============================================================================


class TestParseTimestamp:
    """Tests for yyyymmddHHMMSSZ parsing."""

    def test_parses_as_utc(self):
        # Act
        parsed = parse_timestamp("20200101123045Z")

        # Assert
        assert parsed == _utc(2020, 1, 1, 12, 30, 45)
        assert parsed.tzinfo == timezone.utc

    @pytest.mark.parametrize(
        "value",
        [
            "20200101000000",  # missing Z
            "202001010000Z",  # too short
            "20200101000000Z ",  # trailing space
            "2020-01-01T00:00:00Z",
            "20201301000000Z",  # month 13
            "",
        ],
    )
    def test_malformed_raises(self, value: str):
        # Act / Assert
        with pytest.raises(MalformedTimestampError) as exc_info:
            parse_timestamp(value, "notBefore")

        assert exc_info.value.value == value
        assert exc_info.value.attribute == "notBefore"

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError):
            parse_timestamp("garbage")


class TestResolveNow:
    """Tests for reference instant normalization."""

    def test_zero_means_now(self):
        before = datetime.now(timezone.utc)
        resolved = resolve_now(0)
        after = datetime.now(timezone.utc)

        assert before <= resolved <= after

    def test_naive_datetime_is_utc(self):
        assert resolve_now(datetime(2020, 6, 1)) == _utc(2020, 6, 1)

    def test_epoch_seconds(self):
        assert resolve_now(1577836800) == _utc(2020, 1, 1)


# ============================================================================
# Tests: is_active
# ============================================================================


class TestIsActive:
    """Tests for single-rule evaluation."""

    @pytest.mark.parametrize("now", [_utc(1970, 1, 2), _utc(2020, 6, 1), _utc(2999, 12, 31)])
    def test_no_bounds_always_active(self, now: datetime):
        assert is_active(_rule(), now) is True

    def test_empty_value_lists_are_absent(self):
        # Arrange
        rule = _rule(not_before=[], not_after=[])

        # Act / Assert
        assert is_active(rule, _utc(2020, 6, 1)) is True

    def test_not_before_example(self):
        # Arrange
        rule = _rule(not_before=["20200101000000Z"], not_after=[])

        # Act / Assert
        assert is_active(rule, _utc(2020, 6, 1)) is True
        assert is_active(rule, _utc(2019, 1, 1)) is False

    def test_not_before_boundary_is_inclusive(self):
        rule = _rule(not_before=["20200101000000Z"])

        assert is_active(rule, _utc(2020, 1, 1)) is True
        assert is_active(rule, _utc(2020, 1, 1) - timedelta(seconds=1)) is False

    def test_not_after_boundary_is_inclusive(self):
        rule = _rule(not_after=["20200101000000Z"])

        assert is_active(rule, _utc(2020, 1, 1)) is True
        assert is_active(rule, _utc(2020, 1, 1) + timedelta(seconds=1)) is False

    def test_not_before_uses_earliest_value(self):
        # Arrange - earliest value listed second
        rule = _rule(not_before=["20210101000000Z", "20200101000000Z"])

        # Act / Assert - active between the two, so the first element was not used
        assert is_active(rule, _utc(2020, 6, 1)) is True
        assert is_active(rule, _utc(2019, 6, 1)) is False

    def test_not_after_uses_last_element_not_max(self):
        # Arrange - last element is the EARLIER date
        rule = _rule(not_after=["20210101000000Z", "20200101000000Z"])

        # Act / Assert - after the last element but before the max: inactive
        assert is_active(rule, _utc(2020, 6, 1)) is False
        assert is_active(rule, _utc(2019, 6, 1)) is True

    def test_window_with_both_bounds(self):
        rule = _rule(not_before=["20200101000000Z"], not_after=["20201231235959Z"])

        assert is_active(rule, _utc(2019, 12, 31)) is False
        assert is_active(rule, _utc(2020, 7, 1)) is True
        assert is_active(rule, _utc(2021, 1, 1)) is False

    def test_malformed_not_before_raises(self):
        rule = _rule(not_before=["20200101000000Z", "not-a-time"])

        with pytest.raises(MalformedTimestampError):
            is_active(rule, _utc(2020, 6, 1))

    def test_malformed_not_after_raises(self):
        rule = _rule(not_after=["2020"])

        with pytest.raises(MalformedTimestampError):
            is_active(rule, _utc(2020, 6, 1))

    def test_not_before_short_circuits(self):
        # Arrange - rule not yet valid; its notAfter is never read
        rule = _rule(not_before=["20300101000000Z"], not_after=["bogus"])

        # Act / Assert
        assert is_active(rule, _utc(2020, 6, 1)) is False

    def test_sentinel_zero_uses_wall_clock(self):
        past = _rule(not_after=["20000101000000Z"])
        future = _rule(not_before=["29990101000000Z"])

        assert is_active(past, 0) is False
        assert is_active(future, 0) is False
        assert is_active(_rule(), 0) is True


# ============================================================================
# Tests: filter_active
# ============================================================================


class TestFilterActive:
    """Tests for batch time filtering."""

    @pytest.fixture
    def rules(self) -> list[RuleRecord]:
        return [
            _rule("expired", not_after=["20190101000000Z"]),
            _rule("always"),
            _rule("future", not_before=["20300101000000Z"]),
            _rule("current", not_before=["20200101000000Z"], not_after=["20250101000000Z"]),
        ]

    def test_keeps_active_rules_in_order(self, rules: list[RuleRecord]):
        # Act
        active = filter_active(rules, _utc(2020, 6, 1))

        # Assert
        assert [r.get_string("name") for r in active] == ["always", "current"]

    def test_does_not_mutate_input(self, rules: list[RuleRecord]):
        # Arrange
        original = list(rules)

        # Act
        active = filter_active(rules, _utc(2020, 6, 1))

        # Assert
        assert rules == original
        assert active is not rules

    def test_empty_input(self):
        assert filter_active([], _utc(2020, 6, 1)) == []

    def test_malformed_rule_aborts_batch_by_default(self, rules: list[RuleRecord]):
        # Arrange
        rules.insert(1, _rule("broken", not_before=["yesterday"]))

        # Act / Assert
        with pytest.raises(MalformedTimestampError):
            filter_active(rules, _utc(2020, 6, 1))

    def test_skip_policy_drops_only_the_malformed_rule(self, rules: list[RuleRecord], caplog):
        # Arrange
        rules.insert(1, _rule("broken", not_before=["yesterday"]))

        # Act
        with caplog.at_level("WARNING", logger="sudo-rule-cache.system"):
            active = filter_active(rules, _utc(2020, 6, 1), on_error="skip")

        # Assert
        assert [r.get_string("name") for r in active] == ["always", "current"]
        events = [r.msg for r in caplog.records if isinstance(r.msg, dict)]
        assert {"event": "rule_time_check_failed", "rule": "broken", "attribute": "notBefore", "value": "yesterday"} in events

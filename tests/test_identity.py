"""Tests for the identity filter builder.

Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

from __future__ import annotations

import pytest

from sudo_rule_cache.filters import And, Equality, Or
from sudo_rule_cache.identity import (
    FilterFlags,
    IdentityDescriptor,
    build_filter,
    build_filter_expression,
)

CLASS_TEST = Equality("objectClass", "sudoRule")


# --- Fixtures ---


@pytest.fixture
def alice() -> IdentityDescriptor:
    return IdentityDescriptor.for_user("alice", uid=1000, group_names=["admins", "wheel"])


# --- Single flags ---


class TestSingleFlags:
    """Each flag contributes its clause inside the objectClass test."""

    def test_include_all(self):
        # Arrange
        identity = IdentityDescriptor(flags=FilterFlags.INCLUDE_ALL)

        # Act
        result = build_filter(identity)

        # Assert
        assert result == "(&(objectClass=sudoRule)(|(user=ALL)))"

    def test_include_defaults(self):
        identity = IdentityDescriptor(flags=FilterFlags.INCLUDE_DEFAULTS)

        assert build_filter(identity) == "(&(objectClass=sudoRule)(|(name=defaults)))"

    def test_username(self):
        identity = IdentityDescriptor(username="alice", flags=FilterFlags.USERNAME)

        assert build_filter(identity) == "(&(objectClass=sudoRule)(|(user=alice)))"

    def test_uid(self):
        identity = IdentityDescriptor(uid=1000, flags=FilterFlags.UID)

        assert build_filter(identity) == "(&(objectClass=sudoRule)(|(user=#1000)))"

    def test_groups_one_clause_each(self):
        identity = IdentityDescriptor(group_names=("admins", "wheel"), flags=FilterFlags.GROUPS)

        assert build_filter(identity) == "(&(objectClass=sudoRule)(|(user=%admins)(user=%wheel)))"

    def test_netgroups(self):
        identity = IdentityDescriptor(flags=FilterFlags.NETGROUPS)

        assert build_filter(identity) == "(&(objectClass=sudoRule)(|(user=+*)))"


# --- Skipped preconditions ---


class TestPreconditions:
    """Flags without their required value contribute nothing."""

    def test_no_flags_is_class_only(self):
        # Act
        expr = build_filter_expression(IdentityDescriptor())

        # Assert
        assert expr == And((CLASS_TEST,))
        assert build_filter(IdentityDescriptor()) == "(&(objectClass=sudoRule))"

    def test_uid_zero_is_unset(self):
        identity = IdentityDescriptor(username="alice", uid=0, flags=FilterFlags.UID | FilterFlags.USERNAME)

        assert "#" not in build_filter(identity)
        assert build_filter(identity) == "(&(objectClass=sudoRule)(|(user=alice)))"

    def test_negative_uid_is_unset(self):
        identity = IdentityDescriptor(username="alice", uid=-5, flags=FilterFlags.UID | FilterFlags.USERNAME)

        assert build_filter(identity) == "(&(objectClass=sudoRule)(|(user=alice)))"

    @pytest.mark.parametrize("username", [None, ""])
    def test_username_flag_without_username(self, username):
        identity = IdentityDescriptor(username=username, flags=FilterFlags.USERNAME)

        assert build_filter(identity) == "(&(objectClass=sudoRule))"

    def test_groups_flag_with_empty_list(self):
        identity = IdentityDescriptor(group_names=(), flags=FilterFlags.GROUPS)

        assert build_filter(identity) == "(&(objectClass=sudoRule))"

    def test_values_without_flags_are_ignored(self, alice: IdentityDescriptor):
        identity = IdentityDescriptor(username=alice.username, uid=alice.uid, group_names=alice.group_names)

        assert build_filter(identity) == "(&(objectClass=sudoRule))"


# --- Combined ---


class TestCombined:
    """Clause order is fixed regardless of how flags are combined."""

    def test_all_flags_in_fixed_order(self, alice: IdentityDescriptor):
        # Arrange
        identity = IdentityDescriptor(
            username=alice.username,
            uid=alice.uid,
            group_names=alice.group_names,
            flags=FilterFlags.USER_RULES | FilterFlags.INCLUDE_DEFAULTS,
        )

        # Act
        expr = build_filter_expression(identity)

        # Assert
        assert expr == And(
            (
                CLASS_TEST,
                Or(
                    (
                        Equality("user", "ALL"),
                        Equality("name", "defaults"),
                        Equality("user", "alice"),
                        Equality("user", "#1000"),
                        Equality("user", "%admins"),
                        Equality("user", "%wheel"),
                        Equality("user", "+*"),
                    )
                ),
            )
        )

    def test_for_user_uses_user_rule_flags(self, alice: IdentityDescriptor):
        assert alice.flags == FilterFlags.USER_RULES
        assert alice.group_names == ("admins", "wheel")
        assert build_filter(alice) == (
            "(&(objectClass=sudoRule)(|(user=ALL)(user=alice)(user=#1000)"
            "(user=%admins)(user=%wheel)(user=+*)))"
        )

    def test_deterministic(self, alice: IdentityDescriptor):
        assert build_filter(alice) == build_filter(alice)

"""Identity-based filter builder.

Builds the predicate that selects the cached rules relevant to one identity.
Each enabled flag contributes equality clauses on the targeting attribute,
always in this order:

    INCLUDE_ALL       (user=ALL)
    INCLUDE_DEFAULTS  (name=defaults)
    USERNAME          (user=<username>)
    UID               (user=#<uid>)
    GROUPS            (user=%<group>) per group
    NETGROUPS         (user=+*)

The clauses are OR-ed together and AND-ed with the objectClass test. With no
clauses the filter is the objectClass test alone.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import IntFlag

from sudo_rule_cache.constants import (
    ATTR_NAME,
    ATTR_OBJECTCLASS,
    ATTR_SUDO_USER,
    SUDO_DEFAULTS_RULE,
    SUDO_GROUP_PREFIX,
    SUDO_NETGROUP_WILDCARD,
    SUDO_RULE_OBJECTCLASS,
    SUDO_UID_PREFIX,
    SUDO_USER_ALL,
)
from sudo_rule_cache.filters import And, Equality, FilterExpr, Or, serialize

__all__ = [
    "FilterFlags",
    "IdentityDescriptor",
    "build_filter",
    "build_filter_expression",
]


class FilterFlags(IntFlag):
    """Independent inclusion switches for the identity filter."""

    NONE = 0
    INCLUDE_ALL = 0x01
    INCLUDE_DEFAULTS = 0x02
    USERNAME = 0x04
    UID = 0x08
    GROUPS = 0x10
    NETGROUPS = 0x20

    # Everything a per-user rule lookup needs
    USER_RULES = INCLUDE_ALL | USERNAME | UID | GROUPS | NETGROUPS


@dataclass(frozen=True)
class IdentityDescriptor:
    """Who to select rules for.

    Attributes:
        username: Login name, matched verbatim.
        uid: Numeric user id. 0 (or any non-positive value) means "no uid supplied".
        group_names: Group memberships, in order.
        flags: Which clauses to include.
    """

    username: str | None = None
    uid: int = 0
    group_names: tuple[str, ...] = field(default_factory=tuple)
    flags: FilterFlags = FilterFlags.NONE

    @classmethod
    def for_user(
        cls,
        username: str,
        uid: int = 0,
        group_names: Sequence[str] = (),
        flags: FilterFlags = FilterFlags.USER_RULES,
    ) -> IdentityDescriptor:
        """Descriptor for a regular per-user rule lookup."""
        return cls(username=username, uid=uid, group_names=tuple(group_names), flags=flags)


def _user_clause(value: str) -> Equality:
    return Equality(ATTR_SUDO_USER, value)


def build_filter_expression(identity: IdentityDescriptor) -> FilterExpr:
    """Build the rule-selection expression tree for an identity.

    Flags whose preconditions are not met (no username, uid <= 0, no groups)
    are skipped silently.

    Args:
        identity: Identity and inclusion flags.

    Returns:
        AND of the objectClass test and, if any clause was produced, an OR
        group of the identity clauses.
    """
    flags = identity.flags
    clauses: list[FilterExpr] = []

    if flags & FilterFlags.INCLUDE_ALL:
        clauses.append(_user_clause(SUDO_USER_ALL))

    if flags & FilterFlags.INCLUDE_DEFAULTS:
        clauses.append(Equality(ATTR_NAME, SUDO_DEFAULTS_RULE))

    if flags & FilterFlags.USERNAME and identity.username:
        clauses.append(_user_clause(identity.username))

    if flags & FilterFlags.UID and identity.uid > 0:
        clauses.append(_user_clause(f"{SUDO_UID_PREFIX}{identity.uid:d}"))

    if flags & FilterFlags.GROUPS and identity.group_names:
        for group in identity.group_names:
            clauses.append(_user_clause(f"{SUDO_GROUP_PREFIX}{group}"))

    if flags & FilterFlags.NETGROUPS:
        clauses.append(_user_clause(SUDO_NETGROUP_WILDCARD))

    class_test = Equality(ATTR_OBJECTCLASS, SUDO_RULE_OBJECTCLASS)
    if not clauses:
        return And((class_test,))
    return And((class_test, Or(tuple(clauses))))


def build_filter(identity: IdentityDescriptor) -> str:
    """Build the rule-selection filter string for an identity.

    Example:
        >>> build_filter(IdentityDescriptor(flags=FilterFlags.INCLUDE_ALL))
        '(&(objectClass=sudoRule)(|(user=ALL)))'
    """
    return serialize(build_filter_expression(identity))

"""Predicate expressions for searching the rule cache.

Filters are built as an explicit tree and serialized separately to the
directory-style grammar accepted by the record store:

    (attr=value)      equality clause
    (&(...)(...))     AND group
    (|(...)(...))     OR group

Values are written verbatim. A "*" inside a value is part of the value as
far as the builder is concerned; when a store evaluates the filter it is a
substring/presence wildcard, as in LDAP ("(user=+*)" matches any value that
starts with "+").

Structure:
    Equality, And, Or   - expression variants
    serialize()         - tree -> string
    parse_filter()      - string -> tree
    matches()           - evaluate a tree against a RuleRecord
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from sudo_rule_cache.exceptions import FilterSyntaxError
from sudo_rule_cache.records import RuleRecord

__all__ = [
    "And",
    "Equality",
    "FilterExpr",
    "Or",
    "match_value",
    "matches",
    "parse_filter",
    "serialize",
]


@dataclass(frozen=True)
class Equality:
    """Equality clause: attribute equals value."""

    attr: str
    value: str


@dataclass(frozen=True)
class And:
    """All children must match."""

    children: tuple[FilterExpr, ...]


@dataclass(frozen=True)
class Or:
    """At least one child must match."""

    children: tuple[FilterExpr, ...]


FilterExpr = Union[Equality, And, Or]


# =============================================================================
# Serialization
# =============================================================================


def serialize(expr: FilterExpr) -> str:
    """Render an expression tree in the store's filter grammar.

    Args:
        expr: Expression tree.

    Returns:
        Filter string, e.g. "(&(objectClass=sudoRule)(|(user=ALL)))".
    """
    if isinstance(expr, Equality):
        return f"({expr.attr}={expr.value})"
    if isinstance(expr, And):
        return "(&" + "".join(serialize(child) for child in expr.children) + ")"
    if isinstance(expr, Or):
        return "(|" + "".join(serialize(child) for child in expr.children) + ")"
    raise TypeError(f"Unsupported filter node: {type(expr).__name__}")


# =============================================================================
# Parsing
# =============================================================================


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def fail(self, reason: str) -> FilterSyntaxError:
        return FilterSyntaxError(self.text, self.pos, reason)

    def expect(self, char: str) -> None:
        if self.pos >= len(self.text) or self.text[self.pos] != char:
            raise self.fail(f"expected {char!r}")
        self.pos += 1

    def parse(self) -> FilterExpr:
        expr = self.parse_expr()
        if self.pos != len(self.text):
            raise self.fail("trailing characters")
        return expr

    def parse_expr(self) -> FilterExpr:
        self.expect("(")
        if self.pos >= len(self.text):
            raise self.fail("unexpected end of filter")

        op = self.text[self.pos]
        if op in "&|":
            self.pos += 1
            children: list[FilterExpr] = []
            while self.pos < len(self.text) and self.text[self.pos] == "(":
                children.append(self.parse_expr())
            if not children:
                raise self.fail("empty group")
            self.expect(")")
            return And(tuple(children)) if op == "&" else Or(tuple(children))

        end = self.text.find(")", self.pos)
        if end == -1:
            raise self.fail("unterminated clause")
        clause = self.text[self.pos : end]
        attr, sep, value = clause.partition("=")
        if not sep or not attr or "(" in clause:
            raise self.fail("malformed equality clause")
        self.pos = end + 1
        return Equality(attr, value)


def parse_filter(text: str) -> FilterExpr:
    """Parse a filter string into an expression tree.

    Args:
        text: Filter in the store grammar.

    Returns:
        The parsed expression tree.

    Raises:
        FilterSyntaxError: If the string is not a well-formed filter.
    """
    return _Parser(text.strip()).parse()


# =============================================================================
# Evaluation
# =============================================================================


def match_value(pattern: str, value: str) -> bool:
    """Match a single value against a clause value.

    "*" alone matches any value; other "*" characters split the pattern into
    substrings that must appear in order (LDAP substring semantics).
    Comparison is case-sensitive.
    """
    if "*" not in pattern:
        return pattern == value

    parts = pattern.split("*")
    initial, final = parts[0], parts[-1]
    if not value.startswith(initial):
        return False

    pos = len(initial)
    for part in parts[1:-1]:
        if not part:
            continue
        found = value.find(part, pos)
        if found == -1:
            return False
        pos = found + len(part)

    return len(value) - pos >= len(final) and value.endswith(final)


def matches(expr: FilterExpr, record: RuleRecord) -> bool:
    """Evaluate an expression tree against a record.

    Args:
        expr: Expression tree.
        record: Record to test.

    Returns:
        True if the record satisfies the expression.
    """
    if isinstance(expr, Equality):
        return any(match_value(expr.value, v) for v in record.get_values(expr.attr))
    if isinstance(expr, And):
        return all(matches(child, record) for child in expr.children)
    if isinstance(expr, Or):
        return any(matches(child, record) for child in expr.children)
    raise TypeError(f"Unsupported filter node: {type(expr).__name__}")

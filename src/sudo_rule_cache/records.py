"""RuleRecord - ordered attribute bag for cached sudo rules.

A rule is an opaque mapping from attribute name to one or more string
values. Only a handful of attributes carry meaning for the cache
(name, objectClass, notBefore, notAfter, user); everything else is passed
through untouched.

Attribute order and value order are preserved. The validity evaluator
depends on value order for notAfter (the last value wins).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

__all__ = ["RuleRecord"]


@dataclass
class RuleRecord:
    """Ordered attribute bag: attribute name -> list of string values.

    Attribute names are stored as given. Lookups are case-insensitive,
    matching directory attribute semantics.

    Attributes:
        attrs: Insertion-ordered mapping of attribute to values.
    """

    attrs: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RuleRecord:
        """Build a record from a mapping of scalars or sequences.

        Args:
            data: Mapping whose values are a string/number or a list of them.

        Returns:
            RuleRecord with every value normalized to a list of strings.
        """
        record = cls()
        for attr, value in data.items():
            if isinstance(value, (list, tuple)):
                record.set_values(attr, [str(v) for v in value])
            else:
                record.set_values(attr, [str(value)])
        return record

    def to_dict(self) -> dict[str, list[str]]:
        """Return a plain dict copy suitable for JSON serialization."""
        return {attr: list(values) for attr, values in self.attrs.items()}

    def _key(self, attr: str) -> str | None:
        if attr in self.attrs:
            return attr
        lowered = attr.lower()
        for existing in self.attrs:
            if existing.lower() == lowered:
                return existing
        return None

    def get_values(self, attr: str) -> list[str]:
        """Get all values of an attribute in stored order.

        Returns:
            A copy of the value list, empty if the attribute is absent.
        """
        key = self._key(attr)
        if key is None:
            return []
        return list(self.attrs[key])

    def get_string(self, attr: str) -> str | None:
        """Get the first value of an attribute, or None if absent."""
        values = self.get_values(attr)
        return values[0] if values else None

    def has(self, attr: str) -> bool:
        """True if the attribute is present with at least one value."""
        return bool(self.get_values(attr))

    def add_string(self, attr: str, value: str) -> None:
        """Append a value to an attribute, creating it if needed.

        A value already present is not added twice.
        """
        key = self._key(attr)
        if key is None:
            self.attrs[attr] = [value]
        elif value not in self.attrs[key]:
            self.attrs[key].append(value)

    def set_values(self, attr: str, values: Iterable[str]) -> None:
        """Replace all values of an attribute."""
        key = self._key(attr) or attr
        self.attrs[key] = list(values)

    def remove(self, attr: str) -> None:
        """Remove an attribute if present."""
        key = self._key(attr)
        if key is not None:
            del self.attrs[key]

    def copy(self) -> RuleRecord:
        return RuleRecord(self.to_dict())

    def __iter__(self) -> Iterator[str]:
        return iter(self.attrs)

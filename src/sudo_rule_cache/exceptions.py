"""Exception hierarchy for sudo-rule-cache.

Missing-but-optional data (no validity bounds, no groups, absent refreshed
flag, empty search results) is never an error; each has a neutral default.
Out-of-memory conditions surface as Python's own MemoryError and are not
wrapped.
"""

from __future__ import annotations

__all__ = [
    "FilterSyntaxError",
    "LookupNotFoundError",
    "MalformedTimestampError",
    "StorageError",
    "SudoCacheError",
]


class SudoCacheError(Exception):
    """Base class for all sudo-rule-cache errors."""


class MalformedTimestampError(SudoCacheError, ValueError):
    """A notBefore/notAfter value does not match yyyymmddHHMMSSZ.

    Attributes:
        attribute: Attribute the value was read from.
        value: The offending raw value.
    """

    def __init__(self, value: str, attribute: str | None = None) -> None:
        self.value = value
        self.attribute = attribute
        where = f" in {attribute}" if attribute else ""
        super().__init__(f"Invalid time format{where}: {value!r} (expected yyyymmddHHMMSSZ)")


class LookupNotFoundError(SudoCacheError, LookupError):
    """Identity is not present in the identity store, or has no numeric id."""

    def __init__(self, username: str, reason: str = "user not found") -> None:
        self.username = username
        self.reason = reason
        super().__init__(f"Error looking up user {username}: {reason}")


class StorageError(SudoCacheError):
    """Generic failure of the backing record store."""


class FilterSyntaxError(SudoCacheError, ValueError):
    """A predicate string cannot be parsed."""

    def __init__(self, text: str, position: int, reason: str) -> None:
        self.text = text
        self.position = position
        super().__init__(f"Invalid filter at offset {position}: {reason}: {text!r}")

"""sudo-rule-cache: offline cache of directory-sourced sudo rules.

Caches authorization rules for low-latency evaluation, selects the rules
relevant to an identity, and filters them for temporal validity.

Structure:
    records.py      - RuleRecord attribute bag
    filters.py      - Predicate expression tree, serializer, parser, matcher
    identity.py     - IdentityDescriptor and the identity filter builder
    timewindow.py   - notBefore/notAfter evaluation and batch time filter
    store/          - Backing record store protocol and providers
    cache.py        - SudoRuleCache (save, purge, refreshed flag, lookups)
"""

__version__ = "0.1.0"

from sudo_rule_cache.cache import SudoRuleCache
from sudo_rule_cache.filters import And, Equality, Or, parse_filter, serialize
from sudo_rule_cache.identity import FilterFlags, IdentityDescriptor, build_filter
from sudo_rule_cache.records import RuleRecord
from sudo_rule_cache.timewindow import filter_active, is_active

__all__ = [
    "__version__",
    "And",
    "Equality",
    "FilterFlags",
    "IdentityDescriptor",
    "Or",
    "RuleRecord",
    "SudoRuleCache",
    "build_filter",
    "filter_active",
    "is_active",
    "parse_filter",
    "serialize",
]

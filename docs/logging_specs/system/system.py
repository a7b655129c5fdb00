from __future__ import annotations
from typing import Optional, Literal
from pydantic import BaseModel, Field


class SystemEvent(BaseModel):
    """
    One system log entry (sudo_rule_cache_logs/system/system.jsonl).

    Emitted by SudoRuleCache and the time filter. DEBUG-level events
    (rule_saved, no_rules_matched) only appear with log_level DEBUG.
    """

    # --- core ---
    time: Optional[str] = Field(
        None,
        description="ISO 8601 UTC timestamp, added by formatter during serialization",
    )
    level: str  # "DEBUG", "INFO", "WARNING", "ERROR"
    logger: str  # "sudo-rule-cache.system"
    event: Literal[
        "rule_saved",
        "rules_purged",
        "rule_without_name",
        "no_rules_matched",
        "refreshed_flag_set",
        "rule_time_check_failed",
        "user_lookup_failed",
    ]

    # --- cache context ---
    subdir: Optional[str] = None  # cache subdirectory, e.g. "sudo_rules"
    rule: Optional[str] = None  # rule name (rule_saved, rule_time_check_failed)
    filter: Optional[str] = None  # purge filter; null for a full purge
    deleted: Optional[int] = None  # rules_purged count
    refreshed: Optional[bool] = None  # refreshed_flag_set value

    # --- time check failures ---
    attribute: Optional[str] = None  # "notBefore" or "notAfter"
    value: Optional[str] = None  # offending raw timestamp

    # --- identity lookups ---
    username: Optional[str] = None
    reason: Optional[Literal["not_found", "no_uid"]] = None

    # --- error details ---
    stacktrace: Optional[str] = None

    class Config:
        extra = "forbid"

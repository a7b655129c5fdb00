"""Application-wide constants for sudo-rule-cache.

Constants that define the cache schema and application behavior.
For user-configurable settings per deployment, see config.py.
"""

from platformdirs import user_config_dir

# ============================================================================
# Application Directories
# ============================================================================

APP_NAME: str = "sudo-rule-cache"

# OS-specific config directory:
# - macOS: ~/Library/Application Support/sudo-rule-cache/
# - Linux: ~/.config/sudo-rule-cache/
# - Windows: %APPDATA%\sudo-rule-cache\
DEFAULT_CONFIG_DIR: str = user_config_dir(APP_NAME)

CONFIG_FILENAME: str = "sudo_rule_cache_config.json"

# Default SQLite database for the sqlite storage provider
DEFAULT_DB_FILENAME: str = "sudo_cache.db"

# Log subdirectory created under the user-specified log_dir
LOGS_SUBDIR: str = "sudo_rule_cache_logs"

# ============================================================================
# Rule Record Schema
# ============================================================================

# Generic record attributes
ATTR_OBJECTCLASS: str = "objectClass"
ATTR_NAME: str = "name"

# Marker value identifying a record as a sudo rule
SUDO_RULE_OBJECTCLASS: str = "sudoRule"

# Targeting attribute matched by the identity filter builder
ATTR_SUDO_USER: str = "user"

# Validity window attributes (multi-valued)
ATTR_NOT_BEFORE: str = "notBefore"
ATTR_NOT_AFTER: str = "notAfter"

# Cache subdirectory holding the rule records
SUDORULE_SUBDIR: str = "sudo_rules"

# Boolean attribute on the subdirectory marking a completed full refresh
ATTR_REFRESHED: str = "refreshed"

# ============================================================================
# Identity Store Schema
# ============================================================================

ATTR_UID_NUMBER: str = "uidNumber"
ATTR_MEMBER_OF: str = "memberOf"

# ============================================================================
# Filter Literals
# ============================================================================

# Rules that apply to every user
SUDO_USER_ALL: str = "ALL"

# Name of the rule carrying global sudo defaults
SUDO_DEFAULTS_RULE: str = "defaults"

# Prefixes used in the targeting attribute
SUDO_UID_PREFIX: str = "#"
SUDO_GROUP_PREFIX: str = "%"

# Any value starting with "+" targets a netgroup
SUDO_NETGROUP_WILDCARD: str = "+*"

# ============================================================================
# Timestamps
# ============================================================================

# yyyymmddHHMMSS followed by a literal Z, always UTC
SUDO_TIME_FORMAT: str = "%Y%m%d%H%M%SZ"
SUDO_TIME_PATTERN: str = r"^\d{14}Z$"

# A reference time of 0 means "now"
NOW_SENTINEL: int = 0

# ============================================================================
# Environment Overrides
# ============================================================================

ENV_STORAGE_PROVIDER: str = "SUDO_RULE_CACHE_STORAGE"
ENV_DB_PATH: str = "SUDO_RULE_CACHE_DB_PATH"

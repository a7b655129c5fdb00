"""Application configuration for sudo-rule-cache.

Defines configuration models for storage, logging, and cache behavior.
Config is stored at the OS-appropriate location (via platformdirs);
log_dir is user-specified.

Example usage:
    # Load from config file
    config = AppConfig.load_from_file(config_path)

    # Save new configuration
    config.save_to_file(config_path)
"""

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from sudo_rule_cache.constants import (
    CONFIG_FILENAME,
    DEFAULT_CONFIG_DIR,
    DEFAULT_DB_FILENAME,
    SUDORULE_SUBDIR,
)

# =============================================================================
# Storage Configuration
# =============================================================================


class StorageConfig(BaseModel):
    """Backing record store settings.

    Attributes:
        provider: "sqlite" (persistent) or "memory" (tests, local development).
        sqlite_path: Database file for the sqlite provider.
    """

    provider: Literal["sqlite", "memory"] = "sqlite"
    sqlite_path: str = str(Path(DEFAULT_CONFIG_DIR) / DEFAULT_DB_FILENAME)


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging configuration settings.

    Within log_dir, logs are stored in a sudo_rule_cache_logs/ subdirectory:
        <log_dir>/
        └── sudo_rule_cache_logs/
            └── system/
                └── system.jsonl

    Attributes:
        log_dir: Base directory for logs. None disables file logging.
        log_level: Logging level. DEBUG adds per-rule events.
    """

    log_dir: str | None = None
    log_level: Literal["DEBUG", "INFO", "WARNING"] = "INFO"


# =============================================================================
# Cache Behavior
# =============================================================================


class CacheConfig(BaseModel):
    """Rule cache behavior.

    Attributes:
        subdir: Cache subdirectory holding the rules.
        time_filter_errors: What a lookup does with a rule whose notBefore or
            notAfter is malformed. "raise" fails the whole lookup (a
            malformed cache should not produce partial results); "skip"
            drops the rule and logs a warning.
    """

    subdir: str = Field(default=SUDORULE_SUBDIR, min_length=1)
    time_filter_errors: Literal["raise", "skip"] = "raise"


class AppConfig(BaseModel):
    """Main application configuration for sudo-rule-cache.

    Attributes:
        storage: Backing store selection.
        logging: Logging configuration.
        cache: Rule cache behavior.
    """

    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to JSON file.

        Creates parent directories if they don't exist.

        Args:
            config_path: Path where the config file should be saved.
        """
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(), f, indent=2)
            f.write("\n")

        config_path.chmod(0o600)

    @classmethod
    def load_from_file(cls, config_path: Path) -> "AppConfig":
        """Load configuration from JSON file.

        Args:
            config_path: Path to the config file.

        Returns:
            AppConfig instance with loaded configuration.

        Raises:
            FileNotFoundError: If config file doesn't exist.
            ValueError: If config file is invalid or has invalid fields.
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found at {config_path}.\n" "Run 'sudo-rule-cache config init' to create one."
            )

        try:
            with config_path.open(encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {config_path}: {e}") from e
        except OSError as e:
            raise ValueError(f"Could not read config file {config_path}: {e}") from e

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            errors = []
            for error in e.errors():
                loc = ".".join(str(x) for x in error["loc"])
                errors.append(f"  - {loc}: {error['msg']}")

            raise ValueError(
                f"Invalid configuration in {config_path}:\n"
                + "\n".join(errors)
                + "\n\nEdit the config file or run 'sudo-rule-cache config init --force' to recreate."
            ) from e


def get_config_path() -> Path:
    """Get the full path to the config file in the OS config directory."""
    return Path(DEFAULT_CONFIG_DIR) / CONFIG_FILENAME

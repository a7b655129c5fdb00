"""Shared helpers for CLI commands: config loading and cache setup."""

from __future__ import annotations

from pathlib import Path

import click

from sudo_rule_cache.cache import SudoRuleCache
from sudo_rule_cache.config import AppConfig, get_config_path
from sudo_rule_cache.utils.logging import configure_system_logger


def resolve_config_path(ctx: click.Context) -> Path:
    """Config path from --config, or the OS default."""
    obj = ctx.find_root().obj or {}
    return obj.get("config_path") or get_config_path()


def load_config(ctx: click.Context) -> AppConfig:
    """Load config, falling back to defaults when no file exists.

    Raises:
        click.ClickException: If the config file is invalid.
    """
    path = resolve_config_path(ctx)
    if not path.exists():
        return AppConfig()
    try:
        return AppConfig.load_from_file(path)
    except ValueError as e:
        raise click.ClickException(str(e)) from e


def open_cache(ctx: click.Context) -> SudoRuleCache:
    """Build a SudoRuleCache from config, with logging configured."""
    app_config = load_config(ctx)
    configure_system_logger(app_config.logging.log_dir, app_config.logging.log_level)
    cache = SudoRuleCache.from_config(app_config)
    ctx.call_on_close(cache.store.close)
    return cache

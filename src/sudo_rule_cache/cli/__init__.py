"""Command-line interface for sudo-rule-cache."""

from sudo_rule_cache.cli.main import cli, main

__all__ = ["cli", "main"]

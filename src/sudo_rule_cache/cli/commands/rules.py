"""Rules command group for sudo-rule-cache CLI.

Provides rule storage, lookup, and purge subcommands.
"""

import json
from pathlib import Path

import click

from sudo_rule_cache.cli.commands._common import open_cache
from sudo_rule_cache.exceptions import SudoCacheError
from sudo_rule_cache.identity import FilterFlags
from sudo_rule_cache.records import RuleRecord
from sudo_rule_cache.timewindow import parse_timestamp


def _load_rules_file(path: Path) -> list[RuleRecord]:
    """Load rules from a JSON file holding one rule object or a list of them."""
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON in rules file {path}: {e}") from e

    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise click.ClickException(f"Rules file {path} must contain an object or a list of objects")
    return [RuleRecord.from_dict(item) for item in data]


@click.group()
def rules() -> None:
    """Cached rule commands."""
    pass


@rules.command("save")
@click.argument("rules_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--full", is_flag=True, help="Full refresh: purge everything first, then mark refreshed")
@click.option("--purge-filter", help="Targeted refresh: purge rules matching this filter first")
@click.pass_context
def rules_save(ctx: click.Context, rules_file: Path, full: bool, purge_filter: str | None) -> None:
    """Store rules from a JSON file.

    Each rule is an object of attribute -> value or list of values and must
    carry a "name".
    """
    if full and purge_filter:
        raise click.UsageError("--full and --purge-filter are mutually exclusive")

    records = _load_rules_file(rules_file)
    cache = open_cache(ctx)
    try:
        if full:
            count = cache.full_refresh(records)
        elif purge_filter:
            count = cache.rules_refresh(records, purge_filter)
        else:
            count = cache.store_rules(records)
    except (SudoCacheError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"✓ Stored {count} rule{'s' if count != 1 else ''} in {cache.subdir}")


@rules.command("list")
@click.argument("username")
@click.option("--at", "at_time", help="Reference time as yyyymmddHHMMSSZ (default: now)")
@click.option("--defaults", is_flag=True, help="Also include the defaults rule")
@click.pass_context
def rules_list(ctx: click.Context, username: str, at_time: str | None, defaults: bool) -> None:
    """Print the active rules for a user as JSON."""
    flags = FilterFlags.USER_RULES
    if defaults:
        flags |= FilterFlags.INCLUDE_DEFAULTS

    cache = open_cache(ctx)
    try:
        now = parse_timestamp(at_time) if at_time else 0
        found = cache.lookup_user_rules(username, now, flags)
    except SudoCacheError as e:
        raise click.ClickException(str(e)) from e

    click.echo(json.dumps([rule.to_dict() for rule in found], indent=2))


@rules.command("purge")
@click.option("--filter", "-f", "purge_filter", help="Only purge rules matching this filter")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def rules_purge(ctx: click.Context, purge_filter: str | None, yes: bool) -> None:
    """Purge cached rules (all of them unless --filter is given)."""
    if not purge_filter and not yes:
        click.confirm("Purge ALL cached rules?", abort=True)

    cache = open_cache(ctx)
    try:
        deleted = cache.purge_matching(purge_filter)
    except SudoCacheError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"✓ Purged {deleted} rule{'s' if deleted != 1 else ''} from {cache.subdir}")

"""Refreshed-flag command group for sudo-rule-cache CLI."""

import click

from sudo_rule_cache.cli.commands._common import open_cache
from sudo_rule_cache.exceptions import StorageError


@click.group()
def refreshed() -> None:
    """Full-refresh flag commands."""
    pass


@refreshed.command("get")
@click.pass_context
def refreshed_get(ctx: click.Context) -> None:
    """Show whether a full refresh has completed."""
    cache = open_cache(ctx)
    try:
        click.echo("true" if cache.get_refreshed() else "false")
    except StorageError as e:
        raise click.ClickException(str(e)) from e


@refreshed.command("set")
@click.argument("value", type=click.BOOL)
@click.pass_context
def refreshed_set(ctx: click.Context, value: bool) -> None:
    """Set the refreshed flag (true/false)."""
    cache = open_cache(ctx)
    try:
        cache.set_refreshed(value)
    except StorageError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"✓ Refreshed flag set to {'true' if value else 'false'} for {cache.subdir}")

"""Main CLI entry point for sudo-rule-cache.

Defines the CLI group and registers all subcommands.

Commands:
    filter     - Build identity filters
    rules      - Save, list, and purge cached rules
    refreshed  - Read or set the full-refresh flag
    users      - Manage the identity directory of the local store
    config     - Configuration management commands

Usage:
    sudo-rule-cache -h, --help      Show help message
    sudo-rule-cache -v, --version   Show version
    sudo-rule-cache filter build --user alice --uid 1000 --group admins
    sudo-rule-cache rules save rules.json --full
    sudo-rule-cache rules list alice
    sudo-rule-cache rules purge --filter "(name=old-rule)"
    sudo-rule-cache refreshed get
    sudo-rule-cache config init

Subcommand help:
    sudo-rule-cache COMMAND -h      Show help for a specific command
"""

import sys
from pathlib import Path

import click

from sudo_rule_cache import __version__

from .commands.config import config
from .commands.filter import filter_group
from .commands.refreshed import refreshed
from .commands.rules import rules
from .commands.users import users


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to config file (default: OS config location)",
)
@click.pass_context
def cli(ctx: click.Context, version: bool, config_path: Path | None) -> None:
    """sudo-rule-cache: offline cache of sudo rules."""
    if version:
        click.echo(f"sudo-rule-cache {__version__}")
        sys.exit(0)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(filter_group)
cli.add_command(rules)
cli.add_command(refreshed)
cli.add_command(users)
cli.add_command(config)


def main() -> None:
    """CLI entry point."""
    cli()

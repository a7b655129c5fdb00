"""Config command group for sudo-rule-cache CLI."""

import json

import click

from sudo_rule_cache.cli.commands._common import load_config, resolve_config_path
from sudo_rule_cache.config import AppConfig, CacheConfig, LoggingConfig, StorageConfig


@click.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command("path")
@click.pass_context
def config_path_cmd(ctx: click.Context) -> None:
    """Show config file path."""
    path = resolve_config_path(ctx)
    click.echo(str(path))

    if not path.exists():
        click.echo("(file does not exist - run 'sudo-rule-cache config init' to create)", err=True)


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Display the effective configuration as JSON."""
    click.echo(json.dumps(load_config(ctx).model_dump(), indent=2))


@config.command("init")
@click.option("--storage", type=click.Choice(["sqlite", "memory"]), default="sqlite", show_default=True)
@click.option("--db-path", help="SQLite database path")
@click.option("--log-dir", help="Base directory for logs")
@click.option(
    "--time-filter-errors",
    type=click.Choice(["raise", "skip"]),
    default="raise",
    show_default=True,
    help="How lookups treat rules with malformed timestamps",
)
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
@click.pass_context
def config_init(
    ctx: click.Context,
    storage: str,
    db_path: str | None,
    log_dir: str | None,
    time_filter_errors: str,
    force: bool,
) -> None:
    """Create a configuration file."""
    path = resolve_config_path(ctx)
    if path.exists() and not force:
        raise click.ClickException(f"Config file already exists: {path} (use --force to overwrite)")

    storage_config = StorageConfig(provider=storage)
    if db_path:
        storage_config = StorageConfig(provider=storage, sqlite_path=db_path)

    app_config = AppConfig(
        storage=storage_config,
        logging=LoggingConfig(log_dir=log_dir),
        cache=CacheConfig(time_filter_errors=time_filter_errors),
    )
    app_config.save_to_file(path)
    click.echo(f"✓ Config written to {path}")

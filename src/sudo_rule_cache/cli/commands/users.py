"""Identity directory commands for sudo-rule-cache CLI.

Populates the local store's identity directory, which rules list uses to
resolve a username to uid and groups.
"""

import click

from sudo_rule_cache.cli.commands._common import open_cache
from sudo_rule_cache.exceptions import LookupNotFoundError, StorageError


@click.group()
def users() -> None:
    """Identity directory commands."""
    pass


@users.command("add")
@click.argument("username")
@click.option("--uid", type=click.IntRange(min=1), required=True, help="Numeric user id")
@click.option("--group", "-g", "groups", multiple=True, help="Group membership (repeatable)")
@click.pass_context
def users_add(ctx: click.Context, username: str, uid: int, groups: tuple[str, ...]) -> None:
    """Add or replace a user entry."""
    cache = open_cache(ctx)
    try:
        cache.store.add_user(username, uid, list(groups))
    except StorageError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"✓ User {username} stored (uid {uid}, {len(groups)} group{'s' if len(groups) != 1 else ''})")


@users.command("show")
@click.argument("username")
@click.pass_context
def users_show(ctx: click.Context, username: str) -> None:
    """Show the uid and groups resolved for a user."""
    cache = open_cache(ctx)
    try:
        resolved = cache.resolve_identity(username)
    except (LookupNotFoundError, StorageError) as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"uid: {resolved.uid}")
    click.echo(f"groups: {', '.join(resolved.group_names) or '(none)'}")

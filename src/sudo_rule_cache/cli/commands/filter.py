"""Filter command group for sudo-rule-cache CLI."""

import click

from sudo_rule_cache.identity import FilterFlags, IdentityDescriptor, build_filter


@click.group("filter")
def filter_group() -> None:
    """Identity filter commands."""
    pass


@filter_group.command("build")
@click.option("--user", "-u", "username", help="Match rules naming this user")
@click.option("--uid", type=click.IntRange(min=0), default=0, help="Match rules naming #UID")
@click.option("--group", "-g", "groups", multiple=True, help="Match rules naming %GROUP (repeatable)")
@click.option("--all/--no-all", "include_all", default=True, help="Include rules for ALL users")
@click.option("--defaults", is_flag=True, help="Include the defaults rule")
@click.option("--netgroups/--no-netgroups", default=True, help="Include netgroup-targeted rules")
def filter_build(
    username: str | None,
    uid: int,
    groups: tuple[str, ...],
    include_all: bool,
    defaults: bool,
    netgroups: bool,
) -> None:
    """Print the search filter selecting rules for an identity.

    Identity clauses are only added for the values given.
    """
    flags = FilterFlags.NONE
    if include_all:
        flags |= FilterFlags.INCLUDE_ALL
    if defaults:
        flags |= FilterFlags.INCLUDE_DEFAULTS
    if username:
        flags |= FilterFlags.USERNAME
    if uid:
        flags |= FilterFlags.UID
    if groups:
        flags |= FilterFlags.GROUPS
    if netgroups:
        flags |= FilterFlags.NETGROUPS

    identity = IdentityDescriptor(username=username, uid=uid, group_names=groups, flags=flags)
    click.echo(build_filter(identity))

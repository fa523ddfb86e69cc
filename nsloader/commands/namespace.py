"""Namespace mapping commands."""

from __future__ import annotations

from pathlib import Path
from typing import cast

import click
from rich.table import Table

from ..autoload.registry import normalize_prefix
from ..console import console
from ..paths import ScopeType
from ..paths import create_autoloader
from ..paths import create_settings_manager
from ..paths import settings_scope


def scope_options(func):
    """Attach the shared --local/--project/--global flags."""
    func = click.option(
        "--global", "scope_flag", flag_value="global", help="Store in user settings (~/.nsloader/settings.yaml)"
    )(func)
    func = click.option(
        "--project", "scope_flag", flag_value="project", help="Store in project settings (.nsloader/settings.yaml)"
    )(func)
    func = click.option(
        "--local", "scope_flag", flag_value="local", help="Store in local settings (.nsloader/settings.local.yaml)"
    )(func)
    return func


@click.group(invoke_without_command=True)
@click.pass_context
def namespace(ctx: click.Context):
    """Manage namespace prefix -> directory mappings."""
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@namespace.command("list")
def namespace_list():
    """List effective namespace mappings in probe order."""
    autoloader = create_autoloader(meta_path=[])
    entries = autoloader.namespaces.items()

    table = Table(title="Namespace Mappings", show_header=True, header_style="bold cyan")
    table.add_column("Prefix", style="green")
    table.add_column("Directory", style="magenta", overflow="fold")
    for prefix, directory in entries:
        table.add_row(prefix or "(catch-all)", directory)
    console.print(table)


@namespace.command("add")
@click.argument("prefix")
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@scope_options
def namespace_add(prefix: str, directory: Path, scope_flag: str | None):
    """Map PREFIX to DIRECTORY.

    PREFIX is a dotted namespace such as 'Acme.Widgets'; use '' for the
    catch-all mapping.
    """
    scope = settings_scope(cast(ScopeType | None, scope_flag))
    manager = create_settings_manager()
    prefix = normalize_prefix(prefix)
    manager.add_namespace(prefix, str(directory.resolve()), scope=scope)
    console.print(f"[green]✓ Added namespace {prefix or '(catch-all)'} -> {directory.resolve()} ({scope})[/green]")


@namespace.command("remove")
@click.argument("prefix")
@scope_options
def namespace_remove(prefix: str, scope_flag: str | None):
    """Remove the mapping for PREFIX."""
    scope = settings_scope(cast(ScopeType | None, scope_flag))
    manager = create_settings_manager()
    prefix = normalize_prefix(prefix)
    if manager.remove_namespace(prefix, scope=scope):
        console.print(f"[green]✓ Removed namespace {prefix or '(catch-all)'} ({scope})[/green]")
    else:
        console.print(f"[yellow]No {scope} mapping for {prefix or '(catch-all)'}[/yellow]")

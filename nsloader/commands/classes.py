"""Explicit class registration commands."""

from __future__ import annotations

from typing import cast

import click
from rich.table import Table

from ..console import console
from ..paths import ScopeType
from ..paths import create_autoloader
from ..paths import create_settings_manager
from ..paths import settings_scope
from .namespace import scope_options


@click.group("class", invoke_without_command=True)
@click.pass_context
def class_group(ctx: click.Context):
    """Manage explicit name -> file registrations.

    Explicit registrations always win over namespace mappings.
    """
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@class_group.command("list")
def class_list():
    """List effective explicit registrations."""
    autoloader = create_autoloader(meta_path=[])

    table = Table(title="Class Registrations", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="green")
    table.add_column("Path", style="magenta", overflow="fold")
    table.add_column("Exists", style="yellow")
    for name, path in autoloader.explicit.items():
        table.add_row(name, str(path), "yes" if path.is_file() else "[red]missing[/red]")
    console.print(table)


@class_group.command("add")
@click.argument("name")
@click.argument("path")
@scope_options
def class_add(name: str, path: str, scope_flag: str | None):
    """Register NAME to load from PATH.

    A relative PATH is taken from the modules root when the name is loaded.
    """
    scope = settings_scope(cast(ScopeType | None, scope_flag))
    create_settings_manager().add_class(name, path, scope=scope)
    console.print(f"[green]✓ Added class {name} -> {path} ({scope})[/green]")


@class_group.command("remove")
@click.argument("name")
@scope_options
def class_remove(name: str, scope_flag: str | None):
    """Remove the registration for NAME."""
    scope = settings_scope(cast(ScopeType | None, scope_flag))
    if create_settings_manager().remove_class(name, scope=scope):
        console.print(f"[green]✓ Removed class {name} ({scope})[/green]")
    else:
        console.print(f"[yellow]No {scope} registration for {name}[/yellow]")

"""Show effective autoload configuration."""

from __future__ import annotations

import click
from rich.table import Table

from ..config import MODULES_ROOT_ENV
from ..console import console
from ..paths import create_autoloader
from ..paths import create_settings_manager
from ..paths import load_autoload_settings


@click.group(invoke_without_command=True)
@click.pass_context
def config(ctx: click.Context):
    """Inspect autoload configuration."""
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@config.command("show")
def config_show():
    """Show the merged settings and the effective modules root."""
    manager = create_settings_manager()
    settings = load_autoload_settings(manager)
    autoloader = create_autoloader(manager=manager, meta_path=[])

    table = Table(title="Autoload Configuration", show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="green")
    table.add_column("Value", overflow="fold")
    table.add_row("modules_root", str(autoloader.modules_root))
    table.add_row("extensions", ", ".join(settings.extensions))
    table.add_row("namespaces", str(len(autoloader.namespaces)))
    table.add_row("classes", str(len(autoloader.explicit)))
    table.add_row("prefer_longest_prefix", str(settings.prefer_longest_prefix))
    table.add_row("warn_on_missing_imports", str(settings.warn_on_missing_imports))
    console.print(table)

    console.print(f"[dim]Override the modules root with {MODULES_ROOT_ENV}[/dim]")
    for label, path in (
        ("user", manager.user_settings_file),
        ("project", manager.project_settings_file),
        ("local", manager.local_settings_file),
    ):
        state = "[green]found[/green]" if path.exists() else "[dim]absent[/dim]"
        console.print(f"  {label}: {path} {state}")

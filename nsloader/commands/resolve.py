"""Resolution commands: show where a name resolves to and verify it loads."""

from __future__ import annotations

import sys

import click
from rich.panel import Panel
from rich.table import Table

from ..autoload.resolver import strip_leading_separator
from ..console import console
from ..diagnostics import CollectingDiagnosticSink
from ..paths import create_autoloader


@click.command("resolve")
@click.argument("name")
@click.option("--candidates", "show_candidates", is_flag=True, help="List every probed file path")
def resolve_cmd(name: str, show_candidates: bool):
    """Print the file NAME resolves to.

    Explicit class registrations are consulted first, then namespace
    mappings. Exits with status 1 when nothing is found.

    Examples:

        \b
        nsloader resolve Acme.Widgets.Gadget
        nsloader resolve Acme.My_Widget --candidates
    """
    # Resolution only: keep the import hook out of this process
    autoloader = create_autoloader(meta_path=[])
    path, layer = autoloader.resolve_with_layer(name)

    if show_candidates:
        table = Table(title=f"Candidates for {name}", show_header=True, header_style="bold cyan")
        table.add_column("Path", style="magenta", overflow="fold")
        table.add_column("Exists", style="green")
        for candidate in autoloader.namespaces.candidates(strip_leading_separator(name)):
            table.add_row(str(candidate), "yes" if candidate.is_file() else "")
        console.print(table)

    if path is None:
        click.echo(f"Not found: {name}", err=True)
        sys.exit(1)

    click.echo(str(path))
    if show_candidates:
        console.print(f"[dim]resolved via {layer}[/dim]")


@click.command("check")
@click.argument("name")
def check_cmd(name: str):
    """Resolve and load NAME, then verify the file declared it.

    Exits with status 1 when the name is not found or the loaded file does
    not declare it.
    """
    sink = CollectingDiagnosticSink()
    autoloader = create_autoloader(sink=sink)

    try:
        ok = autoloader.on_reference(name)
    finally:
        autoloader.stop()

    if ok:
        declared = autoloader.loader.declared(autoloader.module_name(name))
        console.print(f"[green]OK[/green] {name} -> {declared!r}")
        return

    for diagnostic in sink.diagnostics:
        console.print(Panel(diagnostic.render(), title=diagnostic.kind.value, border_style="red"))
    sys.exit(1)

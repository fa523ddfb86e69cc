"""nsloader CLI - inspect and verify convention-based name resolution."""

import logging

import click

from .commands.classes import class_group
from .commands.config import config as config_group
from .commands.namespace import namespace as namespace_group
from .commands.resolve import check_cmd
from .commands.resolve import resolve_cmd
from .logging_setup import init_json_logging

logger = logging.getLogger(__name__)


@click.group(invoke_without_command=True)
@click.version_option(package_name="nsloader")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Write JSONL logs to this file")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level for the JSONL log (default: $NSLOADER_LOG_LEVEL or INFO)",
)
@click.pass_context
def cli(ctx: click.Context, log_file: str | None, log_level: str | None):
    """nsloader - resolve dotted names to files and load them on demand."""
    if log_file:
        init_json_logging(log_file, log_level)
        logger.debug("JSONL logging initialised", extra={"event": "cli:start"})

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(resolve_cmd)
cli.add_command(check_cmd)
cli.add_command(namespace_group)
cli.add_command(class_group)
cli.add_command(config_group)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()

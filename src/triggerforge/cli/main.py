"""triggerforge CLI entry point."""

import logging

import click

from triggerforge.config.settings import log_level_from_env


@click.group()
@click.option(
    "--log-level",
    default=log_level_from_env,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (default: TRIGGERFORGE_LOG_LEVEL or WARNING).",
)
def cli(log_level: str):
    """triggerforge: configuration-driven trigger dispatch CLI."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Register subcommands
from triggerforge.cli.config_cmd import config, operations  # noqa: E402

cli.add_command(config)
cli.add_command(operations)

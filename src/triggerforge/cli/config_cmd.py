"""Configuration CLI commands: validate, show and list operations."""

import json
from pathlib import Path

import click

from triggerforge.bootstrap import register_builtin_operations
from triggerforge.accounts import ACCOUNT_CONFIG_PATH
from triggerforge.config.loader import (
    load_config_document,
    read_config_file,
    validate_config_document,
)
from triggerforge.errors import ConfigurationError
from triggerforge.operations.registry import OperationRegistry

_PATH_ARGUMENT = click.argument(
    "path",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)


def _resolve_path(path: Path | None) -> Path:
    return path if path is not None else ACCOUNT_CONFIG_PATH


@click.group()
def config():
    """Trigger configuration commands."""
    pass


@config.command()
@_PATH_ARGUMENT
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Reject operations declared in both the before and after lists.",
)
def validate(path: Path | None, strict: bool):
    """Validate a trigger configuration document (default: bundled Account config)."""
    register_builtin_operations()
    path = _resolve_path(path)

    try:
        data = read_config_file(path)
    except ConfigurationError as e:
        click.echo(click.style(str(e), fg="red"), err=True)
        raise SystemExit(1)

    issues = validate_config_document(data)
    for issue in issues:
        click.echo(click.style(str(issue), fg="red"))

    if issues:
        click.echo(
            click.style(f"\n{len(issues)} error(s) found in {path}", fg="red", bold=True)
        )
        raise SystemExit(1)

    try:
        table = load_config_document(data, strict=strict)
    except ConfigurationError as e:
        click.echo(click.style(f"Configuration failed to load: {e}", fg="red"), err=True)
        raise SystemExit(1)

    click.echo(f"Loaded {len(table)} entity configuration(s):")
    for trigger_config in table:
        state = "enabled" if trigger_config.is_enabled else "disabled"
        click.echo(
            f"  ✓ {trigger_config.entity} ({state}, "
            f"{len(trigger_config.before_ops)} before, "
            f"{len(trigger_config.after_ops)} after)"
        )

    click.echo(click.style("\nTrigger configuration is valid.", fg="green", bold=True))


@config.command()
@_PATH_ARGUMENT
def show(path: Path | None):
    """Print the resolved configuration as JSON."""
    register_builtin_operations()
    path = _resolve_path(path)

    try:
        table = load_config_document(read_config_file(path))
    except ConfigurationError as e:
        click.echo(click.style(str(e), fg="red"), err=True)
        raise SystemExit(1)

    resolved = {c.entity: c.describe() for c in table}
    click.echo(json.dumps(resolved, indent=2))


@click.command()
def operations():
    """List registered trigger operations."""
    register_builtin_operations()
    names = OperationRegistry.list_registered()
    if not names:
        click.echo("No operations registered.")
        return
    for name in names:
        click.echo(name)

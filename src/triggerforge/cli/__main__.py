"""Allow ``python -m triggerforge.cli``."""

from triggerforge.cli.main import cli

if __name__ == "__main__":
    cli()

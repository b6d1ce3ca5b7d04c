"""Entry point for ``python -m midilink``."""

from midilink.cli.main import cli

if __name__ == "__main__":
    cli()

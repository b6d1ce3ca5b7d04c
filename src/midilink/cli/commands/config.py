"""Config commands: show the effective configuration and where it lives."""

import click

from midilink.exceptions import ConfigurationError
from midilink.models import AppConfig
from midilink.models.config import DEFAULT_CONFIG_PATH

from ..errors import exit_with_error


@click.group(name="config")
def config():
    """Inspect midilink configuration."""
    pass


@config.command(name="show")
def show_config():
    """Display the configuration (defaults if no config file exists)."""
    try:
        app_config = AppConfig.load_or_default()
    except ConfigurationError as e:
        exit_with_error(e)

    click.echo(app_config.model_dump_json(indent=2))


@config.command(name="path")
def config_path():
    """Print the path of the config file."""
    click.echo(str(DEFAULT_CONFIG_PATH))

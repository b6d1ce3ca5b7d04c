"""Error reporting for CLI commands."""

import logging
import sys
from typing import NoReturn

import click

from midilink.exceptions import format_error_for_display

logger = logging.getLogger(__name__)


def exit_with_error(error: Exception) -> NoReturn:
    """Print a clean error message (no traceback) and exit with status 1."""
    logger.error(f"Command failed: {error}", exc_info=True)

    user_message, recovery_hint = format_error_for_display(error)

    click.echo("\n" + "=" * 70, err=True)
    click.echo(f"ERROR: {user_message}", err=True)
    click.echo("=" * 70, err=True)

    if recovery_hint:
        click.echo(f"\n{recovery_hint}", err=True)

    click.echo("For logging options, run: midilink --help", err=True)
    sys.exit(1)

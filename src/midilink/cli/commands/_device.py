"""Shared helpers for commands that talk to one device."""

from typing import Optional

import click

from midilink.models import AppConfig


def resolve_device_id(device_id: Optional[str], app_config: AppConfig) -> str:
    """Use the given device, or fall back to the configured default."""
    if device_id:
        return device_id
    if app_config.device_id:
        return app_config.device_id
    raise click.UsageError(
        "No device given and no default device_id configured. "
        "Use 'midilink devices list' to see available devices."
    )

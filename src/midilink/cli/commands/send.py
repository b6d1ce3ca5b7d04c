"""Send command: connect, transmit one message, close."""

import logging
from typing import Optional

import click

from midilink.constants import CHANNEL_SEND_CHANNEL_MESSAGE, CHANNEL_SEND_SYSEX_MESSAGE
from midilink.exceptions import DeviceUnavailableError, MidiLinkError
from midilink.models import AppConfig, DeviceConfig, NodeStatus
from midilink.routing import RoutingTree

from ..errors import exit_with_error
from ..host import ConsoleHost, immediate_scheduler
from ._device import resolve_device_id

logger = logging.getLogger(__name__)


@click.command(name="send")
@click.argument("device_id", required=False)
@click.option(
    "--channel",
    "channel_message",
    type=str,
    default=None,
    help='Channel message as hex bytes, e.g. "90 3C 40"',
)
@click.option(
    "--sysex",
    "sysex_message",
    type=str,
    default=None,
    help='System exclusive message as hex bytes, e.g. "F0 7E 00 F7"',
)
def send(device_id: Optional[str], channel_message: Optional[str], sysex_message: Optional[str]):
    """
    Send one message to a MIDI device.

    DEVICE_ID is the exact port name shown by 'midilink devices list'. If
    omitted, the device_id from the config file is used.
    """
    if (channel_message is None) == (sysex_message is None):
        raise click.UsageError("Give exactly one of --channel or --sysex.")

    try:
        app_config = AppConfig.load_or_default()
        device_id = resolve_device_id(device_id, app_config)

        host = ConsoleHost(quiet=True)
        tree = RoutingTree(host, immediate_scheduler, app_config.compatibility)
        node = tree.add_device(DeviceConfig(device_id=device_id))
        try:
            node.initialize()
            if node.status != NodeStatus.ONLINE:
                raise DeviceUnavailableError(device_id)

            if channel_message is not None:
                sent = node.handle_command(CHANNEL_SEND_CHANNEL_MESSAGE, channel_message)
                text = channel_message
            else:
                sent = node.handle_command(CHANNEL_SEND_SYSEX_MESSAGE, sysex_message)
                text = sysex_message
        finally:
            tree.dispose()

    except MidiLinkError as e:
        exit_with_error(e)

    if not sent:
        click.echo(f"Message '{text}' was not sent, see the log for details.", err=True)
        raise SystemExit(1)

    click.echo(f"Sent {text} to {device_id}")

"""Monitor command: route a device's traffic and print what happens."""

import logging
import time
from typing import Optional

import click

from midilink.discovery import ChannelDiscoveryService, ControlChangeDiscoveryService
from midilink.exceptions import MidiLinkError
from midilink.models import AppConfig, ChannelConfig, ControlChangeConfig, DeviceConfig, NodeStatus
from midilink.routing import RoutingTree

from ..errors import exit_with_error
from ..host import ConsoleHost, thread_scheduler
from ._device import resolve_device_id

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT = 10.0  # seconds


def parse_cc(value: str) -> tuple[int, int]:
    """Parse a CH:N option value into (channel, cc_number)."""
    try:
        channel, cc_number = (int(part) for part in value.split(":"))
    except ValueError:
        raise click.BadParameter(f"expected CHANNEL:NUMBER, got '{value}'", param_hint="--cc") from None
    if not 1 <= channel <= 16 or not 0 <= cc_number <= 127:
        raise click.BadParameter(f"channel must be 1-16 and number 0-127, got '{value}'", param_hint="--cc")
    return channel, cc_number


@click.command(name="monitor")
@click.argument("device_id", required=False)
@click.option(
    "--channel",
    "channels",
    type=click.IntRange(1, 16),
    multiple=True,
    help="Route this MIDI channel (1-16). Repeatable.",
)
@click.option(
    "--cc",
    "control_changes",
    type=str,
    multiple=True,
    help="Route control change N on channel CH, as CH:N. Repeatable.",
)
@click.option(
    "--discover/--no-discover",
    default=True,
    help="Report channels and control changes that aren't routed yet (default: enabled)",
)
def monitor(
    device_id: Optional[str],
    channels: tuple[int, ...],
    control_changes: tuple[str, ...],
    discover: bool,
):
    """
    Connect to a MIDI device and print routed messages.

    Channel and control change nodes are created for every --channel and
    --cc given. Everything the device sends is printed, along with state
    updates of the routed nodes and newly discovered channels and control
    changes.

    Press Ctrl+C to stop monitoring.
    """
    cc_pairs = [parse_cc(value) for value in control_changes]

    try:
        app_config = AppConfig.load_or_default()
        device_id = resolve_device_id(device_id, app_config)

        host = ConsoleHost()
        tree = RoutingTree(host, thread_scheduler, app_config.compatibility)
        device_node = tree.add_device(DeviceConfig(device_id=device_id))

        channel_nodes = {}
        for channel in sorted({*channels, *(channel for channel, _ in cc_pairs)}):
            channel_nodes[channel] = tree.add_channel(device_node.node_id, ChannelConfig(channel=channel))
        for channel, cc_number in cc_pairs:
            tree.add_control_change(
                channel_nodes[channel].node_id, ControlChangeConfig(cc_number=cc_number)
            )
    except MidiLinkError as e:
        exit_with_error(e)

    services = []
    if discover:
        services.append(ChannelDiscoveryService(device_node))
        services.extend(ControlChangeDiscoveryService(node) for node in channel_nodes.values())
    for service in services:
        service.add_discovery_listener(host)
        service.activate()

    try:
        device_node.initialize()
        for node in tree.children_of(device_node.node_id):
            node.initialize()
            for child in tree.children_of(node.node_id):
                child.initialize()

        status = host.wait_for_status(device_node.node_id, timeout=CONNECT_TIMEOUT)
        if status != NodeStatus.ONLINE:
            click.echo(f"Could not connect to '{device_id}'.", err=True)
            raise SystemExit(1)

        click.echo(f"\nMonitoring {device_id}. Press Ctrl+C to stop\n")
        # Keep running until Ctrl+C
        while True:
            time.sleep(0.1)
    except KeyboardInterrupt:
        logger.info("Monitoring interrupted by user")
        click.echo("\nStopping monitor...")
    finally:
        for service in services:
            service.deactivate()
        tree.dispose()

"""Device listing command."""

import click

from midilink.discovery import DeviceDiscoveryService


@click.group(name="devices")
def devices_group():
    """MIDI device commands."""
    pass


@devices_group.command(name="list")
def list_devices():
    """List MIDI devices that can send or receive messages."""
    service = DeviceDiscoveryService()
    service.start_scan()
    results = service.results

    if not results:
        click.echo("No MIDI devices found.")
        return

    click.echo("MIDI Devices:\n")
    for i, result in enumerate(results):
        click.echo(f"  [{i}] {result.label}  (uid: {result.thing_uid})")
        for key, value in result.properties.items():
            if key == "deviceId":
                continue
            click.echo(f"        {key}: {value}")

"""Passive discovery of MIDI channels from a device's traffic."""

from midilink.constants import THING_TYPE_MIDI_CHANNEL
from midilink.midi import ShortMessage
from midilink.models import DiscoveryResult
from midilink.routing import DeviceNode

from .base import PassiveDiscoveryService


class ChannelDiscoveryService(PassiveDiscoveryService):
    """Reports channels seen on a device that have no channel node yet."""

    discovers = "channels"

    def __init__(self, device_node: DeviceNode):
        super().__init__(device_node, THING_TYPE_MIDI_CHANNEL)
        self.device_node = device_node

    def received_message(self, message: ShortMessage, message_text: str) -> None:
        channel = message.channel + 1
        if self.device_node.has_child(channel):
            return

        node_id = self.device_node.node_id
        self.thing_discovered(
            DiscoveryResult(
                thing_uid=f"{node_id}:channel-{channel}",
                thing_type=THING_TYPE_MIDI_CHANNEL,
                label=f"{self.device_node.device_id} Channel {channel}",
                properties={"channel": channel},
                representation_property="channel",
                bridge_uid=node_id,
            )
        )

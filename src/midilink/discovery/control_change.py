"""Passive discovery of control change numbers on a channel."""

from midilink.constants import THING_TYPE_MIDI_CONTROL_CHANGE
from midilink.midi import CONTROL_CHANGE, ShortMessage
from midilink.models import DiscoveryResult
from midilink.routing import ChannelNode

from .base import PassiveDiscoveryService


class ControlChangeDiscoveryService(PassiveDiscoveryService):
    """Reports control change numbers seen on a channel that have no node yet."""

    discovers = "control changes"

    def __init__(self, channel_node: ChannelNode):
        super().__init__(channel_node, THING_TYPE_MIDI_CONTROL_CHANGE)
        self.channel_node = channel_node

    def received_message(self, message: ShortMessage, message_text: str) -> None:
        if message.command != CONTROL_CHANGE:
            return

        cc_number = message.data1
        if self.channel_node.has_child(cc_number):
            return

        device = self.channel_node.device_node
        device_id = device.device_id if device is not None else ""
        node_id = self.channel_node.node_id
        self.thing_discovered(
            DiscoveryResult(
                thing_uid=f"{node_id}:cc-{cc_number}",
                thing_type=THING_TYPE_MIDI_CONTROL_CHANGE,
                label=f"{device_id} Channel {self.channel_node.channel} CC {cc_number}",
                properties={"ccNumber": cc_number},
                representation_property="ccNumber",
                bridge_uid=node_id,
            )
        )

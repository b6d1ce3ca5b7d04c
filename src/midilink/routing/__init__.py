"""Routing of decoded MIDI messages through the device → channel → control change tree."""

from .nodes import ChannelNode, ControlChangeNode, DeviceNode, RoutingNode
from .tree import RoutingTree

__all__ = [
    "ChannelNode",
    "ControlChangeNode",
    "DeviceNode",
    "RoutingNode",
    "RoutingTree",
]

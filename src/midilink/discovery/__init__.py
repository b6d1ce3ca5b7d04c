"""Discovery services for devices, channels and control changes."""

from .base import DiscoveryService, PassiveDiscoveryService
from .channel import ChannelDiscoveryService
from .control_change import ControlChangeDiscoveryService
from .device import DeviceDiscoveryService

__all__ = [
    "ChannelDiscoveryService",
    "ControlChangeDiscoveryService",
    "DeviceDiscoveryService",
    "DiscoveryService",
    "PassiveDiscoveryService",
]

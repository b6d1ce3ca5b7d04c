"""Data models for midilink."""

from .config import (
    AppConfig,
    ChannelConfig,
    CompatibilityConfig,
    ControlChangeConfig,
    DeviceConfig,
)
from .discovery import DiscoveryResult
from .enums import NodeStatus

__all__ = [
    "AppConfig",
    "ChannelConfig",
    "CompatibilityConfig",
    "ControlChangeConfig",
    "DeviceConfig",
    "DiscoveryResult",
    "NodeStatus",
]

"""Enumerations for midilink."""

from enum import Enum


class NodeStatus(str, Enum):
    """Status a routing node reports to the host."""

    UNKNOWN = "unknown"  # Initializing, connection not attempted yet
    ONLINE = "online"
    OFFLINE = "offline"  # Connection failed, detail explains why

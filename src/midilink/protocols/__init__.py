"""Protocol definitions for the host boundary and listeners."""

from .host import HostCallback, Scheduler
from .observers import DiscoveryListener, MidiEventListener

__all__ = [
    "DiscoveryListener",
    "HostCallback",
    "MidiEventListener",
    "Scheduler",
]
